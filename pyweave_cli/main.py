import logging
import os
import sys
from pathlib import Path
from typing import Optional

import typer
import yaml

from pyweave import Config, Context, DisplayMetrics, WeaveError, Weaver
from pyweave.loader import load

# Create the main Typer application object
app = typer.Typer(
    name="pyweave",
    help="Inspect pyweave registries and build UI trees from YAML.",
    add_completion=False,
)

BACKENDS = ("headless", "qt")

# QApplication for the qt backend; it must outlive the build
_qt_app = None


def _load_config(config_path: Optional[Path]) -> Config:
    if config_path is None:
        return Config()
    if not config_path.exists():
        print(f"❌ Error: Config file not found at '{config_path}'")
        raise typer.Exit(code=1)
    return Config.from_file(config_path)


def _make_weaver(backend: str, config: Config) -> Weaver:
    if backend not in BACKENDS:
        print(f"❌ Error: Unknown backend '{backend}'. Choose one of: {', '.join(BACKENDS)}")
        raise typer.Exit(code=1)
    if backend == "qt":
        os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
        from PySide6.QtWidgets import QApplication
        from pyweave.qt import qt_weaver

        global _qt_app
        _qt_app = QApplication.instance() or QApplication(sys.argv[:1])
        return qt_weaver(config)
    return Weaver(config=config)


def _echo_handler(name: str):
    def handler(*args):
        print(f"🔔 {name}{args!r}")
    return handler


def _describe_qt(widget, indent: int = 0) -> str:
    from PySide6.QtWidgets import QWidget

    name = widget.objectName()
    line = f"{'  ' * indent}{type(widget).__name__}" + (f"(id={name!r})" if name else "()")
    children = widget.findChildren(QWidget, "", _direct_children())
    return "\n".join([line] + [_describe_qt(child, indent + 1) for child in children])


def _direct_children():
    from PySide6.QtCore import Qt
    return Qt.FindChildOption.FindDirectChildrenOnly


# --- CLI Commands ---

@app.command()
def elements(
    backend: str = typer.Option("headless", help="Registry to list: headless or qt."),
):
    """
    Lists the registered element keywords with their class and parents.
    """
    weaver = _make_weaver(backend, Config.from_mapping())
    registry = weaver.registry
    print(f"📦 {len(registry.keywords())} elements ({backend})")
    for keyword in registry.keywords():
        descriptor = registry.descriptor(keyword)
        cls = getattr(descriptor.classname, "__name__", "-")
        parents = " -> ".join(registry.parents(keyword)) or "-"
        print(f"  {keyword:<22} {cls:<18} inherits: {parents}")


@app.command()
def traits(
    backend: str = typer.Option("headless", help="Trait set to list: headless or qt."),
    attribute: Optional[str] = typer.Option(None, help="Only traits that can consume this attribute."),
):
    """
    Lists traits, the attributes each one consumes and the first line of its doc.
    """
    weaver = _make_weaver(backend, Config.from_mapping())
    registry = weaver.traits
    ids = sorted(registry.traits_for_attribute(attribute)) if attribute else registry.ids()
    if not ids:
        print(f"⚠️ No trait consumes '{attribute}'.")
        raise typer.Exit(code=1)
    flagged = set(registry.flagged())
    for trait_id in ids:
        trait = registry.get(trait_id)
        marker = " [predicate + attributes]" if trait_id in flagged else ""
        print(f"🔧 {trait_id}{marker}: {', '.join(trait.consumes)}")
        if trait.doc:
            print(f"     {trait.doc.splitlines()[0]}")


@app.command()
def build(
    file_path: Path = typer.Argument(..., help="YAML file holding the UI tree."),
    backend: str = typer.Option("headless", help="Toolkit to build with: headless or qt."),
    config_path: Optional[Path] = typer.Option(None, "--config", help="pyweave.yaml to use."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every trait and setter."),
):
    """
    Builds the tree in FILE_PATH and prints the resulting widget hierarchy.
    Event handlers referenced with !handler print their arguments when called.
    """
    if not file_path.exists():
        print(f"❌ Error: Tree file not found at '{file_path}'")
        raise typer.Exit(code=1)

    config = _load_config(config_path)
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    else:
        config.apply_logging()

    weaver = _make_weaver(backend, config)
    try:
        tree = load(file_path, fallback=_echo_handler)
        if backend == "qt":
            root = weaver.build(None, tree)
            print(_describe_qt(root))
        else:
            context = Context(DisplayMetrics(**config.display), name=file_path.stem)
            root = weaver.build_content(context, tree)
            print(root.describe())
    except (WeaveError, yaml.YAMLError) as e:
        print(f"❌ Could not build '{file_path}':")
        print(f"   {type(e).__name__}: {e}")
        raise typer.Exit(code=1)

    print("✅ Build finished.")


if __name__ == "__main__":
    app()
