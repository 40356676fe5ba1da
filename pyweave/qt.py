# pyweave/qt.py
"""
PySide6 backend.

    from PySide6.QtWidgets import QApplication
    from pyweave.qt import qt_weaver

    app = QApplication([])
    weaver = qt_weaver()
    window = weaver.build(None, ["v-box", {"window-title": "Demo"},
                                 ["label", {"text": "Name"}],
                                 ["line-edit", {"placeholder-text": "type here"}],
                                 ["button", {"text": "OK", "on-click": on_ok}]])
    window.show()
    app.exec()

Attributes map to Qt's camelCase setters (``window-title`` ->
``setWindowTitle``) and symbolic values to Qt enum members
(``:align-center`` -> ``AlignCenter``, searched on the class and its enums).
"""

import logging
import weakref
from typing import Any, Dict, Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QGuiApplication
from PySide6.QtWidgets import (
    QCheckBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QPlainTextEdit,
    QProgressBar,
    QPushButton,
    QScrollArea,
    QSlider,
    QSpinBox,
    QSplitter,
    QStackedWidget,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)

from .base import Keyword
from .config import Config, get_config
from .core import Weaver
from .errors import NoMatchingConstructor, NoMatchingSetter, UnresolvedSymbol
from .registry import Registry
from .toolkit import DisplayMetrics, Toolkit, camel_setter
from .traits import TraitRegistry, env_of, install_common_traits

logger = logging.getLogger(__name__)

# Logical DPI that maps to a density of 1.0 on desktop screens.
BASELINE_DPI = 96.0


def keyword_to_qt_name(name: str) -> str:
    """``align-center`` -> ``AlignCenter``."""
    return "".join(part[:1].upper() + part[1:] for part in name.split("-"))


class QtToolkit(Toolkit):
    """Toolkit adapter for PySide6 widgets."""

    def __init__(self):
        self._ids: "weakref.WeakKeyDictionary[Any, Dict[Any, Any]]" = weakref.WeakKeyDictionary()
        # box layout hints, applied when the widget is added to its parent
        self._hints: "weakref.WeakKeyDictionary[Any, Dict[str, Any]]" = weakref.WeakKeyDictionary()

    def construct_instance(self, cls, context, args):
        # Qt widgets take an optional parent, not a context; layouts re-parent children.
        try:
            return cls(*args)
        except TypeError as exc:
            raise NoMatchingConstructor(cls, [type(a) for a in args]) from exc

    def resolve_setter(self, cls, attribute, value):
        name = camel_setter(attribute)
        setter = getattr(cls, name, None)
        if setter is None or not callable(setter):
            raise NoMatchingSetter(cls, attribute, type(value))
        return setter

    def invoke_setter(self, widget, attribute, value):
        setter = self.resolve_setter(type(widget), attribute, value)
        logger.debug("%s.%s(%r)", type(widget).__name__, camel_setter(attribute), value)
        try:
            setter(widget, value)
        except TypeError as exc:
            # no overload accepted the value
            raise NoMatchingSetter(type(widget), attribute, type(value)) from exc

    def constant_name(self, symbol):
        return keyword_to_qt_name(symbol)

    def resolve_static_constant(self, cls, name):
        value = getattr(cls, name, None)
        if value is not None:
            return value
        for attr in dir(cls):
            nested = getattr(cls, attr, None)
            if isinstance(nested, type) and attr[:1].isupper():
                value = getattr(nested, name, None)
                if value is not None:
                    return value
        raise UnresolvedSymbol(name, owner=cls, constant=name)

    def display_metrics(self, context):
        screen = None
        if context is not None and hasattr(context, "screen"):
            screen = context.screen()
        if screen is None:
            screen = QGuiApplication.primaryScreen()
        if screen is None:
            return DisplayMetrics()
        density = screen.logicalDotsPerInch() / BASELINE_DPI
        return DisplayMetrics(density=density, scaled_density=density,
                              xdpi=screen.physicalDotsPerInchX())

    def context_of(self, widget):
        return widget

    def append_child(self, parent, child):
        if isinstance(parent, QMainWindow):
            parent.setCentralWidget(child)
        elif isinstance(parent, QScrollArea):
            parent.setWidget(child)
            parent.setWidgetResizable(True)
        elif isinstance(parent, (QStackedWidget, QSplitter)):
            parent.addWidget(child)
        elif isinstance(parent, QTabWidget):
            parent.addTab(child, child.windowTitle() or child.objectName())
        else:
            layout = parent.layout()
            if layout is None:
                layout = QVBoxLayout(parent)
            hints = self._hints.get(child, {})
            stretch = hints.get("stretch", 0)
            alignment = hints.get("alignment")
            if alignment is not None:
                layout.addWidget(child, stretch, alignment)
            else:
                layout.addWidget(child, stretch)

    def assign_id(self, widget, widget_id):
        widget.setObjectName(widget_id.name if isinstance(widget_id, Keyword) else str(widget_id))

    def set_layout_hint(self, widget, **hints) -> None:
        self._hints.setdefault(widget, {}).update(hints)

    def id_map(self, holder):
        return self._ids.get(holder)

    def new_id_map(self, holder):
        ids: Dict[Any, Any] = {}
        self._ids[holder] = ids
        return ids


# --- element factories ---
def v_box(context, *args):
    widget = QWidget(*args)
    QVBoxLayout(widget)
    return widget


def h_box(context, *args):
    widget = QWidget(*args)
    QHBoxLayout(widget)
    return widget


def qt_registry() -> Registry:
    """Element definitions for the common Qt widgets."""
    registry = Registry()
    registry.define(
        "widget", classname=QWidget, inherits=None,
        traits=["ref", "id", "container", "id-holder", "layout-spacing",
                "layout-margins", "box-layout-params"],
        value_namespaces={"alignment": Qt, "orientation": Qt, "layout-alignment": Qt},
        container_type="box",
    )
    registry.define("v-box", inherits="widget", attributes={"custom-constructor": v_box})
    registry.define("h-box", inherits="widget", attributes={"custom-constructor": h_box})
    registry.define("main-window", classname=QMainWindow, inherits="widget",
                    container_type="single")
    registry.define("scroll-area", classname=QScrollArea, inherits="widget",
                    container_type="single")
    registry.define("stacked", classname=QStackedWidget, inherits="widget",
                    container_type="pages")
    registry.define("tab-widget", classname=QTabWidget, inherits="widget",
                    container_type="pages")
    registry.define("splitter", classname=QSplitter, inherits="widget",
                    container_type="pages")
    registry.define("label", classname=QLabel, inherits="widget", traits=["text"])
    registry.define("button", classname=QPushButton, inherits="widget",
                    traits=["text", "on-click"], attributes={"text": "Default button"})
    registry.define("check-box", classname=QCheckBox, inherits="button",
                    traits=["on-toggle"], attributes={"text": ""})
    registry.define("line-edit", classname=QLineEdit, inherits="widget",
                    traits=["text", "on-text-change", "on-return"])
    registry.define("text-edit", classname=QPlainTextEdit, inherits="widget",
                    traits=["plain-text", "on-text-change"])
    registry.define("spin-box", classname=QSpinBox, inherits="widget",
                    traits=["on-value-change"])
    registry.define("slider", classname=QSlider, inherits="widget",
                    traits=["on-value-change"])
    registry.define("progress-bar", classname=QProgressBar, inherits="widget")
    return registry


def _install_signal_trait(traits: TraitRegistry, trait_id: str, signal: str) -> None:
    def body(widget, attributes, options):
        getattr(widget, signal).connect(attributes[trait_id])
    body.__doc__ = f"Connects the callable under ``{trait_id}`` to the ``{signal}`` signal."
    traits.register(trait_id, body)


SIGNAL_TRAITS = [
    ("on-click", "clicked"),
    ("on-toggle", "toggled"),
    ("on-return", "returnPressed"),
    ("on-value-change", "valueChanged"),
]


def qt_traits(strict: bool = False) -> TraitRegistry:
    """Common traits plus the Qt-specific ones."""
    traits = install_common_traits(TraitRegistry())

    @traits.trait("text")
    def text(widget, attributes, options):
        value = attributes.get("text")
        widget.setText("" if value is None else str(value))

    @traits.trait("plain-text")
    def plain_text(widget, attributes, options):
        widget.setPlainText(str(attributes["plain-text"]))

    @traits.trait("on-text-change")
    def on_text_change(widget, attributes, options):
        """
        Connects a callable to ``textChanged``. Line edits pass the new text;
        plain text edits pass nothing, so the callable gets the current text.
        """
        callback = attributes["on-text-change"]
        if isinstance(widget, QPlainTextEdit):
            widget.textChanged.connect(lambda: callback(widget.toPlainText()))
        else:
            widget.textChanged.connect(callback)

    for trait_id, signal in SIGNAL_TRAITS:
        _install_signal_trait(traits, trait_id, signal)

    @traits.trait("layout-spacing")
    def layout_spacing(widget, attributes, options):
        """Spacing between the children of a box, in pixels or a dimension pair."""
        env = env_of(options, "layout-spacing")
        widget.layout().setSpacing(env.to_dimension(widget, attributes["layout-spacing"]))

    @traits.trait("layout-margins")
    def layout_margins(widget, attributes, options):
        """A single margin or ``[left, top, right, bottom]`` for the box's layout."""
        env = env_of(options, "layout-margins")
        margins = attributes["layout-margins"]
        if isinstance(margins, (list, tuple)) and len(margins) == 4:
            left, top, right, bottom = (env.to_dimension(widget, m) for m in margins)
        else:
            left = top = right = bottom = env.to_dimension(widget, margins)
        widget.layout().setContentsMargins(left, top, right, bottom)

    @traits.trait("box-layout-params", attributes=["layout-stretch", "layout-alignment"],
                  applies=lambda a, o: o.get("container-type") == "box"
                  and (a.get("layout-stretch") is not None or a.get("layout-alignment") is not None))
    def box_layout_params(widget, attributes, options):
        """
        Records ``layout-stretch`` and ``layout-alignment`` for the parent box,
        which applies them when the widget is added to its layout.
        """
        env = env_of(options, "box-layout-params")
        if attributes.get("layout-stretch") is not None:
            env.toolkit.set_layout_hint(widget, stretch=int(attributes["layout-stretch"]))
        if attributes.get("layout-alignment") is not None:
            alignment = env.resolve_value("widget", attributes["layout-alignment"], "layout-alignment")
            env.toolkit.set_layout_hint(widget, alignment=alignment)

    traits.strict = strict
    return traits


def qt_weaver(config: Optional[Config] = None) -> Weaver:
    """A Weaver wired to the Qt registry, traits and toolkit."""
    config = config or get_config()
    return Weaver(registry=qt_registry(), traits=qt_traits(strict=config.strict_traits),
                  toolkit=QtToolkit(), config=config)
