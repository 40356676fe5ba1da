import zlib
from typing import Any, Callable, Optional, Union


# --- Keyword Class ---
class Keyword:
    """
    A symbolic value in a UI tree, resolved against the registry at build time.

    Plain strings are literal values; only Keyword instances are looked up
    in value tables or turned into native constant names.

    :param name: Hyphenated symbol name, e.g. ``"align-left"``. A leading
                 colon is accepted and dropped.
    """
    __slots__ = ("name",)

    def __init__(self, name: str):
        if isinstance(name, Keyword):
            name = name.name
        if not isinstance(name, str) or not name.lstrip(":"):
            raise TypeError(f"Keyword name must be a non-empty string, got {name!r}")
        self.name = name.lstrip(":")

    def __eq__(self, other):
        return isinstance(other, Keyword) and self.name == other.name

    def __hash__(self):
        return hash((Keyword, self.name))

    def __repr__(self):
        return f":{self.name}"


class _KeywordAccessor:
    """``K.align_left`` is shorthand for ``Keyword("align-left")``."""

    def __getattr__(self, attr: str) -> Keyword:
        if attr.startswith("__"):
            raise AttributeError(attr)
        return Keyword(attr.rstrip("_").replace("_", "-"))

    def __call__(self, name: str) -> Keyword:
        return Keyword(name)


K = _KeywordAccessor()


def name_of(value: Union[str, Keyword]) -> str:
    """
    Returns the hyphenated name for an element keyword or attribute key.

    Underscores are treated as hyphens so ``layout_width`` and
    ``layout-width`` name the same attribute.
    """
    if isinstance(value, Keyword):
        return value.name
    if isinstance(value, str):
        return value.lstrip(":").replace("_", "-")
    raise TypeError(f"Expected a str or Keyword name, got {type(value).__name__}")


def is_identifier(value: Any) -> bool:
    return isinstance(value, Keyword) or (isinstance(value, str) and bool(value.strip(":")))


def normalize_attributes(attributes) -> dict:
    """Returns a fresh dict with every key converted by :func:`name_of`."""
    return {name_of(key): value for key, value in attributes.items()}


# --- Ref ---
class Ref:
    """
    A holder that receives a widget once it is built.

    Pass it as the ``ref`` attribute of a node:

        ok = Ref()
        weaver.build(ctx, ["button", {"ref": ok}])
        ok.value  # -> the Button instance
    """

    def __init__(self, value: Any = None):
        self.value = value

    def set(self, value: Any) -> None:
        self.value = value

    def __bool__(self):
        return self.value is not None

    def __repr__(self):
        return f"Ref({self.value!r})"


def deliver(target: Union[Ref, Callable[[Any], Any]], value: Any) -> None:
    """Hands ``value`` to a Ref or a callback ref."""
    if isinstance(target, Ref):
        target.set(value)
    elif callable(target):
        target(value)
    else:
        raise TypeError(f"ref must be a Ref or a callable, got {type(target).__name__}")


def to_id(obj: Optional[Any]) -> int:
    """
    Makes a non-negative integer ID from any object.

    Non-int values are hashed from their repr with CRC-32, so the same id
    maps to the same number in every run.
    """
    if isinstance(obj, int) and not isinstance(obj, bool):
        return abs(obj)
    return zlib.crc32(repr(obj).encode("utf-8"))
