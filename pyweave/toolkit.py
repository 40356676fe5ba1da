# pyweave/toolkit.py
"""
The native side of weaving. The core never touches widget classes directly:
constructing objects, finding setters, reading class constants, converting
dimensions and attaching children all go through a :class:`Toolkit`.

:class:`ReflectiveToolkit` implements the interface for ordinary Python
classes by inspecting signatures and annotations.
"""

import abc
import collections.abc
import inspect
import logging
import numbers
import typing
import weakref
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

from .errors import (
    AmbiguousSetter,
    NoMatchingConstructor,
    NoMatchingSetter,
    UnresolvedSymbol,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DisplayMetrics:
    """Scale factors used to turn unit-qualified dimensions into pixels."""
    density: float = 1.0
    scaled_density: float = 1.0
    xdpi: float = 160.0


class Context:
    """
    The host object handed to every widget constructor (an application,
    window or activity). It owns the display metrics for its screen.
    """

    def __init__(self, display_metrics: Optional[DisplayMetrics] = None, name: str = "context"):
        self.name = name
        self._display_metrics = display_metrics or DisplayMetrics()
        # id-holder map when the context hosts content (see Weaver.build_content)
        self.tag: Any = None
        self.content: Any = None

    def get_display_metrics(self) -> DisplayMetrics:
        return self._display_metrics

    def set_content_view(self, view) -> None:
        self.content = view

    def __repr__(self):
        return f"Context({self.name!r})"


# --- unit conversion ---
def apply_dimension(unit: str, magnitude: float, metrics: DisplayMetrics) -> float:
    """Converts ``magnitude`` in ``unit`` to (unrounded) pixels."""
    if unit == "px":
        return magnitude
    if unit in ("dp", "dip"):
        return magnitude * metrics.density
    if unit == "sp":
        return magnitude * metrics.scaled_density
    if unit == "pt":
        return magnitude * metrics.xdpi * (1.0 / 72)
    if unit == "in":
        return magnitude * metrics.xdpi
    if unit == "mm":
        return magnitude * metrics.xdpi * (1.0 / 25.4)
    raise UnresolvedSymbol(unit, constant="a dimension unit")


# --- type matching used for constructor and setter resolution ---
def accepts(annotation: Any, value: Any) -> bool:
    """True if ``value`` may be passed to a parameter annotated ``annotation``."""
    if annotation is inspect.Parameter.empty or annotation is Any or annotation is object:
        return True
    if value is None:
        return annotation is type(None) or type(None) in typing.get_args(annotation)
    origin = typing.get_origin(annotation)
    if origin is typing.Union:
        return any(accepts(arg, value) for arg in typing.get_args(annotation))
    if origin is not None:
        annotation = origin
    if annotation is collections.abc.Callable:
        return callable(value)
    if not isinstance(annotation, type):
        return True
    # booleans only fill boolean parameters, never numeric ones
    if isinstance(value, bool):
        return issubclass(annotation, bool)
    if annotation is float and isinstance(value, numbers.Integral):
        return True
    return isinstance(value, annotation)


def _type_hints(func) -> Dict[str, Any]:
    try:
        return typing.get_type_hints(func)
    except (NameError, TypeError):
        # unresolved forward references fall back to raw annotations
        return dict(getattr(func, "__annotations__", {}))


def _bindable(func, args: Sequence[Any], skip_self: bool) -> bool:
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return True
    params = list(signature.parameters.values())
    if skip_self and params and params[0].name in ("self", "cls"):
        params = params[1:]
    try:
        bound = signature.replace(parameters=params).bind(*args)
    except TypeError:
        return False
    hints = _type_hints(func)
    for name, value in bound.arguments.items():
        param = signature.parameters[name]
        if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
            continue
        if not accepts(hints.get(name, param.annotation), value):
            return False
    return True


def snake_setter(attribute: str) -> str:
    return "set_" + attribute.replace("-", "_")


def camel_setter(attribute: str) -> str:
    return "set" + "".join(part[:1].upper() + part[1:] for part in attribute.split("-"))


def keyword_to_constant_name(name: str) -> str:
    """``align-left`` -> ``ALIGN_LEFT``."""
    return name.replace("-", "_").upper()


class Toolkit(abc.ABC):
    """
    Native collaborator interface.

    Subclasses bind the core to a concrete widget library.
    """

    @abc.abstractmethod
    def construct_instance(self, cls: type, context: Any, args: Sequence[Any]) -> Any:
        """Builds ``cls`` from ``(context, *args)``; raises NoMatchingConstructor."""

    @abc.abstractmethod
    def resolve_setter(self, cls: type, attribute: str, value: Any) -> Callable:
        """Returns the unbound setter for ``attribute`` that accepts ``value``."""

    @abc.abstractmethod
    def resolve_static_constant(self, cls: Any, name: str) -> Any:
        """Reads a class-level constant; raises UnresolvedSymbol."""

    @abc.abstractmethod
    def display_metrics(self, context: Any) -> DisplayMetrics:
        """Reads the display metrics of ``context`` (may be expensive)."""

    @abc.abstractmethod
    def append_child(self, parent: Any, child: Any) -> None:
        """Attaches a built child to its parent widget."""

    def convert_dimension(self, magnitude: float, unit: str, metrics: DisplayMetrics) -> float:
        return apply_dimension(unit, magnitude, metrics)

    def constant_name(self, symbol: str) -> str:
        """Naming transform from a symbol name to a native constant name."""
        return keyword_to_constant_name(symbol)

    def context_of(self, widget: Any) -> Any:
        """The context a widget was built with."""
        getter = getattr(widget, "get_context", None)
        return getter() if callable(getter) else None

    def invoke_setter(self, widget: Any, attribute: str, value: Any) -> None:
        setter = self.resolve_setter(type(widget), attribute, value)
        logger.debug("%s.%s(%r)", type(widget).__name__, getattr(setter, "__name__", setter), value)
        setter(widget, value)

    # --- id support used by the ``id`` and ``id-holder`` traits ---
    def assign_id(self, widget: Any, widget_id: Any) -> None:
        from .base import to_id
        widget.set_id(to_id(widget_id))

    def id_map(self, holder: Any) -> Optional[Dict[Any, Any]]:
        """The ID -> widget map stored on an id-holder, or None."""
        tag = holder.get_tag() if hasattr(holder, "get_tag") else getattr(holder, "tag", None)
        return tag if isinstance(tag, dict) else None

    def new_id_map(self, holder: Any) -> Dict[Any, Any]:
        """Stores a fresh, empty ID map on ``holder`` and returns it."""
        ids: Dict[Any, Any] = {}
        if hasattr(holder, "set_tag"):
            holder.set_tag(ids)
        else:
            holder.tag = ids
        return ids


class ReflectiveToolkit(Toolkit):
    """
    Toolkit for plain Python widget classes.

    * constructors: ``cls(context, *args)``, checked against the signature
      and its annotations before the call;
    * setters: ``set_<snake_name>`` or ``set<CamelName>`` taking exactly one
      argument whose annotation accepts the value;
    * constants: class attributes named by :meth:`constant_name`.
    """

    def __init__(self, default_metrics: Optional[DisplayMetrics] = None):
        self.default_metrics = default_metrics or DisplayMetrics()

    def construct_instance(self, cls, context, args):
        args = tuple(args)
        if not _bindable(cls.__init__, (context,) + args, skip_self=True):
            raise NoMatchingConstructor(cls, [type(a) for a in (context,) + args])
        return cls(context, *args)

    def setter_names(self, attribute: str) -> List[str]:
        return [snake_setter(attribute), camel_setter(attribute)]

    def resolve_setter(self, cls, attribute, value):
        found: List[Callable] = []
        names: List[str] = []
        for name in self.setter_names(attribute):
            func = inspect.getattr_static(cls, name, None)
            if func is None:
                continue
            func = getattr(cls, name)
            if any(func is f for f in found):
                continue
            if self._single_argument(func) and _bindable(func, (value,), skip_self=True):
                found.append(func)
                names.append(name)
        if not found:
            raise NoMatchingSetter(cls, attribute, type(value))
        if len(found) > 1:
            raise AmbiguousSetter(cls, attribute, names)
        return found[0]

    @staticmethod
    def _single_argument(func) -> bool:
        try:
            params = list(inspect.signature(func).parameters.values())[1:]
        except (TypeError, ValueError):
            return True
        positional = [p for p in params if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)]
        required = [p for p in positional if p.default is p.empty]
        return len(required) <= 1 and (len(positional) >= 1 or any(p.kind == p.VAR_POSITIONAL for p in params))

    def resolve_static_constant(self, cls, name):
        try:
            return getattr(cls, name)
        except AttributeError:
            raise UnresolvedSymbol(name, owner=cls, constant=name) from None

    def display_metrics(self, context):
        getter = getattr(context, "get_display_metrics", None)
        if callable(getter):
            return getter()
        metrics = getattr(context, "display_metrics", None)
        return metrics if isinstance(metrics, DisplayMetrics) else self.default_metrics

    def append_child(self, parent, child):
        add = getattr(parent, "add_view", None)
        if add is None:
            raise NoMatchingSetter(type(parent), "add-view", type(child))
        add(child)


class MemoizedMetrics:
    """
    Caches ``toolkit.display_metrics(context)`` per context object.

    Contexts that cannot be weakly referenced are cached by identity for the
    lifetime of this object.
    """

    def __init__(self, toolkit: Toolkit):
        self._toolkit = toolkit
        self._weak: "weakref.WeakKeyDictionary[Any, DisplayMetrics]" = weakref.WeakKeyDictionary()
        self._strong: Dict[int, tuple] = {}

    def __call__(self, context) -> DisplayMetrics:
        try:
            return self._weak[context]
        except KeyError:
            pass
        except TypeError:
            cached = self._strong.get(id(context))
            if cached is not None and cached[0] is context:
                return cached[1]
            metrics = self._toolkit.display_metrics(context)
            self._strong[id(context)] = (context, metrics)
            return metrics
        metrics = self._toolkit.display_metrics(context)
        self._weak[context] = metrics
        return metrics

    def clear(self) -> None:
        self._weak.clear()
        self._strong.clear()
