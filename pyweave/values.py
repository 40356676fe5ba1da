# pyweave/values.py
"""
Value resolution: turns the attribute values written in a UI tree into the
values native setters expect.

* numbers, booleans, strings and objects pass through (numbers narrowed to
  ``int``/``float``);
* a :class:`~pyweave.base.Keyword` is looked up in the element's value table,
  then its ancestors', and finally derived from a native class constant
  (``:align-left`` -> ``ALIGN_LEFT``);
* a ``(magnitude, unit)`` pair is converted to whole pixels for the display
  the widget lives on.
"""

import logging
import math
import numbers
from typing import Any, Optional

from .base import Keyword, name_of
from .errors import UnresolvedSymbol
from .registry import NOT_FOUND, Registry
from .toolkit import MemoizedMetrics, Toolkit

logger = logging.getLogger(__name__)

UNITS = ("px", "dp", "dip", "sp", "pt", "in", "mm")


def narrow_number(value: Any) -> Any:
    """Coerces plain numbers to ``int``/``float``; everything else is returned as is."""
    if isinstance(value, bool) or not isinstance(value, numbers.Number):
        return value
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Real):
        return float(value)
    return value


def unit_name(unit: Any) -> Optional[str]:
    if isinstance(unit, Keyword):
        unit = unit.name
    if isinstance(unit, str) and unit.lstrip(":") in UNITS:
        return unit.lstrip(":")
    return None


def is_dimension(value: Any) -> bool:
    """True for ``(10, K.dp)``/``[10, "dp"]`` style values."""
    return (isinstance(value, (list, tuple)) and len(value) == 2
            and isinstance(value[0], numbers.Real) and not isinstance(value[0], bool)
            and unit_name(value[1]) is not None)


def resolve_value(registry: Registry, toolkit: Toolkit, element, value: Any,
                  attribute: Optional[str] = None) -> Any:
    """
    Resolves ``value`` for an attribute of ``element``.

    Symbolic values are sought in the element's ``values`` table and its
    ancestors'. Failing that, the constant name is derived from the symbol
    and read from the class given by ``value_namespaces[attribute]`` (searched
    up the chain) or, without one, from the element's own class.
    """
    if not isinstance(value, Keyword):
        return narrow_number(value)

    found = registry.recursive_find(element, ["values", value])
    if found is not NOT_FOUND:
        return found

    lookup_type = NOT_FOUND
    if attribute is not None:
        lookup_type = registry.recursive_find(element, ["value_namespaces", name_of(attribute)])
    if lookup_type is NOT_FOUND:
        lookup_type = registry.resolve_classname(name_of(element))

    constant = toolkit.constant_name(value.name)
    logger.debug("Resolving %r for %s via %s.%s", value, element,
                 getattr(lookup_type, "__name__", lookup_type), constant)
    try:
        return toolkit.resolve_static_constant(lookup_type, constant)
    except UnresolvedSymbol as exc:
        raise UnresolvedSymbol(value, owner=lookup_type, constant=constant) from exc


class DimensionConverter:
    """
    Converts ``(magnitude, unit)`` values to integer pixels.

    Display metrics are fetched from the toolkit once per context.
    """

    def __init__(self, toolkit: Toolkit):
        self.toolkit = toolkit
        self.metrics = MemoizedMetrics(toolkit)

    def convert(self, context, magnitude: float, unit) -> int:
        name = unit_name(unit)
        if name is None:
            raise UnresolvedSymbol(unit, constant="a dimension unit")
        pixels = self.toolkit.convert_dimension(magnitude, name, self.metrics(context))
        return int(math.floor(pixels + 0.5))

    def to_dimension(self, context, value: Any) -> Any:
        """Converts dimension pairs; any other value is returned unchanged."""
        if is_dimension(value):
            return self.convert(context, value[0], value[1])
        return value
