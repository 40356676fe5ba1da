# pyweave/registry.py
"""
The element registry: connects element keywords to widget classes, records
the inheritance between element types, and keeps per-type metadata (traits,
symbolic value tables, default attributes).
"""

import copy
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from .base import Keyword, name_of
from .errors import CyclicInheritance, NotRegistered

logger = logging.getLogger(__name__)


class _NotFound:
    """Sentinel returned by ``recursive_find`` when nothing matched."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "NOT_FOUND"


NOT_FOUND = _NotFound()


@dataclass
class TypeDescriptor:
    classname: Optional[type] = None
    inherits: Optional[str] = None
    traits: List[str] = field(default_factory=list)
    values: Dict[Keyword, Any] = field(default_factory=dict)
    value_namespaces: Dict[str, Any] = field(default_factory=dict)
    attributes: Dict[str, Any] = field(default_factory=dict)
    container_type: Optional[str] = None
    constructor_args: Optional[Sequence[Any]] = None

    def __post_init__(self):
        if self.inherits is not None:
            self.inherits = name_of(self.inherits)
        if self.container_type is not None:
            self.container_type = name_of(self.container_type)
        self.traits = [name_of(t) for t in self.traits]
        self.values = {Keyword(k): v for k, v in self.values.items()}
        self.value_namespaces = {name_of(k): v for k, v in self.value_namespaces.items()}
        self.attributes = {name_of(k): v for k, v in self.attributes.items()}


class Registry:
    """
    Maps element keywords to :class:`TypeDescriptor` entries.

    A registry is an ordinary object: build one per application (see
    ``pyweave.widgets.default_registry``) or per test, and finish all
    registration before the first build.
    """

    def __init__(self, descriptors: Optional[Dict[str, TypeDescriptor]] = None):
        self._descriptors: Dict[str, TypeDescriptor] = {}
        self._reverse: Dict[type, str] = {}
        for keyword, descriptor in (descriptors or {}).items():
            self.register(keyword, descriptor)

    def copy(self) -> "Registry":
        """Returns an independent registry with the same contents."""
        clone = Registry()
        clone._descriptors = {k: replace(d, traits=list(d.traits), values=dict(d.values),
                                         value_namespaces=dict(d.value_namespaces),
                                         attributes=copy.copy(d.attributes))
                              for k, d in self._descriptors.items()}
        clone._reverse = dict(self._reverse)
        return clone

    # ----- registration -----
    def register(self, keyword: Union[str, Keyword], descriptor: TypeDescriptor) -> "Registry":
        """Inserts or overwrites the descriptor for ``keyword``."""
        kw = name_of(keyword)
        self._check_cycle(kw, descriptor.inherits)
        self._descriptors[kw] = descriptor
        if descriptor.classname is not None:
            self._reverse[descriptor.classname] = kw
        logger.debug("Registered element %r (class=%s, inherits=%r)",
                     kw, getattr(descriptor.classname, "__name__", None), descriptor.inherits)
        return self

    def define(self, keyword: Union[str, Keyword], **fields) -> "Registry":
        """
        Defines an element type. ``inherits`` defaults to ``"view"`` when
        such an element exists, and ``classname`` defaults to the parent's.

        Accepted fields are the :class:`TypeDescriptor` attributes.
        """
        kw = name_of(keyword)
        if "inherits" not in fields:
            fields["inherits"] = "view" if "view" in self._descriptors and kw != "view" else None
        parent = fields["inherits"]
        if "classname" in fields or parent is None:
            return self.register(kw, TypeDescriptor(**fields))

        # an inherited class keeps mapping back to the element that declared it
        parent_descriptor = self._descriptors.get(name_of(parent))
        fields["classname"] = parent_descriptor.classname if parent_descriptor else None
        previous = self._reverse.get(fields["classname"])
        self.register(kw, TypeDescriptor(**fields))
        if previous is not None:
            self._reverse[fields["classname"]] = previous
        elif fields["classname"] is not None:
            del self._reverse[fields["classname"]]
        return self

    def add_trait(self, keyword, trait_id: str) -> "Registry":
        self._require(keyword).traits.append(name_of(trait_id))
        return self

    def set_value(self, keyword, value_keyword, native_value: Any) -> "Registry":
        self._require(keyword).values[Keyword(value_keyword)] = native_value
        return self

    def set_classname(self, keyword, classname: type) -> "Registry":
        self._require(keyword).classname = classname
        self._reverse[classname] = name_of(keyword)
        return self

    def add_default_attribute(self, keyword, attribute, value: Any) -> "Registry":
        self._require(keyword).attributes[name_of(attribute)] = value
        return self

    # ----- lookups -----
    def __contains__(self, keyword) -> bool:
        return name_of(keyword) in self._descriptors

    def keywords(self) -> List[str]:
        return sorted(self._descriptors)

    def descriptor(self, keyword) -> Optional[TypeDescriptor]:
        return self._descriptors.get(name_of(keyword))

    def resolve_classname(self, keyword_or_class):
        """
        Gets the class for an element keyword. Anything that is not a
        keyword is assumed to already be a class and is returned unchanged.
        """
        if not isinstance(keyword_or_class, (str, Keyword)):
            return keyword_or_class
        descriptor = self.descriptor(keyword_or_class)
        if descriptor is None or descriptor.classname is None:
            raise NotRegistered(name_of(keyword_or_class))
        return descriptor.classname

    def keyword_for_class(self, cls: type) -> Optional[str]:
        """Returns the element keyword registered for ``cls``, or None."""
        return self._reverse.get(cls)

    def keyword_for_instance(self, obj: Any) -> Optional[str]:
        """Like keyword_for_class, but falls back along the type's MRO."""
        for cls in type(obj).__mro__:
            keyword = self._reverse.get(cls)
            if keyword is not None:
                return keyword
        return None

    def parents(self, keyword) -> List[str]:
        """The inheritance chain above ``keyword``, nearest first."""
        return list(self._chain(name_of(keyword)))[1:]

    def all_traits(self, keyword) -> List[str]:
        """
        Own traits of ``keyword`` followed by those of each ancestor.
        Duplicates along the chain are kept in order.
        """
        traits: List[str] = []
        for kw in self._chain(name_of(keyword)):
            traits.extend(self._descriptors[kw].traits)
        return traits

    def default_attributes(self, keyword) -> Dict[str, Any]:
        """Default attributes of the ancestors, overridden by the element's own."""
        merged: Dict[str, Any] = {}
        for kw in reversed(list(self._chain(name_of(keyword)))):
            merged.update(self._descriptors[kw].attributes)
        return merged

    def recursive_find(self, keyword, path: Iterable[Any]):
        """
        Looks for a nested field (e.g. ``["values", K.fill]`` or
        ``["value_namespaces", "gravity"]``) on ``keyword`` and then each of
        its ancestors. Returns NOT_FOUND when no element in the chain has it.
        """
        path = list(path)
        for kw in self._chain(name_of(keyword)):
            current: Any = self._descriptors[kw]
            for step in path:
                if isinstance(current, TypeDescriptor):
                    current = getattr(current, str(step).replace("-", "_"), NOT_FOUND)
                elif isinstance(current, dict):
                    current = current.get(step, NOT_FOUND)
                else:
                    current = NOT_FOUND
                if current is NOT_FOUND or current is None:
                    current = NOT_FOUND
                    break
            if current is not NOT_FOUND:
                return current
        return NOT_FOUND

    def container_type(self, keyword) -> Optional[str]:
        """The container type an element advertises to its children."""
        descriptor = self.descriptor(keyword)
        if descriptor is None:
            return None
        return descriptor.container_type or name_of(keyword)

    # ----- internal helpers -----
    def _require(self, keyword) -> TypeDescriptor:
        descriptor = self.descriptor(keyword)
        if descriptor is None:
            raise NotRegistered(name_of(keyword))
        return descriptor

    def _chain(self, keyword: str):
        """Yields ``keyword`` and its registered ancestors, guarding against loops."""
        seen = []
        current = keyword
        while current is not None and current in self._descriptors:
            if current in seen:
                raise CyclicInheritance(seen + [current])
            seen.append(current)
            yield current
            current = self._descriptors[current].inherits

    def _check_cycle(self, keyword: str, parent: Optional[str]) -> None:
        chain = [keyword]
        current = parent
        while current is not None:
            if current in chain:
                raise CyclicInheritance(chain + [current])
            chain.append(current)
            descriptor = self._descriptors.get(current)
            current = descriptor.inherits if descriptor else None
