# pyweave/traits.py
"""
Trait engine.

A trait is a small, conditionally applied attribute handler. Every element
type lists the trait ids it supports (see ``Registry.all_traits``); while a
widget is woven, each trait gets a chance to consume attributes from the
attribute map and to pass options down to the widget's children. Attributes
no trait consumed are applied by the generic setter path.

Defining a trait:

    traits = TraitRegistry()

    @traits.trait("text")
    def text(widget, attributes, options):
        widget.set_text(attributes["text"] or "")

    @traits.trait("padding", attributes=["padding", "padding-left", "padding-top"])
    def padding(widget, attributes, options):
        ...

    @traits.trait("container", applies=lambda attributes, options: True)
    def container(widget, attributes, options):
        return TraitResult(options_fn=lambda o: o.assoc("container-type", "box"))

Match predicate: ``applies`` if given; otherwise "any of ``attributes`` is
set"; otherwise "the attribute named like the trait is set". By default a
trait that ran consumes its ``attributes`` (or its own name).
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Sequence, Set, Tuple

from .base import deliver, name_of
from .errors import TraitConflict, UnknownTrait, WeaveError

logger = logging.getLogger(__name__)

AttributesFn = Callable[[Dict[str, Any]], Dict[str, Any]]
OptionsFn = Callable[["Options"], "Options"]
Predicate = Callable[[Mapping[str, Any], Mapping[str, Any]], Any]
Body = Callable[[Any, Dict[str, Any], "Options"], Any]


def identity(value):
    return value


def is_set(value: Any) -> bool:
    """An attribute counts as set unless it is None or False."""
    return value is not None and value is not False


# --- Options ---
class Options(Mapping):
    """
    Immutable parent-to-child context for one level of a UI tree.

    ``assoc``/``dissoc`` return new instances, so siblings never see each
    other's edits. ``env`` is the running weaver (registry, toolkit, value
    resolver); it is shared by the whole build and is not part of the map.
    """

    __slots__ = ("_data", "_env")

    def __init__(self, data: Optional[Mapping[str, Any]] = None, env: Any = None):
        self._data = {name_of(k): v for k, v in (data or {}).items()}
        self._env = env

    @property
    def env(self):
        return self._env

    def with_env(self, env) -> "Options":
        return Options(self._data, env)

    def assoc(self, key: str, value: Any) -> "Options":
        data = dict(self._data)
        data[name_of(key)] = value
        return Options(data, self._env)

    def dissoc(self, *keys: str) -> "Options":
        drop = {name_of(k) for k in keys}
        return Options({k: v for k, v in self._data.items() if k not in drop}, self._env)

    def __getitem__(self, key):
        return self._data[name_of(key)]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other):
        if isinstance(other, Options):
            return self._data == other._data and self._env is other._env
        return isinstance(other, Mapping) and self._data == dict(other)

    def __hash__(self):
        return id(self)

    def __repr__(self):
        return f"Options({self._data!r})"


@dataclass
class TraitResult:
    """Optional return value of a trait body overriding the default updates."""
    attributes_fn: Optional[AttributesFn] = None
    options_fn: Optional[OptionsFn] = None


def without(keys: Sequence[str]) -> AttributesFn:
    """An attribute update that drops ``keys`` from a map (returns a new dict)."""
    keys = frozenset(keys)

    def drop(attributes):
        return {k: v for k, v in attributes.items() if k not in keys}

    drop.consumed = keys
    return drop


class Trait:
    """A registered trait: ``matches`` plus ``apply``."""

    def __init__(self, trait_id: str, body: Body, attributes: Optional[Sequence[str]] = None,
                 applies: Optional[Predicate] = None, doc: Optional[str] = None):
        self.id = name_of(trait_id)
        self.body = body
        self.attributes: Tuple[str, ...] = tuple(name_of(a) for a in attributes) if attributes else ()
        self.applies = applies
        self.doc = doc if doc is not None else (body.__doc__ or "").strip() or None
        self.conflicting = applies is not None and bool(self.attributes)
        self.consume = without(self.consumes)

    @property
    def consumes(self) -> Tuple[str, ...]:
        return self.attributes or (self.id,)

    def matches(self, attributes: Mapping[str, Any], options: Mapping[str, Any]) -> bool:
        if self.applies is not None:
            return bool(self.applies(attributes, options))
        return any(is_set(attributes.get(key)) for key in self.consumes)

    def apply(self, widget, attributes: Dict[str, Any], options) -> Tuple[AttributesFn, OptionsFn]:
        if not self.matches(attributes, options):
            return identity, identity
        logger.debug("Applying trait %r to %s", self.id, type(widget).__name__)
        result = self.body(widget, attributes, options)
        if isinstance(result, Mapping):
            result = TraitResult(result.get("attributes_fn"), result.get("options_fn"))
        if isinstance(result, TraitResult):
            return (result.attributes_fn or self.consume), (result.options_fn or identity)
        return self.consume, identity

    def __repr__(self):
        return f"Trait({self.id!r}, consumes={list(self.consumes)})"


class TraitRegistry:
    """
    Traits by id, plus introspection metadata (which traits can consume
    which attribute, trait docs, flagged definitions).

    :param strict: reject traits that declare both a custom predicate and an
                   attribute list instead of only flagging them.
    """

    def __init__(self, strict: bool = False):
        self.strict = strict
        self._traits: Dict[str, Trait] = {}
        self.attribute_index: Dict[str, Set[str]] = {}

    def copy(self) -> "TraitRegistry":
        clone = TraitRegistry(strict=self.strict)
        clone._traits = dict(self._traits)
        clone.attribute_index = {k: set(v) for k, v in self.attribute_index.items()}
        return clone

    def register(self, trait_id: str, body: Body, attributes: Optional[Sequence[str]] = None,
                 applies: Optional[Predicate] = None, doc: Optional[str] = None) -> Trait:
        """Adds or overwrites a trait."""
        trait = Trait(trait_id, body, attributes=attributes, applies=applies, doc=doc)
        if trait.conflicting:
            if self.strict:
                raise TraitConflict(trait.id, trait.attributes)
            logger.debug("Trait %r: predicate decides matching, %s decides consumption",
                         trait.id, list(trait.attributes))
        self._traits[trait.id] = trait
        for attribute in trait.consumes:
            self.attribute_index.setdefault(attribute, set()).add(trait.id)
        return trait

    def trait(self, trait_id: str, attributes: Optional[Sequence[str]] = None,
              applies: Optional[Predicate] = None, doc: Optional[str] = None):
        """Decorator form of :meth:`register`."""
        def decorator(body: Body) -> Body:
            self.register(trait_id, body, attributes=attributes, applies=applies, doc=doc)
            return body
        return decorator

    def get(self, trait_id: str) -> Trait:
        try:
            return self._traits[name_of(trait_id)]
        except KeyError:
            raise UnknownTrait(name_of(trait_id)) from None

    def __contains__(self, trait_id) -> bool:
        return name_of(trait_id) in self._traits

    def ids(self) -> List[str]:
        return sorted(self._traits)

    def doc(self, trait_id: str) -> Optional[str]:
        return self.get(trait_id).doc

    def traits_for_attribute(self, attribute: str) -> Set[str]:
        return set(self.attribute_index.get(name_of(attribute), set()))

    def flagged(self) -> List[str]:
        """Ids of traits defined with both a predicate and an attribute list."""
        return sorted(t.id for t in self._traits.values() if t.conflicting)

    def apply(self, trait_id: str, widget, attributes: Dict[str, Any], options) -> Tuple[AttributesFn, OptionsFn]:
        """
        Runs one trait against ``widget``. Returns ``(attributes_fn,
        options_fn)``; both are identity when the trait does not match, in
        which case its body is not called.
        """
        return self.get(trait_id).apply(widget, attributes, options)


# --- traits shared by every toolkit ---
def env_of(options, trait_id: str):
    env = getattr(options, "env", None)
    if env is None:
        raise WeaveError(f"Trait {trait_id!r} needs options built by a Weaver (no env attached).")
    return env


def install_common_traits(traits: TraitRegistry) -> TraitRegistry:
    """Registers the toolkit-independent traits: ref, id, id-holder, container."""

    @traits.trait("ref")
    def ref(widget, attributes, options):
        """
        Takes a ``Ref`` (or a one-argument callable) and hands it the widget.

        Example: ``["button", {"ref": ok}]`` stores the button in ``ok.value``.
        """
        deliver(attributes["ref"], widget)

    @traits.trait("id-holder")
    def id_holder(widget, attributes, options):
        """
        Marks the widget as a holder of lower-level elements. Descendants with
        an ``id`` are stored in the holder's ID map, reachable with
        ``pyweave.find_widget(holder, id)``.
        """
        env_of(options, "id-holder").toolkit.new_id_map(widget)
        return TraitResult(options_fn=lambda o: o.assoc("id-holder", widget))

    @traits.trait("id")
    def id_(widget, attributes, options):
        """
        Sets the widget's numeric ID from any hashable value and, when an
        ID holder was declared above in the tree, registers the widget there.
        """
        toolkit = env_of(options, "id").toolkit
        widget_id = attributes["id"]
        toolkit.assign_id(widget, widget_id)
        holder = options.get("id-holder")
        if holder is not None:
            ids = toolkit.id_map(holder)
            if ids is None:
                ids = toolkit.new_id_map(holder)
            ids[widget_id] = widget

    @traits.trait("container", applies=lambda attributes, options: True)
    def container(widget, attributes, options):
        """
        Puts the type of the widget onto the options map so children can use
        it to choose the right layout parameters.
        """
        registry = env_of(options, "container").registry
        keyword = registry.keyword_for_instance(widget)
        container_type = registry.container_type(keyword) if keyword else None
        return TraitResult(options_fn=lambda o: o.assoc("container-type", container_type))

    return traits
