# pyweave/core.py

import logging
from collections.abc import Mapping
from typing import Any, Dict, Optional, Sequence

from .base import is_identifier, name_of, normalize_attributes
from .config import Config, get_config
from .errors import MalformedNode, NotRegistered, TreeTooDeep
from .registry import Registry
from .toolkit import DisplayMetrics, ReflectiveToolkit, Toolkit
from .traits import Options, TraitRegistry
from .values import DimensionConverter, is_dimension, resolve_value

logger = logging.getLogger(__name__)

# Pseudo-attributes handled by construction, never by traits or setters.
CUSTOM_CONSTRUCTOR = "custom-constructor"
CONSTRUCTOR_ARGS = "constructor-args"


def is_node(tree: Any) -> bool:
    return isinstance(tree, (list, tuple))


class Weaver:
    """
    Builds native widget trees from ``[element, {attributes}, *children]``
    descriptions.

    A weaver combines an element :class:`Registry`, a :class:`TraitRegistry`
    and a :class:`Toolkit`. It owns no state between builds except the
    per-context display metrics cache.

    Example:

        weaver = Weaver()  # headless widgets
        root = weaver.build(Context(), ["linear-layout", {"orientation": K.vertical},
                                        ["text-view", {"text": "Hello"}],
                                        ["button", {"text": "OK", "on-click": on_ok}]])
    """

    def __init__(self, registry: Optional[Registry] = None, traits: Optional[TraitRegistry] = None,
                 toolkit: Optional[Toolkit] = None, config: Optional[Config] = None):
        self.config = config or get_config()
        if registry is None or traits is None:
            from .widgets import default_registry, standard_traits
            registry = registry if registry is not None else default_registry()
            traits = traits if traits is not None else standard_traits(strict=self.config.strict_traits)
        self.registry = registry
        self.traits = traits
        self.toolkit = toolkit or ReflectiveToolkit(DisplayMetrics(**self.config.display))
        self.dimensions = DimensionConverter(self.toolkit)
        self.max_depth = self.config.max_depth

    # ----- value helpers used by traits -----
    def resolve_value(self, element, value: Any, attribute: Optional[str] = None) -> Any:
        return resolve_value(self.registry, self.toolkit, element, value, attribute)

    def to_dimension(self, context, value: Any) -> Any:
        return self.dimensions.to_dimension(context, value)

    def options(self, data: Optional[Mapping] = None) -> Options:
        """A root options map bound to this weaver."""
        return Options(data, env=self)

    # ----- building -----
    def build(self, context, tree):
        """Builds ``tree`` with empty root options."""
        return self.build_node(context, tree, self.options())

    def build_node(self, context, node, options: Optional[Mapping] = None, depth: int = 0):
        """
        Builds one node and its subtree, returning the native widget.

        Anything that is not a list or tuple is returned unchanged. Errors
        abort the whole subtree; nothing is recovered here.
        """
        if not is_node(node):
            return node
        if depth > self.max_depth:
            raise TreeTooDeep(node, self.max_depth)
        if not isinstance(options, Options) or options.env is None:
            options = self.options(options)

        if len(node) < 2:
            raise MalformedNode(node, "expected [element, attributes, *children]")
        element, attributes, *children = node
        if not is_identifier(element):
            raise MalformedNode(node, f"element must be a keyword, got {type(element).__name__}")
        if not isinstance(attributes, Mapping):
            raise MalformedNode(node, f"attributes must be a mapping, got {type(attributes).__name__}")
        element = name_of(element)
        if element not in self.registry:
            raise NotRegistered(element)

        merged = self.registry.default_attributes(element)
        merged.update(normalize_attributes(attributes))
        factory = merged.pop(CUSTOM_CONSTRUCTOR, None)
        args = merged.pop(CONSTRUCTOR_ARGS, None)

        widget = self.construct(element, context, factory, args)
        child_options = self.apply_attributes(element, widget, merged, options)

        for child in children:
            if child is None:
                continue
            self.toolkit.append_child(widget, self.build_node(context, child, child_options, depth + 1))
        return widget

    def construct(self, element: str, context, factory=None, args: Optional[Sequence[Any]] = None):
        """Creates the native widget for ``element``, via ``factory`` when given."""
        if args is None:
            args = self.registry.recursive_find(element, ["constructor_args"]) or ()
        args = list(args)
        if factory is not None:
            logger.debug("Constructing %r with custom constructor %r", element, factory)
            return factory(context, *args)
        cls = self.registry.resolve_classname(element)
        logger.debug("Constructing %r as %s%r", element, cls.__name__, tuple(args))
        return self.toolkit.construct_instance(cls, context, args)

    def apply_attributes(self, element, widget, attributes: Dict[str, Any], options: Optional[Mapping]) -> Options:
        """
        Runs every trait of ``element`` against ``widget``, then applies the
        attributes no trait consumed through the generic setters.

        Each trait sees the options produced by the parent; their option
        updates accumulate into the returned map, which only the widget's
        children receive.
        """
        element = name_of(element)
        if not isinstance(options, Options) or options.env is None:
            options = self.options(options)
        remaining = dict(attributes)
        new_options = options
        for trait_id in self.registry.all_traits(element):
            attributes_fn, options_fn = self.traits.apply(trait_id, widget, remaining, options)
            remaining = attributes_fn(remaining)
            new_options = options_fn(new_options)
        self.apply_default_setters(element, widget, remaining)
        return new_options

    def apply_default_setters(self, element, widget, attributes: Dict[str, Any]) -> None:
        """``{"max-lines": 3}`` -> ``widget.set_max_lines(3)``, values resolved first."""
        for attribute, raw in attributes.items():
            value = self.resolve_value(element, raw, attribute)
            if is_dimension(value):
                value = self.to_dimension(self.toolkit.context_of(widget), value)
            self.toolkit.invoke_setter(widget, attribute, value)

    def configure(self, widget, **attributes):
        """
        Applies attributes to an already built widget. The element keyword is
        recovered from the widget's class.
        """
        element = self.registry.keyword_for_instance(widget)
        if element is None:
            raise NotRegistered(type(widget).__name__, "no element is registered for this class")
        self.apply_attributes(element, widget, normalize_attributes(attributes), self.options())
        return widget

    def build_content(self, host, tree):
        """
        Builds ``tree`` as the content of ``host`` (a window or context).

        ``host`` becomes the ID holder for the whole tree, so any element
        with an ``id`` is reachable through :func:`find_widget`. An already
        built widget is installed as is.
        """
        if is_node(tree):
            self.toolkit.new_id_map(host)
            content = self.build_node(host, tree, self.options({"id-holder": host}))
        else:
            content = tree
        setter = getattr(host, "set_content_view", None)
        if callable(setter):
            setter(content)
        return content

    def find_widget(self, holder, widget_id):
        """Looks up a widget by its ``id`` attribute in ``holder``'s ID map."""
        ids = self.toolkit.id_map(holder)
        if ids is None:
            return None
        return ids.get(widget_id)


_default_weaver: Optional[Weaver] = None


def get_weaver() -> Weaver:
    """The shared headless weaver used by the module-level helpers."""
    global _default_weaver
    if _default_weaver is None:
        _default_weaver = Weaver()
    return _default_weaver


def build(context, tree):
    return get_weaver().build(context, tree)


def configure(widget, **attributes):
    return get_weaver().configure(widget, **attributes)


def find_widget(holder, widget_id):
    return get_weaver().find_widget(holder, widget_id)
