# pyweave/widgets.py
"""
A headless widget toolkit.

These classes behave like a retained-mode widget library without drawing
anything: they record text, layout parameters, padding, listeners and
children, which makes them the default build target for tests, the CLI and
any code that wants to inspect what a UI tree turns into.

``default_registry()`` and ``standard_traits()`` return the element
definitions and traits for this toolkit.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from .base import K, Keyword
from .events import ContextMenu, KeyEvent, MenuItem, TouchEvent
from .registry import Registry
from .traits import TraitRegistry, env_of, install_common_traits, is_set

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================
class Gravity:
    NO_GRAVITY = 0
    CENTER_HORIZONTAL = 1
    LEFT = 3
    RIGHT = 5
    CENTER_VERTICAL = 16
    CENTER = 17
    TOP = 48
    BOTTOM = 80
    FILL_HORIZONTAL = 7
    FILL_VERTICAL = 112
    FILL = 119
    START = 8388611
    END = 8388613


class TruncateAt:
    START = "start"
    MIDDLE = "middle"
    END = "end"
    MARQUEE = "marquee"


class ScaleType:
    CENTER = "center"
    CENTER_CROP = "center_crop"
    CENTER_INSIDE = "center_inside"
    FIT_CENTER = "fit_center"
    FIT_XY = "fit_xy"
    MATRIX = "matrix"


class EditorInfo:
    TYPE_CLASS_TEXT = 1
    TYPE_CLASS_NUMBER = 2
    TYPE_CLASS_PHONE = 3
    TYPE_CLASS_DATETIME = 4
    IME_ACTION_UNSPECIFIED = 0
    IME_ACTION_GO = 2
    IME_ACTION_SEARCH = 3
    IME_ACTION_SEND = 4
    IME_ACTION_NEXT = 5
    IME_ACTION_DONE = 6
    IME_ACTION_PREVIOUS = 7


# =============================================================================
# Layout parameters
# =============================================================================
class LayoutParams:
    FILL_PARENT = -1
    MATCH_PARENT = -1
    WRAP_CONTENT = -2

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height

    def __repr__(self):
        fields = ", ".join(f"{k}={v!r}" for k, v in vars(self).items())
        return f"{type(self).__name__}({fields})"


class MarginLayoutParams(LayoutParams):
    def __init__(self, width: int, height: int):
        super().__init__(width, height)
        self.margins = (0, 0, 0, 0)

    def set_margins(self, left: int, top: int, right: int, bottom: int) -> None:
        self.margins = (left, top, right, bottom)


class LinearLayoutParams(MarginLayoutParams):
    def __init__(self, width: int, height: int, weight: float = 0.0):
        super().__init__(width, height)
        self.weight = weight
        self.gravity = -1


class FrameLayoutParams(MarginLayoutParams):
    def __init__(self, width: int, height: int):
        super().__init__(width, height)
        self.gravity = -1


class RelativeLayoutParams(MarginLayoutParams):
    TRUE = -1

    def __init__(self, width: int, height: int):
        super().__init__(width, height)
        self.rules: Dict[int, int] = {}
        self.align_with_parent = False

    def add_rule(self, verb: int, anchor: int = TRUE) -> None:
        self.rules[verb] = anchor


class ListViewLayoutParams(LayoutParams):
    def __init__(self, width: int, height: int, view_type: int = 0):
        super().__init__(width, height)
        self.view_type = view_type


# =============================================================================
# Views
# =============================================================================
class View:
    """
    Base headless widget.

    :param context: The host context the view belongs to.
    :param attrs: Optional attribute set (kept for constructor parity).
    :param style: Style resource id.
    """
    VISIBLE = 0
    INVISIBLE = 4
    GONE = 8

    def __init__(self, context: Any, attrs: Optional[dict] = None, style: int = 0):
        self._context = context
        self.attrs = attrs
        self.style = style
        self.id: int = -1
        self.tag: Any = None
        self.parent: Optional["Group"] = None
        self.padding = (0, 0, 0, 0)
        self.layout_params: Optional[LayoutParams] = None
        self.visibility = View.VISIBLE
        self.enabled = True
        self.focused = False
        self.properties: Dict[str, Any] = {}
        self.listeners: Dict[str, Callable] = {}

    def get_context(self):
        return self._context

    def set_id(self, view_id: int) -> None:
        self.id = view_id

    def get_id(self) -> int:
        return self.id

    def set_tag(self, tag: Any) -> None:
        self.tag = tag

    def get_tag(self) -> Any:
        return self.tag

    def set_padding(self, left: int, top: int, right: int, bottom: int) -> None:
        self.padding = (left, top, right, bottom)

    def set_layout_params(self, params: LayoutParams) -> None:
        self.layout_params = params

    def get_layout_params(self) -> Optional[LayoutParams]:
        return self.layout_params

    def set_visibility(self, visibility: int) -> None:
        self.visibility = visibility

    def set_enabled(self, enabled: bool) -> None:
        self.enabled = enabled

    def set_focusable(self, focusable: bool) -> None:
        self.properties["focusable"] = focusable

    def set_alpha(self, alpha: float) -> None:
        self.properties["alpha"] = alpha

    def set_minimum_width(self, width: int) -> None:
        self.properties["minimum-width"] = width

    def set_minimum_height(self, height: int) -> None:
        self.properties["minimum-height"] = height

    def set_background_color(self, color: int) -> None:
        self.properties["background-color"] = color

    def set_content_description(self, description: str) -> None:
        self.properties["content-description"] = description

    # --- listeners ---
    def set_on_click_listener(self, listener: Callable) -> None:
        self.listeners["click"] = listener

    def set_on_long_click_listener(self, listener: Callable) -> None:
        self.listeners["long-click"] = listener

    def set_on_touch_listener(self, listener: Callable) -> None:
        self.listeners["touch"] = listener

    def set_on_key_listener(self, listener: Callable) -> None:
        self.listeners["key"] = listener

    def set_on_focus_change_listener(self, listener: Callable) -> None:
        self.listeners["focus-change"] = listener

    def set_on_create_context_menu_listener(self, listener: Callable) -> None:
        self.listeners["create-context-menu"] = listener

    def _fire(self, event: str, *args) -> Any:
        listener = self.listeners.get(event)
        return listener(*args) if listener is not None else None

    def perform_click(self) -> bool:
        if "click" not in self.listeners:
            return False
        self._fire("click", self)
        return True

    def perform_long_click(self) -> bool:
        return bool(self._fire("long-click", self))

    def dispatch_touch(self, event: TouchEvent) -> bool:
        return bool(self._fire("touch", self, event))

    def dispatch_key(self, key_code: int, event: Optional[KeyEvent] = None) -> bool:
        return bool(self._fire("key", self, key_code, event or KeyEvent(key_code)))

    def set_focus(self, focused: bool) -> None:
        self.focused = focused
        self._fire("focus-change", self, focused)

    def create_context_menu(self) -> ContextMenu:
        menu = ContextMenu()
        self._fire("create-context-menu", menu, self, None)
        return menu

    # --- inspection ---
    def describe_props(self) -> Dict[str, Any]:
        props: Dict[str, Any] = {}
        if self.id != -1:
            props["id"] = self.id
        if self.padding != (0, 0, 0, 0):
            props["padding"] = self.padding
        if self.layout_params is not None:
            props["layout"] = self.layout_params
        if self.visibility != View.VISIBLE:
            props["visibility"] = self.visibility
        if not self.enabled:
            props["enabled"] = False
        props.update(self.properties)
        if self.listeners:
            props["listeners"] = sorted(self.listeners)
        return props

    def describe(self, indent: int = 0) -> str:
        """Returns a readable outline of this view and its children."""
        props = ", ".join(f"{k}={v!r}" for k, v in self.describe_props().items())
        line = f"{'  ' * indent}{type(self).__name__}({props})"
        children = getattr(self, "children", [])
        return "\n".join([line] + [child.describe(indent + 1) for child in children])

    def __repr__(self):
        return f"{type(self).__name__}(id={self.id})"


class Group(View):
    """A view that contains other views, in insertion order."""

    def __init__(self, context: Any, attrs: Optional[dict] = None, style: int = 0):
        super().__init__(context, attrs, style)
        self.children: List[View] = []

    def add_view(self, child: View) -> None:
        child.parent = self
        self.children.append(child)

    def get_child_count(self) -> int:
        return len(self.children)

    def get_child_at(self, index: int) -> View:
        return self.children[index]


class LinearLayout(Group):
    HORIZONTAL = 0
    VERTICAL = 1

    def __init__(self, context: Any, attrs: Optional[dict] = None, style: int = 0):
        super().__init__(context, attrs, style)
        self.orientation = LinearLayout.HORIZONTAL
        self.gravity = Gravity.NO_GRAVITY

    def set_orientation(self, orientation: int) -> None:
        self.orientation = orientation
        self.properties["orientation"] = orientation

    def set_gravity(self, gravity: int) -> None:
        self.gravity = gravity
        self.properties["gravity"] = gravity


class RelativeLayout(Group):
    LEFT_OF = 0
    RIGHT_OF = 1
    ABOVE = 2
    BELOW = 3
    ALIGN_BASELINE = 4
    ALIGN_LEFT = 5
    ALIGN_TOP = 6
    ALIGN_RIGHT = 7
    ALIGN_BOTTOM = 8
    ALIGN_PARENT_LEFT = 9
    ALIGN_PARENT_TOP = 10
    ALIGN_PARENT_RIGHT = 11
    ALIGN_PARENT_BOTTOM = 12
    CENTER_IN_PARENT = 13
    CENTER_HORIZONTAL = 14
    CENTER_VERTICAL = 15
    START_OF = 16
    END_OF = 17
    ALIGN_START = 18
    ALIGN_END = 19
    ALIGN_PARENT_START = 20
    ALIGN_PARENT_END = 21


class FrameLayout(Group):
    pass


class ScrollView(FrameLayout):
    def set_fill_viewport(self, fill: bool) -> None:
        self.properties["fill-viewport"] = fill


class ListView(Group):
    def set_on_item_click_listener(self, listener: Callable) -> None:
        self.listeners["item-click"] = listener

    def perform_item_click(self, position: int) -> bool:
        if "item-click" not in self.listeners:
            return False
        view = self.children[position] if position < len(self.children) else None
        self._fire("item-click", self, view, position, position)
        return True

    def set_divider_height(self, height: int) -> None:
        self.properties["divider-height"] = height


class SearchView(Group):
    def __init__(self, context: Any, attrs: Optional[dict] = None, style: int = 0):
        super().__init__(context, attrs, style)
        self.query = ""

    def set_query_hint(self, hint: str) -> None:
        self.properties["query-hint"] = hint

    def set_iconified_by_default(self, iconified: bool) -> None:
        self.properties["iconified-by-default"] = iconified

    def set_on_query_text_listener(self, on_change: Optional[Callable], on_submit: Optional[Callable]) -> None:
        self.listeners["query-text-change"] = on_change
        self.listeners["query-text-submit"] = on_submit

    def set_query(self, query: str, submit: bool = False) -> bool:
        self.query = query
        handled = bool(self._fire("query-text-change", query))
        if submit:
            handled = bool(self._fire("query-text-submit", query))
        return handled


class TextView(View):
    def __init__(self, context: Any, attrs: Optional[dict] = None, style: int = 0):
        super().__init__(context, attrs, style)
        self.text = ""
        self.text_size: Optional[tuple] = None

    def set_text(self, text: str) -> None:
        self.text = text

    def get_text(self) -> str:
        return self.text

    def set_text_size(self, size: float, unit: Optional[str] = None) -> None:
        """Sets the text size; without a unit the size is in scaled pixels."""
        self.text_size = (size, unit or "sp")

    def set_text_color(self, color: int) -> None:
        self.properties["text-color"] = color

    def set_gravity(self, gravity: int) -> None:
        self.properties["gravity"] = gravity

    def set_hint(self, hint: str) -> None:
        self.properties["hint"] = hint

    def set_single_line(self, single_line: bool) -> None:
        self.properties["single-line"] = single_line

    def set_ellipsize(self, where: str) -> None:
        self.properties["ellipsize"] = where

    def set_on_editor_action_listener(self, listener: Callable) -> None:
        self.listeners["editor-action"] = listener

    def on_editor_action(self, action_id: int, event: Optional[KeyEvent] = None) -> bool:
        return bool(self._fire("editor-action", self, action_id, event))

    def describe_props(self) -> Dict[str, Any]:
        props = {"text": self.text}
        if self.text_size is not None:
            props["text_size"] = self.text_size
        props.update(super().describe_props())
        return props


class Button(TextView):
    pass


class CheckBox(Button):
    def __init__(self, context: Any, attrs: Optional[dict] = None, style: int = 0):
        super().__init__(context, attrs, style)
        self.checked = False

    def set_checked(self, checked: bool) -> None:
        self.checked = checked
        self.properties["checked"] = checked


class EditText(TextView):
    def set_input_type(self, input_type: int) -> None:
        self.properties["input-type"] = input_type

    def set_ime_options(self, options: int) -> None:
        self.properties["ime-options"] = options


class ImageView(View):
    def __init__(self, context: Any, attrs: Optional[dict] = None, style: int = 0):
        super().__init__(context, attrs, style)
        self.image: Optional[tuple] = None

    def set_image_resource(self, resource_id: int) -> None:
        self.image = ("resource", resource_id)

    def set_image_uri(self, uri: str) -> None:
        self.image = ("uri", uri)

    def set_image_bitmap(self, bitmap: bytes) -> None:
        self.image = ("bitmap", bitmap)

    def set_scale_type(self, scale_type: str) -> None:
        self.properties["scale-type"] = scale_type

    def describe_props(self) -> Dict[str, Any]:
        props = super().describe_props()
        if self.image is not None:
            props["image"] = self.image[0]
        return props


class ProgressBar(View):
    STYLE_NORMAL = 0
    STYLE_LARGE = 1

    def __init__(self, context: Any, attrs: Optional[dict] = None, style: int = 0):
        super().__init__(context, attrs, style)
        self.progress = 0
        self.max = 100
        self.indeterminate = False

    def set_progress(self, progress: int) -> None:
        self.progress = progress

    def set_max(self, maximum: int) -> None:
        self.max = maximum

    def set_indeterminate(self, indeterminate: bool) -> None:
        self.indeterminate = indeterminate


# =============================================================================
# Element definitions
# =============================================================================
def default_registry() -> Registry:
    """A fresh registry describing the headless toolkit's elements."""
    registry = Registry()
    registry.define(
        "view", classname=View, inherits=None,
        traits=["ref", "id", "padding", "on-click", "on-long-click", "on-touch",
                "on-key", "on-focus-change", "on-create-context-menu",
                "default-layout-params", "linear-layout-params",
                "relative-layout-params", "list-view-layout-params",
                "frame-layout-params"],
        value_namespaces={"gravity": Gravity},
    )
    registry.define("group", classname=Group, traits=["container", "id-holder"])
    registry.define("linear-layout", classname=LinearLayout, inherits="group")
    registry.define("relative-layout", classname=RelativeLayout, inherits="group")
    registry.define("frame-layout", classname=FrameLayout, inherits="group")
    registry.define("scroll-view", classname=ScrollView, inherits="group",
                    container_type="frame-layout")
    registry.define("list-view", classname=ListView, inherits="group",
                    traits=["on-item-click"], container_type="list-view-layout")
    registry.define("search-view", classname=SearchView, inherits="group",
                    traits=["on-query-text"])
    registry.define("text-view", classname=TextView,
                    traits=["text", "text-size", "on-editor-action"],
                    value_namespaces={"ellipsize": TruncateAt})
    registry.define("button", classname=Button, inherits="text-view",
                    attributes={"text": "Default button"})
    registry.define("check-box", classname=CheckBox, inherits="button",
                    attributes={"text": ""})
    registry.define(
        "edit-text", classname=EditText, inherits="text-view",
        values={
            K.number: EditorInfo.TYPE_CLASS_NUMBER,
            K.datetime: EditorInfo.TYPE_CLASS_DATETIME,
            K.text: EditorInfo.TYPE_CLASS_TEXT,
            K.phone: EditorInfo.TYPE_CLASS_PHONE,
            K.go: EditorInfo.IME_ACTION_GO,
            K.done: EditorInfo.IME_ACTION_DONE,
            K.unspecified: EditorInfo.IME_ACTION_UNSPECIFIED,
            K.send: EditorInfo.IME_ACTION_SEND,
            K.search: EditorInfo.IME_ACTION_SEARCH,
            K.previous: EditorInfo.IME_ACTION_PREVIOUS,
            K.next: EditorInfo.IME_ACTION_NEXT,
        },
    )
    registry.define("image-view", classname=ImageView, traits=["image"],
                    value_namespaces={"scale-type": ScaleType})
    registry.define("progress-bar", classname=ProgressBar,
                    value_namespaces={"visibility": View})
    registry.define("progress-bar-large", inherits="progress-bar",
                    constructor_args=[None, ProgressBar.STYLE_LARGE])
    registry.define(
        "layout-params", classname=LayoutParams, inherits=None,
        values={K.fill: LayoutParams.FILL_PARENT,
                K.match: LayoutParams.MATCH_PARENT,
                K.wrap: LayoutParams.WRAP_CONTENT},
        value_namespaces={"gravity": Gravity},
    )
    return registry


# =============================================================================
# Traits
# =============================================================================
MARGIN_ATTRIBUTES = ["layout-margin", "layout-margin-left", "layout-margin-top",
                     "layout-margin-right", "layout-margin-bottom"]

RELATIVE_STANDALONE = {
    "layout-align-parent-bottom": RelativeLayout.ALIGN_PARENT_BOTTOM,
    "layout-align-parent-end": RelativeLayout.ALIGN_PARENT_END,
    "layout-align-parent-left": RelativeLayout.ALIGN_PARENT_LEFT,
    "layout-align-parent-right": RelativeLayout.ALIGN_PARENT_RIGHT,
    "layout-align-parent-start": RelativeLayout.ALIGN_PARENT_START,
    "layout-align-parent-top": RelativeLayout.ALIGN_PARENT_TOP,
    "layout-center-horizontal": RelativeLayout.CENTER_HORIZONTAL,
    "layout-center-vertical": RelativeLayout.CENTER_VERTICAL,
    "layout-center-in-parent": RelativeLayout.CENTER_IN_PARENT,
}

RELATIVE_WITH_ID = {
    "layout-above": RelativeLayout.ABOVE,
    "layout-align-baseline": RelativeLayout.ALIGN_BASELINE,
    "layout-align-bottom": RelativeLayout.ALIGN_BOTTOM,
    "layout-align-end": RelativeLayout.ALIGN_END,
    "layout-align-left": RelativeLayout.ALIGN_LEFT,
    "layout-align-right": RelativeLayout.ALIGN_RIGHT,
    "layout-align-start": RelativeLayout.ALIGN_START,
    "layout-align-top": RelativeLayout.ALIGN_TOP,
    "layout-below": RelativeLayout.BELOW,
    "layout-to-end-of": RelativeLayout.END_OF,
    "layout-to-left-of": RelativeLayout.LEFT_OF,
    "layout-to-right-of": RelativeLayout.RIGHT_OF,
    "layout-to-start-of": RelativeLayout.START_OF,
}

RELATIVE_ATTRIBUTES = (["layout-width", "layout-height", "layout-align-with-parent-if-missing"]
                       + list(RELATIVE_STANDALONE) + list(RELATIVE_WITH_ID))

# (trait id, setter on the widget)
LISTENER_TRAITS = [
    ("on-click", "set_on_click_listener"),
    ("on-long-click", "set_on_long_click_listener"),
    ("on-touch", "set_on_touch_listener"),
    ("on-key", "set_on_key_listener"),
    ("on-focus-change", "set_on_focus_change_listener"),
    ("on-create-context-menu", "set_on_create_context_menu_listener"),
    ("on-editor-action", "set_on_editor_action_listener"),
    ("on-item-click", "set_on_item_click_listener"),
]


def _container_is(container_type: str):
    def applies(attributes, options):
        return options.get("container-type") == container_type
    return applies


def _layout_size(widget, options, value) -> int:
    env = env_of(options, "layout-params")
    resolved = env.resolve_value("layout-params", K.wrap if value is None else value)
    return env.to_dimension(widget.get_context(), resolved)


def _apply_margins(widget, options, params: MarginLayoutParams, attributes) -> None:
    env = env_of(options, "layout-params")
    context = widget.get_context()
    common = env.to_dimension(context, attributes.get("layout-margin", 0))
    left, top, right, bottom = (env.to_dimension(context, attributes.get(a, common))
                                for a in MARGIN_ATTRIBUTES[1:])
    params.set_margins(left, top, right, bottom)


def _install_listener_trait(traits: TraitRegistry, trait_id: str, setter: str) -> None:
    def body(widget, attributes, options):
        getattr(widget, setter)(attributes[trait_id])
    body.__doc__ = f"Takes a callable under ``{trait_id}`` and installs it via ``{setter}``."
    traits.register(trait_id, body)


def standard_traits(strict: bool = False) -> TraitRegistry:
    """
    A fresh trait registry with the common and headless-toolkit traits.

    The layout-parameter traits pair a container predicate with an attribute
    list, so they are always installed; ``strict`` applies to traits
    registered afterwards.
    """
    traits = install_common_traits(TraitRegistry())

    @traits.trait("text")
    def text(widget, attributes, options):
        """Sets the widget's text; non-string values are converted with ``str``."""
        value = attributes.get("text")
        widget.set_text("" if value is None else str(value))

    @traits.trait("text-size")
    def text_size(widget, attributes, options):
        """
        Takes a number (scaled pixels) or a dimension pair like ``(14, K.dp)``
        and sets the widget's text size.
        """
        size = attributes["text-size"]
        if isinstance(size, (list, tuple)):
            magnitude, unit = size
            widget.set_text_size(magnitude, unit.name if isinstance(unit, Keyword) else str(unit))
        else:
            widget.set_text_size(size)

    @traits.trait("image")
    def image(widget, attributes, options):
        """Takes a resource id (int), bytes (bitmap data) or a URI string."""
        source = attributes["image"]
        if isinstance(source, (bytes, bytearray)):
            widget.set_image_bitmap(bytes(source))
        elif isinstance(source, str):
            widget.set_image_uri(source)
        else:
            widget.set_image_resource(source)

    @traits.trait("padding", attributes=["padding", "padding-bottom", "padding-left",
                                         "padding-right", "padding-top"])
    def padding(widget, attributes, options):
        """
        Sets padding from ``padding`` and the per-side attributes. Values are
        pixels or dimension pairs such as ``(8, K.dp)``.
        """
        env = env_of(options, "padding")
        context = widget.get_context()
        common = attributes.get("padding") or 0

        def side(name):
            value = attributes.get(name)
            return env.to_dimension(context, common if value is None else value)

        widget.set_padding(side("padding-left"), side("padding-top"),
                           side("padding-right"), side("padding-bottom"))

    @traits.trait("default-layout-params", attributes=["layout-width", "layout-height"],
                  applies=lambda a, o: ((is_set(a.get("layout-width")) or is_set(a.get("layout-height")))
                                        and o.get("container-type") is None))
    def default_layout_params(widget, attributes, options):
        """Sets plain LayoutParams when the widget has no known container."""
        widget.set_layout_params(LayoutParams(
            _layout_size(widget, options, attributes.get("layout-width")),
            _layout_size(widget, options, attributes.get("layout-height"))))

    @traits.trait("linear-layout-params",
                  attributes=MARGIN_ATTRIBUTES + ["layout-width", "layout-height",
                                                  "layout-weight", "layout-gravity"],
                  applies=_container_is("linear-layout"))
    def linear_layout_params(widget, attributes, options):
        """
        Sets LinearLayoutParams from the width, height, weight, gravity and
        margin attributes when the container is a linear layout. Sizes may be
        numbers, dimension pairs, ``:fill`` or ``:wrap``.
        """
        params = LinearLayoutParams(
            _layout_size(widget, options, attributes.get("layout-width")),
            _layout_size(widget, options, attributes.get("layout-height")),
            attributes.get("layout-weight") or 0)
        _apply_margins(widget, options, params, attributes)
        if attributes.get("layout-gravity") is not None:
            params.gravity = env_of(options, "linear-layout-params").resolve_value(
                "layout-params", attributes["layout-gravity"], "gravity")
        widget.set_layout_params(params)

    @traits.trait("relative-layout-params",
                  attributes=RELATIVE_ATTRIBUTES + MARGIN_ATTRIBUTES,
                  applies=_container_is("relative-layout"))
    def relative_layout_params(widget, attributes, options):
        """
        Sets RelativeLayoutParams. Boolean rules (``layout-center-in-parent``)
        take ``True``; anchored rules (``layout-below``) take the sibling's id.
        """
        from .base import to_id
        params = RelativeLayoutParams(
            _layout_size(widget, options, attributes.get("layout-width")),
            _layout_size(widget, options, attributes.get("layout-height")))
        if attributes.get("layout-align-with-parent-if-missing") is not None:
            params.align_with_parent = bool(attributes["layout-align-with-parent-if-missing"])
        for name, verb in RELATIVE_STANDALONE.items():
            if attributes.get(name) is True:
                params.add_rule(verb)
        for name, verb in RELATIVE_WITH_ID.items():
            if name in attributes:
                params.add_rule(verb, to_id(attributes[name]))
        _apply_margins(widget, options, params, attributes)
        widget.set_layout_params(params)

    @traits.trait("frame-layout-params",
                  attributes=MARGIN_ATTRIBUTES + ["layout-width", "layout-height", "layout-gravity"],
                  applies=_container_is("frame-layout"))
    def frame_layout_params(widget, attributes, options):
        """Sets FrameLayoutParams (size, gravity, margins) inside frame layouts."""
        params = FrameLayoutParams(
            _layout_size(widget, options, attributes.get("layout-width")),
            _layout_size(widget, options, attributes.get("layout-height")))
        _apply_margins(widget, options, params, attributes)
        if attributes.get("layout-gravity") is not None:
            params.gravity = env_of(options, "frame-layout-params").resolve_value(
                "layout-params", attributes["layout-gravity"], "gravity")
        widget.set_layout_params(params)

    @traits.trait("list-view-layout-params",
                  attributes=["layout-width", "layout-height", "layout-view-type"],
                  applies=_container_is("list-view-layout"))
    def list_view_layout_params(widget, attributes, options):
        width = _layout_size(widget, options, attributes.get("layout-width"))
        height = _layout_size(widget, options, attributes.get("layout-height"))
        view_type = attributes.get("layout-view-type")
        widget.set_layout_params(ListViewLayoutParams(width, height, view_type)
                                 if view_type is not None else ListViewLayoutParams(width, height))

    for trait_id, setter in LISTENER_TRAITS:
        _install_listener_trait(traits, trait_id, setter)

    @traits.trait("on-query-text", attributes=["on-query-text-change", "on-query-text-submit"])
    def on_query_text(widget, attributes, options):
        """
        Takes ``on-query-text-change`` and ``on-query-text-submit`` callables.
        When the search view is the action view of a menu item (``menu-item``
        option), the item is passed as a second argument.
        """
        menu_item: Optional[MenuItem] = options.get("menu-item")
        on_change = attributes.get("on-query-text-change")
        on_submit = attributes.get("on-query-text-submit")
        if menu_item is not None:
            if on_change is not None:
                on_change = _with_item(on_change, menu_item)
            if on_submit is not None:
                on_submit = _with_item(on_submit, menu_item)
        widget.set_on_query_text_listener(on_change, on_submit)

    traits.strict = strict
    return traits




def _with_item(callback, menu_item):
    return lambda query: callback(query, menu_item)
