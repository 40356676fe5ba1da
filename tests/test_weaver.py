# tests/test_weaver.py
import unittest
from typing import Optional

from pyweave import K, Ref
from pyweave.config import Config
from pyweave.core import Weaver
from pyweave.errors import (
    MalformedNode,
    NoMatchingConstructor,
    NoMatchingSetter,
    NotRegistered,
    TreeTooDeep,
    UnresolvedSymbol,
)
from pyweave.registry import Registry, TypeDescriptor
from pyweave.toolkit import Context, ReflectiveToolkit
from pyweave.traits import TraitRegistry, TraitResult, install_common_traits


class Node:
    ORIENTATION_VERTICAL = 1

    def __init__(self, context, flavor: Optional[str] = None):
        self.context = context
        self.flavor = flavor
        self.children = []
        self.tag = None
        self.id = None
        self.props = {}
        self.seen_options = None

    def get_context(self):
        return self.context

    def add_view(self, child):
        self.children.append(child)

    def set_id(self, value: int) -> None:
        self.id = value

    def set_tag(self, tag) -> None:
        self.tag = tag

    def get_tag(self):
        return self.tag

    def set_color(self, color: str) -> None:
        self.props["color"] = color

    def set_orientation(self, orientation: int) -> None:
        self.props["orientation"] = orientation

    def set_width(self, width: int) -> None:
        self.props["width"] = width

    def set_max_width(self, width: int) -> None:
        self.props["max-width"] = width


class Container(Node):
    pass


class Leaf(Node):
    pass


class RecordingToolkit(ReflectiveToolkit):
    """Records every generic setter call."""

    def __init__(self):
        super().__init__()
        self.setters = []

    def invoke_setter(self, widget, attribute, value):
        self.setters.append(attribute)
        super().invoke_setter(widget, attribute, value)


def make_weaver(extra_traits=None, toolkit=None):
    registry = Registry()
    registry.register("node", TypeDescriptor(classname=Node, traits=["ref", "id", "seen"]))
    registry.register("container", TypeDescriptor(classname=Container, inherits="node",
                                                  traits=["container", "id-holder", "mark"]))
    registry.register("root", TypeDescriptor(classname=Container, inherits="container"))
    registry.register("leaf", TypeDescriptor(classname=Leaf, inherits="node",
                                             attributes={"color": "grey"},
                                             values={K.wide: 300}))
    traits = install_common_traits(TraitRegistry())

    @traits.trait("seen", applies=lambda attributes, options: True)
    def seen(widget, attributes, options):
        widget.seen_options = dict(options)

    @traits.trait("mark")
    def mark(widget, attributes, options):
        return TraitResult(options_fn=lambda o: o.assoc("mark", attributes["mark"]))

    for register in extra_traits or ():
        register(traits)
    return Weaver(registry, traits, toolkit=toolkit, config=Config.from_mapping({"max_depth": 16}))


class TestBuildNode(unittest.TestCase):
    def setUp(self):
        self.weaver = make_weaver()
        self.context = Context()

    def test_none_children_skipped_in_order(self):
        root = self.weaver.build(self.context, ["container", {"id-holder": True},
                                                ["leaf", {"id": K.x}],
                                                None,
                                                ["leaf", {"id": K.y}]])
        self.assertEqual(len(root.children), 2)
        ids = root.get_tag()
        self.assertEqual([ids[K.x], ids[K.y]], root.children)

    def test_sibling_options_isolated(self):
        root = self.weaver.build(self.context, ["root", {},
                                                ["container", {"mark": "a"}, ["leaf", {}]],
                                                ["container", {}, ["leaf", {}]]])
        first, second = root.children
        self.assertNotIn("mark", second.seen_options)
        self.assertNotIn("mark", second.children[0].seen_options)
        self.assertEqual(first.children[0].seen_options["mark"], "a")
        # a node's own traits see the parent's options, not its own edits
        self.assertNotIn("mark", first.seen_options)

    def test_container_type_passed_to_children(self):
        root = self.weaver.build(self.context, ["root", {}, ["leaf", {}]])
        self.assertEqual(root.children[0].seen_options["container-type"], "root")
        self.assertNotIn("container-type", root.seen_options)

    def test_plain_dict_options(self):
        host = Context(name="host")
        root = self.weaver.build_node(self.context, ["container", {}, ["leaf", {"id": "ok"}]],
                                      {"id-holder": host})
        self.assertIs(self.weaver.find_widget(host, "ok"), root.children[0])
        self.assertIs(root.seen_options["id-holder"], host)

    def test_apply_attributes_with_plain_dict(self):
        widget = Container(self.context)
        options = self.weaver.apply_attributes("container", widget, {"mark": "m"}, {"depth-hint": 1})
        self.assertEqual(widget.seen_options, {"depth-hint": 1})
        self.assertEqual((options["mark"], options["depth-hint"]), ("m", 1))
        self.assertIs(options.env, self.weaver)

    def test_non_tree_returned_unchanged(self):
        marker = object()
        self.assertIs(self.weaver.build(self.context, marker), marker)
        self.assertEqual(self.weaver.build(self.context, "text"), "text")

    def test_defaults_merged_caller_wins(self):
        leaf = self.weaver.build(self.context, ["leaf", {}])
        self.assertEqual(leaf.props["color"], "grey")
        leaf = self.weaver.build(self.context, ["leaf", {"color": "red"}])
        self.assertEqual(leaf.props["color"], "red")

    def test_generic_setter_resolves_values(self):
        leaf = self.weaver.build(self.context, ["leaf", {"width": K.wide,
                                                         "orientation": K.orientation_vertical}])
        self.assertEqual(leaf.props["width"], 300)
        self.assertEqual(leaf.props["orientation"], 1)

    def test_generic_setter_converts_dimensions(self):
        leaf = self.weaver.build(self.context, ["leaf", {"width": [5, K.px]}])
        self.assertEqual(leaf.props["width"], 5)

    def test_underscored_keys(self):
        leaf = self.weaver.build(self.context, ["leaf", {"max_width": 4, "id": 4}])
        self.assertEqual(leaf.props["max-width"], 4)
        self.assertEqual(leaf.id, 4)

    def test_ref(self):
        ref = Ref()
        leaf = self.weaver.build(self.context, ["leaf", {"ref": ref}])
        self.assertIs(ref.value, leaf)

    def test_constructor_args(self):
        leaf = self.weaver.build(self.context, ["leaf", {"constructor-args": ["sweet"]}])
        self.assertEqual(leaf.flavor, "sweet")
        self.assertNotIn("constructor-args", leaf.props)

    def test_custom_constructor(self):
        calls = []

        def factory(context, *args):
            calls.append((context, args))
            return Leaf(context, "custom")

        leaf = self.weaver.build(self.context, ["leaf", {"custom-constructor": factory,
                                                         "constructor_args": [1, 2]}])
        self.assertEqual(leaf.flavor, "custom")
        self.assertEqual(calls, [(self.context, (1, 2))])

    def test_keyword_element(self):
        self.assertIsInstance(self.weaver.build(self.context, [K.leaf, {}]), Leaf)


class TestTraitsAndSetters(unittest.TestCase):
    def test_traits_consume_everything_no_generic_setter(self):
        events = []

        def register(traits):
            traits.register("text", lambda w, a, o: events.append(("text", a["text"])))
            traits.register("on-click", lambda w, a, o: events.append(("on-click", a["on-click"])))

        toolkit = RecordingToolkit()
        weaver = make_weaver([register], toolkit=toolkit)
        weaver.registry.register("plain", TypeDescriptor(classname=Leaf, inherits="node",
                                                         traits=["text", "on-click"]))
        click = print
        weaver.build(Context(), ["plain", {"text": "hi", "on-click": click}])
        self.assertEqual(events, [("text", "hi"), ("on-click", click)])
        self.assertEqual(toolkit.setters, [])


class TestErrors(unittest.TestCase):
    def setUp(self):
        self.weaver = make_weaver()
        self.context = Context()

    def test_malformed_nodes(self):
        for node in ([], ["leaf"], [42, {}], ["leaf", ["not", "a", "map"]]):
            with self.subTest(node=node):
                with self.assertRaises(MalformedNode):
                    self.weaver.build(self.context, node)

    def test_unknown_element(self):
        with self.assertRaises(NotRegistered):
            self.weaver.build(self.context, ["nope", {}])

    def test_unknown_attribute(self):
        with self.assertRaises(NoMatchingSetter):
            self.weaver.build(self.context, ["leaf", {"flavor": "x"}])

    def test_unresolved_symbol(self):
        with self.assertRaises(UnresolvedSymbol):
            self.weaver.build(self.context, ["leaf", {"width": K.huge}])

    def test_bad_constructor_args(self):
        with self.assertRaises(NoMatchingConstructor):
            self.weaver.build(self.context, ["leaf", {"constructor-args": [3]}])

    def test_error_in_child_aborts_build(self):
        with self.assertRaises(NotRegistered):
            self.weaver.build(self.context, ["container", {}, ["leaf", {}], ["nope", {}]])

    def test_depth_guard(self):
        tree = ["leaf", {}]
        for _ in range(20):
            tree = ["container", {}, tree]
        with self.assertRaises(TreeTooDeep):
            self.weaver.build(self.context, tree)


class TestConfigureAndContent(unittest.TestCase):
    def setUp(self):
        self.weaver = make_weaver()

    def test_configure_existing_widget(self):
        leaf = self.weaver.build(Context(), ["leaf", {}])
        self.weaver.configure(leaf, color="green", id=9)
        self.assertEqual(leaf.props["color"], "green")
        self.assertEqual(leaf.id, 9)

    def test_configure_unregistered(self):
        with self.assertRaises(NotRegistered):
            self.weaver.configure(object(), color="green")

    def test_build_content_registers_ids_on_host(self):
        host = Context(name="main")
        content = self.weaver.build_content(host, ["container", {}, ["leaf", {"id": "title"}]])
        self.assertIs(host.content, content)
        self.assertIs(self.weaver.find_widget(host, "title"), content.children[0])
        self.assertIsNone(self.weaver.find_widget(host, "missing"))

    def test_build_content_accepts_built_widget(self):
        host = Context()
        leaf = Leaf(host)
        self.assertIs(self.weaver.build_content(host, leaf), leaf)
        self.assertIs(host.content, leaf)


if __name__ == "__main__":
    unittest.main()
