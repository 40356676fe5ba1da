# tests/test_traits.py
import unittest

from pyweave.errors import TraitConflict, UnknownTrait, WeaveError
from pyweave.traits import Options, TraitRegistry, TraitResult, identity, install_common_traits, without


class Widget:
    def __init__(self):
        self.calls = []


def explode(widget, attributes, options):
    raise AssertionError("body must not run")


class TestOptions(unittest.TestCase):
    def test_assoc_returns_new_map(self):
        base = Options({"a": 1})
        changed = base.assoc("b", 2)
        self.assertEqual(dict(base), {"a": 1})
        self.assertEqual(dict(changed), {"a": 1, "b": 2})

    def test_dissoc(self):
        self.assertEqual(dict(Options({"a": 1, "b": 2}).dissoc("a")), {"b": 2})

    def test_keys_normalized(self):
        options = Options({"container_type": "box"})
        self.assertEqual(options["container-type"], "box")
        self.assertEqual(options.get("container_type"), "box")

    def test_env_survives_updates_but_is_not_a_key(self):
        env = object()
        options = Options({}, env=env).assoc("x", 1)
        self.assertIs(options.env, env)
        self.assertEqual(list(options), ["x"])


class TestTraitApplication(unittest.TestCase):
    def setUp(self):
        self.traits = TraitRegistry()

    def test_non_matching_trait_is_identity_and_body_not_called(self):
        self.traits.register("text", explode)
        attributes = {"other": 1}
        options = Options({"k": "v"})
        attributes_fn, options_fn = self.traits.apply("text", Widget(), attributes, options)
        self.assertEqual(attributes_fn(attributes), {"other": 1})
        self.assertEqual(options_fn(options), options)
        self.assertIs(attributes_fn, identity)
        self.assertIs(options_fn, identity)

    def test_none_and_false_do_not_match(self):
        self.traits.register("text", explode)
        for value in (None, False):
            attributes_fn, _ = self.traits.apply("text", Widget(), {"text": value}, Options())
            self.assertIs(attributes_fn, identity)

    def test_zero_counts_as_set(self):
        seen = []
        self.traits.register("count", lambda w, a, o: seen.append(a["count"]))
        self.traits.apply("count", Widget(), {"count": 0}, Options())
        self.assertEqual(seen, [0])

    def test_default_consumption_is_own_name(self):
        self.traits.register("text", lambda w, a, o: None)
        attributes_fn, options_fn = self.traits.apply("text", Widget(), {"text": "hi", "x": 1}, Options())
        self.assertEqual(attributes_fn({"text": "hi", "x": 1}), {"x": 1})
        self.assertIs(options_fn, identity)

    def test_explicit_attributes_consumed_exactly(self):
        self.traits.register("pad", lambda w, a, o: None, attributes=["a", "b"])
        attributes = {"a": 1, "b": 2, "c": 3, "pad": 4}
        attributes_fn, _ = self.traits.apply("pad", Widget(), attributes, Options())
        self.assertEqual(attributes_fn(attributes), {"c": 3, "pad": 4})
        self.assertEqual(attributes, {"a": 1, "b": 2, "c": 3, "pad": 4})

    def test_any_listed_attribute_triggers_match(self):
        seen = []
        self.traits.register("pad", lambda w, a, o: seen.append(True), attributes=["a", "b"])
        self.traits.apply("pad", Widget(), {"b": 5}, Options())
        self.assertEqual(seen, [True])

    def test_custom_predicate(self):
        seen = []
        self.traits.register("always", lambda w, a, o: seen.append(o.get("mode")),
                             applies=lambda a, o: o.get("mode") == "on")
        self.traits.apply("always", Widget(), {}, Options({"mode": "off"}))
        self.traits.apply("always", Widget(), {}, Options({"mode": "on"}))
        self.assertEqual(seen, ["on"])

    def test_trait_result_overrides(self):
        def body(widget, attributes, options):
            return TraitResult(attributes_fn=without(["x", "y"]),
                               options_fn=lambda o: o.assoc("seen", True))

        self.traits.register("x", body)
        attributes_fn, options_fn = self.traits.apply("x", Widget(), {"x": 1, "y": 2, "z": 3}, Options())
        self.assertEqual(attributes_fn({"x": 1, "y": 2, "z": 3}), {"z": 3})
        self.assertEqual(dict(options_fn(Options())), {"seen": True})

    def test_partial_result_keeps_default_consumption(self):
        self.traits.register("x", lambda w, a, o: TraitResult(options_fn=lambda opts: opts.assoc("k", 1)))
        attributes_fn, options_fn = self.traits.apply("x", Widget(), {"x": 1, "y": 2}, Options())
        self.assertEqual(attributes_fn({"x": 1, "y": 2}), {"y": 2})
        self.assertEqual(options_fn(Options())["k"], 1)

    def test_mapping_result_accepted(self):
        self.traits.register("x", lambda w, a, o: {"options_fn": lambda opts: opts.assoc("k", 2)})
        _, options_fn = self.traits.apply("x", Widget(), {"x": 1}, Options())
        self.assertEqual(options_fn(Options())["k"], 2)

    def test_body_errors_propagate(self):
        def body(widget, attributes, options):
            raise KeyError("boom")

        self.traits.register("x", body)
        with self.assertRaises(KeyError):
            self.traits.apply("x", Widget(), {"x": 1}, Options())

    def test_unknown_trait(self):
        with self.assertRaises(UnknownTrait):
            self.traits.apply("nope", Widget(), {}, Options())


class TestIntrospection(unittest.TestCase):
    def test_attribute_index_and_doc(self):
        traits = TraitRegistry()

        @traits.trait("padding", attributes=["padding", "padding_left"])
        def padding(widget, attributes, options):
            """Sets padding."""

        self.assertEqual(traits.traits_for_attribute("padding-left"), {"padding"})
        self.assertEqual(traits.doc("padding"), "Sets padding.")
        self.assertIn("padding", traits)
        self.assertEqual(traits.ids(), ["padding"])

    def test_predicate_with_attributes_is_flagged(self):
        traits = TraitRegistry()
        traits.register("both", lambda w, a, o: None, attributes=["a"], applies=lambda a, o: True)
        traits.register("plain", lambda w, a, o: None)
        self.assertEqual(traits.flagged(), ["both"])

    def test_flagged_trait_predicate_decides_and_list_consumes(self):
        traits = TraitRegistry()
        traits.register("both", lambda w, a, o: None, attributes=["a", "b"],
                        applies=lambda a, o: o.get("go"))
        attributes = {"a": 1, "b": 2, "c": 3}
        attributes_fn, _ = traits.apply("both", Widget(), attributes, Options())
        self.assertEqual(attributes_fn(attributes), attributes)
        attributes_fn, _ = traits.apply("both", Widget(), attributes, Options({"go": True}))
        self.assertEqual(attributes_fn(attributes), {"c": 3})

    def test_strict_registry_rejects_conflict(self):
        traits = TraitRegistry(strict=True)
        with self.assertRaises(TraitConflict):
            traits.register("both", lambda w, a, o: None, attributes=["a"], applies=lambda a, o: True)

    def test_copy_is_independent(self):
        traits = TraitRegistry()
        traits.register("a", lambda w, a, o: None)
        clone = traits.copy()
        clone.register("b", lambda w, a, o: None)
        self.assertNotIn("b", traits)


class TestCommonTraits(unittest.TestCase):
    def test_common_traits_need_a_weaver(self):
        traits = install_common_traits(TraitRegistry())
        with self.assertRaises(WeaveError):
            traits.apply("id", Widget(), {"id": "x"}, Options())

    def test_ref_callable(self):
        traits = install_common_traits(TraitRegistry())
        received = []
        widget = Widget()
        traits.apply("ref", widget, {"ref": received.append}, Options())
        self.assertEqual(received, [widget])


if __name__ == "__main__":
    unittest.main()
