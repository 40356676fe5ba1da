# tests/test_values.py
import unittest
from fractions import Fraction

from pyweave import K
from pyweave.errors import NotRegistered, UnresolvedSymbol
from pyweave.registry import Registry, TypeDescriptor
from pyweave.toolkit import Context, DisplayMetrics, ReflectiveToolkit, apply_dimension
from pyweave.values import DimensionConverter, is_dimension, narrow_number, resolve_value


class Panel:
    ALIGN_LEFT = 3
    WRAP = "panel-wrap"


class Align:
    CENTER = 17


class FancyPanel(Panel):
    pass


class CountingToolkit(ReflectiveToolkit):
    def __init__(self):
        super().__init__()
        self.metric_calls = 0

    def display_metrics(self, context):
        self.metric_calls += 1
        return super().display_metrics(context)


def registry():
    reg = Registry()
    reg.register("panel", TypeDescriptor(classname=Panel, values={K.wrap: -2},
                                         value_namespaces={"gravity": Align}))
    reg.register("fancy", TypeDescriptor(classname=FancyPanel, inherits="panel"))
    return reg


class TestResolveValue(unittest.TestCase):
    def setUp(self):
        self.registry = registry()
        self.toolkit = ReflectiveToolkit()

    def resolve(self, element, value, attribute=None):
        return resolve_value(self.registry, self.toolkit, element, value, attribute)

    def test_value_table_wins_over_constant(self):
        self.assertEqual(self.resolve("panel", K.wrap), -2)

    def test_value_table_found_on_parent(self):
        self.assertEqual(self.resolve("fancy", K.wrap), -2)

    def test_constant_derived_from_class(self):
        self.assertEqual(self.resolve("fancy", K.align_left), 3)

    def test_value_namespace_for_attribute(self):
        self.assertEqual(self.resolve("fancy", K.center, "gravity"), 17)

    def test_unresolved_symbol(self):
        with self.assertRaises(UnresolvedSymbol) as ctx:
            self.resolve("panel", K.nowhere)
        self.assertEqual(ctx.exception.constant, "NOWHERE")
        self.assertIs(ctx.exception.owner, Panel)

    def test_unknown_element(self):
        with self.assertRaises(NotRegistered):
            self.resolve("missing", K.center)

    def test_literals_pass_through(self):
        self.assertEqual(self.resolve("panel", "wrap"), "wrap")
        self.assertIs(self.resolve("panel", True), True)
        marker = object()
        self.assertIs(self.resolve("panel", marker), marker)

    def test_numbers_are_narrowed(self):
        self.assertEqual(type(self.resolve("panel", Fraction(1, 2))), float)
        self.assertEqual(narrow_number(7), 7)
        self.assertIsInstance(narrow_number(2.5), float)


class TestDimensions(unittest.TestCase):
    def test_units(self):
        metrics = DisplayMetrics(density=2.0, scaled_density=3.0, xdpi=144.0)
        self.assertEqual(apply_dimension("px", 10, metrics), 10)
        self.assertEqual(apply_dimension("dp", 10, metrics), 20)
        self.assertEqual(apply_dimension("dip", 10, metrics), 20)
        self.assertEqual(apply_dimension("sp", 10, metrics), 30)
        self.assertEqual(apply_dimension("in", 1, metrics), 144)
        self.assertAlmostEqual(apply_dimension("pt", 72, metrics), 144)
        self.assertAlmostEqual(apply_dimension("mm", 25.4, metrics), 144)

    def test_px_equals_magnitude_at_unit_density(self):
        converter = DimensionConverter(ReflectiveToolkit())
        context = Context(DisplayMetrics(density=1.0))
        self.assertEqual(converter.to_dimension(context, [10, K.px]), 10)
        self.assertEqual(converter.to_dimension(context, [10, K.dp]), 10)

    def test_dp_scales_monotonically_with_density(self):
        converter = DimensionConverter(ReflectiveToolkit())
        results = [converter.to_dimension(Context(DisplayMetrics(density=d)), (10, K.dp))
                   for d in (0.75, 1.0, 1.5, 2.0, 3.0)]
        self.assertEqual(results, sorted(results))
        self.assertEqual(results, [8, 10, 15, 20, 30])

    def test_rounds_half_up(self):
        converter = DimensionConverter(ReflectiveToolkit())
        context = Context(DisplayMetrics(density=1.25))
        self.assertEqual(converter.convert(context, 2, "dp"), 3)

    def test_string_units(self):
        converter = DimensionConverter(ReflectiveToolkit())
        self.assertEqual(converter.to_dimension(Context(DisplayMetrics(density=2)), (4, ":dp")), 8)

    def test_unknown_unit(self):
        converter = DimensionConverter(ReflectiveToolkit())
        with self.assertRaises(UnresolvedSymbol):
            converter.convert(Context(), 4, K.furlong)

    def test_non_dimensions_unchanged(self):
        converter = DimensionConverter(ReflectiveToolkit())
        self.assertEqual(converter.to_dimension(Context(), 12), 12)
        self.assertEqual(converter.to_dimension(Context(), [1, 2]), [1, 2])
        self.assertFalse(is_dimension((True, K.dp)))
        self.assertTrue(is_dimension([1.5, "mm"]))

    def test_metrics_memoized_per_context(self):
        toolkit = CountingToolkit()
        converter = DimensionConverter(toolkit)
        first, second = Context(), Context()
        for _ in range(3):
            converter.to_dimension(first, (1, K.dp))
        converter.to_dimension(second, (1, K.dp))
        self.assertEqual(toolkit.metric_calls, 2)


if __name__ == "__main__":
    unittest.main()
