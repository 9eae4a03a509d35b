import random
import unittest

from geoquiz.errors import GenerationExhausted
from geoquiz.quiz.options import coordinate_options, numeric_options, round_half_up


class StuckRandom(random.Random):
    """Always draws the same offset, so no new option can ever appear."""

    def uniform(self, a, b):
        return 0.0

    def randint(self, a, b):
        return 0


def _assert_valid(test: unittest.TestCase, opts) -> None:
    values = [o.value for o in opts.options]
    test.assertEqual(len(values), 4)
    test.assertEqual(len(set(values)), 4)
    test.assertEqual(values.count(opts.answer_value), 1)
    test.assertEqual(opts.options[opts.answer_index].value, opts.answer_value)


class NumericOptionsTests(unittest.TestCase):
    def test_four_distinct_options_with_answer(self) -> None:
        rng = random.Random(7)
        for _ in range(300):
            correct = rng.randint(2, 400)
            opts = numeric_options(correct, spread=max(6, correct * 0.3), digits=0, suffix=" units", minimum=2, rng=rng)
            _assert_valid(self, opts)
            self.assertEqual(opts.answer_value, str(correct))

    def test_no_option_below_minimum(self) -> None:
        rng = random.Random(11)
        for _ in range(300):
            correct = rng.uniform(12, 30)
            opts = numeric_options(correct, spread=25, digits=1, suffix=" sq units", minimum=12, rng=rng)
            _assert_valid(self, opts)
            for o in opts.options:
                self.assertGreaterEqual(float(o.value), 12)

    def test_decimal_formatting_and_half_up_rounding(self) -> None:
        opts = numeric_options(28.25, spread=10, digits=1, suffix=" sq units", minimum=10, rng=random.Random(1))
        self.assertEqual(opts.answer_value, "28.3")
        self.assertEqual(opts.options[opts.answer_index].label, "28.3 sq units")

    def test_integer_labels_use_thousands_separator(self) -> None:
        opts = numeric_options(1234, spread=200, digits=0, suffix=" sq units", minimum=2, rng=random.Random(2))
        self.assertEqual(opts.answer_value, "1234")
        self.assertEqual(opts.options[opts.answer_index].label, "1,234 sq units")

    def test_narrow_spread_still_terminates(self) -> None:
        opts = numeric_options(5, spread=0.5, digits=0, minimum=1, rng=random.Random(3))
        _assert_valid(self, opts)

    def test_same_seed_same_options(self) -> None:
        a = numeric_options(48, spread=12, digits=0, rng=random.Random(42))
        b = numeric_options(48, spread=12, digits=0, rng=random.Random(42))
        self.assertEqual(a, b)

    def test_exhaustion_raises(self) -> None:
        with self.assertRaises(GenerationExhausted):
            numeric_options(20, spread=5, digits=0, minimum=2, rng=StuckRandom())

    def test_invalid_arguments(self) -> None:
        with self.assertRaises(ValueError):
            numeric_options(10, spread=0, rng=random.Random())
        with self.assertRaises(ValueError):
            numeric_options(10, spread=5, digits=-1, rng=random.Random())

    def test_round_half_up(self) -> None:
        self.assertEqual(str(round_half_up(2.5, 0)), "3")
        self.assertEqual(str(round_half_up(0.05, 1)), "0.1")
        self.assertEqual(str(round_half_up(3.14 * 81, 1)), "254.3")


class CoordinateOptionsTests(unittest.TestCase):
    def test_points_distinct_and_within_range(self) -> None:
        rng = random.Random(5)
        for _ in range(300):
            x, y = rng.randint(-6, 6), rng.randint(-6, 6)
            opts = coordinate_options((x, y), spread_range=3, rng=rng)
            _assert_valid(self, opts)
            self.assertEqual(opts.answer_value, f"{x},{y}")
            for o in opts.options:
                ox, oy = (int(v) for v in o.value.split(","))
                self.assertLessEqual(abs(ox - x), 3)
                self.assertLessEqual(abs(oy - y), 3)
                self.assertEqual(o.label, f"({ox}, {oy})")

    def test_range_one_is_enough(self) -> None:
        opts = coordinate_options((0, 0), spread_range=1, rng=random.Random(9))
        _assert_valid(self, opts)

    def test_invalid_range(self) -> None:
        with self.assertRaises(ValueError):
            coordinate_options((1, 1), spread_range=0, rng=random.Random())

    def test_exhaustion_raises(self) -> None:
        with self.assertRaises(GenerationExhausted):
            coordinate_options((2, 3), spread_range=2, rng=StuckRandom())


if __name__ == "__main__":
    unittest.main()
