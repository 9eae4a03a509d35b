import unittest

from geoquiz.app.clock import CooperativeClock


class FakeTime:
    def __init__(self) -> None:
        self.t = 0.0

    def __call__(self) -> float:
        return self.t


class CooperativeClockTests(unittest.TestCase):
    def setUp(self) -> None:
        self.time = FakeTime()
        self.clock = CooperativeClock(now=self.time)

    def test_call_later_fires_once_when_due(self) -> None:
        calls = []
        self.clock.call_later(2.0, lambda: calls.append("x"))
        self.assertEqual(self.clock.run_due(), 0)
        self.time.t = 2.0
        self.assertEqual(self.clock.run_due(), 1)
        self.time.t = 10.0
        self.assertEqual(self.clock.run_due(), 0)
        self.assertEqual(calls, ["x"])

    def test_due_order_then_insertion_order(self) -> None:
        calls = []
        self.clock.call_later(1.0, lambda: calls.append("b"))
        self.clock.call_later(0.5, lambda: calls.append("a"))
        self.clock.call_later(1.0, lambda: calls.append("c"))
        self.clock.run_due(now=5.0)
        self.assertEqual(calls, ["a", "b", "c"])

    def test_cancelled_task_never_fires(self) -> None:
        calls = []
        task = self.clock.call_later(1.0, lambda: calls.append("x"))
        task.cancel()
        self.assertEqual(self.clock.pending(), 0)
        self.assertIsNone(self.clock.next_due())
        self.clock.run_due(now=5.0)
        self.assertEqual(calls, [])

    def test_repeating_task_catches_up(self) -> None:
        ticks = []
        self.clock.call_every(1.0, lambda: ticks.append(self.time.t))
        self.time.t = 3.5
        self.assertEqual(self.clock.run_due(), 3)
        self.assertEqual(self.clock.next_due(), 4.0)

    def test_repeating_task_can_cancel_itself(self) -> None:
        ticks = []

        def tick() -> None:
            ticks.append(1)
            if len(ticks) == 2:
                task.cancel()

        task = self.clock.call_every(1.0, tick)
        self.clock.run_due(now=10.0)
        self.assertEqual(len(ticks), 2)
        self.assertEqual(self.clock.pending(), 0)

    def test_callback_may_schedule_more_work(self) -> None:
        calls = []
        self.clock.call_later(1.0, lambda: self.clock.call_later(0.0, lambda: calls.append("inner")))
        self.time.t = 1.0
        self.clock.run_due()
        self.assertEqual(calls, ["inner"])

    def test_invalid_interval(self) -> None:
        with self.assertRaises(ValueError):
            self.clock.call_every(0, lambda: None)


if __name__ == "__main__":
    unittest.main()
