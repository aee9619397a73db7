import random
import unittest

from bingo.engine.errors import ExhaustedPool, StaleReference
from bingo.engine.rounds import RoundStateMachine
from bingo.engine.types import RoundStatus

from bingo.tests._support import FakeClock, MemoryStore


class RoundStateMachineTests(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FakeClock()
        self.store = MemoryStore(self.clock)
        self.machine = RoundStateMachine(self.store, rng=random.Random(99), clock=self.clock)

    def test_create_starts_an_empty_active_round(self) -> None:
        round_ = self.machine.create()
        self.assertEqual(round_.status, RoundStatus.ACTIVE)
        self.assertEqual(round_.drawn_numbers, ())
        self.assertIsNone(round_.finished_at)
        self.assertEqual(self.machine.current(), round_)

    def test_second_create_finishes_the_previous_round(self) -> None:
        first = self.machine.create()
        second = self.machine.create()

        active = self.store.list_rounds(status=RoundStatus.ACTIVE)
        self.assertEqual([r.id for r in active], [second.id])

        previous = self.store.get_round(first.id)
        self.assertEqual(previous.status, RoundStatus.FINISHED)
        self.assertIsNotNone(previous.finished_at)

    def test_create_finishes_every_stray_active_round(self) -> None:
        # Two actives can appear after a create race; the next create heals it.
        self.store.create_round()
        self.store.create_round()
        newest = self.machine.create()
        active = self.store.list_rounds(status=RoundStatus.ACTIVE)
        self.assertEqual([r.id for r in active], [newest.id])

    def test_draw_next_appends_a_new_number(self) -> None:
        round_ = self.machine.create()
        number = self.machine.draw_next(round_)
        stored = self.store.get_round(round_.id)
        self.assertEqual(stored.drawn_numbers, (number,))
        self.assertTrue(1 <= number <= 75)

    def test_75_draws_are_unique_then_pool_is_exhausted(self) -> None:
        round_ = self.machine.create()
        for _ in range(75):
            self.machine.draw_next(round_)
            round_ = self.store.get_round(round_.id)
        self.assertEqual(len(round_.drawn_numbers), 75)
        self.assertEqual(len(set(round_.drawn_numbers)), 75)

        writes = self.store.writes
        with self.assertRaises(ExhaustedPool):
            self.machine.draw_next(round_)
        self.assertEqual(self.store.writes, writes)

    def test_draw_from_stale_snapshot_is_rejected(self) -> None:
        round_ = self.machine.create()
        self.machine.draw_next(round_)
        # round_ still shows an empty history; a second append must not commit.
        with self.assertRaises(StaleReference):
            self.machine.draw_next(round_)
        self.assertEqual(len(self.store.get_round(round_.id).drawn_numbers), 1)

    def test_draw_on_finished_round_is_rejected(self) -> None:
        round_ = self.machine.create()
        finished = self.machine.finish(round_)
        with self.assertRaises(StaleReference):
            self.machine.draw_next(finished)

    def test_finish_stamps_finished_at(self) -> None:
        round_ = self.machine.create()
        finished = self.machine.finish(round_)
        self.assertEqual(finished.status, RoundStatus.FINISHED)
        self.assertIsNotNone(finished.finished_at)
        self.assertIsNone(self.machine.current())

    def test_finishing_twice_is_a_stale_reference(self) -> None:
        round_ = self.machine.create()
        finished = self.machine.finish(round_)
        with self.assertRaises(StaleReference):
            self.machine.finish(round_)
        self.assertEqual(self.store.get_round(round_.id).finished_at, finished.finished_at)

    def test_finish_accepts_an_older_active_round(self) -> None:
        older = self.store.create_round()
        newer = self.store.create_round()

        finished = self.machine.finish(older)

        self.assertEqual(finished.status, RoundStatus.FINISHED)
        self.assertIsNotNone(finished.finished_at)
        self.assertEqual(self.machine.current().id, newer.id)

    def test_finishing_a_superseded_round_is_rejected(self) -> None:
        old = self.machine.create()
        self.machine.create()
        with self.assertRaises(StaleReference):
            self.machine.finish(old)


if __name__ == "__main__":
    unittest.main()
