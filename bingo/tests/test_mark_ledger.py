import unittest

from bingo.engine.errors import FreeCell, LedgerFrozen, NotDrawn, StaleReference
from bingo.engine.marks import toggle_mark
from bingo.engine.types import RoundStatus

from bingo.tests._support import MemoryStore, participant_with, round_with


class ToggleMarkTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = MemoryStore()
        self.round = round_with(self.store, [5, 12, 31, 60])
        self.participant = participant_with(self.store, self.round, marked=[5])

    def test_marks_a_drawn_number(self) -> None:
        updated = toggle_mark(self.store, self.participant, self.round, 12)
        self.assertEqual(updated.marked_numbers, frozenset({5, 12}))
        self.assertEqual(self.store.get_participant(self.participant.id), updated)

    def test_toggling_twice_restores_the_original_set(self) -> None:
        once = toggle_mark(self.store, self.participant, self.round, 31)
        twice = toggle_mark(self.store, once, self.round, 31)
        self.assertEqual(twice.marked_numbers, self.participant.marked_numbers)

    def test_unmarks_a_marked_number(self) -> None:
        updated = toggle_mark(self.store, self.participant, self.round, 5)
        self.assertEqual(updated.marked_numbers, frozenset())

    def test_undrawn_number_is_rejected_without_writing(self) -> None:
        writes = self.store.writes
        with self.assertRaises(NotDrawn) as ctx:
            toggle_mark(self.store, self.participant, self.round, 7)
        self.assertEqual(ctx.exception.details, {"number": 7})
        self.assertEqual(self.store.writes, writes)
        self.assertEqual(
            self.store.get_participant(self.participant.id).marked_numbers, frozenset({5})
        )

    def test_free_cell_cannot_be_toggled(self) -> None:
        with self.assertRaises(FreeCell):
            toggle_mark(self.store, self.participant, self.round, 0)

    def test_ledger_is_frozen_after_a_win(self) -> None:
        won = self.store.update_participant(self.participant.id, {"has_bingo": True})
        with self.assertRaises(LedgerFrozen):
            toggle_mark(self.store, won, self.round, 12)

    def test_finished_round_rejects_marks(self) -> None:
        finished = self.store.update_round(self.round.id, {"status": RoundStatus.FINISHED})
        with self.assertRaises(StaleReference):
            toggle_mark(self.store, self.participant, finished, 12)

    def test_participant_from_another_round_is_rejected(self) -> None:
        other_round = round_with(self.store, [12])
        with self.assertRaises(StaleReference):
            toggle_mark(self.store, self.participant, other_round, 12)

    def test_stale_participant_snapshot_does_not_overwrite(self) -> None:
        toggle_mark(self.store, self.participant, self.round, 12)
        with self.assertRaises(StaleReference):
            toggle_mark(self.store, self.participant, self.round, 31)
        self.assertEqual(
            self.store.get_participant(self.participant.id).marked_numbers, frozenset({5, 12})
        )


if __name__ == "__main__":
    unittest.main()
