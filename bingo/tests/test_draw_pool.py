import random
import unittest

from bingo.engine.draws import POOL_SIZE, DrawPool
from bingo.engine.errors import ExhaustedPool


class DrawPoolTests(unittest.TestCase):
    def test_draw_returns_new_pool_and_leaves_original_untouched(self) -> None:
        pool = DrawPool([5, 12])
        number, updated = pool.draw(random.Random(1))
        self.assertNotIn(number, (5, 12))
        self.assertEqual(pool.drawn, (5, 12))
        self.assertEqual(updated.drawn, (5, 12, number))
        self.assertEqual(updated.last, number)

    def test_drawing_everything_never_repeats(self) -> None:
        pool = DrawPool()
        rng = random.Random(42)
        while not pool.is_exhausted:
            _, pool = pool.draw(rng)
        self.assertEqual(len(pool), POOL_SIZE)
        self.assertEqual(sorted(pool.drawn), list(range(1, 76)))
        self.assertEqual(pool.remaining(), [])

    def test_exhausted_pool_raises(self) -> None:
        pool = DrawPool(range(1, 76))
        with self.assertRaises(ExhaustedPool):
            pool.draw()

    def test_last_remaining_number_is_drawn(self) -> None:
        pool = DrawPool([n for n in range(1, 76) if n != 37])
        number, updated = pool.draw()
        self.assertEqual(number, 37)
        self.assertTrue(updated.is_exhausted)

    def test_rejects_invalid_history(self) -> None:
        with self.assertRaises(ValueError):
            DrawPool([3, 3])
        with self.assertRaises(ValueError):
            DrawPool([0])
        with self.assertRaises(ValueError):
            DrawPool([76])

    def test_contains(self) -> None:
        pool = DrawPool([10, 20])
        self.assertIn(10, pool)
        self.assertNotIn(11, pool)
        self.assertIsNone(DrawPool().last)


if __name__ == "__main__":
    unittest.main()
