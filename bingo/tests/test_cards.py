import random
import unittest

from bingo.engine.cards import (
    COLUMN_RANGES,
    COLUMNS,
    FREE,
    Card,
    card_to_grid,
    column_letter,
    generate_card,
)


class GenerateCardTests(unittest.TestCase):
    def test_columns_hold_five_distinct_values_in_range(self) -> None:
        rng = random.Random(7)
        for _ in range(200):
            card = generate_card(rng)
            for letter, (low, high) in COLUMN_RANGES.items():
                values = card.column(letter)
                self.assertEqual(len(values), 5)
                self.assertEqual(len(set(values)), 5)
                for row, value in enumerate(values):
                    if letter == "N" and row == 2:
                        continue
                    self.assertTrue(low <= value <= high, (letter, value))

    def test_centre_cell_is_free(self) -> None:
        card = generate_card(random.Random(3))
        grid = card_to_grid(card)
        self.assertEqual(grid[2][2], FREE)
        self.assertEqual(card.N[2], FREE)
        self.assertEqual(len(card.numbers()), 24)

    def test_default_randomness_produces_valid_cards(self) -> None:
        card = generate_card()
        self.assertEqual(Card.from_dict(card.to_dict()), card)

    def test_every_value_of_a_column_can_appear(self) -> None:
        rng = random.Random(11)
        seen = {letter: set() for letter in COLUMNS}
        for _ in range(300):
            card = generate_card(rng)
            for letter in COLUMNS:
                seen[letter].update(v for v in card.column(letter) if v != FREE)
        for letter, (low, high) in COLUMN_RANGES.items():
            self.assertEqual(seen[letter], set(range(low, high + 1)))


class CardGridTests(unittest.TestCase):
    def test_grid_is_row_major(self) -> None:
        card = Card(
            B=(1, 2, 3, 4, 5),
            I=(16, 17, 18, 19, 20),
            N=(31, 32, 0, 34, 35),
            G=(46, 47, 48, 49, 50),
            O=(61, 62, 63, 64, 65),
        )
        grid = card_to_grid(card)
        self.assertEqual(grid[0], [1, 16, 31, 46, 61])
        self.assertEqual(grid[2], [3, 18, 0, 48, 63])
        self.assertEqual([row[4] for row in grid], [61, 62, 63, 64, 65])

    def test_from_dict_rejects_invalid_cards(self) -> None:
        valid = generate_card(random.Random(5)).to_dict()

        duplicate = dict(valid, B=[1, 1, 2, 3, 4])
        with self.assertRaises(ValueError):
            Card.from_dict(duplicate)

        out_of_range = dict(valid, G=[1, 47, 48, 49, 50])
        with self.assertRaises(ValueError):
            Card.from_dict(out_of_range)

        no_free = dict(valid, N=[31, 32, 33, 34, 35])
        with self.assertRaises(ValueError):
            Card.from_dict(no_free)

        missing = {k: v for k, v in valid.items() if k != "O"}
        with self.assertRaises(ValueError):
            Card.from_dict(missing)


class ColumnLetterTests(unittest.TestCase):
    def test_letters(self) -> None:
        self.assertEqual(column_letter(1), "B")
        self.assertEqual(column_letter(15), "B")
        self.assertEqual(column_letter(16), "I")
        self.assertEqual(column_letter(45), "N")
        self.assertEqual(column_letter(46), "G")
        self.assertEqual(column_letter(75), "O")
        self.assertEqual(column_letter(0), "")
        self.assertEqual(column_letter(76), "")


if __name__ == "__main__":
    unittest.main()
