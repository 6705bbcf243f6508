"""Unit tests for VocabLevel and level histograms."""

import unittest

from domain.model.errors import InvalidLevelError, ValidationError
from domain.model.vocab_level import VocabLevel, empty_histogram


class TestVocabLevel(unittest.TestCase):

    def test_values_are_stable(self):
        """Stored as integers, so the values must never shift."""
        self.assertEqual(VocabLevel.IGNORED, -1)
        self.assertEqual(VocabLevel.NEW, 0)
        self.assertEqual(VocabLevel.LEVEL_1, 1)
        self.assertEqual(VocabLevel.LEVEL_4, 4)
        self.assertEqual(VocabLevel.LEARNED, 5)
        self.assertEqual(VocabLevel.KNOWN, 6)

    def test_default_and_untracked(self):
        self.assertEqual(VocabLevel.default(), VocabLevel.LEVEL_1)
        self.assertEqual(VocabLevel.untracked(), VocabLevel.NEW)

    def test_parse_accepts_member_int_numeric_string_and_name(self):
        self.assertEqual(VocabLevel.parse(VocabLevel.KNOWN), VocabLevel.KNOWN)
        self.assertEqual(VocabLevel.parse(3), VocabLevel.LEVEL_3)
        self.assertEqual(VocabLevel.parse("-1"), VocabLevel.IGNORED)
        self.assertEqual(VocabLevel.parse("learned"), VocabLevel.LEARNED)

    def test_parse_rejects_out_of_range(self):
        for bad in (7, -2, "LEVEL_9", "abc", None, 2.5, True):
            with self.subTest(value=bad):
                with self.assertRaises(InvalidLevelError) as ctx:
                    VocabLevel.parse(bad)
                self.assertIsInstance(ctx.exception, ValidationError)
                self.assertEqual(ctx.exception.rule, "level_in_enum")


class TestEmptyHistogram(unittest.TestCase):

    def test_every_level_is_zero(self):
        histogram = empty_histogram()
        self.assertEqual(set(histogram), set(VocabLevel))
        self.assertEqual(sum(histogram.values()), 0)

    def test_returns_fresh_dict(self):
        first = empty_histogram()
        first[VocabLevel.NEW] = 5
        self.assertEqual(empty_histogram()[VocabLevel.NEW], 0)


if __name__ == '__main__':
    unittest.main()
