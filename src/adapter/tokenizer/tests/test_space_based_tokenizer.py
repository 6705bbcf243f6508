"""Unit tests for SpaceBasedTokenizer."""

import unittest

from adapter.tokenizer.space_based import WORD_PATTERN_NO_APOSTROPHE, SpaceBasedTokenizer
from domain.model.vocabulary import Token


class TestSegment(unittest.TestCase):

    def setUp(self):
        self.tokenizer = SpaceBasedTokenizer()

    def test_sentence_keeps_order_and_repeats(self):
        tokens = self.tokenizer.segment("The cat sat. The dog ran.")
        self.assertEqual([t.text for t in tokens], ["The", "cat", "sat", "The", "dog", "ran"])
        self.assertEqual([t.normalized for t in tokens], ["the", "cat", "sat", "the", "dog", "ran"])
        self.assertTrue(all(not t.is_phrase for t in tokens))

    def test_empty_and_punctuation_only_yield_nothing(self):
        self.assertEqual(self.tokenizer.segment(""), [])
        self.assertEqual(self.tokenizer.segment("... !!! 123 --"), [])

    def test_non_string_input_yields_nothing(self):
        self.assertEqual(self.tokenizer.segment(None), [])

    def test_inner_apostrophes_and_hyphens_join_words(self):
        tokens = self.tokenizer.segment("Don't be a well-known 'quote'")
        self.assertEqual([t.text for t in tokens], ["Don't", "be", "a", "well-known", "quote"])

    def test_typographic_apostrophe_is_replaced(self):
        tokens = self.tokenizer.segment("don’t")
        self.assertEqual(tokens[0].normalized, "don't")

    def test_digits_are_not_words(self):
        tokens = self.tokenizer.segment("abc123 42 x")
        self.assertEqual([t.text for t in tokens], ["abc", "x"])

    def test_unicode_letters(self):
        tokens = self.tokenizer.segment("Straße Über Привет")
        self.assertEqual([t.normalized for t in tokens], ["straße", "über", "привет"])

    def test_eliding_pattern_splits_articles(self):
        tokenizer = SpaceBasedTokenizer(word_pattern=WORD_PATTERN_NO_APOSTROPHE)
        tokens = tokenizer.segment("l'homme est arrivé")
        self.assertEqual([t.text for t in tokens], ["l", "homme", "est", "arrivé"])

    def test_custom_replace_chars(self):
        tokenizer = SpaceBasedTokenizer(replace_chars={"ß": "ss"})
        self.assertEqual(tokenizer.segment("Straße")[0].normalized, "strasse")

    def test_deterministic(self):
        text = "Ein kleiner Test, ein kleiner Test."
        self.assertEqual(
            [(t.text, t.normalized) for t in self.tokenizer.segment(text)],
            [(t.text, t.normalized) for t in self.tokenizer.segment(text)],
        )


class TestDedupe(unittest.TestCase):

    def setUp(self):
        self.tokenizer = SpaceBasedTokenizer()

    def test_keeps_first_seen_casing_and_order(self):
        tokens = self.tokenizer.dedupe(self.tokenizer.segment("The cat sat. The dog ran."))
        self.assertEqual([t.text for t in tokens], ["The", "cat", "sat", "dog", "ran"])

    def test_case_variants_collapse(self):
        tokens = self.tokenizer.dedupe(self.tokenizer.segment("Cat CAT cat"))
        self.assertEqual(len(tokens), 1)
        self.assertEqual(tokens[0].text, "Cat")

    def test_word_and_phrase_with_same_text_stay_apart(self):
        tokens = self.tokenizer.dedupe([Token.of("cat"), Token.of("cat", is_phrase=True)])
        self.assertEqual(len(tokens), 2)


class TestParseTextAndPhrase(unittest.TestCase):

    def setUp(self):
        self.tokenizer = SpaceBasedTokenizer()

    def test_parse_text_joins_normalized_tokens(self):
        self.assertEqual(self.tokenizer.parse_text("The Cat, sat!"), "the cat sat")

    def test_phrase_of_single_word(self):
        token = self.tokenizer.phrase("  Hello! ")
        self.assertEqual(token.text, "Hello")
        self.assertFalse(token.is_phrase)

    def test_phrase_of_several_words(self):
        token = self.tokenizer.phrase("Give  up,")
        self.assertEqual(token.text, "Give up")
        self.assertEqual(token.normalized, "give up")
        self.assertTrue(token.is_phrase)

    def test_phrase_without_words(self):
        self.assertIsNone(self.tokenizer.phrase("?!"))


if __name__ == '__main__':
    unittest.main()
