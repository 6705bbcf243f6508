"""Unit tests for TokenizerRegistry."""

import unittest

from adapter.tokenizer.chinese import JiebaTokenizer
from adapter.tokenizer.registry import TokenizerRegistry, default_registry
from adapter.tokenizer.space_based import SpaceBasedTokenizer
from domain.model.errors import ConfigurationError, UnsupportedLanguageError
from domain.model.language import LANGUAGES, get_language, supported_languages


class TestTokenizerRegistry(unittest.TestCase):

    def test_resolve_unknown_language_raises(self):
        registry = TokenizerRegistry()
        with self.assertRaises(UnsupportedLanguageError) as ctx:
            registry.resolve("xx")
        self.assertIsInstance(ctx.exception, ConfigurationError)
        self.assertEqual(ctx.exception.rule, "language_supported")
        self.assertEqual(ctx.exception.context, {"language": "xx"})

    def test_register_and_resolve(self):
        registry = TokenizerRegistry()
        tokenizer = SpaceBasedTokenizer()
        registry.register("eo", tokenizer)
        self.assertIs(registry.resolve("eo"), tokenizer)
        self.assertTrue(registry.supports("eo"))

    def test_register_replaces(self):
        first, second = SpaceBasedTokenizer(), SpaceBasedTokenizer()
        registry = TokenizerRegistry({"en": first})
        registry.register("en", second)
        self.assertIs(registry.resolve("en"), second)


class TestDefaultRegistry(unittest.TestCase):

    def setUp(self):
        self.registry = default_registry()

    def test_covers_space_based_languages(self):
        for code in ("en", "de", "fr", "es", "it", "ru", "fi"):
            self.assertIsInstance(self.registry.resolve(code), SpaceBasedTokenizer)

    def test_chinese_uses_jieba(self):
        self.assertIsInstance(self.registry.resolve("zh"), JiebaTokenizer)

    def test_japanese_is_not_supported(self):
        self.assertFalse(self.registry.supports("ja"))
        with self.assertRaises(UnsupportedLanguageError):
            self.registry.resolve("ja")

    def test_french_splits_elided_article(self):
        tokens = self.registry.resolve("fr").segment("l'amour")
        self.assertEqual([t.text for t in tokens], ["l", "amour"])

    def test_registers_exactly_the_supported_languages(self):
        self.assertEqual(self.registry.language_codes, sorted(lang.code for lang in supported_languages()))
        for code, language in LANGUAGES.items():
            self.assertEqual(self.registry.supports(code), language.is_supported)

    def test_get_language(self):
        self.assertEqual(get_language("de").name, "German")
        self.assertIsNone(get_language("xx"))

    def test_language_codes_sorted(self):
        codes = self.registry.language_codes
        self.assertEqual(codes, sorted(codes))
        self.assertIn("zh", codes)


if __name__ == '__main__':
    unittest.main()
