"""Tokenizer registry: resolves a language code to its tokenizer.

New languages are added by registering an implementation, never by
branching on language codes inside a tokenizer.
"""

import logging

from adapter.tokenizer.chinese import JiebaTokenizer
from adapter.tokenizer.space_based import WORD_PATTERN_NO_APOSTROPHE, SpaceBasedTokenizer
from domain.model.errors import UnsupportedLanguageError
from domain.model.language import CHINESE, FRENCH, ITALIAN, supported_languages
from port.tokenizer import Tokenizer

logger = logging.getLogger(__name__)

# Languages whose elided articles ("l'homme") split on the apostrophe
ELIDING_LANGUAGES = (FRENCH.code, ITALIAN.code)


class TokenizerRegistry:
    def __init__(self, tokenizers: dict[str, Tokenizer] | None = None):
        self._tokenizers: dict[str, Tokenizer] = dict(tokenizers or {})

    def register(self, language_code: str, tokenizer: Tokenizer) -> None:
        if language_code in self._tokenizers:
            logger.warning("Replacing tokenizer", extra={"language": language_code})
        self._tokenizers[language_code] = tokenizer

    def resolve(self, language_code: str) -> Tokenizer:
        """Get the tokenizer for a language.

        Raises:
            UnsupportedLanguageError: no tokenizer is registered for the code.
        """
        tokenizer = self._tokenizers.get(language_code)
        if tokenizer is None:
            raise UnsupportedLanguageError(language_code)
        return tokenizer

    def supports(self, language_code: str) -> bool:
        return language_code in self._tokenizers

    @property
    def language_codes(self) -> list[str]:
        return sorted(self._tokenizers)


def default_registry() -> TokenizerRegistry:
    """Registry with a tokenizer for every supported language.

    Whitespace-delimited scripts share one SpaceBasedTokenizer.
    """
    space_based = SpaceBasedTokenizer()
    eliding = SpaceBasedTokenizer(word_pattern=WORD_PATTERN_NO_APOSTROPHE)
    overrides: dict[str, Tokenizer] = {CHINESE.code: JiebaTokenizer()}
    overrides.update({code: eliding for code in ELIDING_LANGUAGES})

    registry = TokenizerRegistry()
    for language in supported_languages():
        registry.register(language.code, overrides.get(language.code, space_based))
    return registry
