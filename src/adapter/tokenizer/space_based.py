"""Tokenizer for scripts that delimit words with whitespace and punctuation."""

import re

from domain.model.vocabulary import Token

# A word is a run of letters, optionally joined by inner apostrophes or hyphens
# ("don't", "well-known"). Digits and underscores never form words.
WORD_PATTERN = r"[^\W\d_]+(?:['\-][^\W\d_]+)*"

# Same, without apostrophe joining, for languages with elided articles ("l'homme").
WORD_PATTERN_NO_APOSTROPHE = r"[^\W\d_]+(?:-[^\W\d_]+)*"

DEFAULT_REPLACE_CHARS = {
    "’": "'",  # right single quotation mark
    "ʼ": "'",  # modifier letter apostrophe
    "‐": "-",  # hyphen
    "­": "",   # soft hyphen
}


class SpaceBasedTokenizer:
    """Regex word splitter with per-language character replacement."""

    separator = " "

    def __init__(self, replace_chars: dict[str, str] | None = None, word_pattern: str = WORD_PATTERN):
        self._replace_chars = {**DEFAULT_REPLACE_CHARS, **(replace_chars or {})}
        self._word_re = re.compile(word_pattern)

    def _prepare(self, raw_text: str) -> str:
        text = raw_text
        for char, replacement in self._replace_chars.items():
            text = text.replace(char, replacement)
        return text

    # ------------------------------------------------------------------
    # Public interface (implements Tokenizer)
    # ------------------------------------------------------------------

    def segment(self, raw_text: str) -> list[Token]:
        if not isinstance(raw_text, str) or not raw_text:
            return []
        text = self._prepare(raw_text)
        return [Token.of(match.group(0)) for match in self._word_re.finditer(text)]

    def dedupe(self, tokens: list[Token]) -> list[Token]:
        seen: set[tuple[str, bool]] = set()
        unique = []
        for token in tokens:
            if token.key in seen:
                continue
            seen.add(token.key)
            unique.append(token)
        return unique

    def parse_text(self, raw_text: str) -> str:
        return self.separator.join(token.normalized for token in self.segment(raw_text))

    def phrase(self, raw_text: str) -> Token | None:
        words = self.segment(raw_text)
        if not words:
            return None
        return Token.of(self.separator.join(w.text for w in words), is_phrase=len(words) > 1)
