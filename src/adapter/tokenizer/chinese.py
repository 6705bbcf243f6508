"""Dictionary-based tokenizer for Chinese, which has no whitespace word boundaries."""

import logging
import re

import jieba

from adapter.tokenizer.space_based import SpaceBasedTokenizer
from domain.model.vocabulary import Token

logger = logging.getLogger(__name__)

# jieba logs its dictionary loading at DEBUG/INFO on first use
logging.getLogger('jieba').setLevel(logging.WARNING)

# Segments without at least one letter or ideograph (punctuation, spaces, numbers) are dropped
_HAS_WORD_CHAR = re.compile(r"[^\W\d_]")


class JiebaTokenizer(SpaceBasedTokenizer):
    """Segments with jieba's prefix dictionary (precise mode).

    Dedupe logic is shared with SpaceBasedTokenizer; only word boundaries
    and the phrase separator differ.
    """

    separator = ""

    def __init__(self, dictionary_path: str | None = None, use_hmm: bool = True):
        super().__init__()
        self._jieba = jieba.Tokenizer(dictionary_path) if dictionary_path else jieba.dt
        self._use_hmm = use_hmm

    def segment(self, raw_text: str) -> list[Token]:
        if not isinstance(raw_text, str) or not raw_text:
            return []
        text = self._prepare(raw_text)
        words = (w.strip() for w in self._jieba.cut(text, cut_all=False, HMM=self._use_hmm))
        return [Token.of(w) for w in words if w and _HAS_WORD_CHAR.search(w)]

    def parse_text(self, raw_text: str) -> str:
        # Chinese parsed text keeps word boundaries visible for rendering
        return " ".join(token.normalized for token in self.segment(raw_text))
