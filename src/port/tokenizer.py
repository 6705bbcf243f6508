"""Tokenizer port: per-language text segmentation."""

from typing import Protocol

from domain.model.vocabulary import Token


class Tokenizer(Protocol):
    """Segments raw text of one language into vocabulary tokens.

    Implementations must be deterministic and total: any string, including
    empty or punctuation-only input, yields a (possibly empty) list and
    never raises.
    """

    # Joins the words of a phrase into its text
    separator: str

    def segment(self, raw_text: str) -> list[Token]:
        """Split text into tokens in reading order, repeats included."""
        ...

    def dedupe(self, tokens: list[Token]) -> list[Token]:
        """Collapse repeats by canonical key, keeping first-seen casing and order."""
        ...

    def parse_text(self, raw_text: str) -> str:
        """Canonical parsed form of the text (normalized tokens joined)."""
        ...

    def phrase(self, raw_text: str) -> Token | None:
        """Combine all words of the text into a single token.

        Returns None when the text contains no words.
        """
        ...
