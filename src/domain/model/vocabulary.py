"""Vocabulary domain models."""

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone


def normalize_text(text: str) -> str:
    """Canonical form used for vocabulary identity: lowercased, whitespace collapsed."""
    return " ".join(text.split()).lower()


@dataclass(frozen=True, eq=False)
class Token:
    """A unit of text produced by a tokenizer.

    Equality and hashing use the canonical key only, so tokens that differ
    in casing collapse together in sets and dict keys.
    """
    text: str
    normalized: str
    is_phrase: bool = False
    parsed_text: str | None = None

    @staticmethod
    def of(text: str, is_phrase: bool = False, parsed_text: str | None = None) -> 'Token':
        return Token(text=text, normalized=normalize_text(text), is_phrase=is_phrase, parsed_text=parsed_text)

    @property
    def key(self) -> tuple[str, bool]:
        return (self.normalized, self.is_phrase)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)


@dataclass
class Vocabulary:
    """A canonical word or phrase in one language."""

    IDENTITY_FIELDS = ('language', 'normalized_text', 'is_phrase')

    id: str
    language: str
    text: str
    normalized_text: str
    is_phrase: bool
    created_at: datetime
    parsed_text: str | None = None

    @staticmethod
    def create(language: str, token: Token) -> 'Vocabulary':
        """New row for a token first seen in this language."""
        return Vocabulary(
            id=str(uuid.uuid4()),
            language=language,
            text=" ".join(token.text.split()),
            normalized_text=token.normalized,
            is_phrase=token.is_phrase,
            created_at=datetime.now(timezone.utc),
            parsed_text=token.parsed_text,
        )

    @property
    def identity(self) -> dict:
        """Fields that define uniqueness."""
        return {f: getattr(self, f) for f in self.IDENTITY_FIELDS}

    @property
    def key(self) -> tuple[str, bool]:
        return (self.normalized_text, self.is_phrase)


@dataclass(frozen=True)
class VocabularyCounters:
    """Derived counts for a vocabulary, recomputed by query on every read."""
    learners_count: int = 0
    content_count: int = 0
