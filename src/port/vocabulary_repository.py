"""Port for canonical vocabulary data access."""

from typing import Protocol

from domain.model.vocabulary import Vocabulary


class VocabularyRepository(Protocol):
    """Protocol for vocabulary rows, unique per (language, normalized_text, is_phrase)."""

    def find_by_keys(self, language: str, keys: list[tuple[str, bool]]) -> list[Vocabulary]:
        """Get rows of one language whose (normalized_text, is_phrase) is in keys.

        One round-trip regardless of len(keys).
        """
        ...

    def insert_many(self, vocabs: list[Vocabulary]) -> list[Vocabulary]:
        """Insert rows, skipping any whose identity already exists.

        Duplicate-key conflicts (including ones caused by a concurrent
        insert) are not errors: the conflicting rows are simply left out of
        the returned list of rows actually inserted.
        """
        ...

    def find_phrases_in(self, language: str, text: str, separator: str) -> list[Vocabulary]:
        """Get the language's phrase rows whose normalized text occurs in text.

        text is a run of normalized words joined by separator; a phrase only
        matches on whole words, i.e. with separator on both sides of it.
        """
        ...

    def get_by_id(self, vocabulary_id: str) -> Vocabulary | None:
        ...

    def get_many(self, vocabulary_ids: list[str]) -> list[Vocabulary]:
        ...
