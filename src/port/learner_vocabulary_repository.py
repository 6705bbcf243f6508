"""Port for learner knowledge-graph data access."""

from datetime import datetime
from typing import Protocol

from domain.model.learner_vocabulary import (
    LearnerVocabulary,
    LearnerVocabularyFilter,
    SavedVocabularyCount,
)
from domain.model.vocab_level import VocabLevel


class LearnerVocabularyRepository(Protocol):
    """Protocol for (learner, vocabulary) rows, unique per pair."""

    def get(self, learner_id: str, vocabulary_id: str) -> LearnerVocabulary | None:
        ...

    def find_many(self, learner_id: str, vocabulary_ids: list[str]) -> list[LearnerVocabulary]:
        """Rows of one learner for the given vocabulary ids, in one round-trip."""
        ...

    def get_or_create(self, row: LearnerVocabulary) -> LearnerVocabulary:
        """Return the stored row for row.identity, inserting row if none exists.

        Race-safe: when a concurrent caller wins the insert, the winner's
        row is returned unmodified.
        """
        ...

    def get_or_create_many(self, rows: list[LearnerVocabulary]) -> list[LearnerVocabulary]:
        """Batched get_or_create for one learner."""
        ...

    def update(
        self,
        learner_id: str,
        vocabulary_id: str,
        level: VocabLevel | None = None,
        notes: str | None = None,
    ) -> LearnerVocabulary | None:
        """Partially update an existing row. Never creates; None if absent."""
        ...

    def find(self, learner_id: str, filters: LearnerVocabularyFilter) -> tuple[list[LearnerVocabulary], int]:
        """Filtered, sorted page of a learner's rows plus the total match count."""
        ...

    def count_saved(
        self,
        learner_id: str,
        levels: list[VocabLevel] | None = None,
        is_phrase: bool | None = None,
        saved_from: datetime | None = None,
        saved_to: datetime | None = None,
        group_by_language: bool = False,
    ) -> list[SavedVocabularyCount]:
        ...

    def count_learners(self, vocabulary_ids: list[str]) -> dict[str, int]:
        """Number of learners tracking each vocabulary at a non-ignored level."""
        ...
