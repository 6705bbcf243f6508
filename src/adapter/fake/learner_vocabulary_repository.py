"""In-memory implementation of LearnerVocabularyRepository for testing."""

from dataclasses import replace
from datetime import datetime, timezone

from domain.model.learner_vocabulary import (
    LearnerVocabulary,
    LearnerVocabularyFilter,
    LearnerVocabularySort,
    SavedVocabularyCount,
)
from domain.model.vocab_level import VocabLevel


def _copy(row: LearnerVocabulary) -> LearnerVocabulary:
    return replace(row, meanings=list(row.meanings))


class FakeLearnerVocabularyRepository:
    def __init__(self):
        self.store: dict[tuple[str, str], LearnerVocabulary] = {}

    def get(self, learner_id: str, vocabulary_id: str) -> LearnerVocabulary | None:
        row = self.store.get((learner_id, vocabulary_id))
        return _copy(row) if row else None

    def find_many(self, learner_id: str, vocabulary_ids: list[str]) -> list[LearnerVocabulary]:
        return [
            _copy(self.store[(learner_id, vocabulary_id)])
            for vocabulary_id in dict.fromkeys(vocabulary_ids)
            if (learner_id, vocabulary_id) in self.store
        ]

    def get_or_create(self, row: LearnerVocabulary) -> LearnerVocabulary:
        key = (row.learner_id, row.vocabulary_id)
        if key not in self.store:
            self.store[key] = _copy(row)
        return _copy(self.store[key])

    def get_or_create_many(self, rows: list[LearnerVocabulary]) -> list[LearnerVocabulary]:
        result = {}
        for row in rows:
            result.setdefault(row.vocabulary_id, self.get_or_create(row))
        return list(result.values())

    def update(
        self,
        learner_id: str,
        vocabulary_id: str,
        level: VocabLevel | None = None,
        notes: str | None = None,
    ) -> LearnerVocabulary | None:
        row = self.store.get((learner_id, vocabulary_id))
        if row is None:
            return None
        if level is not None:
            row.level = level
        if notes is not None:
            row.notes = notes
        if level is not None or notes is not None:
            row.updated_at = datetime.now(timezone.utc)
        return _copy(row)

    def find(self, learner_id: str, filters: LearnerVocabularyFilter) -> tuple[list[LearnerVocabulary], int]:
        rows = [r for r in self.store.values() if r.learner_id == learner_id]
        if filters.language:
            rows = [r for r in rows if r.language == filters.language]
        if filters.levels:
            rows = [r for r in rows if r.level in filters.levels]
        if filters.is_phrase is not None:
            rows = [r for r in rows if r.is_phrase == filters.is_phrase]
        if filters.search:
            needle = filters.search.lower()
            rows = [r for r in rows if needle in r.text.lower()]

        attr = {
            LearnerVocabularySort.TEXT: 'text',
            LearnerVocabularySort.CREATED_AT: 'created_at',
            LearnerVocabularySort.UPDATED_AT: 'updated_at',
            LearnerVocabularySort.LEVEL: 'level',
        }[filters.sort_by]
        rows.sort(key=lambda r: r.id)
        rows.sort(key=lambda r: getattr(r, attr), reverse=filters.descending)
        page = rows[filters.skip:filters.skip + filters.limit]
        return [_copy(r) for r in page], len(rows)

    def count_saved(
        self,
        learner_id: str,
        levels: list[VocabLevel] | None = None,
        is_phrase: bool | None = None,
        saved_from: datetime | None = None,
        saved_to: datetime | None = None,
        group_by_language: bool = False,
    ) -> list[SavedVocabularyCount]:
        rows = [r for r in self.store.values() if r.learner_id == learner_id]
        if levels:
            rows = [r for r in rows if r.level in levels]
        if is_phrase is not None:
            rows = [r for r in rows if r.is_phrase == is_phrase]
        if saved_from:
            rows = [r for r in rows if r.created_at >= saved_from]
        if saved_to:
            rows = [r for r in rows if r.created_at <= saved_to]

        if not group_by_language:
            return [SavedVocabularyCount(count=len(rows))]
        by_language: dict[str, int] = {}
        for row in rows:
            by_language[row.language] = by_language.get(row.language, 0) + 1
        ordered = sorted(by_language.items(), key=lambda item: (-item[1], item[0]))
        return [SavedVocabularyCount(count=count, language=language) for language, count in ordered]

    def count_learners(self, vocabulary_ids: list[str]) -> dict[str, int]:
        wanted = set(vocabulary_ids)
        counts: dict[str, int] = {}
        for row in self.store.values():
            if row.vocabulary_id in wanted and row.level != VocabLevel.IGNORED:
                counts[row.vocabulary_id] = counts.get(row.vocabulary_id, 0) + 1
        return counts
