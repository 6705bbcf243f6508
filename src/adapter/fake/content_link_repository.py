"""In-memory implementation of ContentLinkRepository for testing."""

import copy
from collections import defaultdict
from typing import Any

from adapter.fake.learner_vocabulary_repository import FakeLearnerVocabularyRepository
from domain.model.content import ContentRef
from domain.model.vocab_level import VocabLevel


class FakeContentLinkRepository:
    def __init__(self, learner_vocabularies: FakeLearnerVocabularyRepository | None = None):
        self.store: dict[ContentRef, set[str]] = {}
        self.learner_vocabularies = learner_vocabularies or FakeLearnerVocabularyRepository()

    # ── unit of work support ──────────────────────────────────

    def snapshot(self) -> dict[ContentRef, set[str]]:
        return copy.deepcopy(self.store)

    def restore(self, snapshot: dict[ContentRef, set[str]]) -> None:
        self.store = snapshot

    # ── link set ──────────────────────────────────────────────

    def get_vocabulary_ids(self, content: ContentRef, session: Any = None) -> set[str]:
        return set(self.store.get(content, set()))

    def add_links(self, content: ContentRef, language: str, vocabulary_ids: set[str], session: Any = None) -> int:
        links = self.store.setdefault(content, set())
        new = set(vocabulary_ids) - links
        links |= new
        return len(new)

    def remove_links(self, content: ContentRef, vocabulary_ids: set[str], session: Any = None) -> int:
        links = self.store.get(content, set())
        gone = links & set(vocabulary_ids)
        links -= gone
        if not links:
            self.store.pop(content, None)
        return len(gone)

    def delete_for_content(self, content: ContentRef, session: Any = None) -> int:
        return len(self.store.pop(content, set()))

    # ── aggregate queries ─────────────────────────────────────

    def _level_of(self, learner_id: str, vocabulary_id: str) -> int:
        row = self.learner_vocabularies.store.get((learner_id, vocabulary_id))
        return int(row.level) if row else int(VocabLevel.untracked())

    def count_by_level(self, contents: list[ContentRef], learner_id: str) -> dict[ContentRef, dict[int, int]]:
        counts: dict[ContentRef, dict[int, int]] = {}
        for content in set(contents):
            if not self.store.get(content):
                continue
            levels: dict[int, int] = defaultdict(int)
            for vocabulary_id in self.store[content]:
                levels[self._level_of(learner_id, vocabulary_id)] += 1
            counts[content] = dict(levels)
        return counts

    def count_by_level_grouped(
        self,
        groups: dict[str, list[ContentRef]],
        learner_id: str,
    ) -> dict[str, dict[int, int]]:
        counts: dict[str, dict[int, int]] = {}
        for group_id, contents in groups.items():
            vocabulary_ids = set().union(*(self.store.get(c, set()) for c in contents))
            if not vocabulary_ids:
                continue
            levels: dict[int, int] = defaultdict(int)
            for vocabulary_id in vocabulary_ids:
                levels[self._level_of(learner_id, vocabulary_id)] += 1
            counts[group_id] = dict(levels)
        return counts

    def count_content(self, vocabulary_ids: list[str]) -> dict[str, int]:
        counts: dict[str, int] = defaultdict(int)
        wanted = set(vocabulary_ids)
        for links in self.store.values():
            for vocabulary_id in links & wanted:
                counts[vocabulary_id] += 1
        return dict(counts)
