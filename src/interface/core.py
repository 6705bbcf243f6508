"""Library entry points for the vocabulary core.

VocabularyCore bundles the ports once so callers (HTTP handlers, workers,
scripts) do not have to thread repositories through every call. It holds
no state of its own; every method delegates to a service function.
"""

from datetime import datetime

from adapter.tokenizer.registry import TokenizerRegistry
from domain.model.content import ContentRef, ContentUserData, ContentVocabulary, LinkDelta
from domain.model.learner_vocabulary import (
    LearnerVocabulary,
    LearnerVocabularyFilter,
    SavedVocabularyCount,
)
from domain.model.vocab_level import VocabLevel
from domain.model.vocabulary import Vocabulary, VocabularyCounters
from port.content_activity_repository import ContentActivityRepository
from port.content_link_repository import ContentLinkRepository
from port.learner_language_repository import LearnerLanguageRepository
from port.learner_vocabulary_repository import LearnerVocabularyRepository
from port.meaning_repository import MeaningRepository
from port.unit_of_work import UnitOfWork
from port.vocabulary_repository import VocabularyRepository
from services import aggregation_service, content_linker, learner_vocabulary_service, vocabulary_registry


class VocabularyCore:
    def __init__(
        self,
        tokenizers: TokenizerRegistry,
        vocab_repo: VocabularyRepository,
        link_repo: ContentLinkRepository,
        learner_repo: LearnerVocabularyRepository,
        meaning_repo: MeaningRepository,
        language_repo: LearnerLanguageRepository,
        activity_repo: ContentActivityRepository,
        uow: UnitOfWork,
    ):
        self.tokenizers = tokenizers
        self.vocab_repo = vocab_repo
        self.link_repo = link_repo
        self.learner_repo = learner_repo
        self.meaning_repo = meaning_repo
        self.language_repo = language_repo
        self.activity_repo = activity_repo
        self.uow = uow

    # ── content indexing ──────────────────────────────────────

    def reconcile_content_vocabulary(self, content: ContentRef, language: str, raw_text: str) -> LinkDelta:
        """Call after a content item is created or its text edited."""
        return content_linker.reconcile(
            content, language, raw_text,
            self.tokenizers, self.vocab_repo, self.link_repo, self.uow,
        )

    def remove_content_vocabulary(self, content: ContentRef) -> int:
        """Call after a content item is deleted."""
        return content_linker.remove_content(content, self.link_repo, self.uow)

    def get_content_vocabulary_ids(self, content: ContentRef) -> set[str]:
        return content_linker.get_vocabulary_ids(content, self.link_repo)

    # ── vocabulary ────────────────────────────────────────────

    def ensure_vocabulary(self, language: str, text: str, is_phrase: bool = False) -> Vocabulary:
        return vocabulary_registry.ensure_phrase(self.vocab_repo, self.tokenizers, language, text, is_phrase)

    def get_vocabulary(self, vocabulary_id: str) -> Vocabulary:
        return vocabulary_registry.get_vocabulary(self.vocab_repo, vocabulary_id)

    def get_vocabulary_counters(self, vocabulary_ids: list[str]) -> dict[str, VocabularyCounters]:
        return aggregation_service.get_vocabulary_counters(vocabulary_ids, self.learner_repo, self.link_repo)

    # ── learner knowledge graph ───────────────────────────────

    def get_learner_vocabulary(self, learner_id: str, vocabulary_id: str) -> LearnerVocabulary | None:
        return learner_vocabulary_service.get(learner_id, vocabulary_id, self.learner_repo, self.meaning_repo)

    def ensure_learner_vocabulary(self, learner_id: str, vocabulary_id: str) -> LearnerVocabulary:
        return learner_vocabulary_service.ensure(
            learner_id, vocabulary_id, self.learner_repo, self.vocab_repo, self.language_repo,
        )

    def start_learning_content(self, learner_id: str, content: ContentRef) -> list[LearnerVocabulary]:
        return learner_vocabulary_service.ensure_for_content(
            learner_id, content, self.learner_repo, self.vocab_repo, self.link_repo, self.language_repo,
        )

    def set_learner_vocabulary_level(self, learner_id: str, vocabulary_id: str, level) -> LearnerVocabulary:
        return learner_vocabulary_service.set_level(
            learner_id, vocabulary_id, level, self.learner_repo, self.vocab_repo, self.language_repo,
        )

    def set_learner_vocabulary_notes(self, learner_id: str, vocabulary_id: str, notes: str) -> LearnerVocabulary:
        return learner_vocabulary_service.set_notes(
            learner_id, vocabulary_id, notes, self.learner_repo, self.vocab_repo, self.language_repo,
        )

    def update_learner_vocabulary(
        self,
        learner_id: str,
        vocabulary_id: str,
        level=None,
        notes: str | None = None,
    ) -> LearnerVocabulary:
        return learner_vocabulary_service.update(
            learner_id, vocabulary_id, self.learner_repo, self.vocab_repo, self.language_repo,
            level=level, notes=notes,
        )

    def list_learner_vocabularies(
        self,
        learner_id: str,
        filters: LearnerVocabularyFilter | None = None,
    ) -> tuple[list[LearnerVocabulary], int]:
        return learner_vocabulary_service.list_for(
            learner_id, filters or LearnerVocabularyFilter(), self.learner_repo, self.meaning_repo,
        )

    def count_saved_vocabularies(
        self,
        learner_id: str,
        levels: list | None = None,
        is_phrase: bool | None = None,
        saved_from: datetime | None = None,
        saved_to: datetime | None = None,
        group_by_language: bool = False,
    ) -> list[SavedVocabularyCount]:
        return learner_vocabulary_service.count_saved(
            learner_id, self.learner_repo,
            levels=levels,
            is_phrase=is_phrase,
            saved_from=saved_from,
            saved_to=saved_to,
            group_by_language=group_by_language,
        )

    # ── aggregation ───────────────────────────────────────────

    def get_vocab_level_histogram(
        self,
        contents: list[ContentRef],
        learner_id: str,
    ) -> dict[ContentRef, dict[VocabLevel, int]]:
        return aggregation_service.get_vocab_level_histogram(contents, learner_id, self.link_repo)

    def get_collection_vocab_level_histogram(
        self,
        collections: dict[str, list[ContentRef]],
        learner_id: str,
    ) -> dict[str, dict[VocabLevel, int]]:
        return aggregation_service.get_collection_vocab_level_histogram(collections, learner_id, self.link_repo)

    def annotate_learner_vocab_meanings(
        self,
        mappings: list[LearnerVocabulary],
        learner_id: str,
    ) -> list[LearnerVocabulary]:
        return aggregation_service.annotate_learner_vocab_meanings(mappings, learner_id, self.meaning_repo)

    def annotate_content_with_user_data(
        self,
        contents: list[ContentRef],
        learner_id: str,
    ) -> dict[ContentRef, ContentUserData]:
        return aggregation_service.annotate_content_with_user_data(
            contents, learner_id, self.link_repo, self.activity_repo,
        )

    def get_content_vocabularies(self, content: ContentRef, learner_id: str) -> list[ContentVocabulary]:
        return aggregation_service.get_content_vocabularies(
            content, learner_id, self.link_repo, self.vocab_repo, self.learner_repo, self.meaning_repo,
        )
