"""Learner knowledge graph: per-learner state on the shared vocabulary.

One row per (learner, vocabulary). Rows are created on demand at the
default level and are never deleted; IGNORED is how a learner drops a word.
Every rule below is checked before anything is written.
"""

import logging
from datetime import datetime

from domain.model.content import ContentRef
from domain.model.errors import LanguageNotLearnedError, NotFoundError
from domain.model.learner_vocabulary import (
    LearnerVocabulary,
    LearnerVocabularyFilter,
    SavedVocabularyCount,
    validate_notes,
)
from domain.model.vocab_level import VocabLevel
from domain.model.vocabulary import Vocabulary
from port.content_link_repository import ContentLinkRepository
from port.learner_language_repository import LearnerLanguageRepository
from port.learner_vocabulary_repository import LearnerVocabularyRepository
from port.meaning_repository import MeaningRepository
from port.vocabulary_repository import VocabularyRepository
from services import vocabulary_registry
from services.aggregation_service import annotate_learner_vocab_meanings

logger = logging.getLogger(__name__)


def _check_language(
    learner_id: str,
    vocab: Vocabulary,
    languages: set[str],
) -> None:
    if vocab.language not in languages:
        raise LanguageNotLearnedError(learner_id, vocab.id, vocab.language)


def get(
    learner_id: str,
    vocabulary_id: str,
    repo: LearnerVocabularyRepository,
    meaning_repo: MeaningRepository,
) -> LearnerVocabulary | None:
    row = repo.get(learner_id, vocabulary_id)
    if row is None:
        return None
    return annotate_learner_vocab_meanings([row], learner_id, meaning_repo)[0]


def ensure(
    learner_id: str,
    vocabulary_id: str,
    repo: LearnerVocabularyRepository,
    vocab_repo: VocabularyRepository,
    language_repo: LearnerLanguageRepository,
) -> LearnerVocabulary:
    """Get the learner's row for a vocabulary, creating it at the default level.

    An existing row is returned unmodified, whoever created it.

    Raises:
        NotFoundError: vocabulary does not exist.
        LanguageNotLearnedError: learner is not learning the vocabulary's language.
    """
    vocab = vocabulary_registry.get_vocabulary(vocab_repo, vocabulary_id)
    _check_language(learner_id, vocab, language_repo.get_languages(learner_id))
    return repo.get_or_create(LearnerVocabulary.create(learner_id, vocab))


def ensure_for_content(
    learner_id: str,
    content: ContentRef,
    repo: LearnerVocabularyRepository,
    vocab_repo: VocabularyRepository,
    link_repo: ContentLinkRepository,
    language_repo: LearnerLanguageRepository,
) -> list[LearnerVocabulary]:
    """Start learning a content item: ensure a row for every vocabulary it links.

    Raises:
        LanguageNotLearnedError: any linked vocabulary is in a language the
            learner is not learning. Nothing is created in that case.
    """
    vocabulary_ids = sorted(link_repo.get_vocabulary_ids(content))
    if not vocabulary_ids:
        return []
    vocabs = vocab_repo.get_many(vocabulary_ids)
    languages = language_repo.get_languages(learner_id)
    for vocab in vocabs:
        _check_language(learner_id, vocab, languages)

    rows = repo.get_or_create_many([LearnerVocabulary.create(learner_id, v) for v in vocabs])
    logger.info("Learner started content", extra={
        "learnerId": learner_id,
        "contentKind": content.kind.value,
        "contentId": content.id,
        "vocabularies": len(rows),
    })
    return rows


def update(
    learner_id: str,
    vocabulary_id: str,
    repo: LearnerVocabularyRepository,
    vocab_repo: VocabularyRepository,
    language_repo: LearnerLanguageRepository,
    level=None,
    notes: str | None = None,
) -> LearnerVocabulary:
    """Partially update an existing row; never creates one.

    Raises:
        InvalidLevelError: level is not a VocabLevel.
        ValidationError: notes are not a string or too long.
        NotFoundError: vocabulary or learner row does not exist.
        LanguageNotLearnedError: learner is not learning the vocabulary's language.
    """
    parsed_level = VocabLevel.parse(level) if level is not None else None
    if notes is not None:
        validate_notes(notes)

    vocab = vocabulary_registry.get_vocabulary(vocab_repo, vocabulary_id)
    _check_language(learner_id, vocab, language_repo.get_languages(learner_id))

    row = repo.update(learner_id, vocabulary_id, level=parsed_level, notes=notes)
    if row is None:
        raise NotFoundError(
            "Learner is not tracking this vocabulary",
            context={"learnerId": learner_id, "vocabularyId": vocabulary_id},
        )
    logger.info("Learner vocabulary updated", extra={
        "learnerId": learner_id,
        "vocabularyId": vocabulary_id,
        "level": int(row.level),
    })
    return row


def set_level(
    learner_id: str,
    vocabulary_id: str,
    level,
    repo: LearnerVocabularyRepository,
    vocab_repo: VocabularyRepository,
    language_repo: LearnerLanguageRepository,
) -> LearnerVocabulary:
    return update(learner_id, vocabulary_id, repo, vocab_repo, language_repo, level=level)


def set_notes(
    learner_id: str,
    vocabulary_id: str,
    notes: str,
    repo: LearnerVocabularyRepository,
    vocab_repo: VocabularyRepository,
    language_repo: LearnerLanguageRepository,
) -> LearnerVocabulary:
    return update(learner_id, vocabulary_id, repo, vocab_repo, language_repo, notes=notes)


def list_for(
    learner_id: str,
    filters: LearnerVocabularyFilter,
    repo: LearnerVocabularyRepository,
    meaning_repo: MeaningRepository,
) -> tuple[list[LearnerVocabulary], int]:
    """Filtered page of the learner's rows with meanings attached, plus the total."""
    rows, total = repo.find(learner_id, filters)
    return annotate_learner_vocab_meanings(rows, learner_id, meaning_repo), total


def count_saved(
    learner_id: str,
    repo: LearnerVocabularyRepository,
    levels: list | None = None,
    is_phrase: bool | None = None,
    saved_from: datetime | None = None,
    saved_to: datetime | None = None,
    group_by_language: bool = False,
) -> list[SavedVocabularyCount]:
    parsed_levels = [VocabLevel.parse(level) for level in levels] if levels else None
    return repo.count_saved(
        learner_id,
        levels=parsed_levels,
        is_phrase=is_phrase,
        saved_from=saved_from,
        saved_to=saved_to,
        group_by_language=group_by_language,
    )
