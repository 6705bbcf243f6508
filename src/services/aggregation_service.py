"""Aggregation engine: batched read models over links and learner rows.

Every function issues a constant number of queries regardless of how many
content items or vocabularies it is asked about, and returns an empty
result for empty input without touching storage.
"""

from domain.model.content import ContentRef, ContentUserData, ContentVocabulary
from domain.model.learner_vocabulary import LearnerVocabulary
from domain.model.vocab_level import VocabLevel, empty_histogram
from domain.model.vocabulary import VocabularyCounters
from port.content_activity_repository import ContentActivityRepository
from port.content_link_repository import ContentLinkRepository
from port.learner_vocabulary_repository import LearnerVocabularyRepository
from port.meaning_repository import MeaningRepository
from port.vocabulary_repository import VocabularyRepository


def _zero_filled(counts: dict[int, int] | None) -> dict[VocabLevel, int]:
    histogram = empty_histogram()
    for level, count in (counts or {}).items():
        histogram[VocabLevel(level)] += count
    return histogram


def get_vocab_level_histogram(
    contents: list[ContentRef],
    learner_id: str,
    link_repo: ContentLinkRepository,
) -> dict[ContentRef, dict[VocabLevel, int]]:
    """Per content item, how many linked vocabularies the learner has at each level.

    Untracked vocabulary counts as NEW. Every requested item gets every
    level, so an item without links maps to all zeros. The counts of one
    item always sum to the size of its link set.
    """
    unique = list(dict.fromkeys(contents))
    if not unique:
        return {}
    counts = link_repo.count_by_level(unique, learner_id)
    return {content: _zero_filled(counts.get(content)) for content in unique}


def get_collection_vocab_level_histogram(
    collections: dict[str, list[ContentRef]],
    learner_id: str,
    link_repo: ContentLinkRepository,
) -> dict[str, dict[VocabLevel, int]]:
    """Histogram per collection, a vocabulary shared by several items counted once."""
    if not collections:
        return {}
    counts = link_repo.count_by_level_grouped(collections, learner_id)
    return {group_id: _zero_filled(counts.get(group_id)) for group_id in collections}


def annotate_learner_vocab_meanings(
    mappings: list[LearnerVocabulary],
    learner_id: str,
    meaning_repo: MeaningRepository,
) -> list[LearnerVocabulary]:
    """Attach the learner's meanings to each row with a single lookup."""
    if not mappings:
        return mappings
    vocabulary_ids = list(dict.fromkeys(m.vocabulary_id for m in mappings))
    meanings = meaning_repo.find_learner_meanings(learner_id, vocabulary_ids)
    for mapping in mappings:
        mapping.meanings = list(meanings.get(mapping.vocabulary_id, []))
    return mappings


def annotate_content_with_user_data(
    contents: list[ContentRef],
    learner_id: str,
    link_repo: ContentLinkRepository,
    activity_repo: ContentActivityRepository,
) -> dict[ContentRef, ContentUserData]:
    """Level histogram plus bookmark/view flags for each content item.

    Three batched queries in total.
    """
    unique = list(dict.fromkeys(contents))
    if not unique:
        return {}
    histograms = get_vocab_level_histogram(unique, learner_id, link_repo)
    bookmarked = activity_repo.find_bookmarked(learner_id, unique)
    viewed = activity_repo.find_viewed(learner_id, unique)
    return {
        content: ContentUserData(
            vocabs_by_level=histograms[content],
            is_bookmarked=content in bookmarked,
            is_viewed=content in viewed,
        )
        for content in unique
    }


def get_vocabulary_counters(
    vocabulary_ids: list[str],
    learner_repo: LearnerVocabularyRepository,
    link_repo: ContentLinkRepository,
) -> dict[str, VocabularyCounters]:
    unique = list(dict.fromkeys(vocabulary_ids))
    if not unique:
        return {}
    learners = learner_repo.count_learners(unique)
    contents = link_repo.count_content(unique)
    return {
        vocabulary_id: VocabularyCounters(
            learners_count=learners.get(vocabulary_id, 0),
            content_count=contents.get(vocabulary_id, 0),
        )
        for vocabulary_id in unique
    }


def get_content_vocabularies(
    content: ContentRef,
    learner_id: str,
    link_repo: ContentLinkRepository,
    vocab_repo: VocabularyRepository,
    learner_repo: LearnerVocabularyRepository,
    meaning_repo: MeaningRepository,
) -> list[ContentVocabulary]:
    """Every vocabulary linked to the content with the learner's row, or None if untracked.

    Ordered by normalized text.
    """
    vocabulary_ids = sorted(link_repo.get_vocabulary_ids(content))
    if not vocabulary_ids:
        return []
    vocabs = sorted(vocab_repo.get_many(vocabulary_ids), key=lambda v: (v.normalized_text, v.is_phrase))
    rows = annotate_learner_vocab_meanings(
        learner_repo.find_many(learner_id, vocabulary_ids), learner_id, meaning_repo,
    )
    by_vocabulary = {row.vocabulary_id: row for row in rows}
    return [ContentVocabulary(vocabulary=v, learner_vocabulary=by_vocabulary.get(v.id)) for v in vocabs]
