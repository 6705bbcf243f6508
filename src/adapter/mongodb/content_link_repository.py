"""MongoDB implementation of ContentLinkRepository.

Write methods take the session of an open transaction and let PyMongoError
propagate untouched: ClientSession.with_transaction only retries errors that
still carry their TransientTransactionError label. MongoUnitOfWork converts
whatever escapes the transaction into StorageError.
"""

import uuid
from collections import defaultdict
from datetime import datetime, timezone
from logging import getLogger
from typing import Any

from pymongo.database import Database
from pymongo.errors import PyMongoError

from adapter.mongodb import CONTENT_LINK_COLLECTION_NAME, LEARNER_VOCABULARY_COLLECTION_NAME
from domain.model.content import ContentKind, ContentRef
from domain.model.errors import StorageError
from domain.model.vocab_level import VocabLevel

logger = getLogger(__name__)


def _content_filter(content: ContentRef) -> dict:
    return {'content_kind': content.kind.value, 'content_id': content.id}


def match_contents(contents: list[ContentRef]) -> dict:
    """$match stage restricting links to the given content items, one $in per kind."""
    by_kind: dict[str, set[str]] = defaultdict(set)
    for content in contents:
        by_kind[content.kind.value].add(content.id)
    clauses = [
        {'content_kind': kind, 'content_id': {'$in': sorted(ids)}}
        for kind, ids in sorted(by_kind.items())
    ]
    return {'$match': clauses[0] if len(clauses) == 1 else {'$or': clauses}}


def _learner_level_lookup(learner_id: str) -> list[dict]:
    """Left join with the learner's rows; untracked vocabulary falls into NEW."""
    return [
        {'$lookup': {
            'from': LEARNER_VOCABULARY_COLLECTION_NAME,
            'localField': 'vocabulary_id',
            'foreignField': 'vocabulary_id',
            'pipeline': [
                {'$match': {'learner_id': learner_id}},
                {'$project': {'_id': 0, 'level': 1}},
            ],
            'as': 'learner',
        }},
        {'$unwind': {'path': '$learner', 'preserveNullAndEmptyArrays': True}},
    ]


_LEVEL_OR_NEW = {'$ifNull': ['$learner.level', VocabLevel.untracked().value]}


class MongoContentLinkRepository:
    def __init__(self, db: Database):
        self.collection = db[CONTENT_LINK_COLLECTION_NAME]

    # ── indexes ────────────────────────────────────────────────

    def ensure_indexes(self) -> bool:
        """Create indexes for content_vocabularies collection."""
        from adapter.mongodb.indexes import create_index_safe

        try:
            create_index_safe(
                self.collection,
                [('content_kind', 1), ('content_id', 1), ('vocabulary_id', 1)],
                'uq_link_content_vocab',
                unique=True,
            )
            create_index_safe(self.collection, [('vocabulary_id', 1)], 'idx_link_vocabulary_id')
            return True
        except Exception as e:
            logger.error("Failed to create content_vocabularies indexes", extra={"error": str(e)})
            return False

    # ── link set (transactional) ──────────────────────────────

    def get_vocabulary_ids(self, content: ContentRef, session: Any = None) -> set[str]:
        docs = self.collection.find(_content_filter(content), {'vocabulary_id': 1}, session=session)
        return {doc['vocabulary_id'] for doc in docs}

    def add_links(self, content: ContentRef, language: str, vocabulary_ids: set[str], session: Any = None) -> int:
        if not vocabulary_ids:
            return 0
        now = datetime.now(timezone.utc)
        docs = [
            {
                '_id': str(uuid.uuid4()),
                'content_kind': content.kind.value,
                'content_id': content.id,
                'vocabulary_id': vocabulary_id,
                'language': language,
                'created_at': now,
            }
            for vocabulary_id in sorted(vocabulary_ids)
        ]
        result = self.collection.insert_many(docs, session=session)
        return len(result.inserted_ids)

    def remove_links(self, content: ContentRef, vocabulary_ids: set[str], session: Any = None) -> int:
        if not vocabulary_ids:
            return 0
        query = {**_content_filter(content), 'vocabulary_id': {'$in': sorted(vocabulary_ids)}}
        return self.collection.delete_many(query, session=session).deleted_count

    def delete_for_content(self, content: ContentRef, session: Any = None) -> int:
        return self.collection.delete_many(_content_filter(content), session=session).deleted_count

    # ── aggregate queries ─────────────────────────────────────

    def count_by_level(self, contents: list[ContentRef], learner_id: str) -> dict[ContentRef, dict[int, int]]:
        if not contents:
            return {}
        pipeline = [
            match_contents(contents),
            *_learner_level_lookup(learner_id),
            {'$group': {
                '_id': {'content_kind': '$content_kind', 'content_id': '$content_id', 'level': _LEVEL_OR_NEW},
                'count': {'$sum': 1},
            }},
        ]
        try:
            docs = list(self.collection.aggregate(pipeline))
        except PyMongoError as e:
            logger.error("Failed to count vocabulary levels", extra={"learnerId": learner_id, "contents": len(contents), "error": str(e)})
            raise StorageError("Failed to count vocabulary levels") from e

        counts: dict[ContentRef, dict[int, int]] = defaultdict(dict)
        for doc in docs:
            key = doc['_id']
            content = ContentRef(ContentKind(key['content_kind']), key['content_id'])
            counts[content][int(key['level'])] = doc['count']
        return dict(counts)

    def count_by_level_grouped(
        self,
        groups: dict[str, list[ContentRef]],
        learner_id: str,
    ) -> dict[str, dict[int, int]]:
        """Per-group level counts, each distinct vocabulary counted once per group.

        The query returns one document per distinct vocabulary with the
        content items linking it and the learner's level; group membership
        is resolved in memory.
        """
        group_of: dict[ContentRef, set[str]] = defaultdict(set)
        for group_id, contents in groups.items():
            for content in contents:
                group_of[content].add(group_id)
        if not group_of:
            return {}

        pipeline = [
            match_contents(list(group_of)),
            {'$group': {
                '_id': '$vocabulary_id',
                'vocabulary_id': {'$first': '$vocabulary_id'},
                'contents': {'$addToSet': {'kind': '$content_kind', 'id': '$content_id'}},
            }},
            *_learner_level_lookup(learner_id),
            {'$project': {'_id': 0, 'contents': 1, 'level': _LEVEL_OR_NEW}},
        ]
        try:
            docs = list(self.collection.aggregate(pipeline))
        except PyMongoError as e:
            logger.error("Failed to count collection vocabulary levels", extra={"learnerId": learner_id, "groups": len(groups), "error": str(e)})
            raise StorageError("Failed to count collection vocabulary levels") from e

        counts: dict[str, dict[int, int]] = defaultdict(lambda: defaultdict(int))
        for doc in docs:
            level = int(doc['level'])
            group_ids: set[str] = set()
            for item in doc['contents']:
                group_ids |= group_of.get(ContentRef(ContentKind(item['kind']), item['id']), set())
            for group_id in group_ids:
                counts[group_id][level] += 1
        return {group_id: dict(levels) for group_id, levels in counts.items()}

    def count_content(self, vocabulary_ids: list[str]) -> dict[str, int]:
        if not vocabulary_ids:
            return {}
        pipeline = [
            {'$match': {'vocabulary_id': {'$in': list(vocabulary_ids)}}},
            {'$group': {'_id': '$vocabulary_id', 'count': {'$sum': 1}}},
        ]
        try:
            return {doc['_id']: doc['count'] for doc in self.collection.aggregate(pipeline)}
        except PyMongoError as e:
            logger.error("Failed to count content links", extra={"count": len(vocabulary_ids), "error": str(e)})
            raise StorageError("Failed to count content links") from e
