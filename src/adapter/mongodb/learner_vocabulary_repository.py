"""MongoDB implementation of LearnerVocabularyRepository."""

import re
from datetime import datetime, timezone
from logging import getLogger

from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import BulkWriteError, DuplicateKeyError, PyMongoError

from adapter.mongodb import DUPLICATE_KEY_ERROR_CODE, LEARNER_VOCABULARY_COLLECTION_NAME
from domain.model.errors import StorageError
from domain.model.learner_vocabulary import (
    LearnerVocabulary,
    LearnerVocabularyFilter,
    LearnerVocabularySort,
    SavedVocabularyCount,
)
from domain.model.vocab_level import VocabLevel

logger = getLogger(__name__)

_SORT_FIELDS = {
    LearnerVocabularySort.TEXT: 'text',
    LearnerVocabularySort.CREATED_AT: 'created_at',
    LearnerVocabularySort.UPDATED_AT: 'updated_at',
    LearnerVocabularySort.LEVEL: 'level',
}


class MongoLearnerVocabularyRepository:
    def __init__(self, db: Database):
        self.collection = db[LEARNER_VOCABULARY_COLLECTION_NAME]

    # ── indexes ────────────────────────────────────────────────

    def ensure_indexes(self) -> bool:
        """Create indexes for learner_vocabularies collection."""
        from adapter.mongodb.indexes import create_index_safe

        try:
            create_index_safe(
                self.collection,
                [('learner_id', 1), ('vocabulary_id', 1)],
                'uq_learner_vocab',
                unique=True,
            )
            create_index_safe(
                self.collection,
                [('learner_id', 1), ('language', 1), ('level', 1)],
                'idx_learner_vocab_language_level',
            )
            create_index_safe(self.collection, [('learner_id', 1), ('text', 1)], 'idx_learner_vocab_text')
            create_index_safe(self.collection, [('vocabulary_id', 1), ('level', 1)], 'idx_learner_vocab_vocabulary_level')
            return True
        except Exception as e:
            logger.error("Failed to create learner_vocabularies indexes", extra={"error": str(e)})
            return False

    # ── mapping ───────────────────────────────────────────────

    def _to_domain(self, doc: dict) -> LearnerVocabulary:
        return LearnerVocabulary(
            id=doc['_id'],
            learner_id=doc['learner_id'],
            vocabulary_id=doc['vocabulary_id'],
            language=doc['language'],
            text=doc['text'],
            is_phrase=doc.get('is_phrase', False),
            level=VocabLevel(doc['level']),
            notes=doc.get('notes') or "",
            created_at=doc['created_at'],
            updated_at=doc.get('updated_at', doc['created_at']),
        )

    def _to_document(self, row: LearnerVocabulary) -> dict:
        return {
            '_id': row.id,
            'learner_id': row.learner_id,
            'vocabulary_id': row.vocabulary_id,
            'language': row.language,
            'text': row.text,
            'is_phrase': row.is_phrase,
            'level': int(row.level),
            'notes': row.notes,
            'created_at': row.created_at,
            'updated_at': row.updated_at,
        }

    # ── CRUD ──────────────────────────────────────────────────

    def get(self, learner_id: str, vocabulary_id: str) -> LearnerVocabulary | None:
        try:
            doc = self.collection.find_one({'learner_id': learner_id, 'vocabulary_id': vocabulary_id})
        except PyMongoError as e:
            logger.error("Failed to get learner vocabulary", extra={"learnerId": learner_id, "vocabularyId": vocabulary_id, "error": str(e)})
            raise StorageError("Failed to get learner vocabulary") from e
        return self._to_domain(doc) if doc else None

    def find_many(self, learner_id: str, vocabulary_ids: list[str]) -> list[LearnerVocabulary]:
        if not vocabulary_ids:
            return []
        try:
            docs = self.collection.find({'learner_id': learner_id, 'vocabulary_id': {'$in': list(vocabulary_ids)}})
            return [self._to_domain(doc) for doc in docs]
        except PyMongoError as e:
            logger.error("Failed to find learner vocabularies", extra={"learnerId": learner_id, "error": str(e)})
            raise StorageError("Failed to find learner vocabularies") from e

    def get_or_create(self, row: LearnerVocabulary) -> LearnerVocabulary:
        """Atomic upsert; on a lost upsert race the winner's row is re-read."""
        identity = row.identity
        on_insert = {k: v for k, v in self._to_document(row).items() if k not in identity}
        try:
            try:
                doc = self.collection.find_one_and_update(
                    identity,
                    {'$setOnInsert': on_insert},
                    upsert=True,
                    return_document=ReturnDocument.AFTER,
                )
            except DuplicateKeyError:
                doc = self.collection.find_one(identity)
        except PyMongoError as e:
            logger.error("Failed to ensure learner vocabulary", extra={"learnerId": row.learner_id, "vocabularyId": row.vocabulary_id, "error": str(e)})
            raise StorageError("Failed to ensure learner vocabulary") from e

        if doc is None:
            raise StorageError("Learner vocabulary vanished after upsert", context=identity)
        if doc['_id'] == row.id:
            logger.info("Learner vocabulary created", extra={"learnerId": row.learner_id, "vocabularyId": row.vocabulary_id})
        return self._to_domain(doc)

    def get_or_create_many(self, rows: list[LearnerVocabulary]) -> list[LearnerVocabulary]:
        """Read existing, bulk insert missing, re-read conflicts. Result follows input order."""
        if not rows:
            return []
        learner_ids = {row.learner_id for row in rows}
        if len(learner_ids) != 1:
            raise ValueError("get_or_create_many expects rows of a single learner")
        learner_id = learner_ids.pop()
        wanted = list(dict.fromkeys(row.vocabulary_id for row in rows))

        stored = {r.vocabulary_id: r for r in self.find_many(learner_id, wanted)}
        missing: list[LearnerVocabulary] = []
        for row in rows:
            if row.vocabulary_id not in stored and all(m.vocabulary_id != row.vocabulary_id for m in missing):
                missing.append(row)

        if missing:
            conflicted: set[int] = set()
            try:
                self.collection.insert_many([self._to_document(row) for row in missing], ordered=False)
            except BulkWriteError as e:
                write_errors = e.details.get('writeErrors', [])
                if any(err.get('code') != DUPLICATE_KEY_ERROR_CODE for err in write_errors) or e.details.get('writeConcernErrors'):
                    logger.error("Failed to insert learner vocabularies", extra={"learnerId": learner_id, "error": str(e)})
                    raise StorageError("Failed to insert learner vocabularies") from e
                conflicted = {err['index'] for err in write_errors}
            except PyMongoError as e:
                logger.error("Failed to insert learner vocabularies", extra={"learnerId": learner_id, "error": str(e)})
                raise StorageError("Failed to insert learner vocabularies") from e

            for i, row in enumerate(missing):
                if i not in conflicted:
                    stored[row.vocabulary_id] = row
            if conflicted:
                lost = [missing[i].vocabulary_id for i in conflicted]
                stored.update({r.vocabulary_id: r for r in self.find_many(learner_id, lost)})
            logger.info("Learner vocabularies created", extra={"learnerId": learner_id, "createdCount": len(missing) - len(conflicted)})

        return [stored[vocabulary_id] for vocabulary_id in wanted]

    def update(
        self,
        learner_id: str,
        vocabulary_id: str,
        level: VocabLevel | None = None,
        notes: str | None = None,
    ) -> LearnerVocabulary | None:
        fields: dict = {}
        if level is not None:
            fields['level'] = int(level)
        if notes is not None:
            fields['notes'] = notes
        if not fields:
            return self.get(learner_id, vocabulary_id)
        fields['updated_at'] = datetime.now(timezone.utc)

        try:
            doc = self.collection.find_one_and_update(
                {'learner_id': learner_id, 'vocabulary_id': vocabulary_id},
                {'$set': fields},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error("Failed to update learner vocabulary", extra={"learnerId": learner_id, "vocabularyId": vocabulary_id, "error": str(e)})
            raise StorageError("Failed to update learner vocabulary") from e
        return self._to_domain(doc) if doc else None

    # ── listing ───────────────────────────────────────────────

    def find(self, learner_id: str, filters: LearnerVocabularyFilter) -> tuple[list[LearnerVocabulary], int]:
        query: dict = {'learner_id': learner_id}
        if filters.language:
            query['language'] = filters.language
        if filters.levels:
            query['level'] = {'$in': [int(level) for level in filters.levels]}
        if filters.is_phrase is not None:
            query['is_phrase'] = filters.is_phrase
        if filters.search:
            query['text'] = {'$regex': re.escape(filters.search), '$options': 'i'}

        direction = -1 if filters.descending else 1
        sort = [(_SORT_FIELDS[filters.sort_by], direction), ('_id', 1)]
        try:
            total = self.collection.count_documents(query)
            cursor = self.collection.find(query).sort(sort).skip(filters.skip).limit(filters.limit)
            return [self._to_domain(doc) for doc in cursor], total
        except PyMongoError as e:
            logger.error("Failed to list learner vocabularies", extra={"learnerId": learner_id, "error": str(e)})
            raise StorageError("Failed to list learner vocabularies") from e

    # ── aggregate queries ─────────────────────────────────────

    def count_saved(
        self,
        learner_id: str,
        levels: list[VocabLevel] | None = None,
        is_phrase: bool | None = None,
        saved_from: datetime | None = None,
        saved_to: datetime | None = None,
        group_by_language: bool = False,
    ) -> list[SavedVocabularyCount]:
        match: dict = {'learner_id': learner_id}
        if levels:
            match['level'] = {'$in': [int(level) for level in levels]}
        if is_phrase is not None:
            match['is_phrase'] = is_phrase
        if saved_from or saved_to:
            created: dict = {}
            if saved_from:
                created['$gte'] = saved_from
            if saved_to:
                created['$lte'] = saved_to
            match['created_at'] = created

        pipeline = [
            {'$match': match},
            {'$group': {'_id': '$language' if group_by_language else None, 'count': {'$sum': 1}}},
            {'$sort': {'count': -1, '_id': 1}},
        ]
        try:
            docs = list(self.collection.aggregate(pipeline))
        except PyMongoError as e:
            logger.error("Failed to count saved vocabularies", extra={"learnerId": learner_id, "error": str(e)})
            raise StorageError("Failed to count saved vocabularies") from e

        if not group_by_language:
            return [SavedVocabularyCount(count=docs[0]['count'] if docs else 0)]
        return [SavedVocabularyCount(count=doc['count'], language=doc['_id']) for doc in docs]

    def count_learners(self, vocabulary_ids: list[str]) -> dict[str, int]:
        if not vocabulary_ids:
            return {}
        pipeline = [
            {'$match': {'vocabulary_id': {'$in': list(vocabulary_ids)}, 'level': {'$ne': int(VocabLevel.IGNORED)}}},
            {'$group': {'_id': '$vocabulary_id', 'count': {'$sum': 1}}},
        ]
        try:
            return {doc['_id']: doc['count'] for doc in self.collection.aggregate(pipeline)}
        except PyMongoError as e:
            logger.error("Failed to count learners", extra={"count": len(vocabulary_ids), "error": str(e)})
            raise StorageError("Failed to count learners") from e
