"""MongoDB implementation of MeaningRepository.

Meanings and the learner ↔ meaning join are written by the meanings part of
the platform; this adapter only reads them.
"""

from collections import defaultdict
from logging import getLogger

from pymongo.database import Database
from pymongo.errors import PyMongoError

from adapter.mongodb import LEARNER_MEANING_COLLECTION_NAME, MEANING_COLLECTION_NAME
from domain.model.errors import StorageError
from domain.model.learner_vocabulary import Meaning

logger = getLogger(__name__)


class MongoMeaningRepository:
    def __init__(self, db: Database):
        self.collection = db[LEARNER_MEANING_COLLECTION_NAME]
        self.meanings = db[MEANING_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        from adapter.mongodb.indexes import create_index_safe

        try:
            create_index_safe(
                self.collection,
                [('learner_id', 1), ('vocabulary_id', 1)],
                'idx_learner_meaning_vocab',
            )
            create_index_safe(self.meanings, [('vocabulary_id', 1)], 'idx_meaning_vocabulary_id')
            return True
        except Exception as e:
            logger.error("Failed to create meaning indexes", extra={"error": str(e)})
            return False

    def find_learner_meanings(self, learner_id: str, vocabulary_ids: list[str]) -> dict[str, list[Meaning]]:
        if not vocabulary_ids:
            return {}
        pipeline = [
            {'$match': {'learner_id': learner_id, 'vocabulary_id': {'$in': list(vocabulary_ids)}}},
            {'$lookup': {
                'from': MEANING_COLLECTION_NAME,
                'localField': 'meaning_id',
                'foreignField': '_id',
                'as': 'meaning',
            }},
            {'$unwind': '$meaning'},
            {'$replaceRoot': {'newRoot': '$meaning'}},
            {'$sort': {'vocabulary_id': 1, 'text': 1}},
        ]
        try:
            docs = list(self.collection.aggregate(pipeline))
        except PyMongoError as e:
            logger.error("Failed to find learner meanings", extra={"learnerId": learner_id, "error": str(e)})
            raise StorageError("Failed to find learner meanings") from e

        meanings: dict[str, list[Meaning]] = defaultdict(list)
        for doc in docs:
            meanings[doc['vocabulary_id']].append(Meaning(
                id=doc['_id'],
                vocabulary_id=doc['vocabulary_id'],
                text=doc['text'],
                language=doc['language'],
                added_by=doc.get('added_by'),
            ))
        return dict(meanings)
