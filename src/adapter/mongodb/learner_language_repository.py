"""MongoDB implementation of LearnerLanguageRepository (read-only)."""

from logging import getLogger

from pymongo.database import Database
from pymongo.errors import PyMongoError

from adapter.mongodb import LEARNER_LANGUAGE_COLLECTION_NAME
from domain.model.errors import StorageError

logger = getLogger(__name__)


class MongoLearnerLanguageRepository:
    def __init__(self, db: Database):
        self.collection = db[LEARNER_LANGUAGE_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        from adapter.mongodb.indexes import create_index_safe

        try:
            create_index_safe(self.collection, [('learner_id', 1), ('language', 1)], 'idx_learner_language')
            return True
        except Exception as e:
            logger.error("Failed to create learner_languages indexes", extra={"error": str(e)})
            return False

    def get_languages(self, learner_id: str) -> set[str]:
        try:
            return set(self.collection.distinct('language', {'learner_id': learner_id}))
        except PyMongoError as e:
            logger.error("Failed to get learner languages", extra={"learnerId": learner_id, "error": str(e)})
            raise StorageError("Failed to get learner languages") from e
