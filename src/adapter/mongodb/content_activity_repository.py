"""MongoDB implementation of ContentActivityRepository.

Bookmarks and view history are recorded elsewhere; both lookups here are
single batched queries over the requested content items.
"""

from logging import getLogger

from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from adapter.mongodb import CONTENT_BOOKMARK_COLLECTION_NAME, CONTENT_HISTORY_COLLECTION_NAME
from adapter.mongodb.content_link_repository import match_contents
from domain.model.content import ContentKind, ContentRef
from domain.model.errors import StorageError

logger = getLogger(__name__)


class MongoContentActivityRepository:
    def __init__(self, db: Database):
        self.bookmarks = db[CONTENT_BOOKMARK_COLLECTION_NAME]
        self.history = db[CONTENT_HISTORY_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        from adapter.mongodb.indexes import create_index_safe

        try:
            keys = [('learner_id', 1), ('content_kind', 1), ('content_id', 1)]
            create_index_safe(self.bookmarks, keys, 'idx_bookmark_learner_content')
            create_index_safe(self.history, keys, 'idx_history_learner_content')
            return True
        except Exception as e:
            logger.error("Failed to create content activity indexes", extra={"error": str(e)})
            return False

    def find_bookmarked(self, learner_id: str, contents: list[ContentRef]) -> set[ContentRef]:
        return self._find_present(self.bookmarks, learner_id, contents)

    def find_viewed(self, learner_id: str, contents: list[ContentRef]) -> set[ContentRef]:
        return self._find_present(self.history, learner_id, contents)

    def _find_present(self, collection: Collection, learner_id: str, contents: list[ContentRef]) -> set[ContentRef]:
        if not contents:
            return set()
        query = {'learner_id': learner_id, **match_contents(contents)['$match']}
        try:
            docs = collection.find(query, {'_id': 0, 'content_kind': 1, 'content_id': 1})
            return {ContentRef(ContentKind(doc['content_kind']), doc['content_id']) for doc in docs}
        except PyMongoError as e:
            logger.error(
                "Failed to read content activity",
                extra={"learnerId": learner_id, "collection": collection.name, "error": str(e)},
            )
            raise StorageError("Failed to read content activity") from e
