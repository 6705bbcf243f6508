"""MongoDB implementation of VocabularyRepository."""

from logging import getLogger

from pymongo.database import Database
from pymongo.errors import BulkWriteError, PyMongoError

from adapter.mongodb import DUPLICATE_KEY_ERROR_CODE, VOCABULARY_COLLECTION_NAME
from domain.model.errors import StorageError
from domain.model.vocabulary import Vocabulary

logger = getLogger(__name__)


class MongoVocabularyRepository:
    def __init__(self, db: Database):
        self.collection = db[VOCABULARY_COLLECTION_NAME]

    # ── indexes ────────────────────────────────────────────────

    def ensure_indexes(self) -> bool:
        """Create indexes for vocabularies collection."""
        from adapter.mongodb.indexes import create_index_safe

        try:
            create_index_safe(
                self.collection,
                [('language', 1), ('normalized_text', 1), ('is_phrase', 1)],
                'uq_vocab_identity',
                unique=True,
            )
            create_index_safe(self.collection, [('created_at', -1)], 'idx_vocab_created_at')
            return True
        except Exception as e:
            logger.error("Failed to create vocabularies indexes", extra={"error": str(e)})
            return False

    # ── mapping ───────────────────────────────────────────────

    def _to_domain(self, doc: dict) -> Vocabulary:
        return Vocabulary(
            id=doc['_id'],
            language=doc['language'],
            text=doc['text'],
            normalized_text=doc['normalized_text'],
            is_phrase=doc.get('is_phrase', False),
            created_at=doc['created_at'],
            parsed_text=doc.get('parsed_text'),
        )

    def _to_document(self, vocab: Vocabulary) -> dict:
        return {
            '_id': vocab.id,
            'language': vocab.language,
            'text': vocab.text,
            'normalized_text': vocab.normalized_text,
            'is_phrase': vocab.is_phrase,
            'parsed_text': vocab.parsed_text,
            'created_at': vocab.created_at,
        }

    # ── queries ───────────────────────────────────────────────

    def find_by_keys(self, language: str, keys: list[tuple[str, bool]]) -> list[Vocabulary]:
        """Single $in query on normalized_text; the phrase flag is matched in memory."""
        if not keys:
            return []
        wanted = set(keys)
        texts = sorted({text for text, _ in wanted})
        try:
            docs = self.collection.find({'language': language, 'normalized_text': {'$in': texts}})
            vocabs = [self._to_domain(doc) for doc in docs]
        except PyMongoError as e:
            logger.error("Failed to find vocabularies", extra={"language": language, "keys": len(keys), "error": str(e)})
            raise StorageError("Failed to find vocabularies") from e
        return [v for v in vocabs if v.key in wanted]

    def insert_many(self, vocabs: list[Vocabulary]) -> list[Vocabulary]:
        """Unordered bulk insert; rows rejected by the unique index are dropped from the result."""
        if not vocabs:
            return []
        try:
            self.collection.insert_many([self._to_document(v) for v in vocabs], ordered=False)
            return list(vocabs)
        except BulkWriteError as e:
            write_errors = e.details.get('writeErrors', [])
            unexpected = [err for err in write_errors if err.get('code') != DUPLICATE_KEY_ERROR_CODE]
            if unexpected or e.details.get('writeConcernErrors'):
                logger.error("Failed to insert vocabularies", extra={"count": len(vocabs), "error": str(e)})
                raise StorageError("Failed to insert vocabularies") from e
            conflicted = {err['index'] for err in write_errors}
            logger.info("Vocabulary insert lost to concurrent writer", extra={"conflicts": len(conflicted)})
            return [v for i, v in enumerate(vocabs) if i not in conflicted]
        except PyMongoError as e:
            logger.error("Failed to insert vocabularies", extra={"count": len(vocabs), "error": str(e)})
            raise StorageError("Failed to insert vocabularies") from e

    def find_phrases_in(self, language: str, text: str, separator: str) -> list[Vocabulary]:
        """One query over the language's phrase rows, matched with $indexOfCP on the server."""
        if not text:
            return []
        haystack = f"{separator}{text}{separator}"
        needle = {'$concat': [separator, '$normalized_text', separator]}
        query = {
            'language': language,
            'is_phrase': True,
            '$expr': {'$gte': [{'$indexOfCP': [haystack, needle]}, 0]},
        }
        try:
            return [self._to_domain(doc) for doc in self.collection.find(query)]
        except PyMongoError as e:
            logger.error("Failed to find phrases", extra={"language": language, "error": str(e)})
            raise StorageError("Failed to find phrases") from e

    def get_by_id(self, vocabulary_id: str) -> Vocabulary | None:
        try:
            doc = self.collection.find_one({'_id': vocabulary_id})
        except PyMongoError as e:
            logger.error("Failed to get vocabulary", extra={"vocabularyId": vocabulary_id, "error": str(e)})
            raise StorageError("Failed to get vocabulary") from e
        return self._to_domain(doc) if doc else None

    def get_many(self, vocabulary_ids: list[str]) -> list[Vocabulary]:
        if not vocabulary_ids:
            return []
        try:
            docs = self.collection.find({'_id': {'$in': list(vocabulary_ids)}})
            return [self._to_domain(doc) for doc in docs]
        except PyMongoError as e:
            logger.error("Failed to get vocabularies", extra={"count": len(vocabulary_ids), "error": str(e)})
            raise StorageError("Failed to get vocabularies") from e
