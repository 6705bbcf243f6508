"""MongoDB index management utilities.

Shared index creation with conflict resolution, used by each MongoXxxRepository.
The unique indexes created here are what the get-or-create paths rely on
for race safety.
"""

from logging import getLogger

from pymongo.errors import PyMongoError

from adapter.mongodb import (
    CONTENT_BOOKMARK_COLLECTION_NAME,
    CONTENT_LINK_COLLECTION_NAME,
    LEARNER_LANGUAGE_COLLECTION_NAME,
    LEARNER_MEANING_COLLECTION_NAME,
    LEARNER_VOCABULARY_COLLECTION_NAME,
    VOCABULARY_COLLECTION_NAME,
)

logger = getLogger(__name__)


def create_index_safe(collection, keys: list, name: str, **kwargs) -> bool:
    """Create index with conflict resolution.

    Handles two conflict scenarios:
    - Same name but different key spec or options (schema migration)
    - Same key spec but different name (rename)

    In both cases, drops the conflicting index and recreates with the desired spec.
    """
    try:
        collection.create_index(keys, name=name, **kwargs)
        return True
    except PyMongoError as e:
        if "already exists" not in str(e) and "Conflict" not in str(e):
            raise
        return _resolve_conflict(collection, keys, name, **kwargs)


def _resolve_conflict(collection, keys: list, name: str, **kwargs) -> bool:
    """Drop conflicting index and recreate."""
    keys_dict = dict(keys)

    for idx_name, idx_info in collection.index_information().items():
        if idx_name == '_id_':
            continue

        idx_keys = dict(idx_info.get('key', []))
        same_name = idx_name == name
        same_keys = idx_keys == keys_dict
        same_unique = bool(idx_info.get('unique')) == bool(kwargs.get('unique'))

        if (same_name and not (same_keys and same_unique)) or (same_keys and not same_name):
            logger.warning(f"Dropping conflicting index: {idx_name}")
            collection.drop_index(idx_name)
            collection.create_index(keys, name=name, **kwargs)
            logger.info(f"Recreated index: {name}")
            return True

    logger.error(f"Failed to resolve index conflict for {name}")
    return False


def ensure_all_indexes(db) -> list[str]:
    """Ensure indexes for all collections. Called at startup.

    Returns:
        Names of the collections whose indexes could not be created.
    """
    from adapter.mongodb.content_activity_repository import MongoContentActivityRepository
    from adapter.mongodb.content_link_repository import MongoContentLinkRepository
    from adapter.mongodb.learner_language_repository import MongoLearnerLanguageRepository
    from adapter.mongodb.learner_vocabulary_repository import MongoLearnerVocabularyRepository
    from adapter.mongodb.meaning_repository import MongoMeaningRepository
    from adapter.mongodb.vocabulary_repository import MongoVocabularyRepository

    repositories = {
        VOCABULARY_COLLECTION_NAME: MongoVocabularyRepository(db),
        CONTENT_LINK_COLLECTION_NAME: MongoContentLinkRepository(db),
        LEARNER_VOCABULARY_COLLECTION_NAME: MongoLearnerVocabularyRepository(db),
        LEARNER_LANGUAGE_COLLECTION_NAME: MongoLearnerLanguageRepository(db),
        LEARNER_MEANING_COLLECTION_NAME: MongoMeaningRepository(db),
        CONTENT_BOOKMARK_COLLECTION_NAME: MongoContentActivityRepository(db),
    }
    return [name for name, repo in repositories.items() if not repo.ensure_indexes()]
