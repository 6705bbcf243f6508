"""Wiring for VocabularyCore."""

import logging

from dotenv import load_dotenv

# Must run before importing modules that read env vars at import time
load_dotenv()

from adapter.fake.content_activity_repository import FakeContentActivityRepository
from adapter.fake.content_link_repository import FakeContentLinkRepository
from adapter.fake.learner_language_repository import FakeLearnerLanguageRepository
from adapter.fake.learner_vocabulary_repository import FakeLearnerVocabularyRepository
from adapter.fake.meaning_repository import FakeMeaningRepository
from adapter.fake.unit_of_work import FakeUnitOfWork
from adapter.fake.vocabulary_repository import FakeVocabularyRepository
from adapter.mongodb import UNIQUE_INDEX_COLLECTIONS
from adapter.mongodb.connection import DATABASE_NAME, MONGO_URL, get_mongodb_client, supports_transactions
from adapter.mongodb.content_activity_repository import MongoContentActivityRepository
from adapter.mongodb.content_link_repository import MongoContentLinkRepository
from adapter.mongodb.indexes import ensure_all_indexes
from adapter.mongodb.learner_language_repository import MongoLearnerLanguageRepository
from adapter.mongodb.learner_vocabulary_repository import MongoLearnerVocabularyRepository
from adapter.mongodb.meaning_repository import MongoMeaningRepository
from adapter.mongodb.unit_of_work import MongoUnitOfWork
from adapter.mongodb.vocabulary_repository import MongoVocabularyRepository
from adapter.tokenizer.registry import TokenizerRegistry, default_registry
from domain.model.errors import ConfigurationError, StorageError
from interface.core import VocabularyCore

logger = logging.getLogger(__name__)


def build_core(tokenizers: TokenizerRegistry | None = None, create_indexes: bool = True) -> VocabularyCore:
    """VocabularyCore backed by MongoDB.

    Raises:
        ConfigurationError: MONGO_URL is not set, the server is a standalone
            without transaction support, or a unique index could not be created.
        StorageError: MongoDB is unreachable.
    """
    if not MONGO_URL:
        raise ConfigurationError("MONGO_URL not configured", rule="mongo_url_set")
    client = get_mongodb_client()
    if client is None:
        raise StorageError("Database unavailable")
    if not supports_transactions(client):
        raise ConfigurationError(
            "MongoDB deployment does not support transactions; a replica set is required",
            rule="replica_set",
        )
    db = client[DATABASE_NAME]

    if create_indexes:
        failed = ensure_all_indexes(db)
        missing_unique = [name for name in failed if name in UNIQUE_INDEX_COLLECTIONS]
        if missing_unique:
            logger.error("Unique indexes missing", extra={"database": DATABASE_NAME, "collections": missing_unique})
            raise ConfigurationError(
                "Unique indexes could not be created; existing duplicates must be merged first",
                rule="unique_indexes",
                context={"collections": missing_unique},
            )
        if failed:
            logger.warning("Some indexes could not be created", extra={"database": DATABASE_NAME, "collections": failed})

    return VocabularyCore(
        tokenizers=tokenizers or default_registry(),
        vocab_repo=MongoVocabularyRepository(db),
        link_repo=MongoContentLinkRepository(db),
        learner_repo=MongoLearnerVocabularyRepository(db),
        meaning_repo=MongoMeaningRepository(db),
        language_repo=MongoLearnerLanguageRepository(db),
        activity_repo=MongoContentActivityRepository(db),
        uow=MongoUnitOfWork(client),
    )


def build_in_memory_core(tokenizers: TokenizerRegistry | None = None) -> VocabularyCore:
    """VocabularyCore over in-memory fakes, for tests and local experiments."""
    learner_repo = FakeLearnerVocabularyRepository()
    link_repo = FakeContentLinkRepository(learner_repo)
    return VocabularyCore(
        tokenizers=tokenizers or default_registry(),
        vocab_repo=FakeVocabularyRepository(),
        link_repo=link_repo,
        learner_repo=learner_repo,
        meaning_repo=FakeMeaningRepository(),
        language_repo=FakeLearnerLanguageRepository(),
        activity_repo=FakeContentActivityRepository(),
        uow=FakeUnitOfWork(link_repo),
    )
