"""MongoDB adapters: collection names shared by the repositories."""

VOCABULARY_COLLECTION_NAME = 'vocabularies'
CONTENT_LINK_COLLECTION_NAME = 'content_vocabularies'
LEARNER_VOCABULARY_COLLECTION_NAME = 'learner_vocabularies'
LEARNER_LANGUAGE_COLLECTION_NAME = 'learner_languages'
MEANING_COLLECTION_NAME = 'meanings'
LEARNER_MEANING_COLLECTION_NAME = 'learner_meanings'
CONTENT_BOOKMARK_COLLECTION_NAME = 'content_bookmarks'
CONTENT_HISTORY_COLLECTION_NAME = 'content_history'

# MongoDB server error code for unique index violations
DUPLICATE_KEY_ERROR_CODE = 11000

# Collections whose unique indexes back the get-or-create paths
UNIQUE_INDEX_COLLECTIONS = (
    VOCABULARY_COLLECTION_NAME,
    CONTENT_LINK_COLLECTION_NAME,
    LEARNER_VOCABULARY_COLLECTION_NAME,
)
