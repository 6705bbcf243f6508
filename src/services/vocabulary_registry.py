"""Vocabulary registry: canonical, deduplicated vocabulary per language.

Rows are created lazily the first time a token is seen and never deleted.
Uniqueness of (language, normalized_text, is_phrase) is enforced by storage;
this module only has to re-read keys it lost to a concurrent insert.
"""

import logging

from adapter.tokenizer.registry import TokenizerRegistry
from domain.model.errors import NotFoundError, StorageError, ValidationError
from domain.model.vocabulary import Token, Vocabulary
from port.vocabulary_repository import VocabularyRepository

logger = logging.getLogger(__name__)


def ensure_batch(
    repo: VocabularyRepository,
    tokenizers: TokenizerRegistry,
    language: str,
    tokens: list[Token],
) -> dict[Token, str]:
    """Map every token to the id of its canonical vocabulary row, creating missing rows.

    Round-trips: one read, one unordered bulk insert for missing keys, and
    one re-read only if a concurrent writer won some of those keys.

    Raises:
        UnsupportedLanguageError: no tokenizer for the language.
        StorageError: storage failed, or a lost key could not be re-read.
    """
    tokenizers.resolve(language)
    if not tokens:
        return {}

    unique = list(dict.fromkeys(tokens))
    keys = [token.key for token in unique]
    by_key: dict[tuple[str, bool], Vocabulary] = {v.key: v for v in repo.find_by_keys(language, keys)}

    missing = [Vocabulary.create(language, token) for token in unique if token.key not in by_key]
    if missing:
        inserted = repo.insert_many(missing)
        by_key.update({v.key: v for v in inserted})

        lost = [v.key for v in missing if v.key not in by_key]
        if lost:
            logger.info("Re-reading vocabulary lost to concurrent insert", extra={"language": language, "count": len(lost)})
            by_key.update({v.key: v for v in repo.find_by_keys(language, lost)})
            unresolved = [key for key in lost if key not in by_key]
            if unresolved:
                raise StorageError(
                    "Vocabulary conflict could not be resolved",
                    context={"language": language, "keys": unresolved},
                )
        logger.info("Vocabulary created", extra={"language": language, "count": len(inserted)})

    return {token: by_key[token.key].id for token in unique}


def ensure(
    repo: VocabularyRepository,
    tokenizers: TokenizerRegistry,
    language: str,
    tokens: list[Token],
) -> dict[Token, str]:
    """Alias of ensure_batch for single-call use."""
    return ensure_batch(repo, tokenizers, language, tokens)


def ensure_phrase(
    repo: VocabularyRepository,
    tokenizers: TokenizerRegistry,
    language: str,
    text: str,
    is_phrase: bool = False,
) -> Vocabulary:
    """Get or create the vocabulary row for a learner-entered word or phrase.

    Raises:
        ValidationError: the text has no words, or spans several words
            without is_phrase set.
    """
    tokenizer = tokenizers.resolve(language)
    token = tokenizer.phrase(text)
    if token is None:
        raise ValidationError("Vocabulary text has no words", rule="has_words", context={"text": text})
    if token.is_phrase and not is_phrase:
        raise ValidationError(
            "Text has more than one word but is not marked as a phrase",
            rule="phrase_flag",
            context={"text": text},
        )
    if token.is_phrase:
        token = Token.of(token.text, is_phrase=True, parsed_text=tokenizer.parse_text(text))

    vocabulary_id = ensure_batch(repo, tokenizers, language, [token])[token]
    vocab = repo.get_by_id(vocabulary_id)
    if vocab is None:
        raise StorageError("Vocabulary vanished after ensure", context={"vocabularyId": vocabulary_id})
    return vocab


def get_vocabulary(repo: VocabularyRepository, vocabulary_id: str) -> Vocabulary:
    """Raises NotFoundError if the vocabulary does not exist."""
    vocab = repo.get_by_id(vocabulary_id)
    if vocab is None:
        raise NotFoundError(f"Vocabulary {vocabulary_id} not found", context={"vocabularyId": vocabulary_id})
    return vocab


def get_vocabularies(repo: VocabularyRepository, vocabulary_ids: list[str]) -> list[Vocabulary]:
    """Rows for the ids that exist, in request order."""
    by_id = {v.id: v for v in repo.get_many(list(dict.fromkeys(vocabulary_ids)))}
    return [by_id[i] for i in dict.fromkeys(vocabulary_ids) if i in by_id]
