"""In-memory implementation of VocabularyRepository for testing."""

from collections.abc import Callable

from domain.model.vocabulary import Vocabulary


class FakeVocabularyRepository:
    def __init__(self):
        self.store: dict[str, Vocabulary] = {}
        # Test hook: runs right before insert_many writes, to simulate a concurrent inserter.
        self.before_insert: Callable[[list[Vocabulary]], None] | None = None
        self.round_trips = 0

    def _find_by_identity(self, language: str, key: tuple[str, bool]) -> Vocabulary | None:
        for vocab in self.store.values():
            if vocab.language == language and vocab.key == key:
                return vocab
        return None

    def add(self, vocab: Vocabulary) -> Vocabulary:
        """Seed a row directly (tests)."""
        self.store[vocab.id] = vocab
        return vocab

    # ── VocabularyRepository ──────────────────────────────────

    def find_by_keys(self, language: str, keys: list[tuple[str, bool]]) -> list[Vocabulary]:
        self.round_trips += 1
        wanted = set(keys)
        return [v for v in self.store.values() if v.language == language and v.key in wanted]

    def insert_many(self, vocabs: list[Vocabulary]) -> list[Vocabulary]:
        self.round_trips += 1
        if self.before_insert:
            hook, self.before_insert = self.before_insert, None
            hook(vocabs)
        inserted = []
        for vocab in vocabs:
            if self._find_by_identity(vocab.language, vocab.key) is None:
                self.store[vocab.id] = vocab
                inserted.append(vocab)
        return inserted

    def find_phrases_in(self, language: str, text: str, separator: str) -> list[Vocabulary]:
        self.round_trips += 1
        if not text:
            return []
        haystack = f"{separator}{text}{separator}"
        return [
            v for v in self.store.values()
            if v.language == language and v.is_phrase and f"{separator}{v.normalized_text}{separator}" in haystack
        ]

    def get_by_id(self, vocabulary_id: str) -> Vocabulary | None:
        return self.store.get(vocabulary_id)

    def get_many(self, vocabulary_ids: list[str]) -> list[Vocabulary]:
        return [self.store[i] for i in vocabulary_ids if i in self.store]
