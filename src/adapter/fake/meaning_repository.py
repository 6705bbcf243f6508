"""In-memory implementation of MeaningRepository for testing."""

from domain.model.learner_vocabulary import Meaning


class FakeMeaningRepository:
    def __init__(self):
        self.store: list[tuple[str, Meaning]] = []
        self.calls = 0

    def add(self, learner_id: str, meaning: Meaning) -> None:
        self.store.append((learner_id, meaning))

    def find_learner_meanings(self, learner_id: str, vocabulary_ids: list[str]) -> dict[str, list[Meaning]]:
        self.calls += 1
        wanted = set(vocabulary_ids)
        result: dict[str, list[Meaning]] = {}
        for owner, meaning in self.store:
            if owner == learner_id and meaning.vocabulary_id in wanted:
                result.setdefault(meaning.vocabulary_id, []).append(meaning)
        return result
