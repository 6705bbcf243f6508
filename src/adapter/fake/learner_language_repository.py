"""In-memory implementation of LearnerLanguageRepository for testing."""


class FakeLearnerLanguageRepository:
    def __init__(self):
        self.store: dict[str, set[str]] = {}

    def add(self, learner_id: str, *languages: str) -> None:
        self.store.setdefault(learner_id, set()).update(languages)

    def get_languages(self, learner_id: str) -> set[str]:
        return set(self.store.get(learner_id, set()))
