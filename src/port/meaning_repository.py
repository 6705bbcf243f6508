"""Port for learner meanings (owned by the meanings collaborator)."""

from typing import Protocol

from domain.model.learner_vocabulary import Meaning


class MeaningRepository(Protocol):
    def find_learner_meanings(self, learner_id: str, vocabulary_ids: list[str]) -> dict[str, list[Meaning]]:
        """Meanings the learner is learning, keyed by vocabulary id, in one lookup."""
        ...
