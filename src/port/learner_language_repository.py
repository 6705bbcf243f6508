"""Port for the languages a learner is actively learning."""

from typing import Protocol


class LearnerLanguageRepository(Protocol):
    def get_languages(self, learner_id: str) -> set[str]:
        """Language codes the learner is learning."""
        ...
