"""Port for learner activity on content (bookmarks, view history)."""

from typing import Protocol

from domain.model.content import ContentRef


class ContentActivityRepository(Protocol):
    def find_bookmarked(self, learner_id: str, contents: list[ContentRef]) -> set[ContentRef]:
        """Subset of contents the learner has bookmarked."""
        ...

    def find_viewed(self, learner_id: str, contents: list[ContentRef]) -> set[ContentRef]:
        """Subset of contents the learner has opened before."""
        ...
