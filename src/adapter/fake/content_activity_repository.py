"""In-memory implementation of ContentActivityRepository for testing."""

from domain.model.content import ContentRef


class FakeContentActivityRepository:
    def __init__(self):
        self.bookmarks: set[tuple[str, ContentRef]] = set()
        self.views: set[tuple[str, ContentRef]] = set()

    def bookmark(self, learner_id: str, content: ContentRef) -> None:
        self.bookmarks.add((learner_id, content))

    def view(self, learner_id: str, content: ContentRef) -> None:
        self.views.add((learner_id, content))

    def find_bookmarked(self, learner_id: str, contents: list[ContentRef]) -> set[ContentRef]:
        return {c for c in contents if (learner_id, c) in self.bookmarks}

    def find_viewed(self, learner_id: str, contents: list[ContentRef]) -> set[ContentRef]:
        return {c for c in contents if (learner_id, c) in self.views}
