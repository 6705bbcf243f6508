"""Port for content ↔ vocabulary link data access."""

from typing import Any, Protocol

from domain.model.content import ContentRef


class ContentLinkRepository(Protocol):
    """Protocol for the (content item, vocabulary) join.

    Write methods accept the session of an open unit of work so they run
    inside its transaction.
    """

    def get_vocabulary_ids(self, content: ContentRef, session: Any = None) -> set[str]:
        """Current link set of a content item."""
        ...

    def add_links(self, content: ContentRef, language: str, vocabulary_ids: set[str], session: Any = None) -> int:
        """Insert links. Returns number inserted."""
        ...

    def remove_links(self, content: ContentRef, vocabulary_ids: set[str], session: Any = None) -> int:
        """Delete the given links. Returns number deleted."""
        ...

    def delete_for_content(self, content: ContentRef, session: Any = None) -> int:
        """Delete every link of a content item. Returns number deleted."""
        ...

    # ── aggregate queries ─────────────────────────────────

    def count_by_level(self, contents: list[ContentRef], learner_id: str) -> dict[ContentRef, dict[int, int]]:
        """Count each content item's linked vocabulary per learner level.

        Single query: links left-joined with the learner's rows; vocabulary
        the learner does not track is counted under VocabLevel.NEW. Items
        without links are absent from the result.
        """
        ...

    def count_by_level_grouped(
        self,
        groups: dict[str, list[ContentRef]],
        learner_id: str,
    ) -> dict[str, dict[int, int]]:
        """Like count_by_level, but per group, counting each distinct vocabulary once per group."""
        ...

    def count_content(self, vocabulary_ids: list[str]) -> dict[str, int]:
        """Number of content items linking each vocabulary (absent = 0)."""
        ...
