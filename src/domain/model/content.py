"""Content references and the read-side views built over them.

Content items themselves (texts, lessons) are owned by the content-authoring
part of the platform; this core only needs to know which item it is
talking about.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from domain.model.vocab_level import VocabLevel, empty_histogram

if TYPE_CHECKING:
    from domain.model.learner_vocabulary import LearnerVocabulary
    from domain.model.vocabulary import Vocabulary


class ContentKind(str, Enum):
    TEXT = 'text'
    LESSON = 'lesson'


@dataclass(frozen=True)
class ContentRef:
    """Identifies one content item."""
    kind: ContentKind
    id: str

    @staticmethod
    def text(content_id: str) -> ContentRef:
        return ContentRef(ContentKind.TEXT, content_id)

    @staticmethod
    def lesson(content_id: str) -> ContentRef:
        return ContentRef(ContentKind.LESSON, content_id)


# ── Value Objects ────────────────────────────────────────


@dataclass(frozen=True)
class LinkDelta:
    """Outcome of reconciling a content item's links against its text."""
    added: frozenset[str] = frozenset()
    removed: frozenset[str] = frozenset()
    parsed_text: str = ""

    @property
    def is_noop(self) -> bool:
        return not self.added and not self.removed


@dataclass
class ContentUserData:
    """Per-learner overlay for one content item."""
    vocabs_by_level: dict[VocabLevel, int] = field(default_factory=empty_histogram)
    is_bookmarked: bool = False
    is_viewed: bool = False


@dataclass
class ContentVocabulary:
    """A vocabulary linked to a content item, with the learner's row if tracked."""
    vocabulary: Vocabulary
    learner_vocabulary: LearnerVocabulary | None = None

    @property
    def level(self) -> VocabLevel:
        if self.learner_vocabulary is None:
            return VocabLevel.untracked()
        return self.learner_vocabulary.level
