"""Learner knowledge-graph models."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from domain.model.errors import ValidationError
from domain.model.vocab_level import VocabLevel
from domain.model.vocabulary import Vocabulary

NOTES_MAX_LENGTH = 2048
LIST_LIMIT_MAX = 200


@dataclass(frozen=True)
class Meaning:
    """A learner-authored meaning of a vocabulary (owned by the meanings collaborator)."""
    id: str
    vocabulary_id: str
    text: str
    language: str
    added_by: str | None = None


@dataclass
class LearnerVocabulary:
    """How well one learner knows one vocabulary."""

    IDENTITY_FIELDS = ('learner_id', 'vocabulary_id')

    id: str
    learner_id: str
    vocabulary_id: str
    language: str
    text: str
    level: VocabLevel
    created_at: datetime
    updated_at: datetime
    is_phrase: bool = False
    notes: str = ""
    meanings: list[Meaning] = field(default_factory=list)

    # ── factory ───────────────────────────────────────────

    @staticmethod
    def create(learner_id: str, vocabulary: Vocabulary) -> 'LearnerVocabulary':
        """New row at the default level."""
        now = datetime.now(timezone.utc)
        return LearnerVocabulary(
            id=str(uuid.uuid4()),
            learner_id=learner_id,
            vocabulary_id=vocabulary.id,
            language=vocabulary.language,
            text=vocabulary.text,
            is_phrase=vocabulary.is_phrase,
            level=VocabLevel.default(),
            created_at=now,
            updated_at=now,
        )

    # ── queries ───────────────────────────────────────────

    @property
    def identity(self) -> dict:
        """Fields that define uniqueness."""
        return {f: getattr(self, f) for f in self.IDENTITY_FIELDS}

    @property
    def is_ignored(self) -> bool:
        return self.level == VocabLevel.IGNORED


def validate_notes(notes: str) -> str:
    if not isinstance(notes, str):
        raise ValidationError("Notes must be a string", rule="notes_type")
    if len(notes) > NOTES_MAX_LENGTH:
        raise ValidationError(
            f"Notes must be at most {NOTES_MAX_LENGTH} characters",
            rule="notes_length",
            context={"length": len(notes)},
        )
    return notes


# ── Filters ──────────────────────────────────────────────


class LearnerVocabularySort(str, Enum):
    TEXT = 'text'
    CREATED_AT = 'created_at'
    UPDATED_AT = 'updated_at'
    LEVEL = 'level'


@dataclass(frozen=True)
class LearnerVocabularyFilter:
    """Filter axes for listing a learner's vocabulary."""
    language: str | None = None
    levels: tuple[VocabLevel, ...] | None = None
    is_phrase: bool | None = None
    search: str | None = None
    sort_by: LearnerVocabularySort = LearnerVocabularySort.TEXT
    descending: bool = False
    skip: int = 0
    limit: int = 50

    def __post_init__(self):
        if not isinstance(self.skip, int) or self.skip < 0:
            raise ValidationError("skip must be a non-negative integer", rule="skip_range", context={"skip": self.skip})
        if not isinstance(self.limit, int) or not 1 <= self.limit <= LIST_LIMIT_MAX:
            raise ValidationError(
                f"limit must be between 1 and {LIST_LIMIT_MAX}",
                rule="limit_range",
                context={"limit": self.limit},
            )


@dataclass(frozen=True)
class SavedVocabularyCount:
    """Result row of count_saved(); language is None unless grouped."""
    count: int
    language: str | None = None
