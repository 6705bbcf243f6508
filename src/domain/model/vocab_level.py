"""Vocabulary familiarity levels.

A level is a user-editable label, not a spaced-repetition state: any level
can be set from any other, including to and from IGNORED.
"""

from enum import IntEnum

from domain.model.errors import InvalidLevelError


class VocabLevel(IntEnum):
    IGNORED = -1
    NEW = 0
    LEVEL_1 = 1
    LEVEL_2 = 2
    LEVEL_3 = 3
    LEVEL_4 = 4
    LEARNED = 5
    KNOWN = 6

    # ── rules ─────────────────────────────────────────────

    @classmethod
    def default(cls) -> 'VocabLevel':
        """Level of a freshly tracked vocabulary (lowest tracked, non-ignored tier)."""
        return cls.LEVEL_1

    @classmethod
    def untracked(cls) -> 'VocabLevel':
        """Bucket that vocabulary without a learner row is counted under."""
        return cls.NEW

    @classmethod
    def parse(cls, value) -> 'VocabLevel':
        """Coerce an int, numeric string or member name into a VocabLevel.

        Raises InvalidLevelError for anything else (bools included).
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise InvalidLevelError(value)
        if isinstance(value, str):
            name = value.strip().upper()
            if name in cls.__members__:
                return cls[name]
            try:
                value = int(value)
            except ValueError:
                raise InvalidLevelError(value) from None
        try:
            return cls(value)
        except (ValueError, TypeError):
            raise InvalidLevelError(value) from None


def empty_histogram() -> dict[VocabLevel, int]:
    """Zero count for every level."""
    return {level: 0 for level in VocabLevel}
