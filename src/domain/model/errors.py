"""Domain-level exceptions.

Services raise these errors to express business rule violations.
Callers (API handlers, workers) catch them and map them to their own
failure responses, e.g. ValidationError → 400, NotFoundError → 404.
"""


class DomainError(Exception):
    """Base class for all domain errors."""

    def __init__(self, message: str = "", rule: str | None = None, context: dict | None = None):
        self.rule = rule
        self.context = context or {}
        super().__init__(message)


class NotFoundError(DomainError):
    """Requested entity does not exist."""


class ValidationError(DomainError):
    """Input violates a business validation rule."""


class ConfigurationError(DomainError):
    """The system is not set up to serve this request. Not retryable."""


class StorageError(DomainError):
    """The storage layer failed mid-operation. Any open transaction was rolled back."""


class UnsupportedLanguageError(ConfigurationError):
    """No tokenizer is registered for the language."""

    def __init__(self, language_code: str):
        self.language_code = language_code
        super().__init__(
            f"No tokenizer registered for language '{language_code}'",
            rule="language_supported",
            context={"language": language_code},
        )


class InvalidLevelError(ValidationError):
    """Level value is outside VocabLevel."""

    def __init__(self, level):
        self.level = level
        super().__init__(
            f"Invalid vocabulary level: {level!r}",
            rule="level_in_enum",
            context={"level": level},
        )


class LanguageNotLearnedError(ValidationError):
    """Learner tried to track vocabulary in a language they are not learning."""

    def __init__(self, learner_id: str, vocabulary_id: str, language: str):
        self.learner_id = learner_id
        self.vocabulary_id = vocabulary_id
        self.language = language
        super().__init__(
            f"Learner is not learning '{language}'",
            rule="language_learned",
            context={"learner_id": learner_id, "vocabulary_id": vocabulary_id, "language": language},
        )
