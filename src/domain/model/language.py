"""Language Value Object.

Reference data for the languages the platform knows about. A language is
supported when a tokenizer is registered for it; unsupported languages can
still be listed but never indexed.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Language:
    """Immutable value object representing a language."""

    code: str
    name: str
    is_supported: bool = True


# ── Language instances ────────────────────────────────────────

ENGLISH = Language(code="en", name="English")
GERMAN = Language(code="de", name="German")
FRENCH = Language(code="fr", name="French")
SPANISH = Language(code="es", name="Spanish")
ITALIAN = Language(code="it", name="Italian")
PORTUGUESE = Language(code="pt", name="Portuguese")
DUTCH = Language(code="nl", name="Dutch")
SWEDISH = Language(code="sv", name="Swedish")
DANISH = Language(code="da", name="Danish")
NORWEGIAN = Language(code="no", name="Norwegian")
POLISH = Language(code="pl", name="Polish")
CZECH = Language(code="cs", name="Czech")
RUSSIAN = Language(code="ru", name="Russian")
UKRAINIAN = Language(code="uk", name="Ukrainian")
TURKISH = Language(code="tr", name="Turkish")
FINNISH = Language(code="fi", name="Finnish")
CHINESE = Language(code="zh", name="Chinese")
JAPANESE = Language(code="ja", name="Japanese", is_supported=False)
KOREAN = Language(code="ko", name="Korean", is_supported=False)


# ── Registry ──────────────────────────────────────────────────

LANGUAGES: dict[str, Language] = {
    lang.code: lang
    for lang in (
        ENGLISH, GERMAN, FRENCH, SPANISH, ITALIAN, PORTUGUESE, DUTCH,
        SWEDISH, DANISH, NORWEGIAN, POLISH, CZECH, RUSSIAN, UKRAINIAN,
        TURKISH, FINNISH, CHINESE, JAPANESE, KOREAN,
    )
}


def get_language(code: str) -> Language | None:
    """Look up a Language by its ISO 639-1 code (e.g., "de").

    Returns None for unknown codes.
    """
    return LANGUAGES.get(code)


def supported_languages() -> list[Language]:
    return [lang for lang in LANGUAGES.values() if lang.is_supported]
