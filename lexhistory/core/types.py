"""Core type definitions for the lookup history.

Provides immutable domain models with strict typing.
All entities are Pydantic models for validation and serialization.

A translation is one of two shapes, tagged by ``kind``. The tag is set when
the upstream parser builds the value; everything downstream matches on it.
"""

from datetime import datetime
from typing import Annotated, Any, Literal, Optional, Union
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    TypeAdapter,
    ValidationError,
)

from lexhistory.errors import InvalidTranslationError


class PronunciationDetail(BaseModel):
    """One labelled pronunciation variant (e.g. UK, US)."""
    model_config = ConfigDict(frozen=True)

    ipa: list[str] = Field(min_length=1)
    tts_code: str


# Either a single phonetic string or labelled variants
Pronunciation = Union[str, dict[str, PronunciationDetail]]


class ExampleSentence(BaseModel):
    """Usage example, optionally romanized and translated."""
    model_config = ConfigDict(frozen=True)

    text: str
    pronunciation: Optional[str] = None  # pinyin, romaji...
    translation: Optional[str] = None


class SynonymGroup(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    items: list[str]


class IdiomEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    idiom: str
    meaning: str
    examples: list[ExampleSentence] = Field(default_factory=list)


class IdiomGroup(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    items: list[IdiomEntry]


class PhrasalVerbEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    phrasal_verb: str
    meaning: str
    examples: list[ExampleSentence] = Field(default_factory=list)


class PhrasalVerbGroup(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    items: list[PhrasalVerbEntry]


class Meaning(BaseModel):
    """One sense of a dictionary word."""
    model_config = ConfigDict(frozen=True)

    pronunciation: Pronunciation
    part_of_speech: str
    definition: str
    note: Optional[str] = None
    synonyms: Optional[SynonymGroup] = None
    idioms: Optional[IdiomGroup] = None
    phrasal_verbs: Optional[PhrasalVerbGroup] = None
    examples: list[ExampleSentence] = Field(min_length=1)


class BaseTranslation(BaseModel):
    """Language metadata shared by both translation shapes."""
    model_config = ConfigDict(frozen=True)

    source_language_code: str  # ISO 639-1
    translated_language_code: str  # ISO 639-1
    source_language_main_country_code: Optional[str] = None  # ISO 3166-1 alpha-2
    translated_language_main_country_code: Optional[str] = None
    source_tts_language_code: Optional[str] = None  # BCP 47
    translated_tts_language_code: Optional[str] = None


class DictionaryEntry(BaseTranslation):
    """Single word looked up in dictionary mode."""

    kind: Literal["dictionary"] = "dictionary"
    word: str
    verb_forms: Optional[list[str]] = None
    meanings: list[Meaning] = Field(min_length=1)


class SentenceTranslation(BaseTranslation):
    """Free text translated as a whole."""

    kind: Literal["sentence"] = "sentence"
    text: str
    translation: str


def _translation_kind(value: Any) -> Optional[str]:
    """Resolve the union tag.

    Records written before the tag existed carry no ``kind``; they are told
    apart here, once, by the dictionary-only ``word`` field.
    """
    if isinstance(value, dict):
        kind = value.get("kind")
        if kind:
            return kind
        return "dictionary" if "word" in value else "sentence"
    return getattr(value, "kind", None)


ParsedTranslation = Annotated[
    Union[
        Annotated[DictionaryEntry, Tag("dictionary")],
        Annotated[SentenceTranslation, Tag("sentence")],
    ],
    Discriminator(_translation_kind),
]


class HistoryEntry(BaseModel):
    """One persisted lookup with its bookkeeping metadata."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    timestamp: datetime
    pinned_at: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices("pinned_at", "pinnedAt"),
    )
    translation: ParsedTranslation

    @property
    def is_pinned(self) -> bool:
        return self.pinned_at is not None


translation_adapter: TypeAdapter[ParsedTranslation] = TypeAdapter(ParsedTranslation)


def parse_translation(data: Union[dict, DictionaryEntry, SentenceTranslation]):
    """Build a tagged translation from upstream output.

    Model instances pass through untouched.

    Raises:
        InvalidTranslationError: payload fits neither shape
    """
    if isinstance(data, (DictionaryEntry, SentenceTranslation)):
        return data
    try:
        return translation_adapter.validate_python(data)
    except ValidationError as e:
        first = e.errors()[0] if e.errors() else {}
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        raise InvalidTranslationError(str(first.get("msg", e)), field=field) from e
