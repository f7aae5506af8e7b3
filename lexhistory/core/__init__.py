"""Core domain models and types.

Barrel export for clean imports across the application.
"""

from .types import (
    PronunciationDetail,
    ExampleSentence,
    SynonymGroup,
    IdiomEntry,
    IdiomGroup,
    PhrasalVerbEntry,
    PhrasalVerbGroup,
    Meaning,
    DictionaryEntry,
    SentenceTranslation,
    ParsedTranslation,
    HistoryEntry,
    parse_translation,
)
from .analysis import (
    SearchOperatorType,
    SearchOperator,
    ParsedQuery,
    LanguageStat,
    LanguageAnalysis,
    UsageReport,
)
from .contracts import IKeyValueBackend

__all__ = [
    "PronunciationDetail",
    "ExampleSentence",
    "SynonymGroup",
    "IdiomEntry",
    "IdiomGroup",
    "PhrasalVerbEntry",
    "PhrasalVerbGroup",
    "Meaning",
    "DictionaryEntry",
    "SentenceTranslation",
    "ParsedTranslation",
    "HistoryEntry",
    "parse_translation",
    "SearchOperatorType",
    "SearchOperator",
    "ParsedQuery",
    "LanguageStat",
    "LanguageAnalysis",
    "UsageReport",
    "IKeyValueBackend",
]
