"""Query and reporting types.

Results of parsing a search query and of aggregating the history.
"""

from enum import Enum
from pydantic import BaseModel, ConfigDict, Field


class SearchOperatorType(str, Enum):
    """Which language code an operator constrains."""
    SOURCE = "source"
    TARGET = "target"


class SearchOperator(BaseModel):
    """Exact language filter extracted from a query (``source:en``)."""
    model_config = ConfigDict(frozen=True)

    type: SearchOperatorType
    value: str  # lowercased language code


class ParsedQuery(BaseModel):
    """Structured operators plus the free text left over."""
    model_config = ConfigDict(frozen=True)

    operators: list[SearchOperator] = Field(default_factory=list)
    text: str = ""


class LanguageStat(BaseModel):
    """Frequency of one language code."""
    model_config = ConfigDict(frozen=True)

    code: str
    count: int = Field(ge=0)
    percentage: float = Field(ge=0.0, le=100.0)


class LanguageAnalysis(BaseModel):
    """Source/target language distribution over the whole history."""
    model_config = ConfigDict(frozen=True)

    source_languages: list[LanguageStat] = Field(default_factory=list)
    target_languages: list[LanguageStat] = Field(default_factory=list)
    total_entries: int = 0


class UsageReport(BaseModel):
    """Serialized size of a set of entries, plus the backend's own figure."""
    model_config = ConfigDict(frozen=True)

    entry_count: int
    size_bytes: int
    size_value: str  # formatted to two decimals
    size_unit: str  # B, KB, MB, GB
    stored_bytes: int = 0  # as reported by the backend
