"""
Data models for prompt dataset generation.

A run produces PersonEntry records, expands PromptTemplates against them and
emits one RenderedPrompt per template. Each template carries exactly one
selection variant describing which dataset values fill its placeholders.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple, Union


class PromptDataError(Exception):
    """Base exception for prompt dataset generation."""
    pass


class ConfigError(PromptDataError):
    """Raised when configuration values or files are invalid."""
    pass


class NoCitiesAvailable(PromptDataError):
    """Raised when no city could be fetched from the city API."""
    pass


class EmptyCityPool(PromptDataError):
    """Raised when entries are requested without any city to assign."""
    pass


class EmptyJobCatalog(PromptDataError):
    """Raised when entries are requested without any job title to assign."""
    pass


class NoEntriesGenerated(PromptDataError):
    """Raised when a generation run produced zero entries."""
    pass


class TemplateRequirementError(PromptDataError):
    """Raised when the dataset cannot satisfy a template's selection."""
    pass


class TemplateRenderError(PromptDataError):
    """Raised when a template fails to parse or substitute."""
    pass


@dataclass(frozen=True)
class PersonEntry:
    """One synthetic person record."""
    name: str
    age: int
    city: str
    job_title: str

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "age": self.age,
            "city": self.city,
            "job_title": self.job_title,
        }


@dataclass
class FetchResult:
    """Cities collected by a bounded fetch loop."""
    cities: List[str] = field(default_factory=list)
    attempts: int = 0


@dataclass
class GenerationResult:
    """Entries collected by a bounded generation loop."""
    entries: List[PersonEntry] = field(default_factory=list)
    attempts: int = 0


class SelectionMode(Enum):
    """How a template picks dataset values for its placeholders."""
    FIXED_COUNT = "fixed_count"
    REVERSE_LOOKUP = "reverse_lookup"
    COMBINED_REQUEST = "combined_request"
    CONFIRMATION = "confirmation"
    INDEX_PAIR = "index_pair"
    SEQUENTIAL_RUN = "sequential_run"
    CITY_FILTER = "city_filter"
    JOB_FILTER = "job_filter"
    AGE_CITY_FILTER = "age_city_filter"
    COUNT_FILTER = "count_filter"


@dataclass(frozen=True)
class FixedCount:
    """Sample `count` names from the dataset."""
    count: int
    mode = SelectionMode.FIXED_COUNT

    @property
    def min_entries(self) -> int:
        return self.count


@dataclass(frozen=True)
class ReverseLookup:
    """Sample names plus two ages to look names up by."""
    count: int = 2
    mode = SelectionMode.REVERSE_LOOKUP

    @property
    def min_entries(self) -> int:
        return 2


@dataclass(frozen=True)
class CombinedRequest:
    """Sample names plus two name lookups and one age lookup."""
    count: int = 3
    mode = SelectionMode.COMBINED_REQUEST

    @property
    def min_entries(self) -> int:
        return 3


@dataclass(frozen=True)
class Confirmation:
    """
    Sample names and ask about a decoy name absent from the dataset.

    The name sample shrinks to the whole dataset when it holds fewer than
    `count` entries.
    """
    count: int
    decoy_name: str
    mode = SelectionMode.CONFIRMATION

    @property
    def min_entries(self) -> int:
        return 1


@dataclass(frozen=True)
class IndexPair:
    """
    Two fixed dataset positions.

    Negative positions count from the end of the dataset, so IndexPair(1, -2)
    picks the second and the second-to-last entry.
    """
    first: int
    second: int
    mode = SelectionMode.INDEX_PAIR


@dataclass(frozen=True)
class SequentialRun:
    """A contiguous run of names starting at a random offset."""
    length: int = 5
    mode = SelectionMode.SEQUENTIAL_RUN


@dataclass(frozen=True)
class CityFilter:
    mode = SelectionMode.CITY_FILTER


@dataclass(frozen=True)
class JobFilter:
    mode = SelectionMode.JOB_FILTER


@dataclass(frozen=True)
class AgeCityFilter:
    """City filter combined with an age window around an existing age."""
    window: int = 5
    mode = SelectionMode.AGE_CITY_FILTER


@dataclass(frozen=True)
class CountFilter:
    mode = SelectionMode.COUNT_FILTER


Selection = Union[
    FixedCount,
    ReverseLookup,
    CombinedRequest,
    Confirmation,
    IndexPair,
    SequentialRun,
    CityFilter,
    JobFilter,
    AgeCityFilter,
    CountFilter,
]

FIXED_COUNT_SELECTIONS: Tuple[type, ...] = (
    FixedCount,
    ReverseLookup,
    CombinedRequest,
    Confirmation,
)


@dataclass(frozen=True)
class PromptTemplate:
    """A named text template with its selection variant."""
    desc: str
    template: str
    selection: Selection


@dataclass(frozen=True)
class RenderedPrompt:
    """The text produced by expanding one template against the dataset."""
    desc: str
    text: str

    @property
    def filename(self) -> str:
        return f"prompt_{self.desc}.txt"
