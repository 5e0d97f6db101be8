"""
Data records shared by the requester, the parser and the UI.

Every record is a frozen dataclass; list-valued fields are tuples so that a
finished analysis can't be mutated after it is handed to the page.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class Sentiment(str, Enum):
    POSITIVE = "Positive"
    MIXED = "Mixed"
    NEGATIVE = "Negative"


@dataclass(frozen=True)
class AnalysisRequest:
    """A single search for a movie title."""

    title: str

    def __post_init__(self):
        if not self.title or not self.title.strip():
            raise ValueError("Movie title must not be empty")


@dataclass(frozen=True)
class RawCitation:
    """One web grounding chunk as returned by the model."""

    title: Optional[str] = None
    uri: Optional[str] = None


@dataclass(frozen=True)
class RawModelResponse:
    text: str
    citations: Tuple[RawCitation, ...] = ()


@dataclass(frozen=True)
class GroundingSource:
    title: str
    uri: str


@dataclass(frozen=True)
class MovieAnalysis:
    """Structured critical consensus for one movie."""

    summary: str
    pros: Tuple[str, ...] = ()
    cons: Tuple[str, ...] = ()
    sentiment: Sentiment = Sentiment.MIXED
    sources: Tuple[GroundingSource, ...] = ()


@dataclass(frozen=True)
class Movie:
    """Display record for the trending grid and the detail view."""

    id: str
    title: str
    year: str
    rating: str
    poster: str
    description: str
    genres: Tuple[str, ...] = field(default_factory=tuple)
