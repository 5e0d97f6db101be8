"""
Search state machine for the analysis page.

States: idle -> loading -> loaded | failed. Every submitted search gets a new
request id; a response is only accepted while loading and only for the latest
id, so a slow response to an earlier search can't overwrite a newer one.
"""

import logging
from dataclasses import dataclass, replace
from typing import Optional

from analysis_requester import AnalysisFetchError
from movie_models import MovieAnalysis
from utils import ANALYSIS_ERROR_MESSAGE

logger = logging.getLogger(__name__)

IDLE = "idle"
LOADING = "loading"
LOADED = "loaded"
FAILED = "failed"


@dataclass(frozen=True)
class AnalysisState:
    status: str = IDLE
    title: str = ""
    request_id: int = 0
    analysis: Optional[MovieAnalysis] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class SearchSubmitted:
    title: str


@dataclass(frozen=True)
class ResponseArrived:
    request_id: int
    analysis: Optional[MovieAnalysis] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class SearchCleared:
    pass


def transition(state, event):
    """
    Compute the next state for an event.

    Args:
        state: Current AnalysisState
        event: SearchSubmitted, ResponseArrived or SearchCleared

    Returns:
        The next AnalysisState (the same object when the event is ignored)
    """
    if isinstance(event, SearchSubmitted):
        title = event.title.strip()
        if not title:
            return state
        return AnalysisState(status=LOADING, title=title, request_id=state.request_id + 1)

    if isinstance(event, ResponseArrived):
        if state.status != LOADING or event.request_id != state.request_id:
            logger.debug("Dropping stale response %d (latest is %d)", event.request_id, state.request_id)
            return state
        if event.error is not None or event.analysis is None:
            return replace(state, status=FAILED, error=event.error or ANALYSIS_ERROR_MESSAGE)
        return replace(state, status=LOADED, analysis=event.analysis)

    if isinstance(event, SearchCleared):
        # Keep the counter so in-flight responses stay stale
        return AnalysisState(request_id=state.request_id)

    raise TypeError(f"Unknown event: {event!r}")


class AnalysisSession:
    """Single owner of the page's analysis state."""

    def __init__(self, state=None):
        self.state = state or AnalysisState()

    def dispatch(self, event):
        self.state = transition(self.state, event)
        return self.state

    def submit(self, title):
        """Start a search and return its request id, or None for a blank title."""
        before = self.state
        self.dispatch(SearchSubmitted(title))
        if self.state is before:
            return None
        return self.state.request_id

    def receive(self, request_id, analysis=None, error=None):
        return self.dispatch(ResponseArrived(request_id, analysis=analysis, error=error))

    def clear(self):
        return self.dispatch(SearchCleared())

    def run(self, title, fetch):
        """
        Submit a search, call fetch(title) and record the outcome.

        Any fetch failure leaves the session in the failed state; errors other
        than AnalysisFetchError are re-raised after that.

        Args:
            title: Movie title
            fetch: Callable returning a MovieAnalysis or raising AnalysisFetchError

        Returns:
            The resulting AnalysisState
        """
        request_id = self.submit(title)
        if request_id is None:
            return self.state
        try:
            analysis = fetch(self.state.title)
        except AnalysisFetchError:
            return self.receive(request_id, error=ANALYSIS_ERROR_MESSAGE)
        except Exception:
            logger.exception("Unexpected error while analysing %r", self.state.title)
            self.receive(request_id, error=ANALYSIS_ERROR_MESSAGE)
            raise
        return self.receive(request_id, analysis=analysis)
