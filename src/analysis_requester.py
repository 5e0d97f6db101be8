"""
Gemini requests for a movie's critical consensus, grounded with Google Search.
"""

import logging

from google import genai
from google.genai import types

from movie_models import AnalysisRequest, RawCitation, RawModelResponse
from response_parser import parse_ai_response
from utils import (
    ANALYSIS_TEMPERATURE,
    GEMINI_MODEL,
    NO_ANALYSIS_TEXT,
    get_gemini_api_key,
)

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = (
    'Provide a comprehensive critical consensus and review summary for the movie "{title}".\n'
    "Identify the general sentiment, key strengths (pros), and common criticisms (cons).\n"
    "Return the result in a clear structure. Include the release year if possible."
)


class AnalysisFetchError(Exception):
    """Raised when the model call fails for any reason (network, auth, quota, bad response)."""


def build_analysis_prompt(title):
    """Fill the consensus prompt template with a movie title."""
    return PROMPT_TEMPLATE.format(title=title)


def build_generation_config():
    """Generation settings: Google Search grounding at temperature 0.7."""
    return types.GenerateContentConfig(
        tools=[types.Tool(google_search=types.GoogleSearch())],
        temperature=ANALYSIS_TEMPERATURE,
    )


def extract_web_citations(response):
    """
    Collect the first candidate's grounding chunks that point at a web page.

    Chunks without a web entry are dropped.

    Args:
        response: GenerateContentResponse from the SDK

    Returns:
        Tuple of RawCitation in response order
    """
    candidates = response.candidates or []
    if not candidates:
        return ()
    metadata = candidates[0].grounding_metadata
    chunks = (metadata.grounding_chunks if metadata is not None else None) or []

    citations = []
    for chunk in chunks:
        if chunk.web is None:
            continue
        citations.append(RawCitation(title=chunk.web.title, uri=chunk.web.uri))
    return tuple(citations)


def request_movie_analysis(request, api_key=None, model=GEMINI_MODEL):
    """
    Ask the model for a movie's critical consensus.

    No retries are attempted. The caller decides what to show the user.

    Args:
        request: AnalysisRequest for the movie
        api_key: Gemini API key; looked up from secrets / environment if None
        model: Model identifier

    Returns:
        RawModelResponse with the text and web citations

    Raises:
        AnalysisFetchError: on any client, transport or response-shape failure
    """
    key = api_key if api_key is not None else get_gemini_api_key()

    logger.info("Requesting analysis for %r from %s", request.title, model)
    try:
        client = genai.Client(api_key=key)
        response = client.models.generate_content(
            model=model,
            contents=build_analysis_prompt(request.title),
            config=build_generation_config(),
        )
        text = response.text or NO_ANALYSIS_TEXT
        citations = extract_web_citations(response)
    except Exception as e:
        logger.error("Error fetching movie analysis for %r: %s", request.title, e)
        raise AnalysisFetchError(f"Analysis fetch failed for {request.title!r}") from e

    return RawModelResponse(text=text, citations=citations)


def get_movie_analysis(title, api_key=None):
    """
    Fetch and parse the critical consensus for a movie title.

    Args:
        title: Movie title, must not be blank
        api_key: Optional Gemini API key override

    Returns:
        MovieAnalysis
    """
    request = AnalysisRequest(title=title)
    raw = request_movie_analysis(request, api_key=api_key)
    return parse_ai_response(raw.text, raw.citations)
