"""
Heuristic parser turning the model's free-form review text into a MovieAnalysis.
"""

import re

from movie_models import GroundingSource, MovieAnalysis, Sentiment
from utils import MAX_LIST_ITEMS, SUMMARY_FALLBACK_CHARS

# Header keywords, matched as case-insensitive substrings
PROS_KEYWORDS = ("pros", "strengths", "what they liked")
CONS_KEYWORDS = ("cons", "weaknesses", "criticisms")

BULLET_PATTERN = re.compile(r"^(?:[-*]|\d+\.)")
BULLET_PREFIX = re.compile(r"^[-*\d.]+\s*")

SUMMARY = "summary"
PROS = "pros"
CONS = "cons"


def detect_section(line):
    """
    Return the section a header line switches to, or None.

    Args:
        line: One line of model output

    Returns:
        'pros', 'cons' or None
    """
    lower_line = line.lower()
    if any(keyword in lower_line for keyword in PROS_KEYWORDS):
        return PROS
    elif any(keyword in lower_line for keyword in CONS_KEYWORDS):
        return CONS
    return None


def strip_bullet(line):
    """
    Strip a leading list marker ('-', '*' or '1.') from a line.

    Args:
        line: One line of model output

    Returns:
        The item text, or None when the line is not a list item
    """
    stripped = line.strip()
    if not BULLET_PATTERN.match(stripped):
        return None
    return BULLET_PREFIX.sub("", stripped).strip()


def classify_sentiment(pro_count, con_count):
    """
    Derive the consensus label from the number of strengths and criticisms.

    Negative is checked last, so it wins if both thresholds were ever met.
    """
    sentiment = Sentiment.MIXED
    if pro_count > con_count + 2:
        sentiment = Sentiment.POSITIVE
    if con_count > pro_count + 1:
        sentiment = Sentiment.NEGATIVE
    return sentiment


def build_sources(citations):
    """Map raw citations to display sources, keeping the first five."""
    sources = [
        GroundingSource(title=citation.title or "Source", uri=citation.uri or "#")
        for citation in citations
    ]
    return tuple(sources[:MAX_LIST_ITEMS])


def parse_ai_response(text, citations=()):
    """
    Parse model output into a structured analysis.

    The text is scanned line by line. Lines before the first pros/cons header
    form the summary; list items under a header go to that list; anything else
    under a header is dropped.

    Args:
        text: Raw response text from the model
        citations: Iterable of RawCitation, already limited to web chunks

    Returns:
        MovieAnalysis
    """
    pros = []
    cons = []
    summary = ""
    current_section = SUMMARY

    for line in text.split("\n"):
        section = detect_section(line)
        if section is not None:
            current_section = section
            continue

        if current_section == SUMMARY:
            summary += line + " "
            continue

        item = strip_bullet(line)
        if item is None:
            continue
        if current_section == PROS:
            pros.append(item)
        else:
            cons.append(item)

    summary = summary.strip() or text[:SUMMARY_FALLBACK_CHARS] + "..."

    return MovieAnalysis(
        summary=summary,
        pros=tuple(pros[:MAX_LIST_ITEMS]),
        cons=tuple(cons[:MAX_LIST_ITEMS]),
        sentiment=classify_sentiment(len(pros), len(cons)),
        sources=build_sources(citations),
    )
