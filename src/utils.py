"""
Utility functions and constants for the movie analysis app.
"""

import logging
import os

import streamlit as st
from dotenv import load_dotenv

# Load environment variables (for API keys)
load_dotenv()

logger = logging.getLogger(__name__)

# Global configuration constants
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-3-flash-preview")
ANALYSIS_TEMPERATURE = 0.7

TMDB_TRENDING_URL = "https://api.themoviedb.org/3/trending/movie/week"
TMDB_POSTER_URL = "https://image.tmdb.org/t/p/w500{path}"

MAX_LIST_ITEMS = 5
SUMMARY_FALLBACK_CHARS = 300
NO_ANALYSIS_TEXT = "No analysis available."
ANALYSIS_ERROR_MESSAGE = "Failed to fetch analysis. Please check your API key."

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level=logging.INFO):
    """Attach a console handler to the root logger once per process."""
    root = logging.getLogger()
    if getattr(root, "_cinescore_logging_configured", False):
        return root

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))
    root.addHandler(handler)
    root.setLevel(level)
    root._cinescore_logging_configured = True  # type: ignore[attr-defined]
    return root


def get_api_key(name, default=""):
    """
    Look up a credential in Streamlit secrets, then the process environment.

    Args:
        name: Secret / environment variable name
        default: Value returned when neither source defines it

    Returns:
        The credential string
    """
    try:
        if name in st.secrets:
            return st.secrets[name]
    except Exception as e:
        # No secrets.toml outside `streamlit run`
        logger.debug("Streamlit secrets unavailable for %s: %s", name, e)
    return os.getenv(name, default)


def get_gemini_api_key():
    """Gemini credential, accepting the legacy API_KEY name as well."""
    return get_api_key("GEMINI_API_KEY") or get_api_key("API_KEY")
