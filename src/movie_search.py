"""
Movie lookup for the search bar: trending list, title matching and suggestions.
"""

import logging
import time
from difflib import SequenceMatcher
from urllib.parse import quote

import requests

from movie_models import Movie
from utils import TMDB_POSTER_URL, TMDB_TRENDING_URL, get_api_key

logger = logging.getLogger(__name__)

TRENDING_MOVIES = (
    Movie(
        id="1", title="Dune: Part Two", year="2024", rating="8.6",
        poster="https://picsum.photos/seed/dune/400/600",
        description="Paul Atreides unites with Chani and the Fremen while on a warpath of revenge against the conspirators who destroyed his family.",
        genres=("Sci-Fi", "Action"),
    ),
    Movie(
        id="2", title="Oppenheimer", year="2023", rating="8.4",
        poster="https://picsum.photos/seed/oppy/400/600",
        description="The story of American scientist J. Robert Oppenheimer and his role in the development of the atomic bomb.",
        genres=("Biography", "Drama"),
    ),
    Movie(
        id="3", title="Spider-Man: Across the Spider-Verse", year="2023", rating="8.6",
        poster="https://picsum.photos/seed/spidey/400/600",
        description="Miles Morales catapults across the Multiverse, where he encounters a team of Spider-People charged with protecting its very existence.",
        genres=("Animation", "Action"),
    ),
    Movie(
        id="4", title="Poor Things", year="2023", rating="7.9",
        poster="https://picsum.photos/seed/poor/400/600",
        description="The incredible tale about the fantastical evolution of Bella Baxter, a young woman brought back to life by the brilliant and unorthodox scientist Dr. Godwin Baxter.",
        genres=("Comedy", "Drama"),
    ),
    Movie(
        id="5", title="The Zone of Interest", year="2023", rating="7.5",
        poster="https://picsum.photos/seed/zone/400/600",
        description="The commandant of Auschwitz, Rudolf Höss, and his wife Hedwig, strive to build a dream life for their family in a house and garden next to the camp.",
        genres=("Drama", "War"),
    ),
    Movie(
        id="6", title="Godzilla Minus One", year="2023", rating="8.3",
        poster="https://picsum.photos/seed/gojira/400/600",
        description="Postwar Japan is at its lowest point when a new crisis emerges in the form of a giant monster, baptized in the horrific power of the atomic bomb.",
        genres=("Action", "Sci-Fi"),
    ),
)

STOP_WORDS = {'the', 'a', 'an', 'and', 'or', 'but', 'in', 'on', 'at', 'to', 'for', 'of', 'with', 'by'}


def _tmdb_to_movie(result):
    poster_path = result.get("poster_path")
    vote = result.get("vote_average")
    return Movie(
        id=str(result["id"]),
        title=result["title"],
        year=(result.get("release_date") or "")[:4] or "Recent",
        rating=f"{vote:.1f}" if isinstance(vote, (int, float)) else "TBD",
        poster=TMDB_POSTER_URL.format(path=poster_path) if poster_path else f"https://picsum.photos/seed/{result['id']}/400/600",
        description=result.get("overview") or "",
        genres=(),
    )


def fetch_trending_movies(api_key=None, limit=6):
    """
    Fetch this week's trending movies from TMDB.

    Falls back to the built-in list when no key is configured or the request
    fails.

    Args:
        api_key: TMDB API key; looked up from secrets / environment if None
        limit: Maximum number of movies to return

    Returns:
        Tuple of Movie
    """
    key = api_key if api_key is not None else get_api_key("TMDB_API_KEY")
    if not key:
        return TRENDING_MOVIES

    try:
        response = requests.get(TMDB_TRENDING_URL, params={"api_key": key})
        response.raise_for_status()
        results = response.json().get("results", [])
    except (requests.RequestException, ValueError) as e:
        logger.warning("Trending fetch failed, using built-in list: %s", e)
        return TRENDING_MOVIES

    movies = [_tmdb_to_movie(m) for m in results if m.get("title") and m.get("id")]
    return tuple(movies[:limit]) or TRENDING_MOVIES


def find_trending_match(query, movies=TRENDING_MOVIES):
    """Return the first movie whose title contains the query, ignoring case."""
    query_lower = query.strip().lower()
    if not query_lower:
        return None
    for movie in movies:
        if query_lower in movie.title.lower():
            return movie
    return None


def build_search_movie(query):
    """
    Build a placeholder movie for a title that isn't in the trending list.

    Args:
        query: Search query as typed

    Returns:
        Movie
    """
    title = query.strip()
    return Movie(
        id=f"search-{int(time.time() * 1000)}",
        title=title,
        year="Recent",
        rating="TBD",
        poster=f"https://picsum.photos/seed/{quote(title)}/400/600",
        description=f"Deep analysis for {title}...",
        genres=("Search Result",),
    )


def resolve_selected_movie(query, movies=TRENDING_MOVIES, selected=None):
    """
    Movie to show for a search.

    A movie picked from the grid or the suggestions is used as is; only typed
    queries are matched against the trending list.

    Args:
        query: Search query as typed
        movies: Trending movies to match against
        selected: Movie the user clicked, if any

    Returns:
        Movie
    """
    if selected is not None:
        return selected
    return find_trending_match(query, movies) or build_search_movie(query)


def calculate_title_similarity(query, title):
    """
    Calculate similarity between query and movie title using multiple methods.

    Args:
        query: Search query
        title: Movie title to compare against

    Returns:
        Float similarity score between 0 and 1
    """
    query_lower = query.lower().strip()
    title_lower = title.lower().strip()

    if query_lower == title_lower:
        return 1.0

    if query_lower and title_lower and (query_lower in title_lower or title_lower in query_lower):
        return 0.95

    query_words = set(query_lower.split()) - STOP_WORDS
    title_words = set(title_lower.split()) - STOP_WORDS

    if query_words and title_words:
        overlap = len(query_words & title_words)
        jaccard = overlap / len(query_words | title_words)
        if jaccard >= 0.5:
            return 0.8 + (jaccard * 0.2)

        # Fuzzy word matching for typos
        fuzzy_matches = 0
        for q_word in query_words:
            for t_word in title_words:
                if len(q_word) > 2 and len(t_word) > 2 and SequenceMatcher(None, q_word, t_word).ratio() >= 0.7:
                    fuzzy_matches += 1
                    break

        fuzzy_ratio = fuzzy_matches / len(query_words)
        if fuzzy_ratio >= 0.5:
            return 0.7 + (fuzzy_ratio * 0.2)

    # Character-level fallback
    return SequenceMatcher(None, query_lower, title_lower).ratio()


def suggest_titles(query, movies=TRENDING_MOVIES, max_results=3, similarity_threshold=0.5):
    """
    Rank movies by title similarity to a query.

    Args:
        query: Search query
        movies: Candidate movies
        max_results: Maximum number of suggestions
        similarity_threshold: Minimum similarity score to include

    Returns:
        List of (movie, similarity) tuples, best first
    """
    scored = [(movie, calculate_title_similarity(query, movie.title)) for movie in movies]
    scored = [item for item in scored if item[1] >= similarity_threshold]
    scored.sort(key=lambda x: x[1], reverse=True)
    return scored[:max_results]
