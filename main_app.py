"""
CineScore AI - Streamlit UI for AI-generated critical consensus.
Search any movie (or pick a trending one) to get a grounded summary, pros, cons and sources.
"""

import streamlit as st
import sys
import os

# =============================================================================
# IMPORTS AND SETUP
# =============================================================================

# Add src directory to path for imports
current_dir = os.path.dirname(os.path.abspath(__file__))
src_dir = os.path.join(current_dir, 'src')

if src_dir not in sys.path:
    sys.path.insert(0, src_dir)

from analysis_requester import get_movie_analysis
from analysis_state import AnalysisSession, IDLE, LOADED, FAILED
from movie_models import Sentiment
from movie_search import fetch_trending_movies, resolve_selected_movie, suggest_titles
from utils import GEMINI_MODEL, configure_logging

configure_logging()

APP_NAME = "CineScore AI"

SENTIMENT_COLORS = {
    Sentiment.POSITIVE: "#4ade80",
    Sentiment.MIXED: "#fbbf24",
    Sentiment.NEGATIVE: "#f87171",
}

# =============================================================================
# SESSION STATE MANAGEMENT
# =============================================================================

def initialize_session_state():
    """Initialize all required session state variables."""

    # Single owner of the search / analysis state
    if "analysis_session" not in st.session_state:
        st.session_state.analysis_session = AnalysisSession()

    # Movie shown in the detail hero
    if "selected_movie" not in st.session_state:
        st.session_state.selected_movie = None

    if "search_query" not in st.session_state:
        st.session_state.search_query = ""

    if "trending_movies" not in st.session_state:
        st.session_state.trending_movies = fetch_trending_movies()

# =============================================================================
# UI STYLING
# =============================================================================

def inject_custom_css():
    """Inject custom CSS for the dark card layout."""
    st.markdown("""
    <style>
    #MainMenu {visibility: hidden;}
    footer {visibility: hidden;}

    .app-title {
        font-size: 2rem;
        font-weight: 800;
        color: #e2e8f0;
        margin-bottom: 0.5rem;
    }

    .sentiment-badge {
        display: inline-block;
        padding: 0.25rem 1rem;
        border-radius: 999px;
        font-size: 0.75rem;
        font-weight: bold;
        text-transform: uppercase;
        letter-spacing: 0.1em;
        border: 1px solid currentColor;
    }

    .movie-year {
        font-size: 1.5rem;
        color: #64748b;
    }

    .movie-description {
        font-style: italic;
        color: #cbd5e1;
        line-height: 1.6;
    }

    .footer-note {
        text-align: center;
        font-size: 0.75rem;
        color: #64748b;
        margin-top: 3rem;
    }
    </style>
    """, unsafe_allow_html=True)

# =============================================================================
# CORE FUNCTIONS
# =============================================================================

def analyze_movie(query, movie=None):
    """Select a movie (the clicked one, or a match for the query) and fetch its analysis."""
    query = query.strip()
    if not query:
        return

    st.session_state.selected_movie = resolve_selected_movie(
        query, st.session_state.trending_movies, selected=movie
    )
    st.session_state.search_query = query

    with st.spinner("Aggregating reviews from the web..."):
        st.session_state.analysis_session.run(query, get_movie_analysis)


def reset_to_home():
    """Clear the selection and return to the trending grid."""
    st.session_state.analysis_session.clear()
    st.session_state.selected_movie = None
    st.session_state.search_query = ""

# =============================================================================
# UI COMPONENTS
# =============================================================================

def render_header():
    """Render the title bar and the search form."""
    title_col, search_col = st.columns([1, 2])

    with title_col:
        st.markdown(f'<div class="app-title">🎬 {APP_NAME}</div>', unsafe_allow_html=True)
        if st.button("Home", key="home"):
            reset_to_home()
            st.rerun()

    with search_col:
        with st.form("search_form", clear_on_submit=False):
            query = st.text_input(
                "Search movies for AI critical consensus...",
                value=st.session_state.search_query,
                label_visibility="collapsed",
                placeholder="Search movies for AI critical consensus...",
            )
            submitted = st.form_submit_button("Analyze")

        if submitted and query.strip():
            analyze_movie(query)


def render_trending_grid():
    """Render the trending movies as a clickable grid."""
    st.markdown("### Trending & Critically Acclaimed")

    movies = st.session_state.trending_movies
    cols = st.columns(min(len(movies), 6) or 1)
    for idx, movie in enumerate(movies):
        with cols[idx % len(cols)]:
            st.image(movie.poster, use_container_width=True)
            st.markdown(f"⭐ **{movie.rating}**")
            st.markdown(f"**{movie.title}**")
            st.caption(movie.year)
            if st.button("Analyze", key=f"trending_{movie.id}"):
                analyze_movie(movie.title, movie=movie)
                st.rerun()

    st.markdown("---")
    st.markdown("## The Future of Film Criticism")
    st.markdown(
        f"{APP_NAME} aggregates critical reviews, audience sentiment, and cinematic themes using "
        "real-time grounding search. Type any movie name above to get a comprehensive \"AI Consensus\" summary."
    )
    st.markdown(" · ".join(["Synthesized Analysis", "Pros & Cons", "Sentiment Tracking", "Live Sourcing"]))


def render_suggestions(query):
    """Offer close trending titles when a search didn't match one."""
    suggestions = suggest_titles(query, st.session_state.trending_movies)
    if not suggestions:
        return

    st.write("**Did you mean one of these?**")
    cols = st.columns(len(suggestions))
    for idx, (movie, similarity) in enumerate(suggestions):
        with cols[idx]:
            st.write(f"**{movie.title}** ({movie.year})")
            st.write(f"*{similarity:.0%} match*")
            if st.button("Analyze This Movie", key=f"suggest_{movie.id}"):
                analyze_movie(movie.title, movie=movie)
                st.rerun()


def render_analysis(state):
    """Render the analysis card for the current state."""
    if state.status == LOADED:
        analysis = state.analysis
        color = SENTIMENT_COLORS.get(analysis.sentiment, "#fbbf24")
        st.markdown(
            f'<span class="sentiment-badge" style="color: {color};">{analysis.sentiment.value} Consensus</span>',
            unsafe_allow_html=True,
        )

    st.markdown("### ⚡ AI Critical Consensus")

    if state.status == FAILED:
        st.error(f"❌ {state.error}")
    elif state.status == LOADED:
        analysis = state.analysis
        st.write(analysis.summary)

        pros_col, cons_col = st.columns(2)
        with pros_col:
            st.markdown("#### ✅ Key Strengths")
            for item in analysis.pros:
                st.markdown(f"- {item}")
        with cons_col:
            st.markdown("#### ❌ Common Criticisms")
            for item in analysis.cons:
                st.markdown(f"- {item}")

        if analysis.sources:
            st.markdown("---")
            st.caption("INFORMATION SOURCES")
            st.markdown(" · ".join(f"[{source.title}]({source.uri})" for source in analysis.sources))
    elif state.status == IDLE:
        st.caption("No analysis loaded yet.")


def render_movie_details(movie):
    """Render the detail hero and the analysis card for the selected movie."""
    poster_col, detail_col = st.columns([1, 2])

    with poster_col:
        st.image(movie.poster, use_container_width=True)
        st.markdown(f"**GLOBAL RATING** ⭐ {movie.rating}")
        if movie.genres:
            st.caption(" · ".join(movie.genres))

    with detail_col:
        st.markdown(
            f'<h1>{movie.title} <span class="movie-year">{movie.year}</span></h1>',
            unsafe_allow_html=True,
        )
        st.markdown(f'<p class="movie-description">{movie.description}</p>', unsafe_allow_html=True)

        if movie.id.startswith("search-"):
            render_suggestions(movie.title)

        render_analysis(st.session_state.analysis_session.state)

# =============================================================================
# MAIN APPLICATION
# =============================================================================

def main():
    """Main application function."""
    st.set_page_config(
        page_title=APP_NAME,
        page_icon="🎬",
        layout="wide",
        initial_sidebar_state="collapsed"
    )

    initialize_session_state()
    inject_custom_css()

    render_header()

    if st.session_state.selected_movie is None:
        render_trending_grid()
    else:
        render_movie_details(st.session_state.selected_movie)

    st.markdown(
        f'<div class="footer-note">Powered by {GEMINI_MODEL} & Google Search Grounding • {APP_NAME}</div>',
        unsafe_allow_html=True,
    )

if __name__ == "__main__":
    main()
