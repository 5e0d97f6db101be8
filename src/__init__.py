"""
CineScore AI - Source Package

This package contains the core functionality for the movie analysis app:
- movie_models: Immutable records for requests, citations and analyses
- analysis_requester: Gemini calls with Google Search grounding
- response_parser: Heuristic parser turning review text into a MovieAnalysis
- analysis_state: Search state machine with stale-response protection
- movie_search: Trending list, title matching and suggestions
- utils: Configuration constants, credential lookup and logging setup
"""
