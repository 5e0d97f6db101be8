"""
Unit tests for the Gemini analysis requester.
"""

import unittest
from unittest.mock import patch, MagicMock
from types import SimpleNamespace
import sys
import os

from google.genai import types

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from analysis_requester import (
    AnalysisFetchError,
    build_analysis_prompt,
    build_generation_config,
    extract_web_citations,
    get_movie_analysis,
    request_movie_analysis,
)
from movie_models import AnalysisRequest, GroundingSource, RawCitation, Sentiment


def make_response(text=None, chunks=None):
    """Build a GenerateContentResponse with optional text and grounding chunks."""
    content = None
    if text is not None:
        content = types.Content(role="model", parts=[types.Part(text=text)])
    metadata = None
    if chunks is not None:
        metadata = types.GroundingMetadata(grounding_chunks=chunks)
    return types.GenerateContentResponse(
        candidates=[types.Candidate(content=content, grounding_metadata=metadata)]
    )


def web_chunk(title=None, uri=None):
    return types.GroundingChunk(web=types.GroundingChunkWeb(title=title, uri=uri))


def mock_client_returning(mock_client_cls, response):
    """Make genai.Client(...).models.generate_content return a response."""
    client = MagicMock()
    client.models.generate_content.return_value = response
    mock_client_cls.return_value = client
    return client


class TestRequestHelpers(unittest.TestCase):

    def test_build_analysis_prompt(self):
        """Test the prompt mentions the title and what to look for."""
        prompt = build_analysis_prompt("Oppenheimer")
        self.assertIn('"Oppenheimer"', prompt)
        self.assertIn("critical consensus", prompt)
        self.assertIn("strengths (pros)", prompt)
        self.assertIn("criticisms (cons)", prompt)
        self.assertIn("release year", prompt)

    def test_build_generation_config(self):
        """Test search grounding and temperature are set."""
        config = build_generation_config()
        self.assertEqual(config.temperature, 0.7)
        self.assertEqual(len(config.tools), 1)
        self.assertIsNotNone(config.tools[0].google_search)

    def test_extract_web_citations_filters_non_web(self):
        """Test only chunks with a web entry are kept, in order."""
        response = make_response(chunks=[
            web_chunk("Variety", "http://variety.com/x"),
            types.GroundingChunk(retrieved_context=types.GroundingChunkRetrievedContext(uri="gs://bucket/doc")),
            web_chunk(uri="http://no-title.com"),
        ])

        self.assertEqual(extract_web_citations(response), (
            RawCitation(title="Variety", uri="http://variety.com/x"),
            RawCitation(title=None, uri="http://no-title.com"),
        ))

    def test_extract_web_citations_without_metadata(self):
        """Test responses without grounding metadata or candidates."""
        self.assertEqual(extract_web_citations(make_response(text="hi")), ())
        self.assertEqual(extract_web_citations(types.GenerateContentResponse(candidates=[])), ())


class TestRequestMovieAnalysis(unittest.TestCase):

    @patch('analysis_requester.genai.Client')
    def test_request_success(self, mock_client_cls):
        """Test a successful call returns text and web citations."""
        client = mock_client_returning(
            mock_client_cls,
            make_response(text="Great film.", chunks=[web_chunk("IGN", "http://ign.com")])
        )

        raw = request_movie_analysis(AnalysisRequest("Dune"), api_key="test-key", model="gemini-test")

        self.assertEqual(raw.text, "Great film.")
        self.assertEqual(raw.citations, (RawCitation(title="IGN", uri="http://ign.com"),))

        mock_client_cls.assert_called_once_with(api_key="test-key")
        kwargs = client.models.generate_content.call_args.kwargs
        self.assertEqual(kwargs["model"], "gemini-test")
        self.assertIn('"Dune"', kwargs["contents"])
        self.assertEqual(kwargs["config"].temperature, 0.7)
        self.assertIsNotNone(kwargs["config"].tools[0].google_search)

    @patch('analysis_requester.genai.Client')
    def test_request_without_text_uses_placeholder(self, mock_client_cls):
        """Test the literal placeholder when the model returns no text."""
        mock_client_returning(mock_client_cls, types.GenerateContentResponse(candidates=[]))

        raw = request_movie_analysis(AnalysisRequest("Dune"), api_key="k")

        self.assertEqual(raw.text, "No analysis available.")
        self.assertEqual(raw.citations, ())

    @patch('analysis_requester.get_gemini_api_key')
    @patch('analysis_requester.genai.Client')
    def test_request_looks_up_key(self, mock_client_cls, mock_key):
        """Test the configured key is used when none is passed."""
        mock_key.return_value = "configured-key"
        mock_client_returning(mock_client_cls, make_response(text="ok"))

        request_movie_analysis(AnalysisRequest("Dune"))

        mock_client_cls.assert_called_once_with(api_key="configured-key")

    @patch('analysis_requester.genai.Client')
    def test_api_failure_raises_fetch_error(self, mock_client_cls):
        """Test auth, quota and transport errors surface as AnalysisFetchError."""
        failures = [
            ConnectionError("unreachable"),
            PermissionError("403 PERMISSION_DENIED"),
            RuntimeError("429 RESOURCE_EXHAUSTED"),
        ]
        for failure in failures:
            with self.subTest(failure=failure):
                client = MagicMock()
                client.models.generate_content.side_effect = failure
                mock_client_cls.return_value = client

                with self.assertRaises(AnalysisFetchError) as ctx:
                    request_movie_analysis(AnalysisRequest("Dune"), api_key="k")
                self.assertIs(ctx.exception.__cause__, failure)

    @patch('analysis_requester.genai.Client')
    def test_missing_key_raises_fetch_error(self, mock_client_cls):
        """Test a client that rejects the key surfaces as AnalysisFetchError."""
        mock_client_cls.side_effect = ValueError("Missing key inputs argument!")

        with self.assertRaises(AnalysisFetchError):
            request_movie_analysis(AnalysisRequest("Dune"), api_key="")

    @patch('analysis_requester.genai.Client')
    def test_malformed_response_raises_fetch_error(self, mock_client_cls):
        """Test unexpected response shapes surface as AnalysisFetchError."""
        malformed = [
            object(),
            SimpleNamespace(text="ok", candidates="oops"),
            SimpleNamespace(text="ok", candidates=[SimpleNamespace(grounding_metadata=[])]),
            SimpleNamespace(text="ok", candidates=[
                SimpleNamespace(grounding_metadata=SimpleNamespace(grounding_chunks=["x"]))
            ]),
        ]
        for response in malformed:
            with self.subTest(response=response):
                mock_client_returning(mock_client_cls, response)
                with self.assertRaises(AnalysisFetchError):
                    request_movie_analysis(AnalysisRequest("Dune"), api_key="k")


class TestGetMovieAnalysis(unittest.TestCase):

    @patch('analysis_requester.genai.Client')
    def test_get_movie_analysis_parses_response(self, mock_client_cls):
        """Test the full request-then-parse path."""
        text = (
            "A sweeping epic.\n"
            "Pros:\n- Visuals\n- Score\n- Scale\n"
            "Cons:\n"
        )
        mock_client_returning(
            mock_client_cls,
            make_response(text=text, chunks=[web_chunk("Empire", "http://empire.com")])
        )

        analysis = get_movie_analysis("Dune: Part Two", api_key="k")

        self.assertEqual(analysis.summary, "A sweeping epic.")
        self.assertEqual(analysis.pros, ("Visuals", "Score", "Scale"))
        self.assertEqual(analysis.cons, ())
        self.assertEqual(analysis.sentiment, Sentiment.POSITIVE)
        self.assertEqual(analysis.sources, (GroundingSource(title="Empire", uri="http://empire.com"),))

    @patch('analysis_requester.genai.Client')
    def test_blank_title_rejected(self, mock_client_cls):
        """Test blank titles never reach the model."""
        with self.assertRaises(ValueError):
            get_movie_analysis("   ", api_key="k")
        mock_client_cls.assert_not_called()


if __name__ == '__main__':
    unittest.main()
