"""
Unit tests for similarity scoring.
"""

import json
import pytest
import sys
import warnings
from pathlib import Path

import httpx

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from xte.config import EntailmentConfig
from xte.data.schema import ErrorKind, ScoredPair
from xte.reasoning.similarity import IndraScorer, create_scorer, rank_by_score
from xte.utils.http import transient_retry


def make_scorer(handler, retries: int = 1) -> IndraScorer:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return IndraScorer("http://indra.test/relatedness", retries=retries, client=client)


class TestIndraScorer:
    """Test the relatedness service client."""

    def test_request_and_response(self):
        requests = []

        def handler(request):
            body = json.loads(request.content)
            requests.append(body)
            pairs = [{"t1": p["t1"], "t2": p["t2"], "score": 0.5} for p in body["pairs"]]
            return httpx.Response(200, json={"pairs": pairs})

        result = make_scorer(handler).score("damage", ["act", "violence"])

        assert result.ok
        assert result.value == [ScoredPair("damage", "act", 0.5), ScoredPair("damage", "violence", 0.5)]
        assert requests[0]["corpus"] == "wiki-2018"
        assert requests[0]["scoreFunction"] == "COSINE"
        assert requests[0]["pairs"] == [{"t1": "damage", "t2": "act"}, {"t1": "damage", "t2": "violence"}]

    def test_empty_candidates_skip_the_service(self):
        def handler(request):
            raise AssertionError("service should not be called")

        result = make_scorer(handler).score("damage", [])

        assert result.ok
        assert result.value == []

    def test_server_error(self):
        result = make_scorer(lambda request: httpx.Response(500)).score("damage", ["act"])

        assert result.value == []
        assert result.error == ErrorKind.SERVICE_UNAVAILABLE

    def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        result = make_scorer(handler).score("damage", ["act"])

        assert result.error == ErrorKind.SERVICE_UNAVAILABLE

    def test_transient_error_is_retried(self):
        attempts = []

        def handler(request):
            attempts.append(request)
            if len(attempts) == 1:
                raise httpx.ConnectError("refused", request=request)
            return httpx.Response(200, json={"pairs": [{"t1": "damage", "t2": "act", "score": 0.2}]})

        result = make_scorer(handler, retries=2).score("damage", ["act"])

        assert len(attempts) == 2
        assert result.value == [ScoredPair("damage", "act", 0.2)]

    def test_malformed_response(self):
        result = make_scorer(lambda request: httpx.Response(200, json={"scores": []})).score("damage", ["act"])

        assert result.value == []
        assert result.error == ErrorKind.MALFORMED_INPUT

    def test_non_json_response(self):
        result = make_scorer(lambda request: httpx.Response(200, text="<html>")).score("damage", ["act"])
        assert result.error == ErrorKind.MALFORMED_INPUT


class TestTransientRetry:
    """Test the retry policy for transient HTTP errors."""

    def test_retries_without_deprecation_warnings(self):
        calls = []

        with warnings.catch_warnings():
            warnings.simplefilter("error")

            @transient_retry(attempts=3, initial=0.01, max_wait=0.05)
            def flaky():
                calls.append(1)
                if len(calls) < 3:
                    raise httpx.ReadTimeout("slow")
                return "ok"

            assert flaky() == "ok"

        assert len(calls) == 3

    def test_status_errors_are_not_retried(self):
        calls = []
        request = httpx.Request("POST", "http://indra.test/relatedness")

        @transient_retry(attempts=3, initial=0.01)
        def failing():
            calls.append(1)
            raise httpx.HTTPStatusError("boom", request=request, response=httpx.Response(500, request=request))

        with pytest.raises(httpx.HTTPStatusError):
            failing()

        assert len(calls) == 1


class TestRanking:
    """Test score ranking."""

    def test_stable_descending_by_magnitude(self):
        pairs = [ScoredPair("t", "a", 0.2), ScoredPair("t", "b", -0.7), ScoredPair("t", "c", 0.2),
                 ScoredPair("t", "d", 0.7)]

        assert [p.term2 for p in rank_by_score(pairs)] == ["b", "d", "a", "c"]

    def test_unknown_scorer_raises(self):
        with pytest.raises(ValueError):
            create_scorer(EntailmentConfig(similarity="oracle"))
