"""Tests for word_problems.py - AI word-problem solver."""

from unittest.mock import MagicMock

import pytest
import requests

from scicalc.config import AIConfig
from scicalc.errors import CapabilityUnavailable, InputError, ServiceError
from scicalc.word_problems import (
    NO_RESPONSE_MESSAGE,
    SYSTEM_PROMPT,
    WordProblemSolver,
    build_payload,
    extract_text,
)


def make_response(status=200, data=None, json_error=None):
    response = MagicMock()
    response.ok = 200 <= status < 300
    response.status_code = status
    if json_error:
        response.json.side_effect = json_error
    else:
        response.json.return_value = data
    return response


GOOD_DATA = {"candidates": [{"content": {"parts": [{"text": "Final Answer: 42"}]}}]}


class TestBuildPayload:
    """Tests for build_payload function."""

    def test_structure(self):
        """Test the request body."""
        payload = build_payload("How many apples?")
        assert payload["contents"] == [{"parts": [{"text": "How many apples?"}]}]
        assert payload["tools"] == [{"google_search": {}}]
        assert payload["systemInstruction"]["parts"][0]["text"] == SYSTEM_PROMPT


class TestExtractText:
    """Tests for extract_text function."""

    def test_present(self):
        """Test extracting the first candidate text."""
        assert extract_text(GOOD_DATA) == "Final Answer: 42"

    @pytest.mark.parametrize("data", [
        {},
        {"candidates": []},
        {"candidates": [{"content": {"parts": []}}]},
        {"candidates": [{"content": {"parts": [{"text": ""}]}}]},
        None,
    ])
    def test_missing(self, data):
        """Test malformed responses give None."""
        assert extract_text(data) is None


class TestWordProblemSolver:
    """Tests for WordProblemSolver class."""

    @pytest.fixture
    def http(self):
        """Create a mock HTTP session."""
        return MagicMock(spec=requests.Session)

    @pytest.fixture
    def solver(self, http):
        """Create a solver with an API key."""
        return WordProblemSolver(AIConfig(model="test-model", api_key="secret"), session=http)

    def test_solve(self, solver, http):
        """Test a successful request."""
        http.post.return_value = make_response(data=GOOD_DATA)

        assert solver.solve("  What is 6 times 7?  ") == "Final Answer: 42"

        args, kwargs = http.post.call_args
        assert args[0].endswith("/models/test-model:generateContent")
        assert kwargs["params"] == {"key": "secret"}
        assert kwargs["json"]["contents"][0]["parts"][0]["text"] == "What is 6 times 7?"
        assert kwargs["timeout"] == 30.0

    def test_empty_problem(self, solver, http):
        """Test empty input is rejected before any request."""
        with pytest.raises(InputError):
            solver.solve("   ")
        http.post.assert_not_called()

    def test_missing_key(self, http):
        """Test a missing API key."""
        solver = WordProblemSolver(AIConfig(api_key=None), session=http)
        with pytest.raises(CapabilityUnavailable):
            solver.solve("1 + 1?")
        http.post.assert_not_called()

    def test_http_error_status(self, solver, http):
        """Test non-2xx responses."""
        http.post.return_value = make_response(status=500)
        with pytest.raises(ServiceError, match="Error: API error: 500"):
            solver.solve("problem")

    def test_network_failure(self, solver, http):
        """Test connection errors."""
        http.post.side_effect = requests.ConnectionError("refused")
        with pytest.raises(ServiceError, match="Error: refused"):
            solver.solve("problem")

    def test_malformed_json(self, solver, http):
        """Test a body that is not JSON."""
        http.post.return_value = make_response(json_error=ValueError("bad json"))
        with pytest.raises(ServiceError, match=NO_RESPONSE_MESSAGE):
            solver.solve("problem")

    def test_missing_text(self, solver, http):
        """Test a response without candidate text."""
        http.post.return_value = make_response(data={"candidates": []})
        with pytest.raises(ServiceError, match=NO_RESPONSE_MESSAGE):
            solver.solve("problem")
