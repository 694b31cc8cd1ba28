"""Word-problem solving through the Gemini generateContent API."""

import logging
from typing import Optional

import requests

from .config import AIConfig
from .errors import CapabilityUnavailable, InputError, ServiceError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a world-class math problem solver. When given a word problem, "
    "your task is to identify the mathematical question, extract the relevant "
    "numbers, determine the correct operations, provide a step-by-step "
    "solution, and finally, present the final numerical answer. Your response "
    "should be structured clearly with a 'Problem Analysis', 'Step-by-step "
    "Solution', and 'Final Answer' section."
)

NO_RESPONSE_MESSAGE = "Error: Could not get a response from the AI."
EMPTY_PROBLEM_MESSAGE = "Please enter a problem to solve."
MISSING_KEY_MESSAGE = "No API key configured. Set GEMINI_API_KEY or ai.api_key in .scicalc/config.json."


def build_payload(problem: str) -> dict:
    """Build the generateContent request body for a problem."""
    return {
        "contents": [{"parts": [{"text": problem}]}],
        "tools": [{"google_search": {}}],
        "systemInstruction": {"parts": [{"text": SYSTEM_PROMPT}]},
    }


def extract_text(response: dict) -> Optional[str]:
    """Return ``candidates[0].content.parts[0].text`` or None if absent."""
    try:
        text = response["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    return text or None


class WordProblemSolver:
    """Sends word problems to the text-generation service.

    Args:
        config: API settings (model, URL, key, timeout).
        session: Optional requests session (mainly for tests).
    """

    def __init__(self, config: Optional[AIConfig] = None, session: Optional[requests.Session] = None):
        self.config = config or AIConfig()
        self.http = session or requests.Session()

    def solve(self, problem: str) -> str:
        """Solve a word problem.

        Returns:
            The model's explanation text.

        Raises:
            InputError: Empty problem text.
            CapabilityUnavailable: No API key configured.
            ServiceError: Network failure, non-2xx status, or a response
                without text.
        """
        problem = problem.strip()
        if not problem:
            raise InputError(EMPTY_PROBLEM_MESSAGE)
        if not self.config.api_key:
            raise CapabilityUnavailable(MISSING_KEY_MESSAGE)

        try:
            response = self.http.post(
                self.config.endpoint,
                params={"key": self.config.api_key},
                headers={"Content-Type": "application/json"},
                json=build_payload(problem),
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            logger.warning("Problem solver request failed: %s", e)
            raise ServiceError(f"Error: {e}") from e

        if not response.ok:
            raise ServiceError(f"Error: API error: {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise ServiceError(NO_RESPONSE_MESSAGE) from e

        text = extract_text(data)
        if text is None:
            raise ServiceError(NO_RESPONSE_MESSAGE)
        return text
