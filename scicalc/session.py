"""Input/evaluation state machine.

A session owns the editable expression buffer (display grammar), the last
successful result, the "equals just pressed" flag and the history. All input
sources (keypad, keyboard, voice, REPL) end up calling the transitions here.

States:
- EDITING: keystrokes accumulate in the buffer
- RESULT_SHOWN: right after a successful equals; the next purely numeric
  token starts a fresh buffer instead of extending the result
"""

import logging
import re
from enum import Enum
from typing import Callable, List, Optional

from .errors import EvaluationError
from .evaluator import Evaluator
from .history import CalculationHistory, DEFAULT_HISTORY_LIMIT
from .normalizer import normalize
from .voice import spoken_to_expression

logger = logging.getLogger(__name__)

ERROR_TOKEN = "Error"
NO_RESULT_NOTICE = "No previous result available."

_NUMERIC_TOKEN = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


class State(Enum):
    """State of the input buffer."""

    EDITING = "editing"
    RESULT_SHOWN = "result_shown"


def is_numeric_token(token: str) -> bool:
    """Check whether a token is a plain number such as ``5``, ``-2`` or ``4.5``."""
    return bool(_NUMERIC_TOKEN.match(token))


class CalculatorSession:
    """Owns the buffer, last result, equals flag and history for one session.

    Args:
        evaluator: Evaluator used by ``equals``.
        history_limit: Maximum number of history entries.
        precision: Decimal places kept when formatting numbers.
        error_token: Text shown on screen when evaluation fails.
        on_notice: Called with user-facing notices. Notices are also kept in
            ``notices``.
    """

    def __init__(
        self,
        evaluator: Optional[Evaluator] = None,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        precision: int = 10,
        error_token: str = ERROR_TOKEN,
        on_notice: Optional[Callable[[str], None]] = None,
    ):
        self.evaluator = evaluator or Evaluator()
        self.history = CalculationHistory(max_size=history_limit)
        self.precision = precision
        self.error_token = error_token
        self.on_notice = on_notice

        self.buffer = ""
        self.screen = ""
        self.last_result: Optional[str] = None
        self.equals_flag = False
        self.notices: List[str] = []

    @property
    def state(self) -> State:
        return State.RESULT_SHOWN if self.equals_flag else State.EDITING

    def _show(self, text: str):
        self.screen = text

    def notify(self, message: str):
        """Surface a user-facing notice."""
        self.notices.append(message)
        if self.on_notice:
            self.on_notice(message)

    # --- Transitions ---

    def append(self, token: str) -> str:
        """Append a token, or start over with it right after equals.

        Returns:
            The buffer after the transition.
        """
        if self.equals_flag and is_numeric_token(token):
            self.buffer = token
        else:
            self.buffer += token
        self.equals_flag = False
        self._show(self.buffer)
        return self.buffer

    def backspace(self) -> str:
        """Remove the last character of the buffer."""
        self.buffer = self.buffer[:-1]
        self.equals_flag = False
        self._show(self.buffer)
        return self.buffer

    def clear(self) -> str:
        """Empty the buffer."""
        self.buffer = ""
        self.equals_flag = False
        self._show(self.buffer)
        return self.buffer

    def toggle_sign(self) -> str:
        """Strip a leading minus, or prepend one to a non-empty buffer."""
        if self.buffer.startswith("-"):
            self.buffer = self.buffer[1:]
        elif self.buffer:
            self.buffer = "-" + self.buffer
        self.equals_flag = False
        self._show(self.buffer)
        return self.buffer

    def decimal(self) -> str:
        """Append a decimal point unless the buffer already holds one anywhere."""
        if "." not in self.buffer:
            self.append(".")
        return self.buffer

    def equals(self) -> Optional[str]:
        """Evaluate the buffer.

        On success the result is recorded in history, becomes the last
        result and replaces the buffer. On failure the screen shows the error
        token and nothing else changes.

        Returns:
            The formatted result, or None if evaluation failed or the buffer
            was empty.
        """
        expression = self.buffer
        if not expression.strip():
            return None

        try:
            result = self.evaluator.evaluate(normalize(expression))
            formatted = result.format(self.precision)
        except EvaluationError as e:
            logger.info("Calculation failed for expression %r: %s", expression, e)
            self._show(self.error_token)
            return None

        self.history.add(expression, formatted)
        self.last_result = formatted
        self.buffer = formatted
        self.equals_flag = True
        self._show(formatted)
        return formatted

    def insert_ans(self) -> str:
        """Append the last result, or tell the user there is none."""
        if self.last_result is None:
            self.notify(NO_RESULT_NOTICE)
            return self.buffer
        return self.append(self.last_result)

    def append_spoken(self, transcript: str) -> str:
        """Append a voice transcript after mapping spoken words to symbols."""
        self.buffer += spoken_to_expression(transcript)
        self.equals_flag = False
        self._show(self.buffer)
        return self.buffer

    # --- History hooks ---

    def record(self, expression: str, result: str):
        """Add a feature's outcome to history."""
        return self.history.add(expression, result)

    def clear_history(self):
        """Empty the history."""
        self.history.clear()
        logger.debug("History cleared.")
