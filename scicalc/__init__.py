"""SciCalc - Scientific calculator for the terminal.

A scientific calculator core with:
- Display-symbol normalization (π, √, ×, ÷, −, %, nPr/nCr)
- Input state machine with Ans, equals-chaining and bounded history
- Function plotting with derivative overlay and PNG/PDF export
- Matrix, equation, base, statistics and unit tools
- Word problems (Gemini) and voice input
"""

__version__ = "1.0.0"

from .normalizer import normalize
from .evaluator import Evaluator, get_evaluator
from .session import CalculatorSession, State
from .history import CalculationHistory, HistoryEntry
from .errors import (
    CalculatorError,
    CapabilityUnavailable,
    EvaluationError,
    InputError,
    ServiceError,
)

__all__ = [
    # Core
    "normalize",
    "Evaluator",
    "get_evaluator",
    "CalculatorSession",
    "State",
    # History
    "CalculationHistory",
    "HistoryEntry",
    # Errors
    "CalculatorError",
    "CapabilityUnavailable",
    "EvaluationError",
    "InputError",
    "ServiceError",
]
