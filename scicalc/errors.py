"""Error types for SciCalc.

Every failure path in the calculator maps onto one of these:
- EvaluationError: malformed or undefined expressions
- CapabilityUnavailable: an optional capability is missing (microphone,
  API key, chart to export)
- ServiceError: a remote service answered with an error or bad payload
- InputError: user input failed validation before anything ran
"""


class CalculatorError(Exception):
    """Base class for all calculator errors."""


class EvaluationError(CalculatorError):
    """The evaluator rejected an expression."""


class CapabilityUnavailable(CalculatorError):
    """An optional capability is not available on this system."""


class ServiceError(CalculatorError):
    """A remote service failed or returned an unusable response."""


class InputError(CalculatorError):
    """User input failed validation."""
