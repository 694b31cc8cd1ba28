"""Calculator controller.

``CalculatorApp`` owns the session and the feature collaborators (chart,
word-problem solver, speech listener). Each feature method turns its
outcome into a ``FeatureResult`` for the caller to display and records
successful runs in the session history. Errors never propagate out of a
feature method.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from . import bases, equations, matrix, stats, units
from .config import CalculatorConfig
from .errors import CalculatorError, CapabilityUnavailable, EvaluationError, ServiceError
from .evaluator import Evaluator
from .normalizer import normalize
from .plotting import (
    ChartRenderer,
    DERIVATIVE_COLOR,
    FUNCTION_COLOR,
    PAIR_FUNCTION_COLOR,
    Point,
    Series,
    generate_function_table,
    latex_for,
)
from .session import CalculatorSession
from .voice import SpeechListener
from .word_problems import WordProblemSolver

logger = logging.getLogger(__name__)

EMPTY_FUNCTION_NOTICE = "Please enter a function."
NO_PLOT_DATA_NOTICE = "Could not generate data for the plot. Check your function or range."


@dataclass
class FeatureResult:
    """Outcome of a feature, ready for display."""

    text: str
    ok: bool = True
    latex: List[str] = field(default_factory=list)


class CalculatorApp:
    """Single controller for one calculator session.

    Args:
        config: Calculator configuration.
        on_notice: Called with user-facing notices.
        solver: Word-problem solver (built from config when omitted).
        listener_factory: Creates a speech listener per voice request.
    """

    def __init__(
        self,
        config: Optional[CalculatorConfig] = None,
        on_notice: Optional[Callable[[str], None]] = None,
        solver: Optional[WordProblemSolver] = None,
        listener_factory: Optional[Callable[[], SpeechListener]] = None,
    ):
        self.config = config or CalculatorConfig()
        self.evaluator = Evaluator()
        self.session = CalculatorSession(
            evaluator=self.evaluator,
            history_limit=self.config.history_limit,
            precision=self.config.precision,
            error_token=self.config.error_token,
            on_notice=on_notice,
        )
        self.chart = ChartRenderer()
        self.solver = solver or WordProblemSolver(self.config.ai)
        self.listener_factory = listener_factory or self._default_listener

    def _default_listener(self) -> SpeechListener:
        return SpeechListener(
            language=self.config.voice.language,
            timeout=self.config.voice.timeout,
        )

    def _fail(self, error: CalculatorError, prefix: str = "") -> FeatureResult:
        if isinstance(error, CapabilityUnavailable):
            self.session.notify(str(error))
        message = f"{prefix}{error}" if isinstance(error, EvaluationError) else str(error)
        return FeatureResult(text=message, ok=False)

    def _notice(self, message: str) -> FeatureResult:
        self.session.notify(message)
        return FeatureResult(text=message, ok=False)

    # --- Tools ---

    def matrix_operation(self, operation: str, input_a: str, input_b: str = "") -> FeatureResult:
        """Run a matrix/vector operation and record it."""
        try:
            output = matrix.perform_matrix_operation(operation, input_a, input_b, self.evaluator)
        except CalculatorError as e:
            logger.info("Matrix/Vector calculation error: %s", e)
            return self._fail(e, prefix="Error: ")

        self.session.record(f"Matrix/Vector Op: {operation}", json.dumps(json.loads(output)))
        return FeatureResult(text=output)

    def solve_equation(self, equation: str) -> FeatureResult:
        """Solve a linear or quadratic equation and record it."""
        try:
            output = equations.solve_equation(equation, self.evaluator)
        except CalculatorError as e:
            logger.info("Equation solver error: %s", e)
            return self._fail(e, prefix="Error: Invalid equation format or calculation issue: ")

        self.session.record(f"Solved: {equation.strip()}", output)
        return FeatureResult(text=output)

    def convert_base(self, number: str, from_base: int, to_base: int) -> FeatureResult:
        """Convert an integer between bases and record it."""
        try:
            output = bases.convert_base(number, from_base, to_base)
        except CalculatorError as e:
            return self._fail(e)

        self.session.record(f"Convert {number.strip()} (base {from_base}) to base {to_base}", output)
        return FeatureResult(text=output)

    def statistic(self, kind: str, numbers: str) -> FeatureResult:
        """Compute one statistic and record it."""
        try:
            display, summary = stats.calculate_statistic(kind, numbers)
        except CalculatorError as e:
            return self._fail(e)

        self.session.record(f"Calculated {kind} for: {numbers.strip()}", summary)
        return FeatureResult(text=display)

    def all_statistics(self, numbers: str) -> FeatureResult:
        """Compute the full statistics summary and record it."""
        try:
            output = stats.calculate_all_statistics(numbers)
        except CalculatorError as e:
            return self._fail(e)

        self.session.record(f"Calculated all statistics for: {numbers.strip()}", output)
        return FeatureResult(text=output)

    def convert_unit(self, value: str, from_unit: str, to_unit: str) -> FeatureResult:
        """Convert a value between units. Conversions are not recorded."""
        output = units.format_conversion(value, from_unit, to_unit)
        return FeatureResult(text=output, ok=output not in ("", "Error"))

    def solve_word_problem(self, problem: str) -> FeatureResult:
        """Ask the text-generation service to solve a word problem."""
        try:
            output = self.solver.solve(problem)
        except CalculatorError as e:
            logger.info("Problem solver error: %s", e)
            return self._fail(e)

        self.session.record(f"Word Problem: {problem.strip()}", "Solved with AI")
        return FeatureResult(text=output)

    # --- Plotting ---

    def _table(self, expression: str) -> List[Point]:
        plot = self.config.plot
        return generate_function_table(
            expression,
            self.evaluator,
            start=plot.x_start,
            end=plot.x_end,
            step=plot.step,
        )

    def _latex(self, expression: str) -> str:
        try:
            return latex_for(expression, self.evaluator)
        except EvaluationError:
            return expression

    def plot_function(self, expression: str) -> FeatureResult:
        """Plot f(x) and record it."""
        expression = expression.strip()
        if not expression:
            return self._notice(EMPTY_FUNCTION_NOTICE)

        parsed = normalize(expression)
        table = self._table(parsed)
        if not table:
            return self._notice(NO_PLOT_DATA_NOTICE)

        self.chart.render([Series(f"f(x) = {expression}", FUNCTION_COLOR, table)])
        self.session.record(f"Plotted: f(x) = {expression}", "")
        return FeatureResult(
            text=f"f(x) = {expression}",
            latex=[f"f(x) = {self._latex(parsed)}"],
        )

    def plot_function_and_derivative(self, expression: str) -> FeatureResult:
        """Plot f(x) together with f'(x) and record it."""
        expression = expression.strip()
        if not expression:
            return self._notice(EMPTY_FUNCTION_NOTICE)

        parsed = normalize(expression)
        try:
            derivative = self.evaluator.derivative(parsed, "x")
        except EvaluationError as e:
            return self._notice(f"Invalid expression for derivative: {e}")

        series = [
            Series(f"f(x) = {expression}", PAIR_FUNCTION_COLOR, self._table(parsed)),
            Series(f"f'(x) = {derivative}", DERIVATIVE_COLOR, self._table(normalize(derivative))),
        ]
        self.chart.render(series)
        self.session.record(f"Plotted: f(x) = {expression} and f'(x) = {derivative}", "")
        return FeatureResult(
            text=f"f(x) = {expression}\nf'(x) = {derivative}",
            latex=[f"f(x) = {self._latex(parsed)}", f"f'(x) = {self._latex(derivative)}"],
        )

    def export_png(self, path: str = "graph.png") -> FeatureResult:
        """Save the current chart as PNG."""
        try:
            saved = self.chart.export_png(path)
        except CapabilityUnavailable as e:
            return self._fail(e)

        self.session.record("Exported graph to PNG", "")
        return FeatureResult(text=str(saved))

    def export_pdf(self, path: str = "graph.pdf") -> FeatureResult:
        """Save the current chart as PDF."""
        try:
            saved = self.chart.export_pdf(path)
        except CapabilityUnavailable as e:
            return self._fail(e)

        self.session.record("Exported graph to PDF", "")
        return FeatureResult(text=str(saved))

    # --- Voice ---

    def voice_input(self) -> FeatureResult:
        """Capture one spoken phrase and append it to the buffer."""
        try:
            transcript = self.listener_factory().listen_once()
        except CapabilityUnavailable as e:
            return self._fail(e)
        except ServiceError as e:
            return self._notice(f"Voice input error: {e}")

        return FeatureResult(text=self.session.append_spoken(transcript))
