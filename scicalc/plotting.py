"""Function plotting for SciCalc.

Builds (x, y) tables for an expression in ``x`` and renders them as a line
chart with matplotlib. Tables are computed with the standard-library
``math`` functions (radians), not with the interactive evaluator.
"""

import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

import sympy as sp
from matplotlib.figure import Figure

from .errors import CapabilityUnavailable, EvaluationError
from .evaluator import Evaluator

logger = logging.getLogger(__name__)

Y_LIMIT = 1e10
BACKGROUND = "#000000"
FOREGROUND = "#ffffff"
PDF_TITLE = "Advanced Calculator Plot"
NO_CHART_NOTICE = "No graph to export. Please plot a function first."

FUNCTION_COLOR = "#4285F4"
PAIR_FUNCTION_COLOR = "#00ffcc"
DERIVATIVE_COLOR = "#ff6600"


@dataclass
class Point:
    """A single plotted point."""

    x: float
    y: float


@dataclass
class Series:
    """A named point series drawn in one colour."""

    label: str
    color: str
    points: List[Point] = field(default_factory=list)

    @property
    def xs(self) -> List[float]:
        return [p.x for p in self.points]

    @property
    def ys(self) -> List[float]:
        return [p.y for p in self.points]


def generate_function_table(
    expression: str,
    evaluator: Optional[Evaluator] = None,
    start: float = -2 * math.pi,
    end: float = 2 * math.pi,
    step: float = 0.1,
) -> List[Point]:
    """Sample an expression in ``x`` over ``[start, end]``.

    Points where the expression is undefined, complex, NaN or has
    ``|y| >= 1e10`` are skipped. Coordinates are rounded to 2 places.

    Args:
        expression: Evaluator-grammar expression in ``x``.
        evaluator: Evaluator used to parse the expression.
        start: First x value.
        end: Last x value (inclusive).
        step: Distance between samples.

    Returns:
        List of points, possibly empty.
    """
    evaluator = evaluator or Evaluator()
    x = sp.Symbol("x")

    try:
        expr = evaluator.parse(expression, variables=("x",))
        # Factorials as gamma so non-integer x still samples.
        func = sp.lambdify(x, expr.rewrite(sp.gamma), modules="math")
    except EvaluationError as e:
        logger.debug("Cannot tabulate %r: %s", expression, e)
        return []
    except (TypeError, ValueError, NameError, SyntaxError, KeyError, AttributeError) as e:
        logger.debug("Cannot compile %r: %s", expression, e)
        return []

    count = int(math.floor((end - start) / step + 1e-9))
    table = []
    for i in range(count + 1):
        x_value = start + i * step
        try:
            y_value = float(func(x_value))
        except (ArithmeticError, ValueError, TypeError, NameError):
            continue
        if math.isnan(y_value) or abs(y_value) >= Y_LIMIT:
            continue
        table.append(Point(x=round(x_value, 2), y=round(y_value, 2)))

    return table


def y_range(series: List[Series]) -> Tuple[float, float]:
    """Compute the y-axis range across all series, padded by 10%."""
    values = [y for s in series for y in s.ys if not math.isnan(y)]
    if not values:
        return -10.0, 10.0

    y_min, y_max = min(values), max(values)
    padding = (y_max - y_min) * 0.1
    y_min -= padding
    y_max += padding
    if y_min == y_max:
        y_min -= 1
        y_max += 1
    return y_min, y_max


def latex_for(expression: str, evaluator: Optional[Evaluator] = None) -> str:
    """Return a LaTeX rendering of an expression in ``x``."""
    evaluator = evaluator or Evaluator()
    return sp.latex(evaluator.parse(expression, variables=("x",)))


class ChartRenderer:
    """Draws point series as a line chart; re-rendering replaces the chart."""

    def __init__(self):
        self.figure: Optional[Figure] = None

    def render(self, series: List[Series], title: Optional[str] = None) -> Figure:
        """Render series on linear axes with a legend.

        Any previous chart is destroyed first.
        """
        self.destroy()

        figure = Figure(figsize=(8, 5), facecolor=BACKGROUND)
        ax = figure.add_subplot(111)
        ax.set_facecolor(BACKGROUND)

        for s in series:
            ax.plot(s.xs, s.ys, label=s.label, color=s.color, linewidth=2)

        ax.set_xscale("linear")
        ax.set_yscale("linear")
        ax.set_ylim(*y_range(series))
        ax.set_xlabel("x", color=FOREGROUND)
        ax.set_ylabel("y", color=FOREGROUND)
        ax.tick_params(colors=FOREGROUND)
        ax.grid(True, color=FOREGROUND, alpha=0.2)
        for spine in ax.spines.values():
            spine.set_color(FOREGROUND)
        if title:
            ax.set_title(title, color=FOREGROUND)
        ax.legend(facecolor=BACKGROUND, edgecolor=FOREGROUND, labelcolor=FOREGROUND)

        self.figure = figure
        return figure

    def destroy(self):
        """Drop the current chart, if any."""
        if self.figure is not None:
            self.figure.clear()
            self.figure = None

    def _require_chart(self) -> Figure:
        if self.figure is None:
            raise CapabilityUnavailable(NO_CHART_NOTICE)
        return self.figure

    def export_png(self, path) -> Path:
        """Save the current chart as PNG."""
        figure = self._require_chart()
        path = Path(path)
        figure.savefig(path, format="png", facecolor=figure.get_facecolor())
        return path

    def export_pdf(self, path) -> Path:
        """Save the current chart as a titled single-page PDF."""
        figure = self._require_chart()
        path = Path(path)
        heading = figure.suptitle(PDF_TITLE, color=FOREGROUND)
        try:
            figure.savefig(path, format="pdf", facecolor=figure.get_facecolor())
        finally:
            heading.remove()
        return path
