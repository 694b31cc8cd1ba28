"""Descriptive statistics over a list of numbers."""

import math
import re
from collections import Counter
from typing import List, Tuple

import numpy as np

from .errors import InputError
from .evaluator import format_number

STATISTICS = ("mean", "median", "mode", "stddev")

_SEPARATORS = re.compile(r"[\s,]+")


def parse_numbers(text: str) -> List[float]:
    """Parse whitespace or comma separated numbers, skipping anything else.

    Raises:
        InputError: Empty input, or nothing in it parses as a number.
    """
    text = text.strip()
    if not text:
        raise InputError("Please enter numbers separated by spaces.")

    numbers = []
    for token in _SEPARATORS.split(text):
        try:
            value = float(token)
        except ValueError:
            continue
        if not math.isnan(value):
            numbers.append(value)

    if not numbers:
        raise InputError("No valid numbers found.")
    return numbers


def modes(numbers: List[float]) -> List[float]:
    """Return the most frequent values, in order of first appearance."""
    counts = Counter(numbers)
    top = max(counts.values())
    seen = []
    for n in numbers:
        if counts[n] == top and n not in seen:
            seen.append(n)
    return seen


def sample_variance(numbers: List[float]) -> float:
    if len(numbers) < 2:
        return math.nan
    return float(np.var(numbers, ddof=1))


def sample_stddev(numbers: List[float]) -> float:
    if len(numbers) < 2:
        return math.nan
    return float(np.std(numbers, ddof=1))


def fixed(value: float, places: int) -> str:
    """Format with a fixed number of decimals."""
    if math.isnan(value):
        return "NaN"
    return f"{value:.{places}f}"


def _join(values: List[float]) -> str:
    return ", ".join(format_number(v) for v in values)


def calculate_statistic(kind: str, text: str) -> Tuple[str, str]:
    """Compute a single statistic.

    Args:
        kind: One of ``mean``, ``median``, ``mode``, ``stddev``.
        text: Numbers separated by whitespace or commas.

    Returns:
        ``(display, summary)``: the display line (4 decimals) and the short
        form kept in history (2 decimals).
    """
    if kind not in STATISTICS:
        raise InputError("Invalid statistic.")
    numbers = parse_numbers(text)

    if kind == "mode":
        joined = _join(modes(numbers))
        return f"{kind}: {joined}", joined

    if kind == "mean":
        value = float(np.mean(numbers))
    elif kind == "median":
        value = float(np.median(numbers))
    else:
        value = sample_stddev(numbers)
    return f"{kind}: {fixed(value, 4)}", fixed(value, 2)


def calculate_all_statistics(text: str) -> str:
    """Compute the full statistics summary for a list of numbers."""
    numbers = parse_numbers(text)

    lines = [
        f"Mean: {fixed(float(np.mean(numbers)), 4)}",
        f"Median: {fixed(float(np.median(numbers)), 4)}",
        f"Mode(s): {_join(modes(numbers))}",
        f"Min: {fixed(float(np.min(numbers)), 4)}",
        f"Max: {fixed(float(np.max(numbers)), 4)}",
        f"Sum: {fixed(float(np.sum(numbers)), 4)}",
        f"Variance (sample): {fixed(sample_variance(numbers), 4)}",
        f"Standard Deviation (sample): {fixed(sample_stddev(numbers), 4)}",
    ]
    return "\n".join(lines)
