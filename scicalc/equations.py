"""Equation solver for linear and quadratic equations in ``x``."""

import math
from dataclasses import dataclass
from typing import Optional

import sympy as sp
from sympy.polys.polyerrors import GeneratorsError, PolynomialError

from .errors import EvaluationError, InputError
from .evaluator import Evaluator
from .normalizer import normalize

EPSILON = 1e-9


@dataclass
class Coefficients:
    """Coefficients of ``a*x^2 + b*x + c``."""

    a: float
    b: float
    c: float


def to_zero_form(equation: str) -> str:
    """Rewrite ``lhs = rhs`` as ``(lhs) - (rhs)``."""
    if "=" not in equation:
        return equation
    parts = equation.split("=")
    return f"({parts[0].strip()}) - ({parts[1].strip()})"


def extract_coefficients(expression: str, evaluator: Optional[Evaluator] = None) -> Coefficients:
    """Extract quadratic coefficients from an expression in ``x``.

    Raises:
        EvaluationError: If the expression is not a polynomial in ``x`` of
            degree 2 or less with numeric coefficients.
    """
    evaluator = evaluator or Evaluator()
    x = sp.Symbol("x")
    expr = evaluator.parse(expression, variables=("x",))

    try:
        poly = sp.Poly(sp.expand(sp.simplify(expr)), x)
    except (PolynomialError, GeneratorsError, TypeError, ValueError, AttributeError) as e:
        raise EvaluationError("Only polynomial equations in x are supported.") from e

    if poly.degree() > 2:
        raise EvaluationError("Only linear and quadratic equations are supported.")

    try:
        a, b, c = (float(poly.coeff_monomial(m)) for m in (x**2, x, 1))
    except TypeError as e:
        raise EvaluationError("Coefficients must be numeric.") from e

    return Coefficients(a=round(a, 10), b=round(b, 10), c=round(c, 10))


def _fixed(value: float) -> str:
    # Adding 0.0 turns -0.0 into 0.0
    return f"{value + 0.0:.10f}"


def describe_solution(coefficients: Coefficients) -> str:
    """Solve ``a*x^2 + b*x + c = 0`` and describe the roots."""
    a, b, c = coefficients.a, coefficients.b, coefficients.c

    if abs(a) > EPSILON:
        discriminant = b * b - 4 * a * c
        if discriminant >= 0:
            x1 = (-b + math.sqrt(discriminant)) / (2 * a)
            x2 = (-b - math.sqrt(discriminant)) / (2 * a)
            return f"x₁ = {_fixed(x1)}, x₂ = {_fixed(x2)}"
        real = _fixed(-b / (2 * a))
        imag = _fixed(math.sqrt(abs(discriminant)) / (2 * a))
        return f"x₁ = {real} + {imag}i, x₂ = {real} - {imag}i"

    if abs(b) > EPSILON:
        return f"x = {_fixed(-c / b)}"

    if abs(c) < EPSILON:
        return "Equation is an identity (true for all x)."
    return "Equation has no solution."


def solve_equation(equation: str, evaluator: Optional[Evaluator] = None) -> str:
    """Solve a linear or quadratic equation such as ``x^2 - 4 = 0``.

    Returns:
        A description of the roots.

    Raises:
        InputError: Empty input.
        EvaluationError: The equation could not be parsed or is unsupported.
    """
    text = equation.strip()
    if not text:
        raise InputError("Please enter an equation.")
    expression = to_zero_form(normalize(text))
    return describe_solution(extract_coefficients(expression, evaluator))
