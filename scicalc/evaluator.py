"""Expression evaluator built on SymPy.

Accepts evaluator-grammar text (the output of ``normalizer.normalize``) and
returns a tagged result:

- NumberResult: a real number
- TextResult: plain text such as ``true``/``false``
- StructuredResult: matrices, complex numbers and symbolic forms

Grammar on top of plain Python/SymPy syntax:
- ``^`` is power, ``n!`` is factorial, ``a mod b`` is modulus
- implicit multiplication (``2pi``, ``3(4)``)
- ``[[1, 2], [3, 4]]`` bracket literals are matrices
- ``log`` is base 10 and ``ln`` is the natural logarithm
"""

import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

import sympy as sp
from sympy.core.function import AppliedUndef
from sympy.logic.boolalg import BooleanAtom
from sympy.parsing.sympy_parser import (
    convert_xor,
    implicit_multiplication,
    parse_expr,
    standard_transformations,
)
from sympy.printing.str import StrPrinter

from .errors import EvaluationError

logger = logging.getLogger(__name__)

DEFAULT_PRECISION = 10

TRANSFORMATIONS = standard_transformations + (implicit_multiplication, convert_xor)

_MOD_PATTERN = re.compile(r"(?<![A-Za-z_])mod(?![A-Za-z_])")
# A number glued to a name ("2pi", "5x") is not a valid token; exponents stay.
_NUMBER_THEN_NAME = re.compile(r"(\d)(?=[A-Za-z_])(?![eE][+-]?\d)")
# A name directly followed by "(" is a call.
_CALL_PATTERN = re.compile(r"(?<![\w.])([A-Za-z_]\w*)\s*\(")


def log10(x):
    """Base-10 logarithm."""
    return sp.log(x, 10)


def repeated_factorial(n):
    """``n!!`` read as ``(n!)!``."""
    return sp.factorial(sp.factorial(n))


# Names the parser transformations emit; everything else must come from scope.
_PARSER_GLOBALS = {
    "Integer": sp.Integer,
    "Float": sp.Float,
    "Rational": sp.Rational,
    "Symbol": sp.Symbol,
    "Function": sp.Function,
    "factorial": sp.factorial,
    "factorial2": repeated_factorial,
    "Matrix": sp.Matrix,
}


def non_finite(value) -> Optional[float]:
    """Return the float for an infinite or NaN SymPy value, else None."""
    if value is sp.nan:
        return math.nan
    if value is sp.oo or value is sp.zoo:
        return math.inf
    if value is sp.S.NegativeInfinity:
        return -math.inf
    return None


def _check_counting_args(name: str, n, k) -> None:
    for value in (n, k):
        if value.is_number and not (value.is_integer and value.is_nonnegative):
            raise ValueError(f"{name} requires non-negative integer arguments")
    if n.is_number and k.is_number and k > n:
        raise ValueError(f"{name}: k must be less than or equal to n")


def permutations(n, k=None):
    """Number of ordered selections of k items out of n (n! when k is omitted)."""
    n = sp.sympify(n)
    if k is None:
        _check_counting_args("permutations", n, sp.Integer(0))
        return sp.factorial(n)
    k = sp.sympify(k)
    _check_counting_args("permutations", n, k)
    return sp.ff(n, k)


def combinations(n, k):
    """Number of unordered selections of k items out of n."""
    n, k = sp.sympify(n), sp.sympify(k)
    _check_counting_args("combinations", n, k)
    return sp.binomial(n, k)


# Built-ins the evaluator always knows about.
BUILTINS: Dict[str, Any] = {
    "pi": sp.pi,
    "e": sp.E,
    "E": sp.E,
    "i": sp.I,
    "I": sp.I,
    "Infinity": sp.oo,
    "sqrt": sp.sqrt,
    "cbrt": sp.cbrt,
    "abs": sp.Abs,
    "Abs": sp.Abs,
    "asin": sp.asin,
    "acos": sp.acos,
    "atan": sp.atan,
    "sinh": sp.sinh,
    "cosh": sp.cosh,
    "tanh": sp.tanh,
    "floor": sp.floor,
    "ceil": sp.ceiling,
    "factorial": sp.factorial,
    "ff": sp.ff,
    "binomial": sp.binomial,
    "log10": log10,
    "Matrix": sp.Matrix,
}

# Scope the calculator binds for every interactive evaluation.
CALCULATOR_SCOPE: Dict[str, Any] = {
    "PI": sp.pi,
    "sin": sp.sin,
    "cos": sp.cos,
    "tan": sp.tan,
    "log": log10,
    "ln": sp.log,
    "exp": sp.exp,
    "permutations": permutations,
    "combinations": combinations,
}


class ExpressionPrinter(StrPrinter):
    """Print SymPy expressions back in evaluator grammar."""

    def _print_log(self, expr):
        return "ln(%s)" % self._print(expr.args[0])


def to_text(expr) -> str:
    """Render a SymPy expression as evaluator-grammar text."""
    return ExpressionPrinter().doprint(expr).replace("**", "^")


# --- Result formatting ---


def format_number(value: float, precision: int = DEFAULT_PRECISION) -> str:
    """Format a real number for display.

    Rounds to ``precision`` decimal places and drops a zero fractional part,
    so ``4.0`` prints as ``4`` and ``0.1 + 0.2`` as ``0.3``.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"

    rounded = round(value, precision)
    if rounded == 0:
        return "0"
    if rounded.is_integer() and abs(rounded) < 1e21:
        return str(int(rounded))
    return repr(rounded)


def format_complex(value: complex, precision: int = DEFAULT_PRECISION) -> str:
    """Format a complex number as ``a + bi``."""
    real = round(value.real, precision)
    imag = round(value.imag, precision)
    if imag == 0:
        return format_number(real, precision)

    magnitude = abs(imag)
    imag_text = "i" if magnitude == 1 else f"{format_number(magnitude, precision)}i"
    if real == 0:
        return imag_text if imag > 0 else f"-{imag_text}"
    sign = "+" if imag > 0 else "-"
    return f"{format_number(real, precision)} {sign} {imag_text}"


def _format_element(value, precision: int) -> str:
    if isinstance(value, sp.MatrixBase):
        return format_matrix(value, precision)
    if isinstance(value, sp.Basic) and value.is_number:
        special = non_finite(value)
        if special is not None:
            return format_number(special, precision)
        numeric = complex(sp.N(value))
        if numeric.imag == 0:
            return format_number(numeric.real, precision)
        return format_complex(numeric, precision)
    return to_text(value)


def format_matrix(matrix, precision: int = DEFAULT_PRECISION) -> str:
    """Format a matrix as nested bracket lists.

    Column vectors print as a flat list.
    """
    if matrix.cols == 1:
        items = [_format_element(v, precision) for v in matrix]
        return "[" + ", ".join(items) + "]"

    rows = []
    for r in range(matrix.rows):
        items = [_format_element(matrix[r, c], precision) for c in range(matrix.cols)]
        rows.append("[" + ", ".join(items) + "]")
    return "[" + ", ".join(rows) + "]"


class EvalResult:
    """A value returned by the evaluator."""

    def format(self, precision: int = DEFAULT_PRECISION) -> str:
        raise NotImplementedError


@dataclass
class NumberResult(EvalResult):
    """A real number."""

    value: float

    def format(self, precision: int = DEFAULT_PRECISION) -> str:
        return format_number(self.value, precision)


@dataclass
class TextResult(EvalResult):
    """A result that is already display text."""

    text: str

    def format(self, precision: int = DEFAULT_PRECISION) -> str:
        return self.text


@dataclass
class StructuredResult(EvalResult):
    """A matrix, complex number or symbolic form."""

    value: Any

    def format(self, precision: int = DEFAULT_PRECISION) -> str:
        if isinstance(self.value, complex):
            return format_complex(self.value, precision)
        if isinstance(self.value, sp.MatrixBase):
            return format_matrix(self.value, precision)
        return to_text(self.value)


# --- Evaluator ---


def _wrap_matrix_literals(text: str) -> str:
    """Turn top-level ``[...]`` literals into ``Matrix([...])`` calls."""
    out = []
    depth = 0
    for ch in text:
        if ch == "[":
            if depth == 0:
                out.append("Matrix(")
            depth += 1
            out.append(ch)
        elif ch == "]":
            depth -= 1
            out.append(ch)
            if depth == 0:
                out.append(")")
        else:
            out.append(ch)
    return "".join(out)


class Evaluator:
    """Evaluator capability over SymPy.

    Args:
        scope: Names bound for every evaluation. Defaults to the calculator
            scope (``PI``, trig in radians, ``log`` base 10, ``ln``, ``exp``,
            ``permutations``, ``combinations``).
    """

    def __init__(self, scope: Optional[Dict[str, Any]] = None):
        self.scope = dict(CALCULATOR_SCOPE if scope is None else scope)

    def _local_dict(
        self,
        variables: Iterable[str] = (),
        scope: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        local_dict: Dict[str, Any] = dict(BUILTINS)
        local_dict.update(self.scope)
        for name in variables:
            local_dict[name] = sp.Symbol(name)
        for name, value in (scope or {}).items():
            local_dict[name] = value if callable(value) else sp.sympify(value)
        return local_dict

    def parse(
        self,
        text: str,
        variables: Iterable[str] = (),
        scope: Optional[Dict[str, Any]] = None,
    ):
        """Parse evaluator-grammar text into a SymPy object.

        Args:
            text: Expression text.
            variables: Names to treat as free symbols.
            scope: Extra name bindings for this call.

        Returns:
            The parsed (and evaluated) SymPy expression or matrix.

        Raises:
            EvaluationError: If the text cannot be parsed or evaluated.
        """
        if not text or not text.strip():
            raise EvaluationError("Empty expression")
        if "__" in text:
            raise EvaluationError("Unsupported expression")

        source = _MOD_PATTERN.sub("%", _NUMBER_THEN_NAME.sub(r"\1 ", text))
        source = _wrap_matrix_literals(source)
        local_dict = self._local_dict(variables, scope)

        # Implicit multiplication would read "foo(2)" as "foo*2".
        for name in _CALL_PATTERN.findall(source):
            if name not in local_dict and name not in _PARSER_GLOBALS:
                raise EvaluationError(f"Undefined function {name}")

        try:
            return parse_expr(
                source,
                local_dict=local_dict,
                global_dict=dict(_PARSER_GLOBALS),
                transformations=TRANSFORMATIONS,
            )
        except Exception as e:
            raise EvaluationError(str(e) or type(e).__name__) from e

    def evaluate(self, text: str, scope: Optional[Dict[str, Any]] = None) -> EvalResult:
        """Evaluate text to a concrete result.

        Raises:
            EvaluationError: On syntax errors, undefined names, or results
                that are not concrete values.
        """
        logger.debug("Expression sent to evaluator: %s", text)
        value = self.parse(text, scope=scope)
        return self._to_result(value)

    def value(self, text: str, scope: Optional[Dict[str, Any]] = None):
        """Evaluate text and return the raw SymPy value (number or matrix)."""
        value = self.parse(text, scope=scope)
        self._check_defined(value)
        return value

    def simplify(self, text: str, variables: Iterable[str] = ("x",)) -> str:
        """Simplify an expression and return it as text."""
        expr = self.parse(text, variables=variables)
        try:
            return to_text(sp.simplify(expr))
        except Exception as e:
            raise EvaluationError(str(e)) from e

    def derivative(self, text: str, variable: str = "x") -> str:
        """Differentiate an expression with respect to ``variable``.

        Returns:
            The derivative as evaluator-grammar text.
        """
        expr = self.parse(text, variables=(variable,))
        if isinstance(expr, sp.MatrixBase) or not isinstance(expr, sp.Basic):
            raise EvaluationError("Derivative needs a scalar expression")
        try:
            return to_text(sp.diff(expr, sp.Symbol(variable)))
        except Exception as e:
            raise EvaluationError(str(e)) from e

    @staticmethod
    def _check_defined(value) -> None:
        if isinstance(value, sp.MatrixBase):
            for element in value:
                Evaluator._check_defined(element)
            return
        if not isinstance(value, sp.Basic) or isinstance(value, BooleanAtom):
            return
        undefined_funcs = value.atoms(AppliedUndef)
        if undefined_funcs:
            name = sorted(str(f.func) for f in undefined_funcs)[0]
            raise EvaluationError(f"Undefined function {name}")
        if value.free_symbols:
            name = sorted(str(s) for s in value.free_symbols)[0]
            raise EvaluationError(f"Undefined symbol {name}")

    def _to_result(self, value) -> EvalResult:
        if isinstance(value, (bool, BooleanAtom)):
            return TextResult("true" if bool(value) else "false")
        if isinstance(value, sp.MatrixBase):
            self._check_defined(value)
            return StructuredResult(value)
        if isinstance(value, (int, float)):
            return NumberResult(float(value))
        if not isinstance(value, sp.Basic):
            raise EvaluationError(f"Unsupported result type: {type(value).__name__}")

        self._check_defined(value)

        special = non_finite(value)
        if special is not None:
            return NumberResult(special)

        if value.is_number:
            real, imag = sp.N(value).as_real_imag()
            try:
                real_f, imag_f = float(real), float(imag)
            except OverflowError:
                return NumberResult(math.inf if real > 0 else -math.inf)
            except TypeError as e:
                raise EvaluationError(str(e)) from e
            if imag_f == 0:
                return NumberResult(real_f)
            return StructuredResult(complex(real_f, imag_f))

        return StructuredResult(value)


def get_evaluator() -> Evaluator:
    """Get an evaluator bound to the calculator scope."""
    return Evaluator()
