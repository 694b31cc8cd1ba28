"""Matrix and vector operations.

Operands are evaluator expressions such as ``[[1, 2], [3, 4]]`` or
``[1, 2, 3]``; results are rendered as JSON.
"""

import json
from typing import Any, Optional

import sympy as sp

from .errors import EvaluationError, InputError
from .evaluator import Evaluator, format_complex, non_finite
from .normalizer import normalize

BINARY_OPERATIONS = ("add", "subtract", "multiply", "dot", "cross")
UNARY_OPERATIONS = ("inverse", "transpose", "determinant", "magnitude")
MATRIX_OPERATIONS = BINARY_OPERATIONS + UNARY_OPERATIONS


def _require_matrix(value, operation: str):
    if not isinstance(value, sp.MatrixBase):
        raise InputError(f"{operation} needs a matrix or vector.")
    return value


def apply_operation(operation: str, a, b=None):
    """Apply a matrix/vector operation to already-evaluated operands.

    Raises:
        InputError: Unknown operation, or a missing/invalid operand.
        EvaluationError: The operation is undefined for these operands.
    """
    if operation not in MATRIX_OPERATIONS:
        raise InputError("Invalid operation.")
    if operation in BINARY_OPERATIONS and b is None:
        raise InputError(f"Matrix B is required for {operation}.")

    try:
        if operation == "add":
            return a + b
        if operation == "subtract":
            return a - b
        if operation == "multiply":
            return a * b
        if operation == "inverse":
            return _require_matrix(a, operation).inv()
        if operation == "transpose":
            return _require_matrix(a, operation).T
        if operation == "determinant":
            return _require_matrix(a, operation).det()
        if operation == "dot":
            return _require_matrix(a, operation).dot(_require_matrix(b, operation))
        if operation == "cross":
            return _require_matrix(a, operation).cross(_require_matrix(b, operation))
        return _require_matrix(a, operation).norm()
    except InputError:
        raise
    except (ValueError, TypeError, AttributeError, ArithmeticError) as e:
        raise EvaluationError(str(e)) from e


def to_jsonable(value) -> Any:
    """Convert a SymPy number or matrix into plain JSON-friendly values."""
    if isinstance(value, sp.MatrixBase):
        if value.cols == 1:
            return [to_jsonable(v) for v in value]
        return [[to_jsonable(value[r, c]) for c in range(value.cols)] for r in range(value.rows)]
    if isinstance(value, sp.Basic) and value.is_number:
        if value.is_Integer:
            return int(value)
        special = non_finite(value)
        if special is not None:
            return special
        numeric = complex(sp.N(value))
        if numeric.imag == 0:
            real = round(numeric.real, 10)
            return int(real) if real.is_integer() else real
        return format_complex(numeric)
    if isinstance(value, (int, float)):
        return value
    return str(value)


def perform_matrix_operation(
    operation: str,
    input_a: str,
    input_b: str = "",
    evaluator: Optional[Evaluator] = None,
) -> str:
    """Evaluate operands and apply a matrix/vector operation.

    Args:
        operation: One of ``MATRIX_OPERATIONS``.
        input_a: First operand expression.
        input_b: Second operand expression (binary operations only).
        evaluator: Evaluator used for the operands.

    Returns:
        The result as indented JSON.
    """
    evaluator = evaluator or Evaluator()
    input_a = input_a.strip()
    input_b = input_b.strip()
    if not input_a:
        raise InputError("Please enter matrix A.")

    a = evaluator.value(normalize(input_a))
    b = evaluator.value(normalize(input_b)) if input_b else None
    result = apply_operation(operation, a, b)
    return json.dumps(to_jsonable(result), indent=2)
