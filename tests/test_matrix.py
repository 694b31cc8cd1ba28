"""Tests for matrix.py - Matrix and vector operations."""

import json
import math

import pytest
import sympy as sp

from scicalc.errors import EvaluationError, InputError
from scicalc.matrix import apply_operation, perform_matrix_operation, to_jsonable

A = "[[1, 2], [3, 4]]"
B = "[[5, 6], [7, 8]]"


def run(operation, a, b=""):
    return json.loads(perform_matrix_operation(operation, a, b))


class TestPerformMatrixOperation:
    """Tests for perform_matrix_operation function."""

    def test_add(self):
        """Test matrix addition."""
        assert run("add", A, B) == [[6, 8], [10, 12]]

    def test_subtract(self):
        """Test matrix subtraction."""
        assert run("subtract", B, A) == [[4, 4], [4, 4]]

    def test_multiply(self):
        """Test matrix product."""
        assert run("multiply", A, B) == [[19, 22], [43, 50]]

    def test_multiply_by_scalar(self):
        """Test a scalar operand."""
        assert run("multiply", A, "2") == [[2, 4], [6, 8]]

    def test_inverse(self):
        """Test inverse with fractional entries."""
        assert run("inverse", A) == [[-2, 1], [1.5, -0.5]]

    def test_transpose(self):
        """Test transpose."""
        assert run("transpose", A) == [[1, 3], [2, 4]]

    def test_determinant(self):
        """Test determinant."""
        assert run("determinant", A) == -2

    def test_dot(self):
        """Test dot product of vectors."""
        assert run("dot", "[1, 2, 3]", "[4, 5, 6]") == 32

    def test_cross(self):
        """Test cross product of vectors."""
        assert run("cross", "[1, 2, 3]", "[4, 5, 6]") == [-3, 6, -3]

    def test_magnitude(self):
        """Test vector magnitude."""
        assert run("magnitude", "[3, 4]") == 5

    def test_display_symbols_in_operands(self):
        """Test operands go through the normalizer."""
        assert run("add", "[[√(4), 1]]", "[[1, 2×3]]") == [[3, 7]]

    def test_output_is_indented_json(self):
        """Test the output format."""
        assert perform_matrix_operation("determinant", A) == "-2"
        assert "\n  " in perform_matrix_operation("transpose", A)

    def test_empty_a(self):
        """Test matrix A is required."""
        with pytest.raises(InputError, match="Please enter matrix A."):
            perform_matrix_operation("add", "  ", B)

    def test_missing_b(self):
        """Test binary operations need matrix B."""
        with pytest.raises(InputError, match="Matrix B is required for add."):
            perform_matrix_operation("add", A)

    def test_invalid_operation(self):
        """Test unknown operations."""
        with pytest.raises(InputError, match="Invalid operation."):
            perform_matrix_operation("rotate", A)

    def test_singular_inverse(self):
        """Test inverting a singular matrix."""
        with pytest.raises(EvaluationError):
            perform_matrix_operation("inverse", "[[1, 2], [2, 4]]")

    def test_shape_mismatch(self):
        """Test adding matrices of different shapes."""
        with pytest.raises(EvaluationError):
            perform_matrix_operation("add", A, "[1, 2, 3]")

    def test_unary_on_scalar(self):
        """Test matrix-only operations reject scalars."""
        with pytest.raises(InputError):
            perform_matrix_operation("determinant", "5")

    def test_invalid_operand(self):
        """Test operands that do not evaluate."""
        with pytest.raises(EvaluationError):
            perform_matrix_operation("transpose", "[[1, 2]")


class TestApplyOperation:
    """Tests for apply_operation function."""

    def test_on_sympy_values(self):
        """Test operations on already-evaluated operands."""
        result = apply_operation("transpose", sp.Matrix([[1, 2]]))
        assert result == sp.Matrix([[1], [2]])


class TestToJsonable:
    """Tests for to_jsonable function."""

    def test_numbers(self):
        """Test SymPy numbers become plain numbers."""
        assert to_jsonable(sp.Integer(3)) == 3
        assert to_jsonable(sp.Rational(1, 4)) == 0.25
        assert to_jsonable(sp.sqrt(2)) == pytest.approx(1.4142135624)

    def test_complex(self):
        """Test complex numbers become text."""
        assert to_jsonable(sp.I * 2) == "2i"

    def test_non_finite(self):
        """Test infinite and undefined entries stay real."""
        assert to_jsonable(sp.Matrix([[sp.zoo, 1]])) == [[math.inf, 1]]
        assert to_jsonable(-sp.oo) == -math.inf
        assert math.isnan(to_jsonable(sp.nan))

    def test_non_finite_operand(self):
        """Test a division by zero inside an operand prints as Infinity."""
        text = perform_matrix_operation("transpose", "[[1/0, 1]]")
        assert json.loads(text) == [math.inf, 1]
        assert "NaN" not in text
