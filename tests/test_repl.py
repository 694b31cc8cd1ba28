"""Tests for repl.py - Interactive line handling."""

from unittest.mock import MagicMock

import pytest

from scicalc.app import CalculatorApp
from scicalc.repl import handle_line


@pytest.fixture
def app():
    """Create a calculator app without live services."""
    return CalculatorApp(solver=MagicMock(), listener_factory=MagicMock)


class TestHandleLine:
    """Tests for handle_line function."""

    def test_expression_is_evaluated(self, app, capsys):
        """Test a plain line is appended and evaluated."""
        assert handle_line(app, "2+2") is True
        assert app.session.screen == "4"
        assert "4" in capsys.readouterr().out

    def test_number_after_result_starts_over(self, app):
        """Test a number after a result replaces it."""
        handle_line(app, "2+2")
        handle_line(app, "5")
        assert app.session.buffer == "5"

    def test_operator_after_result_chains(self, app):
        """Test an operator continues from the result."""
        handle_line(app, "2+2")
        handle_line(app, "×10")
        assert app.session.screen == "40"

    def test_empty_line_reevaluates(self, app):
        """Test an empty line runs equals again."""
        handle_line(app, ":type 3*3")
        handle_line(app, "")
        assert app.session.screen == "9"

    def test_error_keeps_buffer(self, app, capsys):
        """Test a failed evaluation shows the error token."""
        handle_line(app, "(2+3")
        assert app.session.screen == "Error"
        assert app.session.buffer == "(2+3"
        assert "Error" in capsys.readouterr().out

    @pytest.mark.parametrize("command", [":quit", ":q", ":exit"])
    def test_quit(self, app, command):
        """Test quit commands stop the loop."""
        assert handle_line(app, command) is False

    def test_press(self, app):
        """Test keypad buttons."""
        handle_line(app, ":press 7 multiply 6 equals")
        assert app.session.screen == "42"

    def test_press_unknown(self, app, capsys):
        """Test unknown buttons are reported."""
        assert handle_line(app, ":press teleport") is True
        assert "Unknown function" in capsys.readouterr().out

    def test_key(self, app):
        """Test keyboard keys."""
        handle_line(app, ":type 12")
        handle_line(app, ":key Backspace")
        assert app.session.buffer == "1"

    def test_editing_commands(self, app):
        """Test :sign, :dot, :back and :clear."""
        handle_line(app, ":type 5")
        handle_line(app, ":sign")
        handle_line(app, ":dot")
        assert app.session.buffer == "-5."
        handle_line(app, ":back")
        assert app.session.buffer == "-5"
        handle_line(app, ":clear")
        assert app.session.buffer == ""

    def test_ans(self, app):
        """Test :ans appends the last result."""
        handle_line(app, "6+1")
        handle_line(app, ":type ×")
        handle_line(app, ":ans")
        assert app.session.buffer == "7×7"

    def test_history(self, app, capsys):
        """Test :history and :clear-history."""
        handle_line(app, "1+1")
        handle_line(app, ":history")
        assert "1+1" in capsys.readouterr().out
        handle_line(app, ":clear-history")
        assert len(app.session.history) == 0

    def test_tools(self, app, capsys):
        """Test the tool commands."""
        handle_line(app, ":solve 2x = 4")
        handle_line(app, ":base ff 16 10")
        handle_line(app, ":units 1 hour minute")
        handle_line(app, ':matrix determinant "[[1, 2], [3, 4]]"')
        handle_line(app, ":stats 1 2 3")
        out = capsys.readouterr().out
        assert "x = 2.0000000000" in out
        assert "255" in out
        assert "60.0000" in out
        assert "-2" in out
        assert "Mean: 2.0000" in out

    def test_base_with_bad_base(self, app, capsys):
        """Test non-integer bases."""
        handle_line(app, ":base 10 ten 2")
        assert "Bases must be whole numbers." in capsys.readouterr().out

    def test_missing_arguments(self, app, capsys):
        """Test usage errors."""
        handle_line(app, ":units 1")
        assert "Usage: :units V FROM TO" in capsys.readouterr().out

    def test_plot_and_export(self, app, tmp_path):
        """Test plotting and exporting."""
        handle_line(app, ":plot sin(x)")
        handle_line(app, f":export {tmp_path / 'plot.pdf'}")
        assert (tmp_path / "plot.pdf").exists()

    def test_unknown_command(self, app, capsys):
        """Test unknown commands."""
        assert handle_line(app, ":frobnicate") is True
        assert "Unknown command" in capsys.readouterr().out

    def test_help(self, app, capsys):
        """Test :help lists commands."""
        handle_line(app, ":help")
        assert ":press" in capsys.readouterr().out
