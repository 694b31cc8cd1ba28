"""Tests for cli.py - CLI interface."""

from unittest.mock import patch

import pytest
from click.testing import CliRunner

from scicalc.cli import main
from scicalc.config import API_KEY_ENV


@pytest.fixture
def runner():
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def project(tmp_path, monkeypatch):
    """Run commands against an empty project without an API key."""
    monkeypatch.delenv(API_KEY_ENV, raising=False)
    return ["--path", str(tmp_path)]


class TestCLIBasics:
    """Basic CLI tests."""

    def test_version(self, runner):
        """Test --version flag."""
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "scicalc" in result.output

    def test_help(self, runner):
        """Test --help flag."""
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "SciCalc" in result.output
        for command in ("eval", "plot", "matrix", "solve", "base", "stats", "units", "ask"):
            assert command in result.output


class TestCoreCommands:
    """Tests for eval, normalize and keys."""

    def test_eval(self, runner, project):
        """Test evaluating a display expression."""
        result = runner.invoke(main, project + ["eval", "5P(2) + √(16)"])
        assert result.exit_code == 0
        assert result.output.strip() == "24"

    def test_eval_error(self, runner, project):
        """Test a malformed expression exits non-zero."""
        result = runner.invoke(main, project + ["eval", "(2+3"])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_eval_uses_configured_precision(self, runner, tmp_path):
        """Test precision comes from the project config."""
        config_dir = tmp_path / ".scicalc"
        config_dir.mkdir()
        (config_dir / "config.json").write_text('{"precision": 3}')
        result = runner.invoke(main, ["--path", str(tmp_path), "eval", "1/3"])
        assert result.output.strip() == "0.333"

    def test_normalize(self, runner):
        """Test showing the evaluator form."""
        result = runner.invoke(main, ["normalize", "5P(3)"])
        assert result.output.strip() == "permutations(5,3)"

    def test_keys(self, runner, project):
        """Test replaying button presses."""
        result = runner.invoke(main, project + ["keys", "7", "multiply", "6", "equals"])
        assert result.exit_code == 0
        assert "42" in result.output

    def test_keys_unknown(self, runner, project):
        """Test unknown buttons."""
        result = runner.invoke(main, project + ["keys", "teleport"])
        assert result.exit_code == 1


class TestReplCommand:
    """Tests for the interactive loop."""

    def test_repl(self, runner, project):
        """Test a short session."""
        result = runner.invoke(main, project + ["repl"], input="2+2\n5\n:quit\n")
        assert result.exit_code == 0
        assert "4" in result.output
        assert "5" in result.output

    def test_default_is_repl(self, runner, project):
        """Test running without a command starts the loop."""
        result = runner.invoke(main, project, input="3*3\n")
        assert result.exit_code == 0
        assert "9" in result.output


class TestPlotCommand:
    """Tests for plot command."""

    def test_plot_png(self, runner, project, tmp_path):
        """Test plotting to PNG."""
        output = tmp_path / "out.png"
        result = runner.invoke(main, project + ["plot", "x^2", "-o", str(output)])
        assert result.exit_code == 0
        assert output.exists()
        assert "x^{2}" in result.output

    def test_plot_derivative_pdf(self, runner, project, tmp_path):
        """Test plotting with derivative to PDF."""
        output = tmp_path / "out.pdf"
        result = runner.invoke(main, project + ["plot", "x^3", "--derivative", "-o", str(output)])
        assert result.exit_code == 0
        assert output.exists()
        assert "3*x^2" in result.output

    def test_plot_no_data(self, runner, project, tmp_path):
        """Test a function without plottable points."""
        result = runner.invoke(main, project + ["plot", "y", "-o", str(tmp_path / "out.png")])
        assert result.exit_code == 1
        assert not (tmp_path / "out.png").exists()


class TestToolCommands:
    """Tests for the tool commands."""

    def test_matrix(self, runner, project):
        """Test a matrix operation."""
        result = runner.invoke(main, project + ["matrix", "[[1,2],[3,4]]", "--op", "determinant"])
        assert result.exit_code == 0
        assert result.output.strip() == "-2"

    @patch("scicalc.cli.questionary")
    def test_matrix_prompts_for_operation(self, mock_questionary, runner, project):
        """Test the operation is picked interactively."""
        mock_questionary.select.return_value.ask.return_value = "transpose"
        result = runner.invoke(main, project + ["matrix", "[1, 2]"])
        assert result.exit_code == 0
        assert "[" in result.output

    def test_matrix_error(self, runner, project):
        """Test a binary operation without B."""
        result = runner.invoke(main, project + ["matrix", "[1, 2]", "--op", "dot"])
        assert result.exit_code == 1
        assert "Matrix B is required for dot." in result.output

    def test_solve(self, runner, project):
        """Test solving an equation."""
        result = runner.invoke(main, project + ["solve", "x^2 - 4 = 0"])
        assert result.exit_code == 0
        assert "2.0000000000" in result.output

    def test_base(self, runner, project):
        """Test base conversion."""
        result = runner.invoke(main, project + ["base", "255", "--to", "16"])
        assert result.output.strip() == "FF"

    def test_base_invalid(self, runner, project):
        """Test invalid digits for the source base."""
        result = runner.invoke(main, project + ["base", "9", "-f", "8"])
        assert result.exit_code == 1

    def test_stats_all(self, runner, project):
        """Test the statistics summary."""
        result = runner.invoke(main, project + ["stats", "1", "2", "3"])
        assert "Mean: 2.0000" in result.output
        assert "Standard Deviation (sample): 1.0000" in result.output

    def test_stats_kind(self, runner, project):
        """Test a single statistic."""
        result = runner.invoke(main, project + ["stats", "1,2,2", "--kind", "mode"])
        assert result.output.strip() == "mode: 2"

    def test_units(self, runner, project):
        """Test unit conversion."""
        result = runner.invoke(main, project + ["units", "1", "kilometer", "meter"])
        assert result.exit_code == 0
        assert "1000.0000" in result.output

    @patch("scicalc.cli.questionary")
    def test_units_prompts(self, mock_questionary, runner, project):
        """Test units are picked interactively."""
        mock_questionary.select.return_value.ask.side_effect = ["time", "hour", "second"]
        result = runner.invoke(main, project + ["units", "2"])
        assert result.exit_code == 0
        assert "7200.0000" in result.output

    def test_units_invalid(self, runner, project):
        """Test incompatible units."""
        result = runner.invoke(main, project + ["units", "1", "meter", "gram"])
        assert result.exit_code == 1


class TestServiceCommands:
    """Tests for ask and listen."""

    def test_ask_without_key(self, runner, project):
        """Test a missing API key."""
        result = runner.invoke(main, project + ["ask", "What is 2+2?"])
        assert result.exit_code == 1
        assert "No API key configured" in result.output

    @patch("scicalc.app.WordProblemSolver")
    def test_ask(self, mock_solver, runner, project):
        """Test solving a word problem."""
        mock_solver.return_value.solve.return_value = "Final Answer: 4"
        result = runner.invoke(main, project + ["ask", "What", "is", "2+2?"])
        assert result.exit_code == 0
        assert "Final Answer: 4" in result.output
        mock_solver.return_value.solve.assert_called_once_with("What is 2+2?")

    @patch("scicalc.app.SpeechListener")
    def test_listen_and_evaluate(self, mock_listener, runner, project):
        """Test voice input with evaluation."""
        mock_listener.return_value.listen_once.return_value = "3 times 4"
        result = runner.invoke(main, project + ["listen", "--evaluate"])
        assert result.exit_code == 0
        assert "3 * 4" in result.output
        assert "12" in result.output
