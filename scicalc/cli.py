"""CLI interface for SciCalc.

Commands:
- repl: Interactive calculator (default when no command is given)
- eval: Evaluate an expression
- normalize: Show the evaluator form of display text
- keys: Replay keypad button presses
- plot: Plot a function (optionally with its derivative) to PNG/PDF
- matrix, solve, base, stats, units: Calculator tools
- ask: Solve a word problem with AI
- listen: Voice input
"""

import logging
import sys
from pathlib import Path

import click
import questionary
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel

from . import __version__
from .app import CalculatorApp, FeatureResult
from .config import load_config
from .errors import InputError
from .keypad import press_button
from .matrix import MATRIX_OPERATIONS
from .normalizer import normalize as normalize_text
from .repl import handle_line, show_screen
from .stats import STATISTICS
from .units import UNIT_CATEGORIES, default_units


console = Console()


def _configure_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _get_app(ctx) -> CalculatorApp:
    """Build the calculator for the current project path."""
    config = load_config(ctx.obj["project_path"])
    return CalculatorApp(
        config,
        on_notice=lambda message: console.print(f"[yellow]{escape(message)}[/yellow]"),
    )


def _emit(result: FeatureResult):
    """Print a feature result and exit non-zero on failure."""
    if not result.ok:
        console.print(f"[red]{escape(result.text or 'Error')}[/red]")
        sys.exit(1)
    console.print(result.text, markup=False)
    for line in result.latex:
        console.print(f"[dim]LaTeX:[/dim] {escape(line)}", highlight=False)


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="scicalc")
@click.option("--path", "-p", default=".", help="Project path holding .scicalc/config.json")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx, path: str, verbose: bool):
    """SciCalc - Scientific calculator for the terminal.

    Run without a command to start the interactive calculator.
    """
    _configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["project_path"] = str(Path(path).resolve())

    if ctx.invoked_subcommand is None:
        ctx.invoke(repl)


# --- Core ---


@main.command()
@click.pass_context
def repl(ctx):
    """Start the interactive calculator (:help for commands)."""
    app = _get_app(ctx)
    console.print(Panel.fit(
        f"[bold]SciCalc[/bold] v{__version__}\n"
        "Type an expression and press Enter. :help for commands, :quit to exit.",
        border_style="blue",
    ))

    while True:
        try:
            line = click.prompt("calc", default="", show_default=False, prompt_suffix="> ")
        except (EOFError, click.Abort):
            break
        if not handle_line(app, line):
            break


@main.command(name="eval")
@click.argument("expression", nargs=-1, required=True)
@click.pass_context
def eval_command(ctx, expression):
    """Evaluate an EXPRESSION written with display symbols.

    Example: scicalc eval "5P(2) + √(16)"
    """
    app = _get_app(ctx)
    app.session.append(" ".join(expression))
    result = app.session.equals()
    if result is None:
        console.print(f"[red]{escape(app.session.screen or 'Error')}[/red]")
        sys.exit(1)
    console.print(result, markup=False, highlight=False)


@main.command()
@click.argument("text", nargs=-1, required=True)
def normalize(text):
    """Show the evaluator form of display TEXT."""
    console.print(normalize_text(" ".join(text)), markup=False, highlight=False)


@main.command()
@click.argument("actions", nargs=-1, required=True)
@click.pass_context
def keys(ctx, actions):
    """Replay keypad button ACTIONS and show the screen.

    Example: scicalc keys 7 multiply 6 equals
    """
    app = _get_app(ctx)
    try:
        for action in actions:
            press_button(app.session, action)
    except InputError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)
    show_screen(app)


# --- Plotting ---


@main.command()
@click.argument("expression")
@click.option("--derivative", "-d", is_flag=True, help="Also plot f'(x)")
@click.option(
    "--output",
    "-o",
    default="graph.png",
    help="Output file (.png or .pdf)",
)
@click.pass_context
def plot(ctx, expression: str, derivative: bool, output: str):
    """Plot f(x) = EXPRESSION and save the chart."""
    app = _get_app(ctx)
    if derivative:
        result = app.plot_function_and_derivative(expression)
    else:
        result = app.plot_function(expression)
    _emit(result)

    if output.lower().endswith(".pdf"):
        saved = app.export_pdf(output)
    else:
        saved = app.export_png(output)
    if saved.ok:
        console.print(f"[green]Saved:[/green] {escape(saved.text)}")
    else:
        _emit(saved)


# --- Tools ---


@main.command()
@click.argument("matrix_a")
@click.argument("matrix_b", required=False, default="")
@click.option("--op", "operation", type=click.Choice(MATRIX_OPERATIONS), help="Operation to perform")
@click.pass_context
def matrix(ctx, matrix_a: str, matrix_b: str, operation: str):
    """Run a matrix/vector operation on MATRIX_A [MATRIX_B].

    Example: scicalc matrix "[[1,2],[3,4]]" --op determinant
    """
    if not operation:
        operation = questionary.select(
            "Operation:",
            choices=list(MATRIX_OPERATIONS),
        ).ask()
        if not operation:
            sys.exit(1)
    _emit(_get_app(ctx).matrix_operation(operation, matrix_a, matrix_b))


@main.command()
@click.argument("equation", nargs=-1, required=True)
@click.pass_context
def solve(ctx, equation):
    """Solve a linear or quadratic EQUATION in x.

    Example: scicalc solve "x^2 - 5x + 6 = 0"
    """
    _emit(_get_app(ctx).solve_equation(" ".join(equation)))


@main.command()
@click.argument("number")
@click.option("--from", "-f", "from_base", type=int, default=10, show_default=True, help="Base of NUMBER")
@click.option("--to", "-t", "to_base", type=int, default=2, show_default=True, help="Target base")
@click.pass_context
def base(ctx, number: str, from_base: int, to_base: int):
    """Convert an integer NUMBER between bases 2 and 36."""
    _emit(_get_app(ctx).convert_base(number, from_base, to_base))


@main.command()
@click.argument("numbers", nargs=-1, required=True)
@click.option(
    "--kind",
    "-k",
    type=click.Choice(("all",) + tuple(STATISTICS)),
    default="all",
    show_default=True,
    help="Statistic to compute",
)
@click.pass_context
def stats(ctx, numbers, kind: str):
    """Compute statistics for NUMBERS."""
    app = _get_app(ctx)
    text = " ".join(numbers)
    if kind == "all":
        _emit(app.all_statistics(text))
    else:
        _emit(app.statistic(kind, text))


@main.command()
@click.argument("value")
@click.argument("from_unit", required=False)
@click.argument("to_unit", required=False)
@click.option("--category", "-c", type=click.Choice(list(UNIT_CATEGORIES)), help="Unit category")
@click.pass_context
def units(ctx, value: str, from_unit: str, to_unit: str, category: str):
    """Convert VALUE from FROM_UNIT to TO_UNIT.

    Units that are not given are picked interactively.
    """
    if not from_unit or not to_unit:
        if not category:
            category = questionary.select(
                "Category:",
                choices=list(UNIT_CATEGORIES),
            ).ask()
            if not category:
                sys.exit(1)
        default_from, default_to = default_units(category)
        from_unit = from_unit or questionary.select(
            "From:",
            choices=UNIT_CATEGORIES[category],
            default=default_from,
        ).ask()
        to_unit = to_unit or questionary.select(
            "To:",
            choices=UNIT_CATEGORIES[category],
            default=default_to,
        ).ask()
        if not from_unit or not to_unit:
            sys.exit(1)

    result = _get_app(ctx).convert_unit(value, from_unit, to_unit)
    if result.ok:
        console.print(f"{escape(value)} {from_unit} = [bold]{result.text}[/bold] {to_unit}")
    else:
        _emit(result)


# --- Services ---


@main.command()
@click.argument("problem", nargs=-1, required=True)
@click.pass_context
def ask(ctx, problem):
    """Solve a word PROBLEM with the AI service."""
    app = _get_app(ctx)
    with console.status("Solving problem..."):
        result = app.solve_word_problem(" ".join(problem))
    _emit(result)


@main.command()
@click.option("--evaluate", "-e", is_flag=True, help="Evaluate the spoken expression")
@click.pass_context
def listen(ctx, evaluate: bool):
    """Capture one spoken expression from the microphone."""
    app = _get_app(ctx)
    with console.status("Listening..."):
        result = app.voice_input()
    if not result.ok:
        _emit(result)
    console.print(result.text, markup=False, highlight=False)

    if evaluate:
        app.session.equals()
        show_screen(app)


if __name__ == "__main__":
    main()
