"""Interactive calculator loop.

A plain line is appended to the buffer and evaluated, so ``2+2`` shows
``4`` and a following ``5`` starts a new expression. An empty line
re-evaluates the buffer. Lines starting with ``:`` are commands:

    :type TEXT         append TEXT without evaluating
    :press ACTION...   press keypad buttons (e.g. ``:press 7 multiply 6 equals``)
    :key KEY           press a keyboard key (Enter, Backspace, Escape, ...)
    :clear :back :sign :dot :ans
    :history           show history
    :clear-history     empty history
    :plot EXPR         plot f(x)
    :deriv EXPR        plot f(x) and f'(x)
    :export PATH       save the current chart (.png or .pdf)
    :matrix OP A [B]   matrix/vector operation
    :solve EQUATION    solve a linear or quadratic equation
    :base N FROM TO    convert between bases
    :stats NUMBERS     statistics summary
    :units V FROM TO   unit conversion
    :ask PROBLEM       solve a word problem with AI
    :listen            voice input
    :help :quit
"""

import shlex
from typing import Callable, Dict, List

from rich.console import Console
from rich.markup import escape

from .app import CalculatorApp, FeatureResult
from .errors import InputError
from .keypad import press_button, press_key

console = Console()

QUIT_COMMANDS = {"quit", "q", "exit"}


def show_screen(app: CalculatorApp):
    """Print the calculator screen."""
    screen = app.session.screen
    if screen == app.session.error_token:
        console.print(f"[bold red]{escape(screen)}[/bold red]")
    else:
        console.print(f"[bold green]{escape(screen)}[/bold green]" if screen else "[dim](empty)[/dim]")


def show_result(result: FeatureResult):
    """Print a feature result."""
    style = "white" if result.ok else "red"
    if result.text:
        console.print(result.text, style=style, markup=False)
    for line in result.latex:
        console.print(f"[dim]LaTeX:[/dim] {escape(line)}", highlight=False)


def _require(args: List[str], count: int, usage: str) -> List[str]:
    if len(args) < count:
        raise InputError(f"Usage: {usage}")
    return args


def _press(app: CalculatorApp, args: List[str]):
    for action in _require(args, 1, ":press ACTION..."):
        press_button(app.session, action)
    show_screen(app)


def _key(app: CalculatorApp, args: List[str]):
    key = _require(args, 1, ":key KEY")[0]
    if not press_key(app.session, key):
        console.print(f"[dim]Ignored key: {escape(key)}[/dim]")
    show_screen(app)


def _matrix(app: CalculatorApp, args: List[str]):
    args = _require(args, 2, ":matrix OP A [B]")
    show_result(app.matrix_operation(args[0], args[1], args[2] if len(args) > 2 else ""))


def _base(app: CalculatorApp, args: List[str]):
    number, from_base, to_base = _require(args, 3, ":base N FROM TO")[:3]
    try:
        show_result(app.convert_base(number, int(from_base), int(to_base)))
    except ValueError:
        raise InputError("Bases must be whole numbers.") from None


def _units(app: CalculatorApp, args: List[str]):
    value, from_unit, to_unit = _require(args, 3, ":units V FROM TO")[:3]
    show_result(app.convert_unit(value, from_unit, to_unit))


def _export(app: CalculatorApp, args: List[str]):
    path = args[0] if args else "graph.png"
    if path.lower().endswith(".pdf"):
        show_result(app.export_pdf(path))
    else:
        show_result(app.export_png(path))


def _typed(app: CalculatorApp, args: List[str]):
    app.session.append(" ".join(args))
    show_screen(app)


def _simple(transition: Callable) -> Callable[[CalculatorApp, List[str]], None]:
    def handler(app: CalculatorApp, args: List[str]):
        transition(app.session)
        show_screen(app)
    return handler


def _help(app: CalculatorApp, args: List[str]):
    console.print(__doc__, markup=False, highlight=False)


COMMANDS: Dict[str, Callable[[CalculatorApp, List[str]], None]] = {
    "type": _typed,
    "press": _press,
    "key": _key,
    "clear": _simple(lambda s: s.clear()),
    "back": _simple(lambda s: s.backspace()),
    "sign": _simple(lambda s: s.toggle_sign()),
    "dot": _simple(lambda s: s.decimal()),
    "ans": _simple(lambda s: s.insert_ans()),
    "history": lambda app, args: app.session.history.show(),
    "clear-history": lambda app, args: app.session.clear_history(),
    "plot": lambda app, args: show_result(app.plot_function(" ".join(args))),
    "deriv": lambda app, args: show_result(app.plot_function_and_derivative(" ".join(args))),
    "export": _export,
    "matrix": _matrix,
    "solve": lambda app, args: show_result(app.solve_equation(" ".join(args))),
    "base": _base,
    "stats": lambda app, args: show_result(app.all_statistics(" ".join(args))),
    "units": _units,
    "ask": lambda app, args: show_result(app.solve_word_problem(" ".join(args))),
    "listen": lambda app, args: show_result(app.voice_input()),
    "help": _help,
}


def handle_line(app: CalculatorApp, line: str) -> bool:
    """Handle one line of REPL input.

    Returns:
        False when the user asked to quit, True otherwise.
    """
    line = line.strip()

    if line.startswith(":"):
        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            console.print(f"[red]{escape(str(e))}[/red]")
            return True
        if not parts:
            return True
        name, args = parts[0].lower(), parts[1:]
        if name in QUIT_COMMANDS:
            return False
        handler = COMMANDS.get(name)
        if handler is None:
            console.print(f"[yellow]Unknown command: :{escape(name)} (try :help)[/yellow]")
            return True
        try:
            handler(app, args)
        except InputError as e:
            console.print(f"[red]{escape(str(e))}[/red]")
        return True

    if line:
        app.session.append(line)
    app.session.equals()
    show_screen(app)
    return True
