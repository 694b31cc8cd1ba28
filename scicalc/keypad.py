"""Dispatch table from input events to session transitions.

Buttons carry an action and a kind (``number``, ``operator`` or
``function``), the same way the keypad groups them. Keyboard keys are
mapped separately. Every handler runs to completion before the next event
is dispatched.
"""

from typing import Callable, Dict, Optional

from .errors import InputError
from .session import CalculatorSession

NUMBER = "number"
OPERATOR = "operator"
FUNCTION = "function"

OPERATOR_SYMBOLS: Dict[str, str] = {
    "add": "+",
    "subtract": "−",
    "multiply": "×",
    "divide": "÷",
    "modulus": "%",
}

# Function buttons that only insert text.
INSERT_TOKENS: Dict[str, str] = {
    "sqrt": "√(",
    "pi": "π",
    "sin": "sin(",
    "cos": "cos(",
    "tan": "tan(",
    "log": "log(",
    "ln": "ln(",
    "exp": "exp(",
    "pow": "^",
    "square": "^2",
    "npr": "P(",
    "ncr": "C(",
    "open-paren": "(",
    "close-paren": ")",
    "factorial": "!",
}

Handler = Callable[[CalculatorSession], object]

FUNCTION_ACTIONS: Dict[str, Handler] = {
    "clear": CalculatorSession.clear,
    "backspace": CalculatorSession.backspace,
    "toggle-sign": CalculatorSession.toggle_sign,
    "decimal": CalculatorSession.decimal,
    "equals": CalculatorSession.equals,
    "ans": CalculatorSession.insert_ans,
}

KEY_ACTIONS: Dict[str, Handler] = {
    "Enter": CalculatorSession.equals,
    "Backspace": CalculatorSession.backspace,
    "Escape": CalculatorSession.clear,
}

TYPED_KEYS = set("0123456789+-*/.()!%")


def press_button(session: CalculatorSession, action: str, kind: Optional[str] = None):
    """Dispatch a keypad button.

    Args:
        session: Session to act on.
        action: Button action, e.g. ``"7"``, ``"add"``, ``"sqrt"``, ``"equals"``.
        kind: Button kind. Inferred from the action when omitted.

    Raises:
        InputError: Unknown action for the given kind.
    """
    kind = kind or infer_kind(action)

    if kind == NUMBER:
        return session.append(action)
    if kind == OPERATOR:
        if action not in OPERATOR_SYMBOLS:
            raise InputError(f"Unknown operator: {action}")
        return session.append(OPERATOR_SYMBOLS[action])
    if kind == FUNCTION:
        if action in FUNCTION_ACTIONS:
            return FUNCTION_ACTIONS[action](session)
        if action in INSERT_TOKENS:
            return session.append(INSERT_TOKENS[action])
        raise InputError(f"Unknown function: {action}")

    raise InputError(f"Unknown button kind: {kind}")


def infer_kind(action: str) -> str:
    """Work out a button's kind from its action name."""
    if action.isdigit():
        return NUMBER
    if action in OPERATOR_SYMBOLS:
        return OPERATOR
    return FUNCTION


def press_key(session: CalculatorSession, key: str) -> bool:
    """Dispatch a keyboard key.

    Returns:
        True if the key was handled, False if it was ignored.
    """
    if key in KEY_ACTIONS:
        KEY_ACTIONS[key](session)
        return True
    if len(key) == 1 and key in TYPED_KEYS:
        session.append(key)
        return True
    return False
