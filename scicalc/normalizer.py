"""Display grammar to evaluator grammar rewrite.

The keypad shows symbols such as π, √, ×, ÷ and − and shorthand such as
``5P(3)``. Before an expression reaches the evaluator those are rewritten,
in a fixed order, into names the evaluator understands.
"""

import re
from typing import List, Tuple


# Order matters: the nP(k) / nC(k) forms must be consumed before the bare
# P( and C( prefixes, and nCr( before C(.
REWRITE_RULES: List[Tuple[re.Pattern, str]] = [
    (re.compile("π"), "pi"),
    (re.compile("√"), "sqrt"),
    (re.compile("×"), "*"),
    (re.compile("÷"), "/"),
    (re.compile("−"), "-"),
    (re.compile("%"), " mod "),
    (re.compile(r"(\d+)P\((\d+)\)"), r"permutations(\1,\2)"),
    (re.compile(r"(\d+)C\((\d+)\)"), r"combinations(\1,\2)"),
    (re.compile(r"P\("), "permutations("),
    (re.compile(r"nCr\("), "combinations("),
    (re.compile(r"C\("), "combinations("),
]

def normalize(display_text: str) -> str:
    """Rewrite display-grammar text into evaluator-grammar text.

    Each rule runs exactly once, in order. A rule that does not match is a
    no-op.

    Args:
        display_text: Expression as typed or spoken.

    Returns:
        Expression ready to hand to the evaluator.
    """
    text = display_text
    for pattern, replacement in REWRITE_RULES:
        text = pattern.sub(replacement, text)
    return text
