"""Helpers for building and classifying JavaScript snippets."""

from __future__ import annotations

import re
from collections.abc import Iterable

_PARENS = re.compile(r"[()]")


def evaluation_string(function: str, params: Iterable[str]) -> str:
    """Build a call expression of the form ``(<function>)("<p1>","<p2>")``."""
    args = ",".join(f'"{param}"' for param in params)
    return f"({function})({args})"


def _skip_args(text: str) -> tuple[bool, str]:
    """Strip a leading balanced pair of parentheses.

    Returns whether the parentheses balanced and the remaining text.
    """
    if not text.startswith("("):
        return False, text
    opened, closed = 1, 0
    rest = text[1:]
    while rest and opened != closed:
        match = _PARENS.search(rest)
        if match is None:
            break
        if match.group() == ")":
            closed += 1
        else:
            opened += 1
        rest = rest[match.end():]
    return opened == closed, rest


def is_likely_js_function(function: str) -> bool:
    """Guess whether ``function`` is a JavaScript function rather than an expression."""
    fun = function.lstrip()
    if not fun:
        return False
    offset = len("async ") - 1 if fun.startswith("async ") else 0
    if fun[offset:].lstrip().startswith("function "):
        return True
    balanced, rest = _skip_args(fun)
    return balanced and rest.lstrip().startswith("=>")