"""
Formatting for generated source.

format_source checks that the text parses as Python, then tidies it up
without changing its meaning: lines inside brackets are re-indented by
nesting depth, blank lines inside brackets are dropped, runs of blank
lines are collapsed and trailing whitespace is removed. Statement-level
indentation and the contents of multi-line strings are left alone.
"""

from __future__ import annotations

import ast
import io
import tokenize

INDENT = "    "
OPENERS = frozenset("([{")
CLOSERS = frozenset(")]}")
_SKIP = frozenset({tokenize.INDENT, tokenize.DEDENT, tokenize.ENDMARKER})


class FormatError(ValueError):
    """Raised when generated text is not valid Python."""

    pass


def _scan(source: str) -> tuple[dict[int, tuple[int, str]], set[int]]:
    """
    Walk the token stream.

    Returns the bracket depth and first token of every line, plus the set
    of lines that lie inside (or end) a multi-line string.
    """
    first: dict[int, tuple[int, str]] = {}
    frozen: set[int] = set()
    depth = 0

    for tok in tokenize.generate_tokens(io.StringIO(source).readline):
        if tok.type in _SKIP:
            continue
        row = tok.start[0]
        if row not in first:
            first[row] = (depth, tok.string)
        if tok.type == tokenize.STRING and tok.end[0] > row:
            frozen.update(range(row + 1, tok.end[0] + 1))
        if tok.type == tokenize.OP:
            if tok.string in OPENERS:
                depth += 1
            elif tok.string in CLOSERS:
                depth -= 1

    return first, frozen


def format_source(source: str) -> str:
    """
    Validate and tidy generated Python source.

    Raises:
        FormatError: If source does not parse
    """
    try:
        ast.parse(source)
        first, frozen = _scan(source)
    except (SyntaxError, tokenize.TokenError) as e:
        raise FormatError(f"generated source is not valid Python: {e}") from e

    out: list[str] = []
    blank_run = 0

    for row, line in enumerate(source.splitlines(), start=1):
        if row in frozen:
            out.append(line)
            blank_run = 0
            continue

        line = line.rstrip()
        depth, token = first.get(row, (0, ""))

        if not line:
            if depth > 0:
                continue
            blank_run += 1
            if blank_run > 2:
                continue
            out.append(line)
            continue

        blank_run = 0
        if depth > 0:
            level = depth - 1 if token in CLOSERS else depth
            line = INDENT * level + line.lstrip()
        out.append(line)

    while out and not out[-1]:
        out.pop()

    return "\n".join(out) + "\n"
