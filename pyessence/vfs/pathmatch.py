"""
Glob matching for virtual paths.

Patterns are matched against the whole path, one segment at a time:

    *        any run of characters other than "/"
    ?        exactly one character other than "/"
    [abc]    one character from the class; ranges like [a-z] are allowed
    [^abc]   one character not in the class ("!" is an ordinary character)
    \\c      the literal character c

Unlike fnmatch, a wildcard never crosses a "/", and malformed patterns
are rejected instead of being matched literally.
"""

from __future__ import annotations

import re
from functools import lru_cache

from .errors import BadPatternError

SEP = "/"


def _class_char(pattern: str, i: int) -> tuple[str, int]:
    """Read one (possibly escaped) character inside a class."""
    if i >= len(pattern):
        raise BadPatternError(pattern, "unterminated character class")
    c = pattern[i]
    if c == "\\":
        if i + 1 >= len(pattern):
            raise BadPatternError(pattern, "trailing backslash")
        return pattern[i + 1], i + 2
    if c in "-]":
        raise BadPatternError(pattern, f"unexpected {c!r} in character class")
    return c, i + 1


def _translate_class(pattern: str, i: int) -> tuple[str, int]:
    """Translate the class starting just after "[". Returns (regex, next index)."""
    negate = False
    if i < len(pattern) and pattern[i] == "^":
        negate = True
        i += 1

    items: list[str] = []
    while True:
        if i < len(pattern) and pattern[i] == "]" and items:
            i += 1
            break
        lo, i = _class_char(pattern, i)
        if i < len(pattern) and pattern[i] == "-":
            hi, i = _class_char(pattern, i + 1)
            if hi < lo:
                raise BadPatternError(pattern, f"reversed range {lo}-{hi}")
            items.append(f"{re.escape(lo)}-{re.escape(hi)}")
        else:
            items.append(re.escape(lo))

    body = "".join(items)
    if negate:
        return f"[^{re.escape(SEP)}{body}]", i
    return f"[{body}]", i


def translate(pattern: str) -> str:
    """Translate a glob pattern into an anchored regular expression."""
    parts: list[str] = []
    i = 0
    n = len(pattern)
    not_sep = f"[^{re.escape(SEP)}]"

    while i < n:
        c = pattern[i]
        i += 1
        if c == "*":
            # Runs of stars behave like one
            while i < n and pattern[i] == "*":
                i += 1
            parts.append(f"{not_sep}*")
        elif c == "?":
            parts.append(not_sep)
        elif c == "\\":
            if i >= n:
                raise BadPatternError(pattern, "trailing backslash")
            parts.append(re.escape(pattern[i]))
            i += 1
        elif c == "[":
            regex, i = _translate_class(pattern, i)
            parts.append(regex)
        else:
            parts.append(re.escape(c))

    return "(?s:" + "".join(parts) + r")\Z"


@lru_cache(maxsize=256)
def compile_pattern(pattern: str) -> re.Pattern[str]:
    """
    Validate and compile a glob pattern.

    Raises:
        BadPatternError: If the pattern is malformed
    """
    return re.compile(translate(pattern))


def match(pattern: str, path: str) -> bool:
    """Report whether path matches the glob pattern."""
    return compile_pattern(pattern).match(path) is not None
