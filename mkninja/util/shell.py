# SPDX-License-Identifier: MIT
"""Shell text helpers."""

from __future__ import annotations

_QUOTES = "'\"`"


def strip_shell_comment(s: str) -> str:
    """Truncate a shell command at its first comment.

    A ``#`` starts a comment unless it is escaped with a backslash or
    inside quotes. Backslashes are literal inside single quotes and escape
    the next character inside double quotes and backticks.

    Example:
        strip_shell_comment("echo a #comment")  # "echo a "
        strip_shell_comment("echo 'a#b'")        # "echo 'a#b'"
    """
    if "#" not in s:
        return s

    escape = False
    quote = ""
    for i, c in enumerate(s):
        if quote:
            if c == quote and (quote == "'" or not escape):
                quote = ""
        elif not escape:
            if c == "#":
                return s[:i]
            if c in _QUOTES:
                quote = c

        if escape:
            escape = False
        elif c == "\\":
            escape = True
    return s
