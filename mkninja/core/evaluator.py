# SPDX-License-Identifier: MIT
"""Makefile-style variable expansion.

Supported syntax:
- Simple variables: $(VAR) or ${VAR}
- Single-character variables: $X (including automatic variables $@, $<)
- Computed names: $($(ARCH)_FLAGS)
- Escaped dollars: $$ becomes literal $
- Shell function: $(shell cmd)

Variables are recursive: the value of a variable is itself expanded each
time it is referenced. Undefined variables expand to the empty string.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Mapping

from mkninja.core.errors import CircularReferenceError, SubstitutionError

logger = logging.getLogger(__name__)

DEFAULT_SHELL = "/bin/sh"

_CLOSERS = {"(": ")", "{": "}"}


class Evaluator:
    """Expands variable references against a set of variables.

    Example:
        ev = Evaluator({"CC": "gcc", "CMD": "$(CC) -c"})
        ev.evaluate_var("CMD")  # "gcc -c"
        ev.expand("$@: $(CMD)", {"@": "foo.o"})  # "foo.o: gcc -c"

    Attributes:
        vars: Variable name to raw value.
        avoid_io: If True, $(shell ...) is not run at expansion time but
            turned into a shell command substitution in the result.
    """

    def __init__(self, vars: Mapping[str, str], *, avoid_io: bool = False) -> None:
        self.vars = vars
        self.avoid_io = avoid_io
        self._expanding: list[str] = []

    def evaluate_var(self, name: str) -> str:
        """Return the fully expanded value of a variable.

        Raises:
            CircularReferenceError: If the variable refers to itself.
        """
        raw = self.vars.get(name)
        if raw is None:
            return ""
        if name in self._expanding:
            chain = self._expanding[self._expanding.index(name) :] + [name]
            raise CircularReferenceError(chain)
        self._expanding.append(name)
        try:
            return self.expand(raw)
        finally:
            self._expanding.pop()

    def expand(self, text: str, local_vars: Mapping[str, str] | None = None) -> str:
        """Expand every variable reference in text.

        Args:
            text: Text to expand.
            local_vars: Variables that take precedence over self.vars and are
                not expanded further (automatic variables).

        Raises:
            SubstitutionError: On an unterminated reference.
        """
        if "$" not in text:
            return text

        result: list[str] = []
        i = 0
        n = len(text)
        while i < n:
            c = text[i]
            if c != "$":
                result.append(c)
                i += 1
                continue
            if i + 1 >= n:
                result.append("$")
                break
            nxt = text[i + 1]
            if nxt == "$":
                result.append("$")
                i += 2
            elif nxt in _CLOSERS:
                end = _find_close(text, i + 2, nxt, _CLOSERS[nxt])
                if end < 0:
                    raise SubstitutionError(f"unterminated variable reference: {text!r}")
                result.append(self._expand_reference(text[i + 2 : end], local_vars))
                i = end + 1
            else:
                result.append(self._lookup(nxt, local_vars))
                i += 2
        return "".join(result)

    def _expand_reference(self, body: str, local_vars: Mapping[str, str] | None) -> str:
        if body.startswith("shell") and body[5:6] in (" ", "\t"):
            return self._shell(self.expand(body[6:], local_vars))
        return self._lookup(self.expand(body, local_vars), local_vars)

    def _lookup(self, name: str, local_vars: Mapping[str, str] | None) -> str:
        if local_vars is not None and name in local_vars:
            return local_vars[name]
        return self.evaluate_var(name)

    def _shell(self, cmd: str) -> str:
        if self.avoid_io:
            return f"$({cmd})"

        shell = self.evaluate_var("SHELL") or DEFAULT_SHELL
        logger.debug("Running $(shell %s)", cmd)
        try:
            result = subprocess.run(
                [shell, "-c", cmd],
                capture_output=True,
                text=True,
            )
        except OSError as e:
            raise SubstitutionError(f"$(shell {cmd}) failed: {e}") from e
        return result.stdout.rstrip("\n").replace("\n", " ")


def _find_close(text: str, start: int, opener: str, closer: str) -> int:
    """Find the closer matching an already consumed opener, or -1."""
    depth = 1
    for i in range(start, len(text)):
        c = text[i]
        if c == opener:
            depth += 1
        elif c == closer:
            depth -= 1
            if depth == 0:
                return i
    return -1
