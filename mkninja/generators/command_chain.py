# SPDX-License-Identifier: MIT
"""Joining recipe commands into a single Ninja command line.

Make runs each recipe line in its own shell and stops at the first
failing line unless that line was marked with ``-``. Ninja runs a single
command per build statement, so the lines are normalized and chained:

    (cmd1) && (cmd2) ; (cmd3 ; true)

Here cmd2 ignores errors, so cmd3 runs regardless of its status, and
cmd3 ignores errors, so the whole chain succeeds.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from mkninja.core.config import GeneratorConfig
from mkninja.core.graph import Command
from mkninja.util.shell import strip_shell_comment

# In-tree compiler invocations that goma can take over.
GOMA_COMPILER_RE = re.compile(
    r"^prebuilts/(gcc|clang)/.*(gcc|g\+\+|clang|clang\+\+) .* -c "
)


def normalize_command(cmd: str) -> str:
    """Normalize one recipe line for use inside a Ninja command.

    Strips comments and surrounding whitespace, joins continuation lines,
    drops trailing semicolons and escapes ``$`` for Ninja. An empty result
    becomes ``true``.
    """
    cmd = strip_shell_comment(cmd)
    cmd = cmd.lstrip(" \t\n\r")
    cmd = cmd.replace("\\\n", " ")
    cmd = cmd.rstrip(" \t\n;")
    cmd = cmd.replace("$", "$$")
    cmd = cmd.replace("\t", " ")
    return cmd or "true"


class CommandChainBuilder:
    """Builds the shell command line for a list of recipe commands."""

    def __init__(self, config: GeneratorConfig) -> None:
        self.config = config

    def build(self, commands: Sequence[Command]) -> tuple[str, bool]:
        """Chain commands into one shell command line.

        Args:
            commands: Commands in execution order.

        Returns:
            Tuple of (command line, needs local pool). The second value is
            True when goma is enabled but none of the commands was handed
            to it, so the build step has to run on the local machine.
        """
        use_gomacc = False
        parts: list[str] = []
        for i, command in enumerate(commands):
            if i > 0:
                parts.append(" ; " if commands[i - 1].ignore_error else " && ")

            cmd = normalize_command(command.cmd)
            if self.config.use_goma and GOMA_COMPILER_RE.match(cmd):
                cmd = f"{self.config.goma_dir}/gomacc {cmd}"
                use_gomacc = True

            needs_subshell = len(commands) > 1 and not cmd.startswith("(")
            if needs_subshell:
                parts.append("(")
            parts.append(cmd)
            if i == len(commands) - 1 and command.ignore_error:
                parts.append(" ; true")
            if needs_subshell:
                parts.append(")")

        return "".join(parts), self.config.use_goma and not use_gomacc
