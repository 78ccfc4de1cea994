# SPDX-License-Identifier: MIT
"""Turning a node's recipe into runnable commands.

Generators never look at raw recipe text. They ask an Executor for the
final list of commands, each carrying its own ignore-error flag.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Protocol, runtime_checkable

from mkninja.core.evaluator import Evaluator
from mkninja.core.graph import Command, DepNode

# Recipe lines are split on newlines, except escaped ones (continuations).
_LINE_SPLIT_RE = re.compile(r"(?<!\\)\n")

_PREFIX_CHARS = "@-+ \t"


@runtime_checkable
class Executor(Protocol):
    """Protocol for expanding a node's recipe into commands."""

    def create_runners(self, node: DepNode, avoid_io: bool) -> list[Command]:
        """Expand the recipe of a node.

        Args:
            node: The node whose recipe to expand.
            avoid_io: If True, expansion must not run external programs;
                work such as $(shell ...) is deferred to build time.

        Returns:
            Commands in execution order.
        """
        ...


class RecipeExecutor:
    """Expands recipes with Makefile semantics.

    Each recipe line is expanded with the automatic variables of its node
    ($@, $<, $^, $+, $|), split into separate commands on embedded
    newlines, and stripped of its @, - and + prefixes. A - prefix marks
    the command as ignoring errors.
    """

    def __init__(self, vars: Mapping[str, str]) -> None:
        self.vars = vars

    def create_runners(self, node: DepNode, avoid_io: bool) -> list[Command]:
        evaluator = Evaluator(self.vars, avoid_io=avoid_io)
        auto_vars = automatic_variables(node)

        runners: list[Command] = []
        for raw in node.cmds:
            expanded = evaluator.expand(raw, auto_vars)
            for line in _LINE_SPLIT_RE.split(expanded):
                command = parse_command_line(line)
                if command is not None:
                    runners.append(command)
        return runners


def parse_command_line(line: str) -> Command | None:
    """Parse the recipe prefixes of a single line.

    Returns:
        The command, or None if nothing is left after the prefixes.
    """
    ignore_error = False
    i = 0
    while i < len(line) and line[i] in _PREFIX_CHARS:
        if line[i] == "-":
            ignore_error = True
        i += 1
    cmd = line[i:]
    if not cmd:
        return None
    return Command(cmd, ignore_error=ignore_error)


def automatic_variables(node: DepNode) -> dict[str, str]:
    """Compute the automatic variables of a node's recipe."""
    normal = [d.output for d in node.deps if not d.is_order_only]
    order_only = [d.output for d in node.deps if d.is_order_only]
    return {
        "@": node.output,
        "<": normal[0] if normal else "",
        "^": " ".join(dict.fromkeys(normal)),
        "+": " ".join(normal),
        "|": " ".join(dict.fromkeys(order_only)),
    }
