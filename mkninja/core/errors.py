# SPDX-License-Identifier: MIT
"""Custom exceptions for mkninja.

All mkninja exceptions inherit from MkninjaError. Every error is fatal to
the generation run: nothing in the package catches these except the CLI,
which reports them and exits non-zero.
"""

from __future__ import annotations


class MkninjaError(Exception):
    """Base class for all mkninja exceptions.

    Attributes:
        message: The error message.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class GraphError(MkninjaError):
    """Malformed dependency graph input."""


class GenerateError(MkninjaError):
    """Error during the generate phase.

    Raised when build file generation fails, including when an output
    file cannot be created, written or made executable.
    """


class DepfileError(GenerateError):
    """The depfile of a command cannot be determined unambiguously.

    Attributes:
        command: The command text that was inspected.
    """

    def __init__(self, message: str, command: str) -> None:
        self.command = command
        super().__init__(f"{message} in {command}")


class AmbiguousDepfileError(DepfileError):
    """A command names more than one candidate output file."""

    def __init__(self, command: str) -> None:
        super().__init__("multiple output file candidates", command)


class MissingDepfileError(DepfileError):
    """A command asks for a depfile but has no -MF or -o to derive it from."""

    def __init__(self, command: str) -> None:
        super().__init__("cannot find the depfile", command)


class DependencyCycleError(GenerateError):
    """Circular dependency detected in the build graph.

    Attributes:
        cycle: The outputs forming the cycle, first and last equal.
    """

    def __init__(self, cycle: list[str]) -> None:
        self.cycle = cycle
        cycle_str = " -> ".join(cycle)
        super().__init__(f"dependency cycle: {cycle_str}")


class SubstitutionError(MkninjaError):
    """Error during variable expansion."""


class CircularReferenceError(SubstitutionError):
    """Circular variable reference detected.

    Attributes:
        chain: The chain of variables forming the cycle.
    """

    def __init__(self, chain: list[str]) -> None:
        self.chain = chain
        cycle_str = " -> ".join(chain)
        super().__init__(f"circular variable reference: {cycle_str}")
