# SPDX-License-Identifier: MIT
"""Generator protocol.

A generator turns a resolved DepGraph into the files some external build
tool runs from. Only Ninja is implemented.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from mkninja.core.graph import DepGraph


@runtime_checkable
class Generator(Protocol):
    """Protocol for build file generators."""

    @property
    def name(self) -> str:
        """Generator name (e.g., 'ninja')."""
        ...

    def generate(self, graph: DepGraph, output_dir: Path) -> None:
        """Write the build files for graph into output_dir.

        Raises:
            MkninjaError: If generation fails. No output file is left
                half-written.
        """
        ...


class BaseGenerator:
    """Shared plumbing: naming and output directory creation."""

    def __init__(self, name: str) -> None:
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def generate(self, graph: DepGraph, output_dir: Path) -> None:
        output_dir.mkdir(parents=True, exist_ok=True)
        self._generate_impl(graph, output_dir)

    def _generate_impl(self, graph: DepGraph, output_dir: Path) -> None:
        """Write the build files. Subclasses must implement."""
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r})"
