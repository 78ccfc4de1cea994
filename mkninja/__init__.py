# SPDX-License-Identifier: MIT
"""
mkninja: Ninja backend for Makefile-semantics build graphs.

mkninja takes a resolved Makefile dependency graph and writes a Ninja
build file plus a launcher script that recreates the environment the
recipes expect.
"""

from __future__ import annotations

from mkninja.core.config import GeneratorConfig
from mkninja.core.errors import MkninjaError
from mkninja.core.graph import Command, DepGraph, DepNode, Edge, load_graph
from mkninja.generators.ninja import NinjaGenerator, generate_ninja

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "Command",
    "DepGraph",
    "DepNode",
    "Edge",
    "GeneratorConfig",
    "MkninjaError",
    "NinjaGenerator",
    "generate_ninja",
    "load_graph",
]
