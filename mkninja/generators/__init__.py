# SPDX-License-Identifier: MIT
"""Build file generators for mkninja."""

from mkninja.generators.generator import BaseGenerator, Generator
from mkninja.generators.launcher import LauncherScriptWriter
from mkninja.generators.ninja import NinjaGenerator, generate_ninja

__all__ = [
    "BaseGenerator",
    "Generator",
    "LauncherScriptWriter",
    "NinjaGenerator",
    "generate_ninja",
]
