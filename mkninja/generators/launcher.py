# SPDX-License-Identifier: MIT
"""Launcher script for the generated Ninja file.

Recipes expect the environment make would have given them. The launcher
exports the variables marked for export, unsets the ones marked
unexport so nothing leaks in from the calling shell, and then execs
ninja.
"""

from __future__ import annotations

import logging
import shlex
from collections.abc import Mapping
from pathlib import Path
from typing import TextIO

from mkninja.core.config import GeneratorConfig
from mkninja.core.evaluator import DEFAULT_SHELL, Evaluator
from mkninja.util.files import atomic_write

logger = logging.getLogger(__name__)


class LauncherScriptWriter:
    """Writes ninja.sh."""

    def __init__(self, config: GeneratorConfig) -> None:
        self.config = config

    def write(
        self,
        path: Path,
        vars: Mapping[str, str],
        exports: Mapping[str, bool],
        build_file: str | None = None,
    ) -> None:
        """Write an executable launcher script to path.

        Raises:
            GenerateError: If the file cannot be written or made executable.
        """
        with atomic_write(path, mode=0o755) as f:
            self.write_script(f, vars, exports, build_file)
        logger.info("Generated %s", path)

    def write_script(
        self,
        f: TextIO,
        vars: Mapping[str, str],
        exports: Mapping[str, bool],
        build_file: str | None = None,
    ) -> None:
        """Write the launcher script text to f."""
        ev = Evaluator(vars)
        shell = ev.evaluate_var("SHELL") or DEFAULT_SHELL
        f.write(f"#!{shell}\n")

        for name in sorted(exports):
            if exports[name]:
                value = shlex.quote(ev.evaluate_var(name))
                f.write(f"export {name}={value}\n")
            else:
                f.write(f"unset {name}\n")

        f.write(f"exec {shlex.join(self.ninja_command(build_file))}\n")

    def ninja_command(self, build_file: str | None = None) -> list[str]:
        """The ninja invocation run by the launcher.

        Args:
            build_file: Path of the Ninja file as seen from the directory
                the launcher is started in. Defaults to the configured
                file name, i.e. a launcher started from the build directory.
        """
        build_file = build_file or self.config.build_file
        cmd = ["ninja"]
        if build_file != "build.ninja":
            cmd.extend(["-f", build_file])
        if self.config.use_goma:
            cmd.append(f"-j{self.config.goma_jobs}")
        return cmd
