# SPDX-License-Identifier: MIT
"""Generator configuration.

A GeneratorConfig is passed explicitly to every component that needs it,
so a generation run depends only on its inputs.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

# Linux accepts roughly 130kB of arguments; stay well below that.
DEFAULT_ARG_LEN_LIMIT = 100 * 1000

DEFAULT_GOMA_JOBS = 300


def _cpu_count() -> int:
    return os.cpu_count() or 1


@dataclass(frozen=True)
class GeneratorConfig:
    """Settings for a Ninja generation run.

    Attributes:
        goma_dir: Directory containing gomacc. Empty disables goma: no
            command prefixing, no local pool and default ninja parallelism.
        suffix: Appended to the output file names (build<suffix>.ninja,
            ninja<suffix>.sh).
        arg_len_limit: Commands longer than this are written to a response
            file instead of inline.
        pool_depth: Depth of local_pool when goma is enabled.
        goma_jobs: Ninja parallelism used by the launcher with goma.
    """

    goma_dir: str = ""
    suffix: str = ""
    arg_len_limit: int = DEFAULT_ARG_LEN_LIMIT
    pool_depth: int = field(default_factory=_cpu_count)
    goma_jobs: int = DEFAULT_GOMA_JOBS

    @property
    def use_goma(self) -> bool:
        return bool(self.goma_dir)

    @property
    def build_file(self) -> str:
        return f"build{self.suffix}.ninja"

    @property
    def shell_file(self) -> str:
        return f"ninja{self.suffix}.sh"

    @classmethod
    def from_env(
        cls, environ: Mapping[str, str] | None = None, **overrides: Any
    ) -> GeneratorConfig:
        """Create a config from MKNINJA_* environment variables.

        Recognized variables:
            MKNINJA_GOMA_DIR: sets goma_dir.
            MKNINJA_SUFFIX: sets suffix.

        Keyword arguments that are not None take precedence over the
        environment.
        """
        if environ is None:
            environ = os.environ

        values: dict[str, Any] = {}
        if environ.get("MKNINJA_GOMA_DIR"):
            values["goma_dir"] = environ["MKNINJA_GOMA_DIR"]
        if environ.get("MKNINJA_SUFFIX"):
            values["suffix"] = environ["MKNINJA_SUFFIX"]
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
