# SPDX-License-Identifier: MIT
"""File output helpers."""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TextIO

from mkninja.core.errors import GenerateError


@contextmanager
def atomic_write(path: Path, mode: int | None = None) -> Iterator[TextIO]:
    """Open a file for writing that only appears once complete.

    Content goes to ``<path>~`` and is moved over path when the block
    exits normally. If the block raises, the temporary file is removed
    and path is left untouched.

    Args:
        path: Destination file.
        mode: Permission bits to apply before the file is moved into place.

    Raises:
        GenerateError: If the file cannot be created, written or moved.
    """
    tmp_path = path.with_name(path.name + "~")
    try:
        f = open(tmp_path, "w")
    except OSError as e:
        raise GenerateError(f"cannot create {path}: {e}") from e

    try:
        with f:
            yield f
        if mode is not None:
            os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
    except OSError as e:
        tmp_path.unlink(missing_ok=True)
        raise GenerateError(f"cannot write {path}: {e}") from e
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
