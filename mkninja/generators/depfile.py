# SPDX-License-Identifier: MIT
"""Finding the dependency file a compiler command writes.

Ninja reads header dependencies from the depfile named in a rule. Make
recipes don't declare one, so it is inferred from the compiler flags:
-MD/-MMD request a depfile, -MF names it, and otherwise it sits next to
the -o output with a .d extension.
"""

from __future__ import annotations

import logging
import posixpath
import re

from mkninja.core.errors import AmbiguousDepfileError, MissingDepfileError

logger = logging.getLogger(__name__)

# llvm-rs-cc accepts -MD but never writes a depfile.
_NO_DEPFILE_TOOLS = ("bin/llvm-rs-cc ",)

_TOKEN_END_RE = re.compile(r"[ \t\n]")


def strip_ext(path: str) -> str:
    """Remove the extension of the last path component."""
    return posixpath.splitext(path)[0]


def _flag_value(command: str, flag: str) -> str | None:
    """Return the token following flag, or None if flag is absent.

    Raises:
        AmbiguousDepfileError: If flag appears more than once.
    """
    index = command.find(flag)
    if index < 0:
        return None
    rest = command[index + len(flag) - 1 :].lstrip(" \t\n\r")
    if flag in rest:
        raise AmbiguousDepfileError(command)
    return _TOKEN_END_RE.split(rest, maxsplit=1)[0]


def _find_depfile(command: str) -> str:
    padded = command + " "
    if " -MD " not in padded and " -MMD " not in padded:
        return ""

    mf = _flag_value(command, " -MF ")
    if mf is not None:
        return mf

    out = _flag_value(command, " -o ")
    if out is None:
        raise MissingDepfileError(command)
    return strip_ext(out) + ".d"


def get_depfile(command: str) -> str:
    """Infer the depfile of a command.

    Args:
        command: The full command line of a rule.

    Returns:
        The depfile path, or "" if the command writes none.

    Raises:
        AmbiguousDepfileError: If -MF or -o appears more than once.
        MissingDepfileError: If -MD/-MMD is given with neither -MF nor -o.
    """
    if any(tool in command for tool in _NO_DEPFILE_TOOLS):
        return ""

    depfile = _find_depfile(command)
    if not depfile:
        return ""

    # Some toolchains post-process foo.d into foo.P; prefer the final file.
    processed = strip_ext(depfile) + ".P"
    if processed in command:
        return processed

    # GCC skips the preprocessor for .s files, so -MF is ignored.
    assembly = "/" + strip_ext(posixpath.basename(depfile)) + ".s"
    if assembly in command:
        logger.debug("No depfile for assembly source %s", assembly)
        return ""

    return depfile
