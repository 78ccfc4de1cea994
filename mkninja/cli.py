# SPDX-License-Identifier: MIT
"""Command-line interface for mkninja."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from mkninja.core.config import GeneratorConfig
from mkninja.core.errors import MkninjaError
from mkninja.core.graph import load_graph
from mkninja.generators.ninja import NinjaGenerator

# Set up logging
logger = logging.getLogger("mkninja")


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Configure logging based on verbosity level."""
    if debug:
        level = logging.DEBUG
        fmt = "%(levelname)s: %(name)s: %(message)s"
    elif verbose:
        level = logging.INFO
        fmt = "%(levelname)s: %(message)s"
    else:
        level = logging.WARNING
        fmt = "%(levelname)s: %(message)s"

    logging.basicConfig(level=level, format=fmt)


def parse_variables(args: list[str]) -> tuple[dict[str, str], list[str]]:
    """Parse KEY=value arguments from a list.

    Args:
        args: List of arguments.

    Returns:
        Tuple of (variables dict, remaining args).
    """
    variables: dict[str, str] = {}
    remaining: list[str] = []

    for arg in args:
        if "=" in arg and not arg.startswith("-"):
            key, _, value = arg.partition("=")
            if key:  # Valid KEY=value
                variables[key] = value
            else:
                remaining.append(arg)
        else:
            remaining.append(arg)

    return variables, remaining


def cmd_generate(args: argparse.Namespace) -> int:
    """Generate build.ninja and ninja.sh from a graph file.

    KEY=value arguments override variables of the graph.
    """
    setup_logging(args.verbose, args.debug)

    variables, remaining = parse_variables(args.extra)
    if remaining:
        logger.error("Unexpected arguments: %s", " ".join(remaining))
        return 1

    config = GeneratorConfig.from_env(
        goma_dir=args.goma_dir,
        suffix=args.suffix,
        arg_len_limit=args.arg_len_limit,
    )
    build_dir = Path(args.build_dir)

    try:
        graph = load_graph(args.graph)
        graph.vars.update(variables)
        logger.info("Loaded %d nodes from %s", len(graph), args.graph)
        if config.use_goma:
            logger.info("Using goma from %s", config.goma_dir)

        NinjaGenerator(config).generate(graph, build_dir)
    except MkninjaError as e:
        logger.error("%s", e)
        return 1
    except OSError as e:
        logger.error("Cannot create %s: %s", build_dir, e)
        return 1

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the mkninja CLI."""
    parser = argparse.ArgumentParser(
        prog="mkninja",
        description="Generate a Ninja build file from a Makefile dependency graph.",
    )
    from mkninja import __version__

    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--debug", action="store_true", help="Debug output")
    parser.add_argument(
        "-B", "--build-dir", default=".", help="Output directory (default: .)"
    )
    parser.add_argument(
        "--goma-dir",
        metavar="DIR",
        help="Directory containing gomacc (default: $MKNINJA_GOMA_DIR)",
    )
    parser.add_argument(
        "--suffix",
        metavar="SUFFIX",
        help=(
            "Suffix for build<SUFFIX>.ninja and ninja<SUFFIX>.sh; "
            "write --suffix=-x for a suffix starting with '-'"
        ),
    )
    parser.add_argument(
        "--arg-len-limit",
        type=int,
        metavar="N",
        help="Use a response file for commands longer than N characters",
    )
    parser.add_argument("graph", help="Dependency graph in JSON form")
    parser.add_argument(
        "extra",
        nargs="*",
        help="Variable overrides (KEY=value)",
    )
    parser.set_defaults(func=cmd_generate)

    args = parser.parse_args(argv)
    result: int = args.func(args)
    return result


if __name__ == "__main__":
    sys.exit(main())
