# SPDX-License-Identifier: MIT
"""Ninja build file generator.

Walks the dependency graph from its roots and writes one rule and one
build statement per target. Every target gets its own rule, since each
recipe is a distinct command line:

    rule rule0
     description = build $out
     depfile = out/foo.d
     command = gcc -c foo.c -o out/foo.o -MD
    build out/foo.o: rule0 foo.c || out

Targets without a recipe use Ninja's built-in phony rule.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from enum import Enum
from pathlib import Path
from typing import TextIO

from mkninja.core.config import GeneratorConfig
from mkninja.core.errors import DependencyCycleError
from mkninja.core.executor import Executor, RecipeExecutor
from mkninja.core.graph import DepGraph, DepNode, Edge
from mkninja.generators.command_chain import CommandChainBuilder
from mkninja.generators.depfile import get_depfile
from mkninja.generators.generator import BaseGenerator
from mkninja.generators.launcher import LauncherScriptWriter
from mkninja.util.files import atomic_write

logger = logging.getLogger(__name__)


class _VisitState(Enum):
    IN_PROGRESS = "in_progress"
    DONE = "done"


class NinjaGenerator(BaseGenerator):
    """Generator that produces build.ninja and its ninja.sh launcher.

    Example:
        generator = NinjaGenerator(GeneratorConfig(goma_dir="/opt/goma"))
        generator.generate(graph, Path("out"))
        # Creates out/build.ninja and out/ninja.sh
    """

    PHONY_RULE = "phony"
    LOCAL_POOL = "local_pool"
    RSP_COMMAND = "sh $out.rsp"

    def __init__(
        self,
        config: GeneratorConfig | None = None,
        executor: Executor | None = None,
    ) -> None:
        """Initialize the generator.

        Args:
            config: Generation settings; defaults to GeneratorConfig().
            executor: Expands recipes into commands. Defaults to a
                RecipeExecutor over the graph's variables.
        """
        super().__init__("ninja")
        self.config = config or GeneratorConfig()
        self._executor = executor
        self._chain_builder = CommandChainBuilder(self.config)
        self._rule_id = 0
        self._state: dict[str, _VisitState] = {}

    def _generate_impl(self, graph: DepGraph, output_dir: Path) -> None:
        build_path = output_dir / self.config.build_file
        shell_path = output_dir / self.config.shell_file
        launcher = LauncherScriptWriter(self.config)

        # Both files stay in their temporaries until both are complete.
        with atomic_write(build_path) as build_f:
            with atomic_write(shell_path, mode=0o755) as shell_f:
                self.write_build_file(graph, build_f)
                launcher.write_script(
                    shell_f, graph.vars, graph.exports, build_path.as_posix()
                )
        logger.info("Generated %s (%d rules)", build_path, self._rule_id)
        logger.info("Generated %s", shell_path)

    def write_build_file(self, graph: DepGraph, f: TextIO) -> None:
        """Write the Ninja file for graph to f.

        Raises:
            DepfileError: If a command's depfile is ambiguous.
            DependencyCycleError: If the graph has a cycle.
        """
        self._rule_id = 0
        self._state = {}
        executor = self._executor or RecipeExecutor(graph.vars)

        f.write("# Generated by mkninja\n")
        f.write("\n")

        if self.config.use_goma:
            f.write(f"pool {self.LOCAL_POOL}\n")
            f.write(f" depth = {self.config.pool_depth}\n")

        for node in graph.nodes:
            self._emit_tree(node, graph, executor, f)

    def _emit_tree(
        self, root: DepNode, graph: DepGraph, executor: Executor, f: TextIO
    ) -> None:
        """Emit root and everything it depends on, each at most once.

        Depth-first with an explicit stack, so deep graphs don't hit the
        recursion limit. Nodes are written when first entered.
        """
        if root.output in self._state:
            return

        self._enter(root, executor, f)
        stack: list[tuple[DepNode, Iterator[Edge]]] = [(root, iter(root.deps))]
        while stack:
            node, deps = stack[-1]
            edge = next(deps, None)
            if edge is None:
                self._state[node.output] = _VisitState.DONE
                stack.pop()
                continue

            state = self._state.get(edge.output)
            if state is _VisitState.DONE:
                continue
            if state is _VisitState.IN_PROGRESS:
                outputs = [n.output for n, _ in stack]
                cycle = outputs[outputs.index(edge.output) :] + [edge.output]
                raise DependencyCycleError(cycle)

            dep = graph.node(edge.output)
            self._enter(dep, executor, f)
            stack.append((dep, iter(dep.deps)))

    def _enter(self, node: DepNode, executor: Executor, f: TextIO) -> None:
        self._state[node.output] = _VisitState.IN_PROGRESS
        if node.is_dangling:
            return
        self._emit_node(node, executor, f)

    def _emit_node(self, node: DepNode, executor: Executor, f: TextIO) -> None:
        """Write the rule and build statement of a single node."""
        runners = executor.create_runners(node, True)
        rule_name = self.PHONY_RULE
        use_local_pool = False
        if runners:
            command, use_local_pool = self._chain_builder.build(runners)
            rule_name = self._new_rule_name()
            logger.debug("%s: %s", rule_name, node.output)
            self._write_rule(f, rule_name, command)

        output = self._escape_path(node.output)
        f.write(f"build {output}: {rule_name}{self._dep_string(node)}\n")
        if use_local_pool:
            f.write(f" pool = {self.LOCAL_POOL}\n")

    def _write_rule(self, f: TextIO, name: str, command: str) -> None:
        depfile = get_depfile(command)

        f.write(f"rule {name}\n")
        f.write(" description = build $out\n")
        if depfile:
            f.write(f" depfile = {depfile}\n")
        if len(command) > self.config.arg_len_limit:
            logger.debug(
                "%s: command is %d characters, using a response file",
                name,
                len(command),
            )
            f.write(" rspfile = $out.rsp\n")
            f.write(f" rspfile_content = {command}\n")
            command = self.RSP_COMMAND
        f.write(f" command = {command}\n")

    def _new_rule_name(self) -> str:
        name = f"rule{self._rule_id}"
        self._rule_id += 1
        return name

    def _dep_string(self, node: DepNode) -> str:
        deps = [self._escape_path(d.output) for d in node.deps if not d.is_order_only]
        order_only = [self._escape_path(d.output) for d in node.deps if d.is_order_only]
        result = ""
        if deps:
            result += " " + " ".join(deps)
        if order_only:
            result += " || " + " ".join(order_only)
        return result

    def _escape_path(self, path: str) -> str:
        """Escape a path for use in a build statement."""
        return path.replace("$", "$$").replace(" ", "$ ").replace(":", "$:")


def generate_ninja(
    graph: DepGraph, output_dir: Path, config: GeneratorConfig | None = None
) -> None:
    """Write the Ninja file and launcher for graph into output_dir."""
    NinjaGenerator(config).generate(graph, output_dir)
