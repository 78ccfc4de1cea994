# SPDX-License-Identifier: MIT
"""Dependency graph consumed by the generators.

The graph is produced by an earlier stage (Makefile parsing and rule
resolution) and is read-only here. Nodes are identified by their output
path; edges refer to other nodes by output path as well.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from mkninja.core.errors import GraphError


@dataclass(frozen=True)
class Command:
    """A single runnable recipe line.

    Attributes:
        cmd: The shell text, already expanded.
        ignore_error: True if a failure of this line must not stop the
            recipe (the Makefile ``-`` prefix).
    """

    cmd: str
    ignore_error: bool = False


@dataclass(frozen=True)
class Edge:
    """A prerequisite of a node.

    Attributes:
        output: Output path of the prerequisite node.
        is_order_only: True for prerequisites that must be built first but
            do not trigger a rebuild when they change.
    """

    output: str
    is_order_only: bool = False


@dataclass
class DepNode:
    """A target in the dependency graph.

    Attributes:
        output: The output path, unique within the graph.
        cmds: Raw (unexpanded) recipe lines.
        deps: Prerequisites, in declaration order.
        is_phony: True for targets with no file product.
    """

    output: str
    cmds: list[str] = field(default_factory=list)
    deps: list[Edge] = field(default_factory=list)
    is_phony: bool = False

    @property
    def is_dangling(self) -> bool:
        """True if the node is only a reference and builds nothing."""
        return not self.cmds and not self.deps and not self.is_phony


class DepGraph:
    """A resolved dependency graph plus its variables and exports.

    Attributes:
        nodes: The root nodes, in emission order.
        vars: Variable name to raw (unexpanded) value.
        exports: Variable name to True (export) or False (unset).
    """

    def __init__(
        self,
        nodes: list[DepNode],
        vars: Mapping[str, str] | None = None,
        exports: Mapping[str, bool] | None = None,
        *,
        all_nodes: list[DepNode] | None = None,
    ) -> None:
        self.nodes = list(nodes)
        self.vars: dict[str, str] = dict(vars or {})
        self.exports: dict[str, bool] = dict(exports or {})
        self._by_output: dict[str, DepNode] = {}
        for node in [*self.nodes, *(all_nodes or [])]:
            self._by_output.setdefault(node.output, node)

    def node(self, output: str) -> DepNode:
        """Look up a node by output path.

        Outputs that are referenced but never defined (plain source files,
        for instance) get an empty node, which generators treat as a
        dangling leaf.
        """
        node = self._by_output.get(output)
        if node is None:
            return DepNode(output)
        return node

    def __contains__(self, output: object) -> bool:
        return output in self._by_output

    def __len__(self) -> int:
        return len(self._by_output)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DepGraph:
        """Build a graph from its JSON form.

        Example:
            {
                "roots": ["all"],
                "nodes": [
                    {"output": "all", "phony": true, "deps": ["foo.o"]},
                    {"output": "foo.o", "deps": ["foo.c"],
                     "order_only": ["out"], "cmds": ["$(CC) -c $< -o $@"]}
                ],
                "vars": {"CC": "gcc"},
                "exports": {"PATH": true}
            }

        ``roots`` defaults to every node, in file order.

        Raises:
            GraphError: If the data is not a valid graph.
        """
        if not isinstance(data, Mapping):
            raise GraphError("graph must be a JSON object")

        nodes: list[DepNode] = []
        by_output: dict[str, DepNode] = {}
        for entry in data.get("nodes", []):
            node = _node_from_dict(entry)
            if node.output in by_output:
                raise GraphError(f"duplicate node: {node.output}")
            by_output[node.output] = node
            nodes.append(node)

        roots_data = data.get("roots")
        if roots_data is None:
            roots = nodes
        else:
            roots = []
            for output in roots_data:
                if output not in by_output:
                    raise GraphError(f"unknown root: {output}")
                roots.append(by_output[output])

        vars = data.get("vars", {})
        exports = data.get("exports", {})
        if not isinstance(vars, Mapping) or not isinstance(exports, Mapping):
            raise GraphError("'vars' and 'exports' must be JSON objects")

        return cls(
            roots,
            {str(k): str(v) for k, v in vars.items()},
            {str(k): bool(v) for k, v in exports.items()},
            all_nodes=nodes,
        )


def _node_from_dict(entry: Any) -> DepNode:
    if not isinstance(entry, Mapping) or "output" not in entry:
        raise GraphError(f"node must be an object with an 'output': {entry!r}")

    deps = [Edge(str(d)) for d in entry.get("deps", [])]
    deps.extend(Edge(str(d), is_order_only=True) for d in entry.get("order_only", []))
    return DepNode(
        output=str(entry["output"]),
        cmds=[str(c) for c in entry.get("cmds", [])],
        deps=deps,
        is_phony=bool(entry.get("phony", False)),
    )


def load_graph(path: Path | str) -> DepGraph:
    """Load a graph from a JSON file.

    Raises:
        GraphError: If the file cannot be read or parsed.
    """
    path = Path(path)
    try:
        with open(path) as f:
            data = json.load(f)
    except OSError as e:
        raise GraphError(f"cannot read graph {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise GraphError(f"invalid JSON in {path}: {e}") from e
    return DepGraph.from_dict(data)
