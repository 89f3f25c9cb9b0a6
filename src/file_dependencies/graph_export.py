# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Graphviz DOT export of a dependency graph for cycle diagnostics.

Each file becomes a cluster holding one node per symbol it defines (the
placeholder node when it defines none). Each require becomes an edge from
every symbol of the requiring file to the required symbol, provided the
required symbol is a node of the exported graph.

Example output:
    digraph dependency {
        rankdir=LR;
        subgraph cluster_1 {
            rankdir=TB;
            "x";
            label="File: x.js"
        }
        "x" -> "y";
    }
"""

import logging
from pathlib import Path
from typing import List, Set, Union

from file_dependencies.models import DependencyGraph

logger = logging.getLogger(__name__)


def quote(value: str) -> str:
    """Quote a DOT identifier, escaping backslashes and double quotes."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class DotGraphExporter:
    """Renders a DependencyGraph as DOT text and writes it to disk."""

    def __init__(self, graph_name: str = "dependency", rankdir: str = "LR") -> None:
        self.graph_name = graph_name
        self.rankdir = rankdir

    def render(self, graph: DependencyGraph) -> str:
        lines: List[str] = [f"digraph {self.graph_name} {{", f"\trankdir={self.rankdir};"]
        nodes: Set[str] = set()

        for cluster_num, node in enumerate(graph.nodes(), start=1):
            lines.append(f"\tsubgraph cluster_{cluster_num} {{")
            lines.append("\t\trankdir=TB;")
            for name in node.labels:
                nodes.add(name)
                lines.append(f"\t\t{quote(name)};")
            lines.append(f"\t\tlabel={quote('File: ' + node.path)}")
            lines.append("\t}")

        for node in graph.nodes():
            for name in node.labels:
                for required in node.requires.values():
                    if required in nodes:
                        lines.append(f"\t{quote(name)} -> {quote(required)};")

        lines.append("}")
        return "\n".join(lines) + "\n"

    def write(self, graph: DependencyGraph, path: Union[str, Path]) -> Path:
        """Write the rendered graph to `path`, creating parent directories."""
        output = Path(path)
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(self.render(graph), encoding="utf-8")
        logger.info(f"Exported dependency graph of {len(graph)} files to {output}")
        return output
