# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Core data models for file dependency ordering.

This module defines the data structures passed between the pipeline stages:
- FileRecord: A source file with its extracted defines and requires
- ResolvedEdge: A require that matched some file's define
- UnresolvedRequirements: Requires with no owner, kept for reporting only
- FileNode: One file's entry in the dependency graph
- DependencyGraph: Ordered mapping of file path -> FileNode
- OrderingResult: Final ordered file list plus sorting metadata

All models serialize to JSON-compatible primitives.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional

logger = logging.getLogger(__name__)

# Stands in for the defines of a file that owns no symbols
NO_DEFINES_PLACEHOLDER = "---"

# Symbol name -> owning file path
SymbolTable = Dict[str, str]


def dedupe(values: Iterable[str]) -> List[str]:
    """Remove duplicates while keeping first-occurrence order."""
    return list(dict.fromkeys(values))


@dataclass
class FileRecord:
    """A source file and the symbols it defines and requires.

    `content` belongs to the caller and is never modified here.
    """

    path: str
    content: str
    defines: List[str] = field(default_factory=list)
    requires: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.defines = dedupe(self.defines)
        self.requires = dedupe(self.requires)


@dataclass(frozen=True)
class ResolvedEdge:
    """Dependency of `source` on `target`, created by requiring `symbol`."""

    source: str
    target: str
    symbol: str

    @property
    def is_self_edge(self) -> bool:
        return self.source == self.target


class UnresolvedRequirements:
    """Unresolved symbol name -> requesting file paths, in first-seen order."""

    def __init__(self) -> None:
        self._by_symbol: Dict[str, List[str]] = {}

    def add(self, symbol: str, requested_by: str) -> None:
        requesters = self._by_symbol.setdefault(symbol, [])
        if requested_by not in requesters:
            requesters.append(requested_by)

    def to_rows(self) -> List[List[str]]:
        """Rows for the not-found report: symbol followed by each requester."""
        return [[symbol, *paths] for symbol, paths in self._by_symbol.items()]

    def to_dict(self) -> Dict[str, List[str]]:
        return {symbol: list(paths) for symbol, paths in self._by_symbol.items()}

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._by_symbol

    def __len__(self) -> int:
        return len(self._by_symbol)

    def __bool__(self) -> bool:
        return bool(self._by_symbol)


@dataclass
class FileNode:
    """A file's entry in the dependency graph.

    Attributes:
        path: File path (graph key).
        defines: Symbols this file owns after resolution (may be empty).
        requires: Dependency file path -> symbol name that created the edge.
    """

    path: str
    defines: List[str] = field(default_factory=list)
    requires: Dict[str, str] = field(default_factory=dict)

    @property
    def labels(self) -> List[str]:
        """Defined symbols, or the placeholder when the file defines nothing."""
        return list(self.defines) if self.defines else [NO_DEFINES_PLACEHOLDER]

    def copy(self) -> "FileNode":
        return FileNode(path=self.path, defines=list(self.defines), requires=dict(self.requires))

    def to_dict(self) -> Dict[str, Any]:
        return {"defines": self.labels, "requires": dict(self.requires)}


class DependencyGraph:
    """Mapping of file path -> FileNode, iterated in insertion order.

    Every `requires` target of a node is itself a node of the graph that was
    built from the same input set. Unresolved symbols never appear as edges.

    NOT thread-safe: each invocation owns its own graph.
    """

    def __init__(self, nodes: Optional[Iterable[FileNode]] = None) -> None:
        self._nodes: Dict[str, FileNode] = {}
        for node in nodes or ():
            self.add_node(node)

    def add_node(self, node: FileNode) -> None:
        self._nodes[node.path] = node

    def get_node(self, path: str) -> Optional[FileNode]:
        return self._nodes.get(path)

    def remove(self, paths: Iterable[str]) -> None:
        """Remove nodes. Callers collect `paths` before calling."""
        for path in paths:
            self._nodes.pop(path, None)

    def paths(self) -> List[str]:
        return list(self._nodes)

    def nodes(self) -> List[FileNode]:
        return list(self._nodes.values())

    def edges(self) -> List[ResolvedEdge]:
        return [
            ResolvedEdge(source=node.path, target=target, symbol=symbol)
            for node in self._nodes.values()
            for target, symbol in node.requires.items()
        ]

    def copy(self) -> "DependencyGraph":
        """Deep-enough copy for destructive sorting and pruning."""
        return DependencyGraph(node.copy() for node in self._nodes.values())

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {path: node.to_dict() for path, node in self._nodes.items()}

    def __contains__(self, path: object) -> bool:
        return path in self._nodes

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._nodes))

    def __len__(self) -> int:
        return len(self._nodes)


@dataclass
class OrderingResult:
    """Outcome of ordering one input set.

    Attributes:
        ordered_files: Files in dependency order (dependencies first).
        layers: Batches of files made ready together by the sorter.
        cyclic_files: Pruned cyclic core when a cycle was found, else empty.
        forced: True when cyclic files were appended without ordering.
        report_path: Where the cycle diagnostic graph was written, if anywhere.
    """

    ordered_files: List[str] = field(default_factory=list)
    layers: List[List[str]] = field(default_factory=list)
    cyclic_files: List[str] = field(default_factory=list)
    forced: bool = False
    report_path: Optional[str] = None
