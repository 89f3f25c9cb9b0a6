# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Dependency graph construction.

Builds the DependencyGraph in two phases:
Phase 1: paths -> FileRecords (missing and unreadable files dropped, content extracted)
Phase 2: FileRecords -> SymbolResolver -> DependencyGraph

A node's defines are the symbols it still owns after resolution. Its
requires map each dependency file to the symbol that created the edge; when
several symbols point at the same file, the last one is kept.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from file_dependencies.config import Config
from file_dependencies.diagnostics import DiagnosticType, WarningCollector
from file_dependencies.extractors import Extractor, create_extractor
from file_dependencies.models import (
    DependencyGraph,
    FileNode,
    FileRecord,
    SymbolTable,
    UnresolvedRequirements,
    dedupe,
)
from file_dependencies.storage import FileSource, LocalFileSource
from file_dependencies.symbol_resolver import SymbolResolver

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """Graph plus the side information gathered while building it."""

    graph: DependencyGraph
    symbol_table: SymbolTable
    unresolved: UnresolvedRequirements
    missing_files: List[str] = field(default_factory=list)


class DependencyGraphBuilder:
    """Turns a list of candidate paths into a DependencyGraph.

    Usage:
        builder = DependencyGraphBuilder(config, source=InMemoryFileSource(files))
        result = builder.build_from_paths(["a.js", "b.js"])
        result.graph
    """

    def __init__(
        self,
        config: Config,
        source: Optional[FileSource] = None,
        extractor: Optional[Extractor] = None,
        collector: Optional[WarningCollector] = None,
    ) -> None:
        self.config = config
        self.source = source if source is not None else LocalFileSource(config.encoding)
        self.extractor = extractor if extractor is not None else create_extractor(config)
        self.collector = collector if collector is not None else WarningCollector()
        self.resolver = SymbolResolver(config, self.collector)

    def existing_paths(self, paths: Iterable[str]) -> List[str]:
        """Drop duplicates and paths that do not exist, warning for the latter."""
        existing: List[str] = []
        for path in dedupe(paths):
            if self.source.exists(path):
                existing.append(path)
            else:
                self.collector.emit(
                    DiagnosticType.MISSING_FILE,
                    f'Source file "{path}" not found.',
                    file=path,
                )
        return existing

    def load_records(self, paths: Iterable[str]) -> List[FileRecord]:
        """Read and extract each existing file, dropping unreadable ones with a warning."""
        records = []
        for path in self.existing_paths(paths):
            try:
                content = self.source.read(path)
            except (OSError, UnicodeDecodeError) as e:
                self.collector.emit(
                    DiagnosticType.UNREADABLE_FILE,
                    f'Source file "{path}" could not be read: {e}',
                    file=path,
                )
                continue
            records.append(self.make_record(path, content))
        return records

    def make_record(self, path: str, content: str) -> FileRecord:
        return FileRecord(
            path=path,
            content=content,
            defines=self.extractor.extract_defines(content),
            requires=self.extractor.extract_requires(content),
        )

    def build(self, records: List[FileRecord]) -> BuildResult:
        """Resolve symbols and assemble the graph from already loaded records."""
        table = self.resolver.build_symbol_table(records)
        resolution = self.resolver.resolve(records, table)

        graph = DependencyGraph()
        for record in records:
            owned = [symbol for symbol in record.defines if table.get(symbol) == record.path]
            graph.add_node(FileNode(path=record.path, defines=owned))

        for edge in resolution.edges:
            node = graph.get_node(edge.source)
            assert node is not None
            node.requires[edge.target] = edge.symbol

        logger.info(
            f"Built dependency graph: {len(graph)} files, {len(graph.edges())} edges, "
            f"{len(resolution.unresolved)} unresolved symbols"
        )
        return BuildResult(graph=graph, symbol_table=table, unresolved=resolution.unresolved)

    def build_from_paths(self, paths: Iterable[str]) -> BuildResult:
        paths = list(paths)
        records = self.load_records(paths)
        result = self.build(records)
        loaded = {record.path for record in records}
        result.missing_files = [path for path in dedupe(paths) if path not in loaded]
        return result
