# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Service layer that runs one ordering invocation end to end.

Flow:
    candidate paths -> DependencyGraphBuilder -> DependencyGraph
    -> (not-found report) -> TopologicalSorter -> OutputPort

Enumerating the candidate paths (globbing) is the caller's job. All
structures are built fresh per call; nothing is cached between calls.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, MutableMapping, Optional

from file_dependencies.config import Config
from file_dependencies.diagnostics import StructuredWarning, WarningCollector
from file_dependencies.extractors import Extractor, create_extractor
from file_dependencies.graph_builder import DependencyGraphBuilder
from file_dependencies.graph_export import DotGraphExporter
from file_dependencies.models import DependencyGraph, OrderingResult, UnresolvedRequirements
from file_dependencies.output import OutputPort, write_not_found_report
from file_dependencies.storage import FileSource, LocalFileSource
from file_dependencies.topo_sort import TopologicalSorter

logger = logging.getLogger(__name__)


@dataclass
class InvocationResult:
    """Everything one invocation produced.

    Attributes:
        ordering: Sorter output (ordered files, layers, cycle information).
        graph: The full dependency graph before sorting.
        unresolved: Required symbols no file defines.
        missing_files: Input paths that did not exist.
        warnings: Every warning emitted during the invocation.
        destination: JSON destination written, if any.
    """

    ordering: OrderingResult
    graph: DependencyGraph
    unresolved: UnresolvedRequirements
    missing_files: List[str] = field(default_factory=list)
    warnings: List[StructuredWarning] = field(default_factory=list)
    destination: Optional[str] = None

    @property
    def ordered_files(self) -> List[str]:
        return self.ordering.ordered_files

    def warning_counts(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for warning in self.warnings:
            counts[warning.type] = counts.get(warning.type, 0) + 1
        return counts


class FileDependencyService:
    """Orders source files so every dependency precedes its dependents.

    Usage:
        service = FileDependencyService(Config(overrides={"dest": "order.json"}))
        result = service.order_files(["lib/a.js", "lib/b.js"])
        result.ordered_files

    The extractor is resolved once at construction and reused by every call.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        source: Optional[FileSource] = None,
        shared_state: Optional[MutableMapping[str, object]] = None,
        extractor: Optional[Extractor] = None,
        exporter: Optional[DotGraphExporter] = None,
    ) -> None:
        self.config = config if config is not None else Config()
        self.source = source if source is not None else LocalFileSource(self.config.encoding)
        self.extractor = extractor if extractor is not None else create_extractor(self.config)
        self.exporter = exporter if exporter is not None else DotGraphExporter()
        self.output = OutputPort(self.config, shared_state)

    @property
    def shared_state(self) -> MutableMapping[str, object]:
        return self.output.shared_state

    def order_files(self, paths: Iterable[str]) -> InvocationResult:
        """Compute and publish the dependency order of `paths`.

        Raises:
            CyclicDependencyError: In strict mode when the files form a cycle.
                The diagnostic graph has been written before it is raised.
        """
        collector = WarningCollector()
        builder = DependencyGraphBuilder(
            self.config, source=self.source, extractor=self.extractor, collector=collector
        )
        built = builder.build_from_paths(paths)

        if self.config.not_found_report:
            write_not_found_report(built.unresolved, self.config.not_found_report)

        sorter = TopologicalSorter(self.config, exporter=self.exporter, collector=collector)
        ordering = sorter.sort(built.graph)

        destination = self.output.publish(ordering.ordered_files)

        counts = collector.count_by_type()
        if counts:
            logger.info(f"Completed with warnings: {counts}")

        return InvocationResult(
            ordering=ordering,
            graph=built.graph,
            unresolved=built.unresolved,
            missing_files=built.missing_files,
            warnings=collector.get_warnings(),
            destination=str(destination) if destination is not None else None,
        )
