# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Layered topological sort of a dependency graph.

The sorter repeatedly takes every remaining file whose dependencies have all
been emitted, appends that layer to the output in graph iteration order and
removes it from the working set. The ready layer is collected before any
removal so the working set is never mutated while it is being scanned.

If files remain but none is ready, there is a cycle. The stuck set is pruned
to its cyclic core (see cycle_pruner), exported as a DOT diagram, and then:
- strict mode (default): CyclicDependencyError is raised
- lenient mode (force_make_file_list): the stuck files are appended in
  iteration order so the caller still receives every file exactly once
"""

import logging
from pathlib import Path
from typing import List, Optional

from file_dependencies.config import Config
from file_dependencies.cycle_pruner import prune_unreferenced
from file_dependencies.diagnostics import DiagnosticType, Severity, WarningCollector
from file_dependencies.graph_export import DotGraphExporter
from file_dependencies.models import DependencyGraph, OrderingResult

logger = logging.getLogger(__name__)


class CyclicDependencyError(Exception):
    """Raised in strict mode when no valid next file exists.

    Attributes:
        files: The pruned set of files forming the cycle(s).
        report_path: Where the diagnostic graph was written, if it was.
        ordered_files: Files that were ordered before the sort got stuck.
    """

    def __init__(
        self,
        files: List[str],
        report_path: Optional[str] = None,
        ordered_files: Optional[List[str]] = None,
    ) -> None:
        self.files = list(files)
        self.report_path = report_path
        self.ordered_files = list(ordered_files or [])
        super().__init__(format_cycle_message(self.files, report_path))


def format_cycle_message(files: List[str], report_path: Optional[str]) -> str:
    lines = ["A cyclic dependency was found among the following files:"]
    lines.extend(f"  {path}" for path in files)
    if report_path is not None:
        lines.append(f"See exported cycle dependency graph: {report_path}")
    return "\n".join(lines)


def ready_files(remaining: DependencyGraph) -> List[str]:
    """Files in `remaining` with no dependency still in `remaining`."""
    return [
        node.path
        for node in remaining.nodes()
        if not any(target in remaining for target in node.requires)
    ]


class TopologicalSorter:
    """Orders a DependencyGraph so every dependency precedes its dependents.

    Usage:
        sorter = TopologicalSorter(config)
        result = sorter.sort(graph)
        result.ordered_files
    """

    def __init__(
        self,
        config: Config,
        exporter: Optional[DotGraphExporter] = None,
        collector: Optional[WarningCollector] = None,
    ) -> None:
        self.config = config
        self.exporter = exporter if exporter is not None else DotGraphExporter()
        self.collector = collector if collector is not None else WarningCollector()

    def sort(self, graph: DependencyGraph) -> OrderingResult:
        """Sort `graph` without modifying it.

        Raises:
            CyclicDependencyError: In strict mode, when a cycle blocks progress.
        """
        result = OrderingResult()
        remaining = graph.copy()

        while len(remaining):
            layer = ready_files(remaining)
            if not layer:
                self._handle_cycle(remaining, result)
                break
            result.layers.append(layer)
            result.ordered_files.extend(layer)
            remaining.remove(layer)

        logger.info(
            f"Ordered {len(result.ordered_files)} files in {len(result.layers)} layers"
            + (" (forced)" if result.forced else "")
        )
        return result

    def _handle_cycle(self, stuck: DependencyGraph, result: OrderingResult) -> None:
        cyclic = prune_unreferenced(stuck)
        result.cyclic_files = cyclic.paths()
        result.report_path = self._export(cyclic)
        message = format_cycle_message(result.cyclic_files, result.report_path)

        if not self.config.force_make_file_list:
            self.collector.emit(
                DiagnosticType.CYCLIC_DEPENDENCY,
                message,
                severity=Severity.ERROR,
                files=result.cyclic_files,
            )
            raise CyclicDependencyError(
                result.cyclic_files, result.report_path, result.ordered_files
            )

        self.collector.emit(
            DiagnosticType.CYCLIC_DEPENDENCY_DEGRADED,
            message,
            files=result.cyclic_files,
        )
        result.ordered_files.extend(stuck.paths())
        result.forced = True

    def _export(self, cyclic: DependencyGraph) -> Optional[str]:
        """Write the cycle diagram; a write failure must not hide the cycle."""
        try:
            path = self.exporter.write(cyclic, Path(self.config.cycle_dot_report))
        except OSError as e:
            logger.error(f"Failed to export cycle graph to {self.config.cycle_dot_report}: {e}")
            return None
        return str(path)
