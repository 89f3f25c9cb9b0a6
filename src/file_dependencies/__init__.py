# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Dependency-respecting ordering of source files."""

from .config import Config, ConfigurationError
from .cycle_pruner import prune_unreferenced
from .diagnostics import DiagnosticType, StructuredWarning, WarningCollector
from .extractors import CallableExtractor, Extractor, RegexExtractor, create_extractor
from .graph_builder import BuildResult, DependencyGraphBuilder
from .graph_export import DotGraphExporter
from .models import (
    NO_DEFINES_PLACEHOLDER,
    DependencyGraph,
    FileNode,
    FileRecord,
    OrderingResult,
    ResolvedEdge,
    UnresolvedRequirements,
)
from .output import OutputPort, write_not_found_report
from .service import FileDependencyService, InvocationResult
from .storage import FileSource, InMemoryFileSource, LocalFileSource
from .symbol_resolver import ResolutionResult, SymbolResolver
from .topo_sort import CyclicDependencyError, TopologicalSorter

__version__ = "0.1.0"

__all__ = [
    "Config",
    "ConfigurationError",
    "FileRecord",
    "FileNode",
    "DependencyGraph",
    "ResolvedEdge",
    "UnresolvedRequirements",
    "OrderingResult",
    "NO_DEFINES_PLACEHOLDER",
    "Extractor",
    "RegexExtractor",
    "CallableExtractor",
    "create_extractor",
    "FileSource",
    "LocalFileSource",
    "InMemoryFileSource",
    "SymbolResolver",
    "ResolutionResult",
    "DependencyGraphBuilder",
    "BuildResult",
    "TopologicalSorter",
    "CyclicDependencyError",
    "prune_unreferenced",
    "DotGraphExporter",
    "OutputPort",
    "write_not_found_report",
    "FileDependencyService",
    "InvocationResult",
    "DiagnosticType",
    "StructuredWarning",
    "WarningCollector",
]
