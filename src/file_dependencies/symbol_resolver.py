# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Symbol resolution: match each required symbol to the file that defines it.

Flow: FileRecords -> build_symbol_table() -> SymbolTable
      FileRecords + SymbolTable -> resolve() -> ResolvedEdges + UnresolvedRequirements

When several files define the same symbol, the last one in input order owns
it. No error or warning is raised for the redefinition; it is only logged at
debug level. Symbol names are opaque strings and are not validated.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from file_dependencies.config import Config
from file_dependencies.diagnostics import DiagnosticType, WarningCollector
from file_dependencies.models import (
    FileRecord,
    ResolvedEdge,
    SymbolTable,
    UnresolvedRequirements,
)

logger = logging.getLogger(__name__)


@dataclass
class ResolutionResult:
    """Edges found by the resolver plus the requires it could not match."""

    edges: List[ResolvedEdge] = field(default_factory=list)
    unresolved: UnresolvedRequirements = field(default_factory=UnresolvedRequirements)
    skipped_self_edges: int = 0


class SymbolResolver:
    """Builds the symbol table and resolves requires against it.

    Usage:
        resolver = SymbolResolver(config, collector)
        table = resolver.build_symbol_table(records)
        result = resolver.resolve(records, table)
    """

    def __init__(self, config: Config, collector: Optional[WarningCollector] = None) -> None:
        self.config = config
        self.collector = collector if collector is not None else WarningCollector()

    def build_symbol_table(self, records: Iterable[FileRecord]) -> SymbolTable:
        """Map every defined symbol to its owning file (last writer wins)."""
        table: SymbolTable = {}
        for record in records:
            for symbol in record.defines:
                previous = table.get(symbol)
                if previous is not None and previous != record.path:
                    logger.debug(
                        f'Symbol "{symbol}" defined by "{previous}" is redefined by "{record.path}"'
                    )
                table[symbol] = record.path
        return table

    def resolve(self, records: Iterable[FileRecord], table: SymbolTable) -> ResolutionResult:
        """Resolve each record's requires to edges.

        Unresolved symbols are recorded and warned about, never turned into edges.
        """
        result = ResolutionResult()
        skip_self = self.config.skip_required_myself

        for record in records:
            for symbol in record.requires:
                owner = table.get(symbol)
                if owner is None:
                    result.unresolved.add(symbol, record.path)
                    self.collector.emit(
                        DiagnosticType.UNRESOLVED_SYMBOL,
                        f'Not found "{symbol}". required by "{record.path}".',
                        file=record.path,
                        symbol=symbol,
                    )
                    continue

                edge = ResolvedEdge(source=record.path, target=owner, symbol=symbol)
                if edge.is_self_edge and skip_self:
                    result.skipped_self_edges += 1
                    continue
                result.edges.append(edge)

        logger.debug(
            f"Resolved {len(result.edges)} edges, "
            f"{len(result.unresolved)} unresolved symbols, "
            f"{result.skipped_self_edges} self edges skipped"
        )
        return result
