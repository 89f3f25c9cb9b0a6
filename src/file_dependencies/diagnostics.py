# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Structured warnings for non-fatal anomalies.

Anomalies are collected per invocation and reported in aggregate rather than
aborting on the first one. Only a strict-mode cycle is fatal, and that is
raised as CyclicDependencyError (see topo_sort); it is still recorded here
before raising so the invocation's warning list is complete.

Warning types:
- missing_file: An input path does not exist; the file is dropped
- unreadable_file: An input file exists but cannot be read; the file is dropped
- unresolved_symbol: A required symbol has no owner; the edge is omitted
- cyclic_dependency: No topological progress possible (strict mode)
- cyclic_dependency_degraded: Same, but the order was forced (lenient mode)
"""

import json
import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class DiagnosticType:
    """Warning type identifiers.

    Design: Using class constants (not Enum) for JSON-compatible strings.
    """

    MISSING_FILE = "missing_file"
    UNREADABLE_FILE = "unreadable_file"
    UNRESOLVED_SYMBOL = "unresolved_symbol"
    CYCLIC_DEPENDENCY = "cyclic_dependency"
    CYCLIC_DEPENDENCY_DEGRADED = "cyclic_dependency_degraded"


class Severity:
    WARNING = "warning"
    ERROR = "error"


@dataclass
class StructuredWarning:
    """A single anomaly with enough context to report it.

    Attributes:
        type: DiagnosticType value
        severity: "warning" or "error"
        message: Human-readable summary
        timestamp: ISO 8601 timestamp
        file: File the anomaly concerns (optional)
        symbol: Symbol the anomaly concerns (optional)
        files: All files implicated, for multi-file anomalies like cycles
    """

    type: str
    severity: str
    message: str
    timestamp: str
    file: Optional[str] = None
    symbol: Optional[str] = None
    files: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dictionary, omitting unset fields."""
        result: Dict[str, Any] = {
            "type": self.type,
            "severity": self.severity,
            "message": self.message,
            "timestamp": self.timestamp,
        }
        if self.file is not None:
            result["file"] = self.file
        if self.symbol is not None:
            result["symbol"] = self.symbol
        if self.files:
            result["files"] = list(self.files)
        return result

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)


class WarningCollector:
    """Collects and logs the warnings raised during one invocation.

    Each warning is logged at WARNING level (ERROR for fatal cycles) with its
    structured payload attached as `extra_fields`, which StructuredFormatter
    merges into the JSON log line.

    Usage:
        collector = WarningCollector()
        collector.emit(DiagnosticType.MISSING_FILE, "not found", file="a.js")
        collector.count_by_type()  # {"missing_file": 1}
    """

    def __init__(self) -> None:
        self._warnings: List[StructuredWarning] = []

    def emit(
        self,
        warning_type: str,
        message: str,
        severity: str = Severity.WARNING,
        file: Optional[str] = None,
        symbol: Optional[str] = None,
        files: Optional[List[str]] = None,
    ) -> StructuredWarning:
        """Record a warning and log it.

        Returns:
            The recorded StructuredWarning.
        """
        warning = StructuredWarning(
            type=warning_type,
            severity=severity,
            message=message,
            timestamp=datetime.now(timezone.utc).isoformat(),
            file=file,
            symbol=symbol,
            files=list(files or []),
        )
        self._warnings.append(warning)

        level = logging.ERROR if severity == Severity.ERROR else logging.WARNING
        logger.log(level, message, extra={"extra_fields": warning.to_dict()})
        return warning

    def get_warnings(self, warning_type: Optional[str] = None) -> List[StructuredWarning]:
        if warning_type is None:
            return list(self._warnings)
        return [w for w in self._warnings if w.type == warning_type]

    def count_by_type(self) -> Dict[str, int]:
        return dict(Counter(w.type for w in self._warnings))

    def __len__(self) -> int:
        return len(self._warnings)
