# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Unit tests for structured warnings."""

import json
import logging

from file_dependencies.diagnostics import (
    DiagnosticType,
    Severity,
    StructuredWarning,
    WarningCollector,
)


class TestStructuredWarning:
    def test_to_dict_omits_unset_fields(self):
        warning = StructuredWarning(
            type=DiagnosticType.MISSING_FILE,
            severity=Severity.WARNING,
            message="gone",
            timestamp="2025-01-01T00:00:00+00:00",
            file="a.js",
        )
        assert warning.to_dict() == {
            "type": "missing_file",
            "severity": "warning",
            "message": "gone",
            "timestamp": "2025-01-01T00:00:00+00:00",
            "file": "a.js",
        }

    def test_to_json(self):
        warning = StructuredWarning(
            type=DiagnosticType.CYCLIC_DEPENDENCY,
            severity=Severity.ERROR,
            message="cycle",
            timestamp="t",
            files=["x", "y"],
        )
        assert json.loads(warning.to_json())["files"] == ["x", "y"]


class TestWarningCollector:
    """Tests for WarningCollector."""

    def test_emit_records_and_logs(self, caplog):
        collector = WarningCollector()
        with caplog.at_level(logging.WARNING, logger="file_dependencies.diagnostics"):
            collector.emit(DiagnosticType.UNRESOLVED_SYMBOL, "Not found", file="a.js", symbol="s")

        assert len(collector) == 1
        assert collector.get_warnings()[0].symbol == "s"
        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert record.extra_fields["type"] == "unresolved_symbol"

    def test_error_severity_logged_as_error(self, caplog):
        collector = WarningCollector()
        with caplog.at_level(logging.WARNING, logger="file_dependencies.diagnostics"):
            collector.emit(DiagnosticType.CYCLIC_DEPENDENCY, "cycle", severity=Severity.ERROR)

        assert caplog.records[-1].levelno == logging.ERROR

    def test_filter_and_counts(self):
        collector = WarningCollector()
        collector.emit(DiagnosticType.MISSING_FILE, "m1")
        collector.emit(DiagnosticType.MISSING_FILE, "m2")
        collector.emit(DiagnosticType.UNRESOLVED_SYMBOL, "u1")

        assert [w.message for w in collector.get_warnings(DiagnosticType.MISSING_FILE)] == [
            "m1",
            "m2",
        ]
        assert collector.count_by_type() == {"missing_file": 2, "unresolved_symbol": 1}
        assert len(collector) == 3
