# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Shared fixtures for file dependency tests."""

from pathlib import Path
from typing import Dict, Iterable, Optional

import pytest

from file_dependencies.config import Config
from file_dependencies.models import DependencyGraph, FileNode


def js_file(defines: Iterable[str] = (), requires: Iterable[str] = ()) -> str:
    """Render a small AMD-style source file."""
    lines = [f'define("{name}", function () {{}});' for name in defines]
    lines.extend(f'var dep = require("{name}");' for name in requires)
    return "\n".join(lines) + "\n"


def make_graph(deps: Dict[str, Dict[str, str]], defines: Optional[Dict[str, list]] = None):
    """Build a DependencyGraph from {path: {dependency_path: symbol}}.

    Each file defines the symbol named after its path unless `defines` says otherwise.
    """
    defines = defines or {}
    return DependencyGraph(
        FileNode(path=path, defines=defines.get(path, [path]), requires=dict(requires))
        for path, requires in deps.items()
    )


@pytest.fixture
def make_config(tmp_path: Path):
    """Factory for a Config that ignores any config file in the working directory."""

    def _make(**overrides):
        overrides.setdefault("cycle_dot_report", str(tmp_path / "cyclemap.dot"))
        return Config(config_path=tmp_path / "absent.yml", overrides=overrides)

    return _make
