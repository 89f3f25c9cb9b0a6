# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Isolation of the cyclic core of a stuck dependency graph.

When the sorter can make no progress, every remaining file either sits on a
cycle or depends (directly or not) on one. Files that nothing in the stuck
set refers to cannot be on a cycle, so they are removed; counts are then
recomputed and the process repeats until nothing changes.

This is a heuristic, not a minimal cycle cover: files that are referenced by
a cycle member but only lead back into it through other files stay in the
result. It is used for diagnostics only.
"""

import logging
from typing import Dict

from file_dependencies.models import DependencyGraph

logger = logging.getLogger(__name__)


def count_incoming_references(graph: DependencyGraph) -> Dict[str, int]:
    """Count, per file, the edges from files in `graph` that point at it.

    Edge targets are located through the symbols each file currently defines,
    so references to files outside `graph` are not counted.
    """
    owners: Dict[str, str] = {}
    for node in graph.nodes():
        for symbol in node.defines:
            owners[symbol] = node.path

    counts = {path: 0 for path in graph.paths()}
    for node in graph.nodes():
        for symbol in node.requires.values():
            owner = owners.get(symbol)
            if owner is not None:
                counts[owner] += 1
    return counts


def prune_unreferenced(stuck: DependencyGraph) -> DependencyGraph:
    """Return a copy of `stuck` reduced to the files that form cycles.

    The input graph is left unchanged.
    """
    working = stuck.copy()
    rounds = 0
    while True:
        counts = count_incoming_references(working)
        unreferenced = [path for path, count in counts.items() if count == 0]
        if not unreferenced:
            break
        working.remove(unreferenced)
        rounds += 1

    logger.debug(
        f"Pruned {len(stuck) - len(working)} of {len(stuck)} stuck files in {rounds} rounds"
    )
    return working
