# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Publishing of the ordered file list and of the not-found report.

The ordered list leaves the core through two channels:
(a) a caller-supplied shared-state mapping, under a configurable key
(b) an optional JSON destination artifact

The not-found report is a CSV table with one row per unresolved symbol: the
symbol followed by every file that required it.
"""

import csv
import json
import logging
from pathlib import Path
from typing import List, MutableMapping, Optional, Union

from file_dependencies.config import DEST_SENTINEL, Config
from file_dependencies.models import UnresolvedRequirements

logger = logging.getLogger(__name__)


def is_destination(dest: Optional[str]) -> bool:
    """True when `dest` names a real artifact rather than "no destination"."""
    return bool(dest) and dest != DEST_SENTINEL


class OutputPort:
    """Exposes the final ordered file list to the caller.

    Usage:
        state = {}
        port = OutputPort(config, state)
        port.publish(["a.js", "b.js"])
        state[config.output_property]  # ["a.js", "b.js"]
    """

    def __init__(
        self,
        config: Config,
        shared_state: Optional[MutableMapping[str, object]] = None,
    ) -> None:
        self.config = config
        self.shared_state: MutableMapping[str, object] = (
            shared_state if shared_state is not None else {}
        )

    def publish(self, ordered_files: List[str], dest: Optional[str] = None) -> Optional[Path]:
        """Publish to shared state and, if a destination is set, to JSON.

        Args:
            ordered_files: The computed order.
            dest: Destination override; falls back to the configured `dest`.

        Returns:
            The destination path written, or None if channel (b) was skipped.
        """
        key = self.config.output_property
        self.shared_state[key] = list(ordered_files)
        logger.debug(f"Published {len(ordered_files)} files under '{key}'")

        target = dest if dest is not None else self.config.dest
        if not is_destination(target):
            return None
        assert target is not None
        return self.write_destination(ordered_files, target)

    def write_destination(self, ordered_files: List[str], dest: Union[str, Path]) -> Path:
        output = Path(dest)
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(json.dumps(list(ordered_files)), encoding="utf-8")
        logger.info(f"Wrote ordered list of {len(ordered_files)} files to {output}")
        return output


def write_not_found_report(unresolved: UnresolvedRequirements, path: Union[str, Path]) -> Path:
    """Write the unresolved-requirements table as CSV."""
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    with open(output, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerows(unresolved.to_rows())
    logger.info(f"Wrote {len(unresolved)} unresolved symbols to {output}")
    return output
