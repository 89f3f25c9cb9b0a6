# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Command-line entry point.

Expands the given glob patterns into the candidate file list, orders the
files and prints the result as a JSON array on stdout.

    file-dependencies --dest build/order.json "src/**/*.js"
"""

import argparse
import glob
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from file_dependencies.config import Config, ConfigurationError
from file_dependencies.logging_setup import setup_logging
from file_dependencies.service import FileDependencyService
from file_dependencies.topo_sort import CyclicDependencyError

logger = logging.getLogger(__name__)


def expand_patterns(patterns: Sequence[str]) -> List[str]:
    """Expand glob patterns in order; a pattern matching nothing is kept as is.

    Keeping unmatched literals lets the missing-file warning report them.
    """
    paths: List[str] = []
    for pattern in patterns:
        matches = sorted(glob.glob(pattern, recursive=True))
        paths.extend(matches if matches else [pattern])
    return paths


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        prog="file-dependencies",
        description="Generate a list of files in dependency order.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("patterns", nargs="+", help="Files or glob patterns to order")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML configuration file. Default: ./.file_dependencies.yml",
    )
    parser.add_argument("--dest", default=None, help="Write the ordered list as JSON here")
    parser.add_argument("--output-property", default=None, help="Shared-state key")
    parser.add_argument(
        "--skip-required-myself",
        action="store_true",
        default=None,
        help="Ignore files requiring their own symbols",
    )
    parser.add_argument(
        "--force",
        dest="force_make_file_list",
        action="store_true",
        default=None,
        help="Append cyclic files instead of failing",
    )
    parser.add_argument("--cycle-report", default=None, help="DOT file for cycle diagnostics")
    parser.add_argument("--not-found-report", default=None, help="CSV of unresolved symbols")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Console log level. Default: WARNING",
    )
    parser.add_argument("--log-file", type=Path, default=None, help="JSON log file")
    return parser.parse_args(argv)


def overrides_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    """Collect the options given on the command line, skipping unset ones."""
    candidates = {
        "dest": args.dest,
        "output_property": args.output_property,
        "skip_required_myself": args.skip_required_myself,
        "force_make_file_list": args.force_make_file_list,
        "cycle_dot_report": args.cycle_report,
        "not_found_report": args.not_found_report,
    }
    return {key: value for key, value in candidates.items() if value is not None}


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the CLI.

    Returns:
        Exit status: 0 on success, 1 on a cycle, a configuration error, or
        an output that could not be written.
    """
    args = parse_args(argv)
    setup_logging(log_file=args.log_file, log_level=getattr(logging, args.log_level))

    try:
        config = Config(config_path=args.config, overrides=overrides_from_args(args))
        service = FileDependencyService(config)
        result = service.order_files(expand_patterns(args.patterns))
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1
    except CyclicDependencyError:
        # Already reported by the sorter
        return 1
    except OSError as e:
        logger.error(f"Failed to write output: {e}")
        return 1

    print(json.dumps(result.ordered_files, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
