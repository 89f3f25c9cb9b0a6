# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Configuration loading and validation for file dependency ordering."""

import importlib
import logging
import re
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = ".file_dependencies.yml"

DEFAULT_DEFINES_PATTERN = r"""define\s*\(\s*['"]([^'"]+)['"]"""
DEFAULT_REQUIRES_PATTERN = r"""require\s*\(\s*['"]([^'"]+)['"]"""

# A destination equal to this means "no destination"
DEST_SENTINEL = "src"

ExtractFunction = Callable[[str], Sequence[str]]


class ConfigurationError(Exception):
    """Raised when configuration validation fails critically."""

    pass


class Config:
    """Configuration for one ordering invocation.

    Loads .file_dependencies.yml with validation and defaults, then applies
    `overrides` (programmatic callers and the CLI) with the same validation.
    The option names used by build-tool integrations (camelCase) are
    accepted as aliases.
    """

    DEFAULTS: Dict[str, Any] = {
        "task_name": "file_dependencies",
        "target": "default",
        "output_property": None,  # derived from task_name and target
        "extract_defines_pattern": DEFAULT_DEFINES_PATTERN,
        "extract_requires_pattern": DEFAULT_REQUIRES_PATTERN,
        "extract_defines": None,
        "extract_requires": None,
        "skip_required_myself": False,
        "force_make_file_list": False,
        "cycle_dot_report": "cyclemap.dot",
        "not_found_report": None,
        "dest": None,
        "encoding": "utf-8",
    }

    ALIASES: Dict[str, str] = {
        "taskName": "task_name",
        "outputProperty": "output_property",
        "extractDefinesPattern": "extract_defines_pattern",
        "extractRequiresPattern": "extract_requires_pattern",
        "extractDefinesRegex": "extract_defines_pattern",
        "extractRequiresRegex": "extract_requires_pattern",
        "extractDefines": "extract_defines",
        "extractRequires": "extract_requires",
        "skipRequiredMyself": "skip_required_myself",
        "forceMakeFileList": "force_make_file_list",
        "cycleDotReport": "cycle_dot_report",
        "cycleReport": "cycle_dot_report",
        "notFoundReport": "not_found_report",
    }

    # Keys whose default is None but accept a string when set
    _OPTIONAL_STRINGS = ("output_property", "not_found_report", "dest")
    _PATTERNS = ("extract_defines_pattern", "extract_requires_pattern")
    _CALLABLES = ("extract_defines", "extract_requires")

    def __init__(
        self,
        config_path: Optional[Path] = None,
        overrides: Optional[Mapping[str, Any]] = None,
    ):
        """Initialize configuration.

        Args:
            config_path: Path to configuration file. If None, uses default location.
            overrides: Values applied on top of the file, e.g. from the CLI.

        Raises:
            ConfigurationError: If an extractor import string cannot be resolved.
        """
        if config_path is None:
            config_path = Path.cwd() / DEFAULT_CONFIG_FILENAME

        self.config_path = config_path
        self._config: Dict[str, Any] = {}
        self._load_config()
        if overrides:
            self._validate_and_merge(dict(overrides))

    def _load_config(self) -> None:
        """Load and validate configuration from file."""
        self._config = self.DEFAULTS.copy()

        if not self.config_path.exists():
            logger.info(f"Configuration file not found at {self.config_path}, using defaults")
            return

        try:
            with open(self.config_path, encoding="utf-8") as f:
                loaded_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.warning(
                f"Error parsing configuration file {self.config_path}: {e}, using defaults"
            )
            return
        except OSError as e:
            logger.warning(
                f"Unable to read configuration file {self.config_path}: {e}, using defaults"
            )
            return

        if loaded_config is None:
            logger.warning("Configuration file is empty, using defaults")
            return

        if not isinstance(loaded_config, dict):
            logger.warning(
                f"Configuration file must contain a YAML dictionary, "
                f"got {type(loaded_config)}, using defaults"
            )
            return

        self._validate_and_merge(loaded_config)

    def _validate_and_merge(self, loaded_config: Dict[str, Any]) -> None:
        """Validate configuration values and merge them over current values.

        Invalid parameters are logged as warnings and the previous value is kept.
        """
        for raw_key, value in loaded_config.items():
            key = self.ALIASES.get(raw_key, raw_key)
            if key not in self.DEFAULTS:
                logger.warning(f"Unknown configuration parameter '{raw_key}', ignoring")
                continue

            if key in self._CALLABLES and value is not None:
                self._config[key] = self._resolve_callable(key, value)
                continue

            if not self._validate_parameter(key, value):
                logger.warning(
                    f"Invalid value for '{raw_key}': {value!r}, keeping {self._config[key]!r}"
                )
                continue

            self._config[key] = value

    def _validate_parameter(self, key: str, value: Any) -> bool:
        """Validate a configuration parameter.

        Returns:
            True if valid, False if invalid
        """
        if key in self._OPTIONAL_STRINGS:
            return value is None or (isinstance(value, str) and bool(value))
        if key in self._CALLABLES:
            return value is None

        expected_type = type(self.DEFAULTS[key])
        if not isinstance(value, expected_type):
            return False

        if key in self._PATTERNS:
            try:
                return re.compile(value).groups == 1
            except re.error:
                return False
        elif key in ("task_name", "target", "cycle_dot_report", "encoding"):
            return bool(value)

        return True

    def _resolve_callable(self, key: str, value: Any) -> ExtractFunction:
        """Resolve an extractor given as a callable or a "module:function" string."""
        if callable(value):
            return value
        if not isinstance(value, str) or ":" not in value:
            raise ConfigurationError(
                f"'{key}' must be a callable or a 'module:function' string, got {value!r}"
            )

        module_name, _, attr_path = value.partition(":")
        try:
            target: Any = importlib.import_module(module_name)
            for attr in attr_path.split("."):
                target = getattr(target, attr)
        except (ImportError, AttributeError) as e:
            raise ConfigurationError(f"Cannot resolve '{key}' from {value!r}: {e}") from e

        if not callable(target):
            raise ConfigurationError(f"'{key}' resolved to a non-callable: {value!r}")

        logger.debug(f"Resolved {key} to {value}")
        return target

    @property
    def task_name(self) -> str:
        value = self._config["task_name"]
        assert isinstance(value, str)
        return value

    @property
    def target(self) -> str:
        value = self._config["target"]
        assert isinstance(value, str)
        return value

    @property
    def output_property(self) -> str:
        """Shared-state key the ordered list is published under."""
        value = self._config["output_property"]
        if value is None:
            return f"{self.task_name}.{self.target}.ordered_files"
        assert isinstance(value, str)
        return value

    @property
    def extract_defines_pattern(self) -> str:
        value = self._config["extract_defines_pattern"]
        assert isinstance(value, str)
        return value

    @property
    def extract_requires_pattern(self) -> str:
        value = self._config["extract_requires_pattern"]
        assert isinstance(value, str)
        return value

    @property
    def extract_defines(self) -> Optional[ExtractFunction]:
        """Override for defines extraction, or None to use the pattern."""
        return self._config["extract_defines"]

    @property
    def extract_requires(self) -> Optional[ExtractFunction]:
        """Override for requires extraction, or None to use the pattern."""
        return self._config["extract_requires"]

    @property
    def skip_required_myself(self) -> bool:
        """Whether a file requiring its own symbol is kept out of the graph."""
        value = self._config["skip_required_myself"]
        assert isinstance(value, bool)
        return value

    @property
    def force_make_file_list(self) -> bool:
        """Lenient cycle handling: append cyclic files instead of failing."""
        value = self._config["force_make_file_list"]
        assert isinstance(value, bool)
        return value

    @property
    def cycle_dot_report(self) -> str:
        value = self._config["cycle_dot_report"]
        assert isinstance(value, str)
        return value

    @property
    def not_found_report(self) -> Optional[str]:
        return self._config["not_found_report"]

    @property
    def dest(self) -> Optional[str]:
        """Destination artifact path as configured (may be the "src" sentinel)."""
        return self._config["dest"]

    @property
    def encoding(self) -> str:
        value = self._config["encoding"]
        assert isinstance(value, str)
        return value
