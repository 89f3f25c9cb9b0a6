# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Tests for configuration loading and validation."""

import tempfile
from pathlib import Path

import pytest
import yaml

from file_dependencies.config import (
    DEFAULT_DEFINES_PATTERN,
    DEFAULT_REQUIRES_PATTERN,
    Config,
    ConfigurationError,
)


def split_words(content):
    return content.split()


def test_default_config_when_file_missing():
    """Test that defaults are used when config file is missing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        config = Config(config_path=Path(tmpdir) / "nonexistent.yml")

        assert config.output_property == "file_dependencies.default.ordered_files"
        assert config.extract_defines_pattern == DEFAULT_DEFINES_PATTERN
        assert config.extract_requires_pattern == DEFAULT_REQUIRES_PATTERN
        assert config.extract_defines is None
        assert config.extract_requires is None
        assert config.skip_required_myself is False
        assert config.force_make_file_list is False
        assert config.cycle_dot_report == "cyclemap.dot"
        assert config.not_found_report is None
        assert config.dest is None
        assert config.encoding == "utf-8"


def test_valid_config_loading():
    """Test loading a valid configuration file."""
    with tempfile.TemporaryDirectory() as tmpdir:
        config_path = Path(tmpdir) / "config.yml"
        config_data = {
            "task_name": "concat",
            "target": "app",
            "skip_required_myself": True,
            "not_found_report": "notfound.csv",
        }
        with open(config_path, "w") as f:
            yaml.dump(config_data, f)

        config = Config(config_path=config_path)

        assert config.output_property == "concat.app.ordered_files"
        assert config.skip_required_myself is True
        assert config.not_found_report == "notfound.csv"
        # Defaults for unspecified values
        assert config.force_make_file_list is False


def test_camel_case_aliases():
    """Test that build-tool style option names are accepted."""
    with tempfile.TemporaryDirectory() as tmpdir:
        config_path = Path(tmpdir) / "config.yml"
        config_data = {
            "outputProperty": "ordered",
            "skipRequiredMyself": True,
            "forceMakeFileList": True,
            "cycleReport": "cycles.dot",
            "notFoundReport": "missing.csv",
            "extractDefinesPattern": r"provide\('([^']+)'\)",
        }
        with open(config_path, "w") as f:
            yaml.dump(config_data, f)

        config = Config(config_path=config_path)

        assert config.output_property == "ordered"
        assert config.skip_required_myself is True
        assert config.force_make_file_list is True
        assert config.cycle_dot_report == "cycles.dot"
        assert config.not_found_report == "missing.csv"
        assert config.extract_defines_pattern == r"provide\('([^']+)'\)"


def test_invalid_parameter_types():
    """Test that invalid parameter types are rejected and defaults used."""
    with tempfile.TemporaryDirectory() as tmpdir:
        config_path = Path(tmpdir) / "config.yml"
        config_data = {
            "skip_required_myself": "yes please",
            "force_make_file_list": 1,
            "cycle_dot_report": 42,
            "dest": ["a", "b"],
        }
        with open(config_path, "w") as f:
            yaml.dump(config_data, f)

        config = Config(config_path=config_path)

        assert config.skip_required_myself is False
        assert config.force_make_file_list is False
        assert config.cycle_dot_report == "cyclemap.dot"
        assert config.dest is None


@pytest.mark.parametrize(
    "pattern",
    [
        r"define\(['\"][^'\"]+['\"]",  # no capturing group
        r"(define)\(['\"]([^'\"]+)['\"]",  # two capturing groups
        r"define\((",  # does not compile
    ],
)
def test_invalid_patterns_rejected(pattern, tmp_path):
    """Test that patterns need exactly one capturing group."""
    config = Config(
        config_path=tmp_path / "absent.yml",
        overrides={"extract_defines_pattern": pattern},
    )
    assert config.extract_defines_pattern == DEFAULT_DEFINES_PATTERN


def test_unknown_parameter_ignored(tmp_path, caplog):
    """Test that unknown parameters are warned about and ignored."""
    config_path = tmp_path / "config.yml"
    config_path.write_text("unknown_option: 1\nforce_make_file_list: true\n")

    config = Config(config_path=config_path)

    assert config.force_make_file_list is True
    assert "Unknown configuration parameter 'unknown_option'" in caplog.text


def test_empty_config_file(tmp_path):
    """Test that an empty config file uses defaults."""
    config_path = tmp_path / "config.yml"
    config_path.write_text("")

    config = Config(config_path=config_path)

    assert config.cycle_dot_report == "cyclemap.dot"


def test_malformed_yaml(tmp_path, caplog):
    """Test that malformed YAML falls back to defaults."""
    config_path = tmp_path / "config.yml"
    config_path.write_text("dest: [unclosed\n")

    config = Config(config_path=config_path)

    assert config.dest is None
    assert "Error parsing configuration file" in caplog.text


def test_non_dict_yaml(tmp_path):
    """Test that non-mapping YAML content falls back to defaults."""
    config_path = tmp_path / "config.yml"
    config_path.write_text("- just\n- a list\n")

    config = Config(config_path=config_path)

    assert config.skip_required_myself is False


def test_overrides_applied_after_file(tmp_path):
    """Test that overrides win over values loaded from file."""
    config_path = tmp_path / "config.yml"
    config_path.write_text("dest: from_file.json\nskip_required_myself: true\n")

    config = Config(config_path=config_path, overrides={"dest": "from_cli.json"})

    assert config.dest == "from_cli.json"
    assert config.skip_required_myself is True


def test_dest_sentinel_kept_as_configured(tmp_path):
    """Test that the "src" sentinel is stored as is; OutputPort interprets it."""
    config = Config(config_path=tmp_path / "absent.yml", overrides={"dest": "src"})
    assert config.dest == "src"


class TestExtractorFunctions:
    """Tests for pluggable extraction functions."""

    def test_callable_override(self, tmp_path):
        config = Config(
            config_path=tmp_path / "absent.yml",
            overrides={"extract_defines": split_words},
        )
        assert config.extract_defines is split_words
        assert config.extract_requires is None

    def test_import_string_resolved(self, tmp_path):
        config_path = tmp_path / "config.yml"
        config_path.write_text("extract_requires: 'os.path:basename'\n")

        config = Config(config_path=config_path)

        import os.path

        assert config.extract_requires is os.path.basename

    def test_unresolvable_import_string(self, tmp_path):
        with pytest.raises(ConfigurationError):
            Config(
                config_path=tmp_path / "absent.yml",
                overrides={"extract_defines": "no_such_module_xyz:func"},
            )

    def test_missing_attribute(self, tmp_path):
        with pytest.raises(ConfigurationError):
            Config(
                config_path=tmp_path / "absent.yml",
                overrides={"extract_defines": "os.path:no_such_function"},
            )

    def test_string_without_colon(self, tmp_path):
        with pytest.raises(ConfigurationError):
            Config(
                config_path=tmp_path / "absent.yml",
                overrides={"extract_defines": "os.path.basename"},
            )

    def test_non_callable_target(self, tmp_path):
        with pytest.raises(ConfigurationError):
            Config(
                config_path=tmp_path / "absent.yml",
                overrides={"extract_defines": "os:sep"},
            )
