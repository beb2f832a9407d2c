"""
Tests for progress configuration loading.

Covers:
- Packaged defaults
- Partial overrides keep remaining defaults
- Validation failures raise ConfigurationError naming the key
- SITELOG_CONFIG_TRACE audit record
"""

from datetime import timedelta

import pytest
import yaml

from sitelog_config import (
    DEFAULT_CONFIG_PATH,
    ProgressConfig,
    compute_checksum,
    get_active_config,
    parse_progress_config,
)
from sitelog_engines.schedule import ContractType
from sitelog_kernel.exceptions import ConfigurationError


def _write_yaml(tmp_path, data, name="progress.yaml"):
    path = tmp_path / name
    path.write_text(yaml.safe_dump(data, allow_unicode=True), encoding="utf-8")
    return path


class TestPackagedDefaults:
    """The shipped defaults.yaml."""

    def test_defaults_file_exists(self):
        assert DEFAULT_CONFIG_PATH.exists()

    def test_defaults_match_schema_defaults(self):
        config = get_active_config()
        schema = ProgressConfig()

        assert config.config_id == "sitelog-defaults"
        assert config.s_curve_steps == schema.s_curve_steps == 6
        assert config.future_tolerance_days == 0
        assert config.future_tolerance == timedelta(0)
        assert config.display_precision == 1
        assert config.label_format == "{month}/{day}"
        assert config.default_contract_type == ContractType.CALENDAR_DAYS
        assert config.issue_statuses == ("issue",)
        assert config.checksum


class TestOverrides:
    """Project-specific YAML files."""

    def test_partial_override(self, tmp_path):
        path = _write_yaml(tmp_path, {
            "config_id": "site-a",
            "version": 3,
            "s_curve": {"steps": 10, "future_tolerance_days": 1},
        })

        config = get_active_config(path)

        assert config.config_id == "site-a"
        assert config.version == 3
        assert config.s_curve_steps == 10
        assert config.future_tolerance == timedelta(days=1)
        assert config.display_precision == 1

    def test_working_days_and_issue_statuses(self, tmp_path):
        path = _write_yaml(tmp_path, {
            "progress": {"default_contract_type": "working_days"},
            "logs": {"issue_statuses": ["issue", "rejected"]},
        })

        config = get_active_config(path)

        assert config.default_contract_type == ContractType.WORKING_DAYS
        assert config.issue_statuses == ("issue", "rejected")

    def test_empty_file_is_all_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")

        config = get_active_config(path)

        assert config.s_curve_steps == 6

    def test_checksum_is_deterministic(self):
        a = compute_checksum({"b": 1, "a": {"y": 2, "x": 1}})
        b = compute_checksum({"a": {"x": 1, "y": 2}, "b": 1})
        assert a == b
        assert a != compute_checksum({"a": 1})


class TestValidation:
    """Invalid values are rejected with the offending key."""

    @pytest.mark.parametrize(
        "data, key",
        [
            ({"s_curve": {"steps": 0}}, "steps"),
            ({"s_curve": {"steps": "six"}}, "steps"),
            ({"s_curve": {"steps": True}}, "steps"),
            ({"s_curve": {"future_tolerance_days": -1}}, "future_tolerance_days"),
            ({"progress": {"display_precision": 9}}, "display_precision"),
            ({"s_curve": {"label_format": "{week}"}}, "label_format"),
            ({"progress": {"default_contract_type": "lunar"}}, "default_contract_type"),
            ({"logs": {"issue_statuses": "issue"}}, "issue_statuses"),
            ({"s_curve": ["steps", 6]}, "s_curve"),
        ],
    )
    def test_invalid_value(self, data, key):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_progress_config(data)

        assert exc_info.value.key == key
        assert exc_info.value.code == "INVALID_CONFIGURATION"

    def test_top_level_list_rejected(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            get_active_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_active_config(tmp_path / "nope.yaml")


class TestConfigTrace:
    """Every load is traced."""

    def test_trace_record(self, tmp_path, captured_logs):
        path = _write_yaml(tmp_path, {"config_id": "site-b", "version": 2})

        config = get_active_config(path)

        traces = [r for r in captured_logs() if r["message"] == "SITELOG_CONFIG_TRACE"]
        assert len(traces) == 1
        assert traces[0]["config_id"] == "site-b"
        assert traces[0]["config_version"] == 2
        assert traces[0]["checksum"] == config.checksum
        assert traces[0]["source"] == str(path)
