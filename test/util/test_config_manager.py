import os
from pathlib import Path

import pytest
from pydantic import ValidationError

from modlink.model.enum.register_type_enum import RegisterType
from modlink.model.enum.value_encoding_enum import ValueEncoding
from modlink.model.enum.overflow_policy_enum import OverflowPolicy
from modlink.util.config_manager import ConfigManager

EXAMPLE_CONFIG = Path(__file__).resolve().parents[2] / "res" / "modlink.yml"


class TestEnvVarSubstitution:
    def test_default_used_when_unset(self, monkeypatch):
        monkeypatch.delenv("MODLINK_TEST_PORT", raising=False)

        assert ConfigManager.parse_env_var_with_default("${MODLINK_TEST_PORT:-1502}") == 1502

    def test_environment_wins_over_default(self, monkeypatch):
        monkeypatch.setenv("MODLINK_TEST_HOST", "10.0.0.9")

        assert ConfigManager.parse_env_var_with_default("${MODLINK_TEST_HOST:-127.0.0.1}") == "10.0.0.9"

    def test_unset_without_default_is_none(self, monkeypatch):
        monkeypatch.delenv("MODLINK_TEST_MISSING", raising=False)

        assert ConfigManager.parse_env_var_with_default("${MODLINK_TEST_MISSING}") is None

    def test_plain_strings_untouched(self):
        assert ConfigManager.parse_env_var_with_default("holding") == "holding"

    @pytest.mark.parametrize("raw, expected", [("true", True), ("FALSE", False), ("42", 42), ("1.5", 1.5), ("x", "x")])
    def test_values_are_typed(self, raw, expected):
        assert ConfigManager._parse_value_by_type(raw) == expected

    def test_resolve_env_vars_recurses(self, monkeypatch):
        monkeypatch.setenv("MODLINK_TEST_UNIT", "4")
        data = {"device": {"unit_id": "${MODLINK_TEST_UNIT}"}, "links": [{"a": "${MODLINK_TEST_NONE:-x}"}]}

        assert ConfigManager.resolve_env_vars(data) == {"device": {"unit_id": 4}, "links": [{"a": "x"}]}


class TestLoadModlinkConfig:
    def test_loads_example_config(self, monkeypatch):
        monkeypatch.setenv("MODBUS_HOST", "192.168.1.50")
        monkeypatch.delenv("MODBUS_PORT", raising=False)

        config = ConfigManager.load_modlink_config(str(EXAMPLE_CONFIG))

        assert config.device.host == "192.168.1.50"
        assert config.device.port == 502
        assert config.pubsub.overflow_policy is OverflowPolicy.DROP_OLDEST
        assert len(config.links) == 4

        setpoint = config.links[3]
        assert setpoint.link.write_register_type is RegisterType.HOLDING
        assert setpoint.link.write_value_encoding is ValueEncoding.FLOAT32
        assert setpoint.value_type is float

    def test_env_file_is_loaded(self, tmp_path, monkeypatch):
        monkeypatch.delenv("MODLINK_TEST_ADDR", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text("MODLINK_TEST_ADDR=77\n", encoding="utf-8")
        config_file = tmp_path / "modlink.yml"
        config_file.write_text(
            "links:\n"
            "  - owner_id: tank\n"
            "    attribute: level\n"
            "    link:\n"
            "      readType: input\n"
            "      readAddress: ${MODLINK_TEST_ADDR:-0}\n",
            encoding="utf-8",
        )

        try:
            config = ConfigManager.load_modlink_config(str(config_file), str(env_file))
        finally:
            os.environ.pop("MODLINK_TEST_ADDR", None)

        assert config.links[0].link.read_address == 77

    def test_empty_file_gives_defaults(self, tmp_path):
        config_file = tmp_path / "empty.yml"
        config_file.write_text("", encoding="utf-8")

        config = ConfigManager.load_modlink_config(str(config_file), str(tmp_path / "missing.env"))

        assert config.links == []
        assert config.device.transport == "tcp"

    def test_invalid_link_is_rejected(self, tmp_path):
        config_file = tmp_path / "bad.yml"
        config_file.write_text(
            "links:\n  - owner_id: a\n    attribute: b\n    link:\n      readType: holding\n      readAddress: 1\n"
            "      writeType: input\n      writeAddress: 1\n",
            encoding="utf-8",
        )

        with pytest.raises(ValidationError):
            ConfigManager.load_modlink_config(str(config_file), str(tmp_path / "missing.env"))
