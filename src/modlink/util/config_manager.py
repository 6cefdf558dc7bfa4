import os
import re
from typing import Any

import yaml
from dotenv import load_dotenv

from modlink.schema.modlink_config_schema import ModlinkFileConfig

_ENV_PATTERN = re.compile(r"^\$\{(\w+)(?::-([^\}]*))?\}$")


class ConfigManager:

    @staticmethod
    def load_yaml_file(path: str) -> dict:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    @staticmethod
    def parse_env_var_with_default(value: str) -> bool | int | float | str | None:
        match = _ENV_PATTERN.match(value.strip())  # Match ${VAR_NAME:-default} or ${VAR_NAME}
        if not match:
            return value

        var_name = match.group(1)
        default_value = match.group(2)

        resolved_value = os.getenv(var_name) or default_value
        if resolved_value is not None:
            return ConfigManager._parse_value_by_type(resolved_value)
        return None

    @staticmethod
    def resolve_env_vars(data: Any) -> Any:
        """Recursively replace ${VAR} / ${VAR:-default} strings."""
        if isinstance(data, dict):
            return {k: ConfigManager.resolve_env_vars(v) for k, v in data.items()}
        if isinstance(data, list):
            return [ConfigManager.resolve_env_vars(v) for v in data]
        if isinstance(data, str):
            return ConfigManager.parse_env_var_with_default(data)
        return data

    @staticmethod
    def load_modlink_config(config_path: str, env_file: str | None = None) -> ModlinkFileConfig:
        """Load .env, then the YAML config, and validate it."""
        load_dotenv(env_file)
        raw_config: dict = ConfigManager.load_yaml_file(config_path)
        return ModlinkFileConfig.model_validate(ConfigManager.resolve_env_vars(raw_config))

    @staticmethod
    def _parse_value_by_type(value: str) -> bool | int | float | str:
        lowered = value.strip().lower()
        if lowered in ("true", "false"):
            return lowered == "true"
        try:
            return int(value)
        except ValueError:
            pass
        try:
            return float(value)
        except ValueError:
            return value
