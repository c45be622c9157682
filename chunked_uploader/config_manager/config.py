"""Resolve uploader configuration from file, environment, and CLI overrides."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from chunked_uploader.config_manager.helpers import load_config_file, parse_bytes
from chunked_uploader.config_manager.uploader_config import UploaderConfig
from chunked_uploader.const import CHUNK_SIZE_ENV_VAR
from chunked_uploader.exceptions import ConfigLoadError

logger = logging.getLogger(__name__)

_ENV_MAP: dict[str, str] = {
    "chunk_size": CHUNK_SIZE_ENV_VAR,
    "bucket": "CHUNKED_UPLOAD_BUCKET",
    "content_type": "CHUNKED_UPLOAD_CONTENT_TYPE",
}


class ConfigManager:
    """Build effective uploader configuration from file, env, and CLI overrides."""

    def __init__(self, config_path: Path | None = None) -> None:
        """Initialise ConfigManager.

        Args:
            config_path: Optional YAML file used as the base configuration.
        """
        self.config_path = config_path

    def _read_env_overrides(self) -> dict[str, Any]:
        """Read configuration overrides from environment variables.

        Returns:
            A dictionary of configuration field names to override values.
        """
        overrides: dict[str, Any] = {}

        for field_name, env_var_name in _ENV_MAP.items():
            env_value = os.getenv(env_var_name)
            if env_value is None:
                continue

            if field_name == "chunk_size":
                try:
                    overrides[field_name] = parse_bytes(env_value)
                except ValueError:
                    logger.warning(
                        f"Ignoring invalid {env_var_name} value {env_value!r}"
                    )
                    continue
            else:
                overrides[field_name] = env_value

        return overrides

    def resolve_effective_config(
        self, cli_config: dict[str, Any] | None = None
    ) -> UploaderConfig:
        """Resolve the effective uploader configuration for this run.

        Args:
            cli_config: Optional CLI-provided configuration overrides. ``None``
                values are ignored.

        Returns:
            The resolved ``UploaderConfig``.

        Raises:
            ConfigLoadError: If the config file cannot be read or the merged
                values fail validation.
        """
        merged: dict[str, Any] = UploaderConfig().model_dump()

        if self.config_path is not None:
            merged.update(load_config_file(self.config_path))

        merged.update(self._read_env_overrides())

        if cli_config is not None:
            merged.update(
                {key: value for key, value in cli_config.items() if value is not None}
            )

        try:
            return UploaderConfig.model_validate(merged)
        except ValidationError as e:
            raise ConfigLoadError(f"Invalid uploader configuration: {e}") from e
