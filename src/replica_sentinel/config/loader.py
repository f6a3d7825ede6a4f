"""ConfigLoader — one YAML file, env vars on top, call-site overrides last.

The file is ``$SENTINEL_CONFIG_FILE`` when set (deployments keep their node
list outside the package), otherwise ``config/<$SENTINEL_ENV>/settings.yaml``
with ``dev`` as the default environment.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from replica_sentinel.config.settings import ENV_PREFIX, Settings

logger = logging.getLogger(__name__)

_CONFIG_ROOT = Path(__file__).resolve().parent
CONFIG_FILE_VAR = f"{ENV_PREFIX}CONFIG_FILE"
ENV_VAR = f"{ENV_PREFIX}ENV"


class ConfigLoader:
    """Load settings from YAML with environment variable overrides."""

    @staticmethod
    def config_path() -> tuple[Path, bool]:
        """Return the YAML path to read and whether it was named explicitly."""
        explicit = os.environ.get(CONFIG_FILE_VAR)
        if explicit:
            return Path(explicit).expanduser(), True
        env = os.environ.get(ENV_VAR, "dev")
        return _CONFIG_ROOT / env / "settings.yaml", False

    @staticmethod
    def _read(path: Path) -> dict[str, Any]:
        """Parse ``path``; an empty document is an empty mapping.

        Raises:
            ValueError: If the document is not a mapping.
        """
        with path.open() as config_file:
            data = yaml.safe_load(config_file)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a mapping, got {type(data).__name__}")
        return data

    @staticmethod
    def _from_env(key: str) -> bool:
        return f"{ENV_PREFIX}{key.upper()}" in os.environ

    @staticmethod
    def load_settings(**overrides: Any) -> Settings:
        """Build Settings: overrides > env vars > YAML > field defaults.

        A missing per-environment file means defaults only. A file named by
        ``SENTINEL_CONFIG_FILE`` must exist.

        Raises:
            FileNotFoundError: If the explicitly named file is missing.
            ValueError: If the YAML document is not a mapping.
        """
        path, explicit = ConfigLoader.config_path()
        if path.exists():
            file_values = ConfigLoader._read(path)
            logger.debug("Loaded %d setting(s) from %s", len(file_values), path)
        elif explicit:
            raise FileNotFoundError(f"{CONFIG_FILE_VAR} points at a missing file: {path}")
        else:
            file_values = {}
        # pydantic-settings ranks init kwargs above env vars, so env-backed keys are dropped here.
        values = {key: value for key, value in file_values.items() if not ConfigLoader._from_env(key)}
        values.update(overrides)
        return Settings(**values)
