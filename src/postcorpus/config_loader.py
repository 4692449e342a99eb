from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from postcorpus.config import CorpusConfig
from postcorpus.exceptions import ConfigLoadError

logger = logging.getLogger(__name__)

CONFIG_RELPATH = Path(".postcorpus") / "config.yml"
ENV_PREFIX = "POSTCORPUS_"


def _env_override_paths() -> set[tuple[str, ...]]:
    """Config paths set through ``POSTCORPUS_SECTION__KEY`` variables."""
    return {
        tuple(part.lower() for part in key[len(ENV_PREFIX) :].split("__") if part)
        for key in os.environ
        if key.startswith(ENV_PREFIX)
    }


def _overlay(
    base: dict[str, Any], file_config: dict[str, Any], skip: set[tuple[str, ...]], path: Path
) -> dict[str, Any]:
    """Lay the file's ``section: {key: value}`` pairs over ``base`` unless the env already set them."""
    merged = {section: dict(values) for section, values in base.items()}
    for section, values in file_config.items():
        if section not in merged or values is None or (section.lower(),) in skip:
            continue
        if not isinstance(values, dict):
            msg = f"'{section}' must be a mapping, got {type(values).__name__}"
            raise ConfigLoadError(path, msg)
        for key, value in values.items():
            if (section.lower(), str(key).lower()) not in skip:
                merged[section][key] = value
    return merged


class ConfigLoader:
    """Loads and validates postcorpus configuration.

    Handles YAML file loading and works with CorpusConfig (BaseSettings)
    to apply environment variable overrides on top of the file.
    """

    def __init__(self, content_root: Path | None = None):
        """Initialize config loader.

        Args:
            content_root: Root directory of the corpus. If None, uses current working directory.

        """
        self.content_root = content_root if content_root is not None else Path.cwd()

    @property
    def config_path(self) -> Path:
        return self.content_root / CONFIG_RELPATH

    def load(self) -> CorpusConfig:
        """Loads configuration with environment-variable precedence.

        Priority (highest to lowest):
        1. Environment variables (POSTCORPUS_SECTION__KEY)
        2. Config file (.postcorpus/config.yml relative to content_root)
        3. Defaults
        """
        file_config = self._load_from_file()
        skip = _env_override_paths()
        try:
            merged = _overlay(CorpusConfig().model_dump(mode="json"), file_config, skip, self.config_path)
            if ("paths", "content_root") not in skip:
                merged["paths"]["content_root"] = self.content_root
            return CorpusConfig.model_validate(merged)
        except ValidationError as exc:
            raise ConfigLoadError(self.config_path, str(exc)) from exc

    def _load_from_file(self) -> dict[str, Any]:
        """Loads configuration from .postcorpus/config.yml."""
        config_path = self.config_path
        if not config_path.exists():
            logger.debug("No config file at %s, using defaults", config_path)
            return {}

        try:
            with config_path.open(encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigLoadError(config_path, f"invalid YAML: {e}") from e
        except OSError as e:
            raise ConfigLoadError(config_path, str(e)) from e

        if not isinstance(data, dict):
            msg = f"configuration root must be a mapping, got {type(data).__name__}"
            raise ConfigLoadError(config_path, msg)
        return data
