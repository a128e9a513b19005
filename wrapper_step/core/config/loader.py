"""
Configuration loader — reads step inputs into a StepConfig.

Inputs come from the calling pipeline's environment (lower-case keys,
one per input). An optional YAML file can provide defaults for the same
keys, which is handy when running the step locally. Precedence:

    explicit overrides  >  environment  >  YAML file  >  model defaults
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from wrapper_step.core.errors import ConfigError
from wrapper_step.core.models.config import StepConfig

logger = logging.getLogger(__name__)

# Environment keys, as declared by the step's inputs
INPUT_KEYS = (
    "project_root_dir",
    "gradle_version",
    "android_home",
    "generation_mode",
    "gradle_bin",
    "download_distribution",
    "export_outputs",
    "download_timeout",
)


def read_config_file(path: Path) -> dict[str, Any]:
    """Load step inputs from a YAML mapping.

    Raises:
        ConfigError: If the file is missing, unreadable or not a mapping.
    """
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # Inputs may sit under an "inputs" key or at the top level
    inputs = data.get("inputs", data)
    if not isinstance(inputs, dict):
        raise ConfigError(f"Expected 'inputs' to be a mapping in {path}")

    unknown = sorted(set(inputs) - set(INPUT_KEYS))
    if unknown:
        logger.warning("Ignoring unknown keys in %s: %s", path, ", ".join(unknown))

    logger.debug("Loaded step inputs from %s", path)
    return {k: v for k, v in inputs.items() if k in INPUT_KEYS}


def load_config(
    env: Mapping[str, str] | None = None,
    config_path: Path | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> StepConfig:
    """Assemble the step configuration from all sources.

    This only reads and coerces values; call ``validate_config`` to
    check them against the filesystem.

    Args:
        env: Environment mapping (default: ``os.environ``).
        config_path: Optional YAML file with default inputs.
        overrides: Values that win over everything else (CLI options).
            ``None`` values are ignored.

    Raises:
        ConfigError: If a source is unreadable or a value has the wrong type.
    """
    env = os.environ if env is None else env

    data: dict[str, Any] = {}
    if config_path is not None:
        data.update(read_config_file(config_path))

    for key in INPUT_KEYS:
        value = env.get(key)
        # Pipelines export unset inputs as empty strings
        if value is not None and (value != "" or key not in data):
            data[key] = value

    for key, value in (overrides or {}).items():
        if value is not None:
            data[key] = value

    # Empty strings for typed fields mean "use the default"
    for key in ("generation_mode", "gradle_bin", "download_distribution",
                "export_outputs", "download_timeout"):
        if data.get(key) == "":
            del data[key]

    try:
        return StepConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid step input: {e}") from e


def validate_project_root(config: StepConfig) -> Path:
    """Check that the project root input names an existing directory."""
    if not config.project_root_dir:
        raise ConfigError("no ProjectRootDir parameter specified")

    root = Path(config.project_root_dir)
    if not root.exists():
        raise ConfigError(f"ProjectRootDir ({config.project_root_dir}) not exists")
    if not root.is_dir():
        raise ConfigError(f"ProjectRootDir ({config.project_root_dir}) is not a directory")
    return root


def validate_android_home(config: StepConfig) -> Path:
    """Check that the Android SDK home input names an existing directory."""
    if not config.android_home:
        raise ConfigError("no AndroidHome parameter specified")

    home = Path(config.android_home)
    if not home.is_dir():
        raise ConfigError(f"AndroidHome ({config.android_home}) not exists")
    return home


def validate_config(config: StepConfig) -> None:
    """Check required inputs. Reads the filesystem, never writes it.

    Raises:
        ConfigError: On the first problem found.
    """
    validate_project_root(config)

    if not config.gradle_version.strip():
        raise ConfigError("no GradleVersion parameter specified")

    if config.generation_mode == "template":
        validate_android_home(config)

    if config.download_timeout <= 0:
        raise ConfigError(f"download_timeout must be positive, got {config.download_timeout}")
