"""Configuration loading for snippet extraction (snippets.config.json)."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from pydantic.alias_generators import to_camel

from snippet_extractor.errors import ConfigError
from snippet_extractor.models import ExtractionConfig

DEFAULT_CONFIG_NAME = "snippets.config.json"

_PATH_KEYS = (
    ("rootDirectory", "root_directory"),
    ("snippetOutputDirectory", "snippet_output_directory"),
)


def load_config(config_path: Path, overrides: dict[str, Any] | None = None) -> ExtractionConfig:
    """Load and validate an extraction config file.

    Relative ``rootDirectory`` and ``snippetOutputDirectory`` values are
    resolved against the directory holding the config file. ``overrides``
    (already using field names) replace file values before validation.

    Raises:
        ConfigError: If the file is missing, is not a JSON object, or fails
            schema validation.
    """
    config_file = config_path.expanduser()
    if config_file.is_dir():
        config_file = config_file / DEFAULT_CONFIG_NAME
    if not config_file.exists():
        raise ConfigError(f"Config file not found: {config_file}")

    try:
        data = json.loads(config_file.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Cannot parse {config_file}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a JSON object at the root")

    base = config_file.parent.resolve()
    for camel, snake in _PATH_KEYS:
        for key in (camel, snake):
            value = data.get(key)
            if isinstance(value, str) and not Path(value).is_absolute():
                data[key] = str(base / value)

    return build_config(data, overrides)


def build_config(data: dict[str, Any], overrides: dict[str, Any] | None = None) -> ExtractionConfig:
    """Validate a raw mapping into an ``ExtractionConfig``."""
    payload = dict(data)
    for field_name, value in (overrides or {}).items():
        if value is None:
            continue
        payload.pop(to_camel(field_name), None)
        payload[field_name] = value

    try:
        return ExtractionConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"Invalid snippet extraction config: {exc}") from exc
