"""Resource configuration with environment variable substitution."""

import json
import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from provider import ConfigError

ENV_VAR_PATTERN = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)\}")


def substitute_env_vars(value: Any) -> Any:
    """Recursively substitute ${VAR_NAME} patterns with environment variables."""
    if isinstance(value, str):
        def replace(match: re.Match[str]) -> str:
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                raise ConfigError(f"Environment variable {var_name} is not set")
            return env_value

        return ENV_VAR_PATTERN.sub(replace, value)
    elif isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [substitute_env_vars(v) for v in value]
    return value


class ResourceConfig(BaseModel):
    """Where to find game resources.

    Each resource dir contributes, in this order: its documents, its loose
    data directory, then its archives. Earlier resource dirs take priority
    over later ones.
    """

    resource_dirs: list[str] = Field(default_factory=list)
    data_dir: str | None = "data"  # None disables loose files
    archives: list[str] = Field(default_factory=list)  # ZIP containers, highest priority first
    documents: list[str] = Field(default_factory=list)  # e.g. fallout2.cfg
    skip_missing_archives: bool = True

    @classmethod
    def from_file(cls, path: str | Path) -> "ResourceConfig":
        """Load configuration from a YAML or JSON file."""
        path = Path(path)
        try:
            with path.open() as f:
                if path.suffix == ".json":
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e
        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ResourceConfig":
        """Load configuration from a dictionary."""
        data = substitute_env_vars(data)
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid resource configuration: {e}") from e
