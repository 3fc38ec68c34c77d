"""Naming conventions for split artifacts and configuration loading."""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError

DEFAULT_METADATA_SUFFIX = ".mdt"
DEFAULT_SIDECAR_PREFIX = ".b"
DEFAULT_MAX_SIDECAR_INDEX = 99


@dataclass(frozen=True)
class PilConfig:
    """Artifact naming used by split and squash."""

    metadata_suffix: str = DEFAULT_METADATA_SUFFIX
    sidecar_prefix: str = DEFAULT_SIDECAR_PREFIX
    max_sidecar_index: int = DEFAULT_MAX_SIDECAR_INDEX  # two-digit names

    def __post_init__(self) -> None:
        if not self.metadata_suffix.startswith(".") or len(self.metadata_suffix) < 2:
            raise ConfigError(
                f"metadata_suffix must look like '.ext', got {self.metadata_suffix!r}"
            )
        if not self.sidecar_prefix.startswith("."):
            raise ConfigError(
                f"sidecar_prefix must start with '.', got {self.sidecar_prefix!r}"
            )
        if not 0 <= self.max_sidecar_index <= 99:
            raise ConfigError(
                f"max_sidecar_index must be within 0-99, got {self.max_sidecar_index}"
            )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PilConfig":
        """Build a config from a mapping, rejecting unknown keys and bad types."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - set(known)
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(sorted(unknown))}")

        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            expected = int if key == "max_sidecar_index" else str
            if not isinstance(value, expected) or isinstance(value, bool):
                raise ConfigError(
                    f"Config key {key!r} must be {expected.__name__}, "
                    f"got {type(value).__name__}"
                )
            kwargs[key] = value
        return cls(**kwargs)


def load_config(config_path: Path) -> PilConfig:
    """Load configuration from YAML file."""
    try:
        with open(config_path) as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config {config_path}: {e.strerror}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        return PilConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Config {config_path} must contain a mapping")
    return PilConfig.from_dict(data)
