"""Configuration loading for svcstat.

Settings live in an optional YAML file. Search order:
1. SVCSTAT_CONFIG environment variable
2. .svcstat/config.yaml in the current directory
3. ~/.svcstat/config.yaml
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from svcstat.exceptions import ConfigError

CONFIG_ENV_VAR = "SVCSTAT_CONFIG"


class SvcstatConfig(BaseModel):
    """Runtime settings for service queries."""

    root: Path = Field(
        default=Path("/"), description="Filesystem root used for init-system probes"
    )
    status_timeout: float = Field(
        default=5.0, gt=0, alias="statusTimeout", description="Seconds allowed for a status query"
    )
    probe_timeout: float = Field(
        default=3.0, gt=0, alias="probeTimeout", description="Seconds allowed for a systemd presence probe"
    )
    systemctl: str = Field(default="systemctl", description="systemctl executable")
    use_bus: bool = Field(
        default=True, alias="useBus", description="Query systemd over the system bus first"
    )

    model_config = ConfigDict(populate_by_name=True)


def _candidate_paths() -> list[Path]:
    return [
        Path.cwd() / ".svcstat" / "config.yaml",
        Path.home() / ".svcstat" / "config.yaml",
    ]


def _read_yaml(path: Path) -> dict[str, Any]:
    """Read a YAML mapping from a config file.

    Raises:
        ConfigError: If the file cannot be read or is not a mapping.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not read config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def load_config(path: Path | None = None) -> SvcstatConfig:
    """Load configuration from the first config file found.

    Args:
        path: Explicit config file. Overrides the search order.

    Returns:
        The loaded configuration, or defaults when no file exists.

    Raises:
        ConfigError: If a config file exists but is unreadable or invalid.
    """
    if path is None:
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            path = Path(env_path).expanduser()
            if not path.exists():
                raise ConfigError(f"{CONFIG_ENV_VAR} is set but the file does not exist: {path}")
        else:
            path = next((p for p in _candidate_paths() if p.exists()), None)

    if path is None:
        return SvcstatConfig()

    data = _read_yaml(path)
    try:
        return SvcstatConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e
