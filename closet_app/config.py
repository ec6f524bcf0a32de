"""Configuration helpers for the MyCloset app."""

from dataclasses import dataclass
from pathlib import Path
import os
from typing import Optional

DEFAULT_DATABASE_PATH = "data/closet.db"
DEFAULT_LOCATION_NAME = "Current Location"


def _as_bool(value: Optional[str], default: bool) -> bool:
    if value is None or value == "":
        return default
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def _as_float(value: Optional[str]) -> Optional[float]:
    if value is None or str(value).strip() == "":
        return None
    return float(value)


@dataclass
class ClosetConfig:
    """Configuration values for the closet app.

    Coordinates for the default location are optional; without them the daily
    weather row stays empty until a trip with coordinates covers the date.
    """

    database_path: str = DEFAULT_DATABASE_PATH
    seed_defaults: bool = True
    default_location_name: str = DEFAULT_LOCATION_NAME
    default_latitude: Optional[float] = None
    default_longitude: Optional[float] = None
    temperature_unit: str = "fahrenheit"
    http_timeout_seconds: float = 5.0
    location_result_limit: int = 8
    max_open_drafts: int = 20
    environment: str | None = None

    @property
    def has_default_coordinates(self) -> bool:
        return self.default_latitude is not None and self.default_longitude is not None

    @classmethod
    def from_env(cls) -> "ClosetConfig":
        """Build a config from environment variables or an environment YAML file.

        Environment specific YAML lives in ``config/environments/<env>.yaml`` by
        default and is merged with environment variables, which take precedence.
        """

        env_name = os.getenv("APP_ENV")
        config_path = os.getenv("APP_CONFIG_PATH")
        config_dir = Path(os.getenv("CLOSET_CONFIG_DIR", "config/environments"))
        yaml_config: dict = {}

        if config_path:
            path = Path(config_path)
        elif env_name:
            path = config_dir / f"{env_name}.yaml"
        else:
            path = None

        if path and path.exists():
            yaml_config = cls._load_yaml_config(path)

        def get_value(key: str, default: Optional[str] = None) -> Optional[str]:
            env_key = key.upper()
            return os.getenv(env_key, yaml_config.get(key, default))

        return cls(
            database_path=str(get_value("database_path", DEFAULT_DATABASE_PATH) or DEFAULT_DATABASE_PATH),
            seed_defaults=_as_bool(get_value("seed_defaults"), True),
            default_location_name=str(
                get_value("default_location_name", DEFAULT_LOCATION_NAME) or DEFAULT_LOCATION_NAME
            ),
            default_latitude=_as_float(get_value("default_latitude")),
            default_longitude=_as_float(get_value("default_longitude")),
            temperature_unit=str(get_value("temperature_unit", "fahrenheit") or "fahrenheit"),
            http_timeout_seconds=float(get_value("http_timeout_seconds", "5.0") or 5.0),
            location_result_limit=int(get_value("location_result_limit", "8") or 8),
            max_open_drafts=int(get_value("max_open_drafts", "20") or 20),
            environment=env_name,
        )

    @staticmethod
    def _load_yaml_config(path: Path) -> dict:
        """Parse a minimal YAML/INI-style config without external dependencies."""

        config: dict[str, str] = {}
        for line in path.read_text().splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if ":" not in stripped:
                continue
            key, raw_value = stripped.split(":", 1)
            value = raw_value.strip()
            if (value.startswith("\"") and value.endswith("\"")) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]
            config[key.strip()] = value
        return config
