"""Configuration dataclasses for the wattcast engine.

Replaces module-level constants with type-safe, testable config objects.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path


def _env_int(key, default):
    value = os.environ.get(key)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        return default


@dataclass
class ForecastConfig:
    """Forecast pipeline tuning."""
    horizon_hours: int = 24
    min_filter_samples: int = 5  # IQR filtering only above this many readings
    real_data_threshold: int = 5  # more normalized readings than this = real data
    iqr_multiplier: float = 1.5
    history_hours: int = 12
    seed: int | None = None

    @classmethod
    def from_env(cls):
        return cls(seed=_env_int("WATTCAST_SEED", None))


@dataclass
class PathConfig:
    """Data file locations."""
    data_dir: Path = field(default_factory=lambda: Path.home() / ".wattcast")

    @property
    def readings_path(self) -> Path:
        return self.data_dir / "readings.json"

    @property
    def forecast_path(self) -> Path:
        return self.data_dir / "forecast.json"

    def ensure_dirs(self):
        """Create the data directory."""
        self.data_dir.mkdir(parents=True, exist_ok=True)

    @classmethod
    def from_env(cls):
        data_dir = os.environ.get("WATTCAST_DATA_DIR")
        if data_dir:
            return cls(data_dir=Path(data_dir).expanduser())
        return cls()


@dataclass
class ServerConfig:
    """HTTP API settings."""
    host: str = "127.0.0.1"
    port: int = 8010
    api_key: str = ""

    @classmethod
    def from_env(cls):
        return cls(
            host=os.environ.get("WATTCAST_HOST", cls.host),
            port=_env_int("WATTCAST_PORT", cls.port),
            api_key=os.environ.get("WATTCAST_API_KEY", ""),
        )


@dataclass
class AppConfig:
    """Top-level config composing all sub-configs."""
    forecast: ForecastConfig = field(default_factory=ForecastConfig)
    paths: PathConfig = field(default_factory=PathConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    @classmethod
    def from_env(cls):
        """Create config from environment variables."""
        return cls(
            forecast=ForecastConfig.from_env(),
            paths=PathConfig.from_env(),
            server=ServerConfig.from_env(),
        )
