"""JSON I/O for readings and forecasts.

Single class that handles all file-based storage, so tests can mock it
and the CLI never touches paths directly.
"""

import json
import logging
import os
import tempfile
from pathlib import Path

from wattcast.engine.config import PathConfig

logger = logging.getLogger(__name__)


class ReadingsFormatError(ValueError):
    """Readings file is not a JSON list or an object with a ``readings`` list."""


def _atomic_write_json(path, data, **kwargs):
    """Write JSON atomically using temp file + rename."""
    path = Path(path)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w") as f:
            json.dump(data, f, **kwargs)
        os.replace(tmp_path, path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


class DataStore:
    """Loads historical readings and saves forecast results."""

    def __init__(self, paths: PathConfig):
        self.paths = paths

    def ensure_dirs(self):
        self.paths.ensure_dirs()

    def load_readings(self, path=None) -> list[dict]:
        """Load readings from a JSON file.

        A missing file means no history and returns []. Invalid JSON or an
        unexpected top-level shape raises.

        Raises:
            json.JSONDecodeError: file is not valid JSON.
            ReadingsFormatError: JSON is neither a list nor {"readings": [...]}.
        """
        path = Path(path) if path else self.paths.readings_path
        if not path.is_file():
            logger.info(f"No readings file at {path}, forecasting without history")
            return []
        with open(path) as f:
            data = json.load(f)
        if isinstance(data, dict):
            data = data.get("readings")
        if not isinstance(data, list):
            raise ReadingsFormatError(f"{path}: expected a list of readings or an object with a 'readings' list")
        logger.debug(f"Loaded {len(data)} readings from {path}")
        return data

    def save_forecast(self, forecast: dict, path=None) -> Path:
        """Write a forecast dict to disk atomically."""
        path = Path(path) if path else self.paths.forecast_path
        path.parent.mkdir(parents=True, exist_ok=True)
        _atomic_write_json(path, forecast, indent=2)
        return path
