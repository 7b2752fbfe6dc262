"""
Dashboard config persistence (platformdirs + JSON).

Persisted items (schema v1):
- data_source: CSV path or URL of the Fear & Greed dataset
- secondary_column: CSV column plotted against the index (e.g. price)
- default_view: tab shown on page load (updated by the dashboard whenever
  the user switches tabs)
- strip_jitter_amount / strip_point_size: drill-down strip plot appearance

The other items are edited by hand in the JSON file.

Behavior:
- If config file missing or unreadable -> defaults are used
- If schema_version mismatches:
  - default: reset to defaults
  - optional: keep loaded but update version
- Unknown keys in loaded JSON are ignored with warnings
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from platformdirs import user_config_dir

from feargreed.sentiment_widget.dataset import DEFAULT_SECONDARY_COLUMN
from feargreed.sentiment_widget.views import DashboardView
from feargreed.utils.logging import get_logger

logger = get_logger(__name__)

# Increment when you make a breaking change to the on-disk JSON schema.
SCHEMA_VERSION: int = 1

DEFAULT_DATA_SOURCE = "fear_greed_index.csv"


def _clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, v))


@dataclass
class DashboardConfigData:
    """
    JSON-serializable config payload.

    Keep fields JSON-friendly (primitives only).
    """
    schema_version: int = SCHEMA_VERSION
    data_source: str = DEFAULT_DATA_SOURCE
    secondary_column: Optional[str] = DEFAULT_SECONDARY_COLUMN
    default_view: str = DashboardView.TIMELINE.value
    strip_jitter_amount: float = 0.35
    strip_point_size: int = 6

    def to_json_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "schema_version": self.schema_version,
            "data_source": self.data_source,
            "secondary_column": self.secondary_column,
            "default_view": self.default_view,
            "strip_jitter_amount": self.strip_jitter_amount,
            "strip_point_size": self.strip_point_size,
        }

    @classmethod
    def from_json_dict(cls, d: Dict[str, Any]) -> "DashboardConfigData":
        """
        Tolerant loader:
        - ignores unknown keys
        - falls back to defaults for missing or invalid values
        """
        defaults = cls()
        schema_version = int(d.get("schema_version", -1))

        data_source = d.get("data_source", defaults.data_source)
        if not isinstance(data_source, str) or not data_source.strip():
            logger.warning(f"Invalid data_source {data_source!r}, using default")
            data_source = defaults.data_source

        secondary_column = d.get("secondary_column", defaults.secondary_column)
        if secondary_column is not None and not isinstance(secondary_column, str):
            logger.warning(f"Invalid secondary_column {secondary_column!r}, using default")
            secondary_column = defaults.secondary_column

        default_view = str(d.get("default_view", defaults.default_view))
        try:
            DashboardView(default_view)
        except ValueError:
            logger.warning(f"Unknown default_view '{default_view}', using '{defaults.default_view}'")
            default_view = defaults.default_view

        strip_jitter_amount = defaults.strip_jitter_amount
        if "strip_jitter_amount" in d:
            try:
                strip_jitter_amount = _clamp(float(d["strip_jitter_amount"]), 0.0, 1.0)
            except (TypeError, ValueError):
                pass

        strip_point_size = defaults.strip_point_size
        if "strip_point_size" in d:
            try:
                strip_point_size = max(1, int(d["strip_point_size"]))
            except (TypeError, ValueError):
                pass

        known_keys = set(defaults.to_json_dict())
        for key in d.keys():
            if key not in known_keys:
                logger.warning(f"Unknown key '{key}' in dashboard config, ignoring")

        return cls(
            schema_version=schema_version,
            data_source=data_source,
            secondary_column=secondary_column,
            default_view=default_view,
            strip_jitter_amount=strip_jitter_amount,
            strip_point_size=strip_point_size,
        )


class DashboardConfig:
    """
    Manager for loading/saving DashboardConfigData to disk.
    """

    def __init__(self, *, path: Path, data: Optional[DashboardConfigData] = None):
        self.path = path
        self.data = data if data is not None else DashboardConfigData()

    @staticmethod
    def default_config_path(
        app_name: str = "feargreed",
        filename: str = "dashboard_config.json",
        app_author: str | None = None,
    ) -> Path:
        """
        Determine OS-appropriate per-user config path.

        macOS:   ~/Library/Application Support/feargreed/dashboard_config.json
        Linux:   ~/.config/feargreed/dashboard_config.json
        Windows: %APPDATA%\\feargreed\\dashboard_config.json
        """
        d = Path(user_config_dir(app_name, app_author))
        return d / filename

    @classmethod
    def load(
        cls,
        *,
        config_path: Optional[Path] = None,
        app_name: str = "feargreed",
        filename: str = "dashboard_config.json",
        schema_version: int = SCHEMA_VERSION,
        reset_on_version_mismatch: bool = True,
        create_if_missing: bool = False,
    ) -> "DashboardConfig":
        """
        Load config from disk.

        If file doesn't exist or is unreadable -> defaults.
        If schema mismatch:
          - reset_on_version_mismatch=True -> defaults
          - else -> keep loaded but overwrite schema_version

        If create_if_missing=True and file is missing -> immediately write defaults.
        """
        path = config_path or cls.default_config_path(app_name=app_name, filename=filename)
        default_data = DashboardConfigData(schema_version=schema_version)

        try:
            raw = path.read_text(encoding="utf-8")
            parsed = json.loads(raw)
            if not isinstance(parsed, dict):
                logger.warning(f"Dashboard config file at {path} does not contain a dict, using defaults")
                return cls(path=path, data=default_data)

            loaded = DashboardConfigData.from_json_dict(parsed)

            if int(loaded.schema_version) != int(schema_version):
                if reset_on_version_mismatch:
                    logger.warning(
                        f"Dashboard config schema version mismatch: loaded={loaded.schema_version}, "
                        f"expected={schema_version}, resetting to defaults"
                    )
                    return cls(path=path, data=default_data)
                loaded.schema_version = int(schema_version)

            return cls(path=path, data=loaded)
        except FileNotFoundError:
            logger.debug(f"Dashboard config file not found at {path}, using defaults")
            cfg = cls(path=path, data=default_data)
            if create_if_missing:
                cfg.save()
            return cfg
        except json.JSONDecodeError as e:
            logger.warning(f"Dashboard config file at {path} is not valid JSON: {e}, using defaults")
            return cls(path=path, data=default_data)
        except (OSError, TypeError, ValueError) as e:
            logger.warning(f"Error loading dashboard config from {path}: {e}, using defaults")
            return cls(path=path, data=default_data)

    def save(self) -> None:
        """Write config to disk."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            json_str = json.dumps(self.data.to_json_dict(), indent=2)
            self.path.write_text(json_str, encoding="utf-8")
            logger.info(f"Saved dashboard config to {self.path}")
        except OSError as e:
            logger.error(f"Error saving dashboard config to {self.path}: {e}")
            raise

    def get_default_view(self) -> DashboardView:
        return DashboardView(self.data.default_view)

    def set_default_view(self, view: DashboardView) -> None:
        self.data.default_view = view.value

    def get_data_source(self) -> str:
        return self.data.data_source

    def set_data_source(self, source: str) -> None:
        self.data.data_source = source

    def get_strip_jitter_amount(self) -> float:
        return self.data.strip_jitter_amount

    def set_strip_jitter_amount(self, value: float) -> None:
        self.data.strip_jitter_amount = _clamp(value, 0.0, 1.0)
