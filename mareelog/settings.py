"""
Chart and Sensor Settings

This module defines the read-only display configuration consumed by the
statistics and series steps: per-channel sensor settings and chart
parameters. Settings are normally supplied by the caller; load_settings()
reads them from a JSON file and falls back to defaults when the file is
missing or unreadable; save_settings() writes them back.
"""

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Dict, Optional, Tuple, Union
from . import constants

logger = logging.getLogger(__name__)

DEFAULT_COLORS = (
    "#e6194b", "#3cb44b", "#4363d8", "#f58231", "#911eb4", "#46f0f0",
    "#f032e6", "#bcf60c", "#008080", "#9a6324", "#800000", "#000075",
)


@dataclass(frozen=True)
class SensorConfig:
    """
    Display settings of one temperature channel.

    Attributes:
        id: Channel number, 1..12 (maps to ``Temp{id}``).
        enabled: Whether the channel is charted and counted.
        label: Display name overriding the header-derived name.
        color: Line color.
        min: Lower setpoint in °C, drawn as a constant line.
        max: Upper setpoint in °C, drawn as a constant line.
    """
    id: int
    enabled: bool = True
    label: str = ""
    color: str = "#000000"
    min: Optional[float] = None
    max: Optional[float] = None


def default_sensors() -> Tuple[SensorConfig, ...]:
    return tuple(
        SensorConfig(id=i + 1, color=DEFAULT_COLORS[i % len(DEFAULT_COLORS)])
        for i in range(constants.TEMP_CHANNELS)
    )


@dataclass(frozen=True)
class ChartSettings:
    """
    Chart parameters.

    Attributes:
        points_per_page: Minutes covered by one chart page.
        display_step: Minimum minutes between plotted points.
        temp_min: Lower bound of the temperature axis.
        temp_max: Upper bound of the temperature axis.
        sensors: Per-channel settings.
    """
    points_per_page: int = 1440
    display_step: int = 1
    temp_min: float = -30.0
    temp_max: float = 50.0
    sensors: Tuple[SensorConfig, ...] = field(default_factory=default_sensors)

    @property
    def effective_page_size(self) -> int:
        """Rows per page: wider steps make each page cover proportionally more rows."""
        return self.points_per_page * self.display_step


DEFAULT_SETTINGS = ChartSettings()


def settings_from_dict(data: Dict) -> ChartSettings:
    """
    Build settings from a dictionary.

    Accepts both snake_case keys and the camelCase keys used by the viewer's
    stored settings (``pointsPerPage``, ``displayStep``, ``tempMin``,
    ``tempMax``). Missing keys keep their defaults.

    Raises:
        ValueError: If a value has the wrong type or a sensor has no id.
    """
    def pick(*keys, default):
        for key in keys:
            if key in data and data[key] is not None:
                return data[key]
        return default

    try:
        sensors_data = pick("sensors", default=None)
        sensors = default_sensors() if sensors_data is None else tuple(
            SensorConfig(
                id=int(s["id"]),
                enabled=bool(s.get("enabled", True)),
                label=str(s.get("label") or ""),
                color=str(s.get("color") or "#000000"),
                min=None if s.get("min") is None else float(s["min"]),
                max=None if s.get("max") is None else float(s["max"]),
            )
            for s in sensors_data
        )
        settings = ChartSettings(
            points_per_page=int(pick("points_per_page", "pointsPerPage", default=DEFAULT_SETTINGS.points_per_page)),
            display_step=int(pick("display_step", "displayStep", default=DEFAULT_SETTINGS.display_step)),
            temp_min=float(pick("temp_min", "tempMin", default=DEFAULT_SETTINGS.temp_min)),
            temp_max=float(pick("temp_max", "tempMax", default=DEFAULT_SETTINGS.temp_max)),
            sensors=sensors,
        )
    except (KeyError, TypeError) as exc:
        raise ValueError(f"Invalid chart settings: {exc}") from exc

    if settings.points_per_page < 1 or settings.display_step < 1:
        raise ValueError("points_per_page and display_step must be positive")
    return settings


def settings_to_dict(settings: ChartSettings) -> Dict:
    data = asdict(settings)
    data["sensors"] = [asdict(s) for s in settings.sensors]
    return data


def load_settings(path: Union[str, Path] = constants.SETTINGS_FILE) -> ChartSettings:
    """
    Load chart settings from a JSON file.

    Args:
        path: Settings file. Defaults to SETTINGS_FILE in the data directory.

    Returns:
        Parsed settings, or the defaults when the file is missing or invalid.
    """
    path = Path(path)
    if not path.exists():
        return DEFAULT_SETTINGS

    try:
        with path.open("r", encoding="utf-8") as file:
            return settings_from_dict(json.load(file))
    except (OSError, ValueError) as exc:
        logger.error("Failed to read chart settings from %s: %s", path, exc)
        return DEFAULT_SETTINGS


def save_settings(settings: ChartSettings, path: Union[str, Path] = constants.SETTINGS_FILE) -> Path:
    """
    Write chart settings to a JSON file, creating its directory if needed.

    Returns:
        Path of the written file.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as file:
        json.dump(settings_to_dict(settings), file, indent=2, ensure_ascii=False)
    logger.info("Saved chart settings to %s", path)
    return path
