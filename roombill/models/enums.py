"""Enum definitions for room pricing."""

from enum import Enum


class CalculationType(str, Enum):
    """How a utility is charged for a room."""

    UNIT = "unit"  # Consumed units x rate
    FIXED = "fixed"  # Flat monthly amount


class SettingKey(str, Enum):
    """Recognized keys of the settings table."""

    WATER_RATE = "water_rate"
    ELECTRIC_RATE = "electric_rate"
    TRASH_FEE = "trash_fee"
