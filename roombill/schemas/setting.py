"""Settings schemas."""

from decimal import Decimal

from pydantic import BaseModel


class SettingUpdate(BaseModel):
    """Schema for updating a single setting."""

    value: str


class SettingsBulkUpdate(BaseModel):
    """Schema for updating several settings at once."""

    settings: dict[str, str]


class RateSettings(BaseModel):
    """Parsed billing rates, with fallbacks applied."""

    water_rate: Decimal
    electric_rate: Decimal
    trash_fee: Decimal
