"""Settings service: key/value store and the billing rate provider."""

import logging
from decimal import Decimal, InvalidOperation

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from roombill.core.config import settings as app_settings
from roombill.models.enums import SettingKey
from roombill.models.setting import Setting
from roombill.schemas.setting import RateSettings
from roombill.services.calculator import to_rate

logger = logging.getLogger(__name__)

NUMERIC_KEYS = {key.value for key in SettingKey}
RATE_KEYS = {SettingKey.WATER_RATE.value, SettingKey.ELECTRIC_RATE.value}


def _parse_decimal(raw: str | None) -> Decimal | None:
    if raw is None:
        return None
    try:
        value = Decimal(str(raw).strip())
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


def get_all_settings(db: Session) -> dict[str, str]:
    """Get every stored setting as a key/value mapping."""
    return {s.setting_key: s.setting_value for s in db.query(Setting).all()}


def _validate_value(key: str, value: str) -> None:
    """Reject numeric settings that billing could not use as given."""
    if key not in NUMERIC_KEYS:
        return
    parsed = _parse_decimal(value)
    if key in RATE_KEYS:
        if parsed is None or parsed <= 0 or parsed != to_rate(parsed):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Setting '{key}' must be a positive number with at most 4 decimals",
            )
    elif parsed is None or parsed < 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Setting '{key}' must be a non-negative number",
        )


def _upsert(db: Session, key: str, value: str) -> None:
    setting = db.query(Setting).filter(Setting.setting_key == key).first()
    if setting:
        setting.setting_value = value
    else:
        db.add(Setting(setting_key=key, setting_value=value))


def update_setting(db: Session, key: str, value: str) -> dict[str, str]:
    """Create or replace one setting."""
    _validate_value(key, value)
    _upsert(db, key, value)
    db.commit()
    return {key: value}


def update_settings_bulk(db: Session, values: dict[str, str]) -> dict[str, str]:
    """Create or replace several settings; nothing is saved if any value is invalid."""
    for key, value in values.items():
        _validate_value(key, value)
    for key, value in values.items():
        _upsert(db, key, value)
    db.commit()
    return values


def _rate(
    stored: dict[str, str],
    key: SettingKey,
    default: Decimal,
    allow_zero: bool,
) -> Decimal:
    raw = stored.get(key.value)
    value = _parse_decimal(raw)
    if value is None or value < 0 or (value == 0 and not allow_zero):
        if raw is not None:
            logger.warning("Unusable value %r for setting %s, using %s", raw, key.value, default)
        return default
    return value


def get_rate_settings(db: Session) -> RateSettings:
    """Current water/electric rates and trash fee.

    Missing or unparsable values fall back to the configured defaults.
    Rates must be positive; a trash fee of 0 is a legitimate "no fee".
    """
    stored = get_all_settings(db)
    return RateSettings(
        water_rate=_rate(stored, SettingKey.WATER_RATE, app_settings.DEFAULT_WATER_RATE, False),
        electric_rate=_rate(
            stored, SettingKey.ELECTRIC_RATE, app_settings.DEFAULT_ELECTRIC_RATE, False
        ),
        trash_fee=_rate(stored, SettingKey.TRASH_FEE, app_settings.DEFAULT_TRASH_FEE, True),
    )
