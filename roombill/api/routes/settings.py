"""Settings API routes."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from roombill.core.database import get_db
from roombill.schemas.setting import RateSettings, SettingsBulkUpdate, SettingUpdate
from roombill.services import settings as settings_service

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/", response_model=dict[str, str])
def get_settings(db: Session = Depends(get_db)) -> dict[str, str]:
    """Get all stored settings."""
    return settings_service.get_all_settings(db)


@router.get("/rates", response_model=RateSettings)
def get_rates(db: Session = Depends(get_db)) -> RateSettings:
    """Get the billing rates in effect, with defaults filled in."""
    return settings_service.get_rate_settings(db)


@router.post("/bulk", response_model=dict[str, str])
def update_settings_bulk(
    data: SettingsBulkUpdate,
    db: Session = Depends(get_db),
) -> dict[str, str]:
    """Create or replace several settings at once."""
    return settings_service.update_settings_bulk(db, data.settings)


@router.put("/{key}", response_model=dict[str, str])
def update_setting(
    key: str,
    data: SettingUpdate,
    db: Session = Depends(get_db),
) -> dict[str, str]:
    """Create or replace one setting."""
    return settings_service.update_setting(db, key, data.value)
