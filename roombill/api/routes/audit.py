"""Consistency audit route."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from roombill.core.database import get_db
from roombill.schemas.billing import ConsistencyReport
from roombill.services.audit import find_inconsistencies

router = APIRouter(prefix="/audit", tags=["audit"])


@router.get("/consistency", response_model=ConsistencyReport)
def check_consistency(db: Session = Depends(get_db)) -> ConsistencyReport:
    """Report rooms with several active tenants and bills whose totals do not add up."""
    return find_inconsistencies(db)
