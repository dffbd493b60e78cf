"""Bill routes: generation, saving and payment."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.orm import Session

from roombill.core.database import get_db
from roombill.schemas.billing import BillGenerationResult, BillResponse, BillSave
from roombill.services import billing as billing_service

router = APIRouter(prefix="/bills", tags=["bills"])

Month = Annotated[int, Path(ge=1, le=12, description="Billing month, 1-12")]
Year = Annotated[int, Path(ge=1, description="Billing year")]


@router.get("/generate/{month}/{year}", response_model=BillGenerationResult)
def generate_bills(
    month: Month,
    year: Year,
    db: Session = Depends(get_db),
) -> BillGenerationResult:
    """Compute the bills of a period without saving them.

    Every room read in the period and every occupied room gets a bill.
    """
    return billing_service.generate_bills(db, month, year)


@router.post("/generate/{month}/{year}", response_model=list[BillResponse])
def persist_generated_bills(
    month: Month,
    year: Year,
    db: Session = Depends(get_db),
) -> list[BillResponse]:
    """Compute and save the bills of a period, replacing saved ones."""
    bills, _ = billing_service.persist_generated_bills(db, month, year)
    return [BillResponse.model_validate(b) for b in bills]


@router.get("/{month}/{year}", response_model=list[BillResponse])
def get_period_bills(
    month: Month,
    year: Year,
    db: Session = Depends(get_db),
) -> list[BillResponse]:
    """Get the saved bills of a period."""
    bills = billing_service.get_bills_for_period(db, month, year)
    return [BillResponse.model_validate(b) for b in bills]


@router.get("/{bill_id}", response_model=BillResponse)
def get_bill(bill_id: int, db: Session = Depends(get_db)) -> BillResponse:
    """Get a saved bill by ID."""
    return BillResponse.model_validate(billing_service.get_bill(db, bill_id))


@router.post("/", response_model=BillResponse, status_code=status.HTTP_201_CREATED)
def save_bill(
    bill_data: BillSave,
    response: Response,
    db: Session = Depends(get_db),
) -> BillResponse:
    """Save a bill, replacing the room's bill for the same period.

    The total must equal the sum of the line items; leave it out to have
    it computed.
    """
    bill, created = billing_service.save_bill(db, bill_data)
    if not created:
        response.status_code = status.HTTP_200_OK
    return BillResponse.model_validate(bill)


@router.put("/{bill_id}/pay", response_model=BillResponse)
def mark_bill_paid(bill_id: int, db: Session = Depends(get_db)) -> BillResponse:
    """Mark a bill as paid today."""
    return BillResponse.model_validate(billing_service.mark_bill_paid(db, bill_id))
