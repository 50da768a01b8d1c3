"""
Payment routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
from mandi.db.session import get_db
from mandi.models.user import User, UserRole
from mandi.models.party import PartyType
from mandi.schemas.payment import PaymentCreate, PaymentResponse
from mandi.services import payment_service
from mandi.api.dependencies import get_current_user, require_role

router = APIRouter(prefix="/payments", tags=["payments"])


@router.get("", response_model=List[PaymentResponse])
async def list_payments(
    entity_type: Optional[PartyType] = None,
    entity_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List payments, oldest first."""
    return payment_service.list_payments(
        db,
        entity_type=entity_type,
        entity_id=entity_id,
        start_date=start_date,
        end_date=end_date
    )


@router.post("", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
async def create_payment(
    payment_data: PaymentCreate,
    current_user: User = Depends(require_role(UserRole.OPERATOR)),
    db: Session = Depends(get_db)
):
    """Record money paid to a kisan or collected from a vyapari."""
    return payment_service.record_payment(db, payment_data, recorded_by_id=current_user.id)
