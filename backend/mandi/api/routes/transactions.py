"""
Transaction routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
from mandi.db.session import get_db
from mandi.models.user import User, UserRole
from mandi.schemas.transaction import (
    TransactionCreate, TransactionResponse, TransactionPreviewRequest,
    TransactionPreview, TransactionBatchUpdate
)
from mandi.schemas.party import BatchUpdateResult
from mandi.services import transaction_service
from mandi.api.dependencies import get_current_user, require_role

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.get("", response_model=List[TransactionResponse])
async def list_transactions(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    kisan_id: Optional[int] = None,
    vyapari_id: Optional[int] = None,
    product_id: Optional[int] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List transactions, newest first."""
    return transaction_service.list_transactions(
        db,
        start_date=start_date,
        end_date=end_date,
        kisan_id=kisan_id,
        vyapari_id=vyapari_id,
        product_id=product_id
    )


@router.post("", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    transaction_data: TransactionCreate,
    current_user: User = Depends(require_role(UserRole.OPERATOR)),
    db: Session = Depends(get_db)
):
    """Record a sale and update both parties' balances."""
    return transaction_service.record_transaction(db, transaction_data, recorded_by_id=current_user.id)


@router.post("/preview", response_model=TransactionPreview)
async def preview_transaction(
    preview_data: TransactionPreviewRequest,
    current_user: User = Depends(require_role(UserRole.OPERATOR)),
    db: Session = Depends(get_db)
):
    """Compute the commission split for the given items without saving."""
    breakdown = transaction_service.preview_commission(
        db,
        preview_data.items,
        preview_data.commission_kisan_rate,
        preview_data.commission_vyapari_rate_per_kg
    )
    return breakdown.as_dict()


@router.patch("/batch", response_model=BatchUpdateResult)
async def batch_update_transactions(
    batch_data: TransactionBatchUpdate,
    current_user: User = Depends(require_role(UserRole.ADMIN)),
    db: Session = Depends(get_db)
):
    """Update notes, status or type of several transactions."""
    updated = transaction_service.batch_update_transactions(
        db, batch_data.ids, batch_data.model_dump(exclude={"ids"})
    )
    return {"updated_count": updated}


@router.get("/{transaction_id}", response_model=TransactionResponse)
async def get_transaction(
    transaction_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get transaction by ID."""
    return transaction_service.get_transaction(db, transaction_id)


@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_transaction(
    transaction_id: int,
    current_user: User = Depends(require_role(UserRole.ADMIN)),
    db: Session = Depends(get_db)
):
    """Delete a transaction and reverse its effect on both balances."""
    transaction_service.delete_transaction(db, transaction_id)
    return None
