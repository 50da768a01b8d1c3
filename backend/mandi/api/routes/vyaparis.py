"""
Vyapari (trader) routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional
from mandi.db.session import get_db
from mandi.models.user import User, UserRole
from mandi.models.party import PartyType
from mandi.schemas.party import (
    VyapariCreate, VyapariUpdate, VyapariBatchUpdate, VyapariResponse,
    BatchUpdateResult, RecalculateBalancesResponse
)
from mandi.services import party_service
from mandi.api.dependencies import get_current_user, require_role

router = APIRouter(prefix="/vyaparis", tags=["vyaparis"])


@router.get("", response_model=List[VyapariResponse])
async def list_vyaparis(
    search: Optional[str] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List vyaparis, optionally filtered by name or contact number."""
    return party_service.list_parties(db, PartyType.VYAPARI, search)


@router.post("", response_model=VyapariResponse, status_code=status.HTTP_201_CREATED)
async def create_vyapari(
    vyapari_data: VyapariCreate,
    current_user: User = Depends(require_role(UserRole.OPERATOR)),
    db: Session = Depends(get_db)
):
    """Register a new vyapari with a zero balance."""
    return party_service.create_party(
        db, PartyType.VYAPARI, vyapari_data.model_dump(), registered_by_id=current_user.id
    )


@router.patch("/batch", response_model=BatchUpdateResult)
async def batch_update_vyaparis(
    batch_data: VyapariBatchUpdate,
    current_user: User = Depends(require_role(UserRole.ADMIN)),
    db: Session = Depends(get_db)
):
    """Apply the same contact, location or GST fields to several vyaparis."""
    updates = batch_data.model_dump(exclude={"ids"}, exclude_none=True)
    updated = party_service.batch_update_parties(db, PartyType.VYAPARI, batch_data.ids, updates)
    return {"updated_count": updated}


@router.post("/recalculate-balances", response_model=RecalculateBalancesResponse)
async def recalculate_balances(
    current_user: User = Depends(require_role(UserRole.ADMIN)),
    db: Session = Depends(get_db)
):
    """Rebuild every kisan and vyapari balance from transaction and payment history."""
    return party_service.recalculate_balances(db)


@router.get("/{vyapari_id}", response_model=VyapariResponse)
async def get_vyapari(
    vyapari_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get vyapari by ID."""
    return party_service.get_party(db, PartyType.VYAPARI, vyapari_id)


@router.patch("/{vyapari_id}", response_model=VyapariResponse)
async def update_vyapari(
    vyapari_id: int,
    vyapari_data: VyapariUpdate,
    current_user: User = Depends(require_role(UserRole.OPERATOR)),
    db: Session = Depends(get_db)
):
    """Update vyapari details. Only fields sent in the request change."""
    return party_service.update_party(
        db, PartyType.VYAPARI, vyapari_id, vyapari_data.model_dump(exclude_unset=True)
    )


@router.delete("/{vyapari_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_vyapari(
    vyapari_id: int,
    current_user: User = Depends(require_role(UserRole.ADMIN)),
    db: Session = Depends(get_db)
):
    """Delete a vyapari without any recorded transactions or payments."""
    party_service.delete_party(db, PartyType.VYAPARI, vyapari_id)
    return None
