"""
Kisan (farmer) routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional
from mandi.db.session import get_db
from mandi.models.user import User, UserRole
from mandi.models.party import PartyType
from mandi.schemas.party import (
    KisanCreate, KisanUpdate, KisanBatchUpdate, KisanResponse,
    BatchUpdateResult, RecalculateBalancesResponse
)
from mandi.services import party_service
from mandi.api.dependencies import get_current_user, require_role

router = APIRouter(prefix="/kisans", tags=["kisans"])


@router.get("", response_model=List[KisanResponse])
async def list_kisans(
    search: Optional[str] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List kisans, optionally filtered by name or contact number."""
    return party_service.list_parties(db, PartyType.KISAN, search)


@router.post("", response_model=KisanResponse, status_code=status.HTTP_201_CREATED)
async def create_kisan(
    kisan_data: KisanCreate,
    current_user: User = Depends(require_role(UserRole.OPERATOR)),
    db: Session = Depends(get_db)
):
    """Register a new kisan with a zero balance."""
    return party_service.create_party(
        db, PartyType.KISAN, kisan_data.model_dump(), registered_by_id=current_user.id
    )


@router.patch("/batch", response_model=BatchUpdateResult)
async def batch_update_kisans(
    batch_data: KisanBatchUpdate,
    current_user: User = Depends(require_role(UserRole.ADMIN)),
    db: Session = Depends(get_db)
):
    """Apply the same contact/location fields to several kisans."""
    updates = batch_data.model_dump(exclude={"ids"}, exclude_none=True)
    updated = party_service.batch_update_parties(db, PartyType.KISAN, batch_data.ids, updates)
    return {"updated_count": updated}


@router.post("/recalculate-balances", response_model=RecalculateBalancesResponse)
async def recalculate_balances(
    current_user: User = Depends(require_role(UserRole.ADMIN)),
    db: Session = Depends(get_db)
):
    """Rebuild every kisan and vyapari balance from transaction and payment history."""
    return party_service.recalculate_balances(db)


@router.get("/{kisan_id}", response_model=KisanResponse)
async def get_kisan(
    kisan_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get kisan by ID."""
    return party_service.get_party(db, PartyType.KISAN, kisan_id)


@router.patch("/{kisan_id}", response_model=KisanResponse)
async def update_kisan(
    kisan_id: int,
    kisan_data: KisanUpdate,
    current_user: User = Depends(require_role(UserRole.OPERATOR)),
    db: Session = Depends(get_db)
):
    """Update kisan details. Only fields sent in the request change."""
    return party_service.update_party(
        db, PartyType.KISAN, kisan_id, kisan_data.model_dump(exclude_unset=True)
    )


@router.delete("/{kisan_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_kisan(
    kisan_id: int,
    current_user: User = Depends(require_role(UserRole.ADMIN)),
    db: Session = Depends(get_db)
):
    """Delete a kisan without any recorded transactions or payments."""
    party_service.delete_party(db, PartyType.KISAN, kisan_id)
    return None
