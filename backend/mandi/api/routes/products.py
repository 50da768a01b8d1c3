"""
Product routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from mandi.db.session import get_db
from mandi.models.user import User, UserRole
from mandi.schemas.product import ProductCreate, ProductUpdate, ProductBatchUpdate, ProductResponse
from mandi.schemas.party import BatchUpdateResult
from mandi.services import product_service
from mandi.api.dependencies import get_current_user, require_role

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=List[ProductResponse])
async def list_products(
    active_only: bool = False,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List products by name."""
    return product_service.list_products(db, active_only=active_only)


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    product_data: ProductCreate,
    current_user: User = Depends(require_role(UserRole.OPERATOR)),
    db: Session = Depends(get_db)
):
    """Create a new product."""
    return product_service.create_product(db, product_data.model_dump())


@router.patch("/batch", response_model=BatchUpdateResult)
async def batch_update_products(
    batch_data: ProductBatchUpdate,
    current_user: User = Depends(require_role(UserRole.ADMIN)),
    db: Session = Depends(get_db)
):
    """Apply the same category, price or active flag to several products."""
    updates = batch_data.model_dump(exclude={"ids"}, exclude_none=True)
    updated = product_service.batch_update_products(db, batch_data.ids, updates)
    return {"updated_count": updated}


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get product by ID."""
    return product_service.get_product(db, product_id)


@router.patch("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: int,
    product_data: ProductUpdate,
    current_user: User = Depends(require_role(UserRole.OPERATOR)),
    db: Session = Depends(get_db)
):
    """Update a product."""
    return product_service.update_product(db, product_id, product_data.model_dump(exclude_unset=True))


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: int,
    current_user: User = Depends(require_role(UserRole.ADMIN)),
    db: Session = Depends(get_db)
):
    """Delete a product that was never sold."""
    product_service.delete_product(db, product_id)
    return None


@router.post("/{product_id}/refresh-stats", response_model=ProductResponse)
async def refresh_product_stats(
    product_id: int,
    current_user: User = Depends(require_role(UserRole.OPERATOR)),
    db: Session = Depends(get_db)
):
    """Recompute price statistics from the product's sales."""
    return product_service.refresh_price_statistics(db, product_id)
