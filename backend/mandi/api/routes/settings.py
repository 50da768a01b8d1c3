"""
System settings routes.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from mandi.db.session import get_db
from mandi.models.user import User, UserRole
from mandi.schemas.settings import SystemSettingsUpdate, SystemSettingsResponse
from mandi.services import settings_service
from mandi.api.dependencies import get_current_user, require_role

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=SystemSettingsResponse)
async def get_settings(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get the mandi-wide settings."""
    return settings_service.get_system_settings(db)


@router.patch("", response_model=SystemSettingsResponse)
async def update_settings(
    settings_data: SystemSettingsUpdate,
    current_user: User = Depends(require_role(UserRole.ADMIN)),
    db: Session = Depends(get_db)
):
    """Update commission rates or mandi details."""
    return settings_service.update_system_settings(
        db, settings_data.model_dump(exclude_unset=True), updated_by_id=current_user.id
    )
