"""
Shared API dependencies: the authenticated user and role checks.
"""
import logging
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from mandi.core.security import decode_access_token, role_allows
from mandi.db.session import get_db
from mandi.models.user import User, UserRole

logger = logging.getLogger(__name__)

security = HTTPBearer()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """Resolve the bearer token to an active user."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise credentials_exception

    user_id = payload.get("user_id")
    if user_id is None:
        raise credentials_exception

    user = db.query(User).filter(User.id == user_id).first()
    if user is None or not user.is_active:
        raise credentials_exception

    return user


def require_role(minimum_role: UserRole):
    """Dependency factory allowing users at or above ``minimum_role``."""
    async def checker(current_user: User = Depends(get_current_user)) -> User:
        if not role_allows(current_user.role, minimum_role):
            logger.warning(
                f"User {current_user.id} ({current_user.role.value}) denied, "
                f"requires {minimum_role.value}"
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions"
            )
        return current_user
    return checker
