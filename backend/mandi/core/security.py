"""
Security utilities: password hashing, JWT tokens and role ranks.
"""
from datetime import datetime, timedelta
from typing import Optional
import hashlib
import bcrypt
from jose import JWTError, jwt
from mandi.core.config import settings

# Higher rank includes every permission of the lower ranks
ROLE_RANKS = {
    "viewer": 0,
    "operator": 1,
    "admin": 2,
    "superadmin": 3,
}


def _pre_hash_password(password: str) -> bytes:
    # bcrypt only looks at the first 72 bytes
    return hashlib.sha256(password.encode('utf-8')).digest()


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its bcrypt hash."""
    return bcrypt.checkpw(_pre_hash_password(plain_password), hashed_password.encode('utf-8'))


def get_password_hash(password: str) -> str:
    """Hash a password for storage."""
    hashed = bcrypt.hashpw(_pre_hash_password(password), bcrypt.gensalt())
    return hashed.decode('utf-8')


def role_allows(role: str, minimum_role: str) -> bool:
    """Return True when ``role`` ranks at or above ``minimum_role``."""
    role = getattr(role, "value", role)
    minimum_role = getattr(minimum_role, "value", minimum_role)
    return ROLE_RANKS.get(role, -1) >= ROLE_RANKS[minimum_role]


def create_access_token(
    username: str,
    user_id: int,
    role: str,
    expires_delta: Optional[timedelta] = None
) -> str:
    """Create a signed JWT carrying the user's identity and role."""
    expire = datetime.utcnow() + (expires_delta or timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS))
    claims = {
        "sub": username,
        "user_id": user_id,
        "role": role,
        "exp": expire,
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    """Decode and verify a JWT token, returning None when it is invalid or expired."""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
