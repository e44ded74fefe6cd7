import logging

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .database import get_db
from .models import User
from .security_utils import verify_access_token

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the calling user from the bearer token on every request"""

    if not credentials:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated. Please provide a valid Bearer token in the Authorization header.",
        )

    payload = verify_access_token(credentials.credentials)
    if not payload:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    subject = payload.get("sub")
    try:
        user_id = int(subject)
    except (TypeError, ValueError):
        logger.warning(f"Token carries an invalid subject claim: {subject!r}")
        raise HTTPException(status_code=401, detail="Invalid token claims") from None

    user = db.query(User).filter(User.id == user_id).first()
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="User not found or inactive.")

    logger.debug(f"User authenticated: {user.email} ({user.role})")
    return user


def require_role(*roles: str):
    """
    Create a dependency that only lets the given roles through

    Example usage:
        @router.patch("/{appointment_id}/approve")
        async def approve(current_user: User = Depends(require_role("doctor"))):
            ...
    """

    async def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            logger.warning(
                f"User {current_user.id} with role {current_user.role} denied, requires {roles}"
            )
            raise HTTPException(status_code=403, detail="Access denied for this role")
        return current_user

    return role_checker
