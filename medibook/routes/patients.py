import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth import require_role
from ..constants import UserRole
from ..database import get_db
from ..models import User
from ..schemas import UserEnvelope, UserUpdate, user_to_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/patient", tags=["Patients"])


@router.get("/me", response_model=UserEnvelope)
async def get_my_profile(current_user: User = Depends(require_role(UserRole.PATIENT))):
    return UserEnvelope(data=user_to_response(current_user))


@router.put("/me", response_model=UserEnvelope)
async def update_my_profile(
    data: UserUpdate,
    current_user: User = Depends(require_role(UserRole.PATIENT)),
    db: Session = Depends(get_db),
):
    """Update phone, age and gender; only provided fields change"""
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(current_user, field, value)

    db.commit()
    db.refresh(current_user)
    logger.info(f"Patient {current_user.id} updated profile")

    return UserEnvelope(message="Profile updated successfully", data=user_to_response(current_user))
