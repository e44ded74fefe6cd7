import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..constants import UserRole
from ..database import get_db
from ..domain.doctors.repository import DoctorRepository
from ..domain.doctors.schemas import doctor_to_response, profile_to_columns
from ..errors import ConflictError
from ..models import User
from ..rate_limiter import create_rate_limiter
from ..schemas import (
    AuthData,
    AuthEnvelope,
    LoginRequest,
    MessageResponse,
    SignupRequest,
    user_to_response,
)
from ..security_utils import create_access_token, hash_password, verify_password
from ..utils.sanitization import sanitize_text

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Authentication"])

signup_rate_limit = create_rate_limiter(limit=5, window_seconds=3600, key_prefix="signup")
login_rate_limit = create_rate_limiter(limit=10, window_seconds=900, key_prefix="login")

EMAIL_TAKEN_MESSAGE = "User already exists with this email"


def build_auth_data(db: Session, user: User, issue_token: bool = True) -> AuthData:
    profile = None
    if user.role == UserRole.DOCTOR:
        doctor = DoctorRepository.get_doctor_by_user(db, user.id)
        profile = doctor_to_response(doctor) if doctor else None

    return AuthData(
        user=user_to_response(user),
        token=create_access_token(user.id) if issue_token else None,
        doctorProfile=profile,
    )


@router.post("/signup", response_model=AuthEnvelope, status_code=201)
async def signup(
    data: SignupRequest,
    db: Session = Depends(get_db),
    _: None = Depends(signup_rate_limit),
):
    """Register a patient or doctor; doctor profiles start unverified"""
    if db.query(User).filter(User.email == data.email).first():
        raise ConflictError(EMAIL_TAKEN_MESSAGE)

    user = User(
        name=data.name.strip(),
        email=data.email,
        password_hash=hash_password(data.password),
        role=data.role,
        phone=data.phone,
        age=data.age,
        gender=data.gender,
    )
    db.add(user)

    try:
        db.flush()
        if data.role == UserRole.DOCTOR and data.doctorProfile:
            columns = profile_to_columns(data.doctorProfile)
            columns["bio"] = sanitize_text(columns.get("bio"))
            DoctorRepository.create_doctor(db, user.id, commit=False, is_verified=False, **columns)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError(EMAIL_TAKEN_MESSAGE) from e

    db.refresh(user)
    logger.info(f"New {user.role} registered: user {user.id}")

    return AuthEnvelope(message="User registered successfully", data=build_auth_data(db, user))


@router.post("/login", response_model=AuthEnvelope)
async def login(
    data: LoginRequest,
    db: Session = Depends(get_db),
    _: None = Depends(login_rate_limit),
):
    user = db.query(User).filter(User.email == data.email).first()

    # Same answer for unknown email and wrong password
    if not user or not verify_password(data.password, user.password_hash):
        logger.warning("Failed login attempt")
        raise HTTPException(status_code=401, detail="Invalid credentials")

    if not user.is_active:
        raise HTTPException(status_code=401, detail="Account is deactivated")

    logger.info(f"User {user.id} logged in")
    return AuthEnvelope(message="Login successful", data=build_auth_data(db, user))


@router.post("/logout", response_model=MessageResponse)
async def logout(current_user: User = Depends(get_current_user)):
    # Tokens are stateless; the client discards its copy
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=AuthEnvelope)
async def get_me(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return AuthEnvelope(data=build_auth_data(db, current_user, issue_token=False))
