"""
Create the default admin account if it does not exist yet.

Usage:
    DEFAULT_ADMIN_PASSWORD=... python -m medibook.create_admin
"""

import logging
import sys

from .config import DEFAULT_ADMIN_EMAIL, DEFAULT_ADMIN_NAME, DEFAULT_ADMIN_PASSWORD
from .constants import UserRole
from .database import Base, SessionLocal, engine
from .models import User
from .security_utils import hash_password

logger = logging.getLogger(__name__)


def create_admin(db, email: str, password: str, name: str) -> User:
    """Return the existing admin for ``email`` or create one"""
    existing = db.query(User).filter(User.email == email).first()
    if existing:
        if existing.role != UserRole.ADMIN:
            raise ValueError(f"{email} already belongs to a {existing.role} account")
        logger.info(f"Admin {email} already exists")
        return existing

    admin = User(
        name=name,
        email=email,
        password_hash=hash_password(password),
        role=UserRole.ADMIN,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    logger.info(f"Admin {email} created")
    return admin


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    if not DEFAULT_ADMIN_PASSWORD:
        logger.error("DEFAULT_ADMIN_PASSWORD is not set")
        return 1

    Base.metadata.create_all(bind=engine, checkfirst=True)
    db = SessionLocal()
    try:
        create_admin(db, DEFAULT_ADMIN_EMAIL.lower(), DEFAULT_ADMIN_PASSWORD, DEFAULT_ADMIN_NAME)
    except ValueError as e:
        logger.error(str(e))
        return 1
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
