"""User lookup, first-sight creation, registration and login.

Email uniqueness is enforced by the ``users.email`` unique index. Creation
paths insert optimistically and treat an ``IntegrityError`` as "someone
else got there first".
"""

import re
from typing import List, Optional
import uuid

import structlog
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, desc, select

from ..core.errors import AuthError, ConflictError, NotFoundError, ValidationError
from ..core.security import dummy_verify, get_password_hash, verify_password
from ..models.user import User

log = structlog.get_logger()

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_email(email: Optional[str]) -> str:
    if not isinstance(email, str) or not email.strip():
        raise ValidationError("Email is required")

    email = email.strip()
    if not EMAIL_PATTERN.match(email):
        raise ValidationError("Invalid email address")
    return email


def get_user_by_email(session: Session, email: str) -> Optional[User]:
    return session.exec(select(User).where(User.email == email)).first()


def get_user(session: Session, user_id: uuid.UUID) -> User:
    user = session.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def list_users(session: Session) -> List[User]:
    return list(session.exec(select(User).order_by(desc(User.created_at))).all())


def _insert_user(session: Session, user: User) -> bool:
    """Commit a new user; False if the email was taken in the meantime."""
    session.add(user)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        return False
    session.refresh(user)
    return True


def resolve_or_create(session: Session, email: Optional[str]) -> User:
    email = normalize_email(email)

    user = get_user_by_email(session, email)
    if user:
        return user

    user = User(email=email)
    if _insert_user(session, user):
        log.info("user_created", user_id=str(user.id), email=email)
        return user

    # Lost the race to a concurrent first-sight request
    user = get_user_by_email(session, email)
    if user is None:
        raise ConflictError("Could not create user")
    return user


def register(session: Session, email: Optional[str], password: Optional[str]) -> User:
    email = normalize_email(email)
    if not password:
        raise ValidationError("Email and password are required")

    if get_user_by_email(session, email):
        raise ConflictError("Email already registered")

    user = User(email=email, password_hash=get_password_hash(password))
    if not _insert_user(session, user):
        raise ConflictError("Email already registered")

    log.info("user_registered", user_id=str(user.id), email=email)
    return user


def login(session: Session, email: Optional[str], password: Optional[str]) -> User:
    if not email or not password:
        raise ValidationError("Email and password are required")

    user = get_user_by_email(session, email.strip())

    # One message for every failure so callers can't probe which emails exist
    if user is None or user.password_hash is None:
        dummy_verify()
        raise AuthError("Incorrect email or password")

    if not verify_password(password, user.password_hash):
        raise AuthError("Incorrect email or password")

    return user
