from datetime import datetime, timedelta, timezone
from typing import Optional
import jwt
from passlib.context import CryptContext
from .config import settings
from .errors import AuthError

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# JWT token functions
def create_access_token(data: dict, expires_delta: Optional[timedelta] = None,
                        secret_key: Optional[str] = None):
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, secret_key or settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return encoded_jwt


def decode_access_token(token: str, secret_key: Optional[str] = None) -> str:
    """Return the email stored in the token's ``sub`` claim."""
    try:
        payload = jwt.decode(
            token, secret_key or settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
    except jwt.exceptions.PyJWTError:
        raise AuthError("Could not validate credentials")

    email = payload.get("sub")
    if not email:
        raise AuthError("Could not validate credentials")
    return email


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def dummy_verify() -> None:
    # Same amount of hashing work as a real check, for unknown accounts
    pwd_context.dummy_verify()


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)
