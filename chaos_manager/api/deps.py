from dataclasses import dataclass
from typing import Optional
import uuid

from fastapi import Depends, Header, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlmodel import Session

from ..core.config import Settings
from ..core.errors import AuthError
from ..core.security import decode_access_token
from ..db.session import get_session
from ..models.user import User
from ..store import users as user_store

# auto_error=False: a missing Authorization header just means "no token"
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Identity:
    """Who is calling, resolved once per request."""
    user: Optional[User] = None

    @property
    def is_anonymous(self) -> bool:
        return self.user is None

    @property
    def owner_id(self) -> Optional[uuid.UUID]:
        return self.user.id if self.user else None


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_identity(
    token: Optional[HTTPAuthorizationCredentials] = Depends(security),
    x_user_email: Optional[str] = Header(default=None),
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> Identity:
    if token is not None:
        email = decode_access_token(token.credentials, secret_key=settings.SECRET_KEY)
        user = user_store.get_user_by_email(session, email)
        if user is None:
            raise AuthError("Could not validate credentials")
        return Identity(user=user)

    if x_user_email is not None and x_user_email.strip():
        return Identity(user=user_store.resolve_or_create(session, x_user_email))

    return Identity()


def get_current_user(identity: Identity = Depends(get_identity)) -> User:
    if identity.user is None:
        raise AuthError("Not authenticated")
    return identity.user
