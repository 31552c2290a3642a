from typing import Optional
from datetime import datetime
import uuid

from .task import CamelModel


class UserIdentify(CamelModel):
    email: Optional[str] = None


class UserBrief(CamelModel):
    id: uuid.UUID
    email: str


class UserRead(UserBrief):
    created_at: datetime


class UserCredentials(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class LoginResult(UserBrief):
    access_token: str
    token_type: str = "bearer"
