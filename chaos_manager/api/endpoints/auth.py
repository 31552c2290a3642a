from fastapi import APIRouter, Depends, status
from sqlmodel import Session
from datetime import timedelta

from ...core.config import Settings
from ...core.security import create_access_token
from ...db.session import get_session
from ...models.user import User
from ...schemas.user import LoginResult, UserBrief, UserCredentials, UserRead
from ...store import users as user_store
from ..deps import get_current_user, get_settings

router = APIRouter()

@router.post("/register", response_model=UserBrief, status_code=status.HTTP_201_CREATED)
def register(credentials: UserCredentials, session: Session = Depends(get_session)):
    return user_store.register(session, credentials.email, credentials.password)

@router.post("/login", response_model=LoginResult)
def login(
    credentials: UserCredentials,
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
):
    user = user_store.login(session, credentials.email, credentials.password)

    # Create access token
    access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = create_access_token(
        data={"sub": user.email}, expires_delta=access_token_expires, secret_key=settings.SECRET_KEY
    )

    return LoginResult(id=user.id, email=user.email, access_token=access_token)

@router.get("/me", response_model=UserRead)
def get_current_user_profile(current_user: User = Depends(get_current_user)):
    return current_user
