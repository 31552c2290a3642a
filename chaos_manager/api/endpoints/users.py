from fastapi import APIRouter, Depends, status
from sqlmodel import Session
from typing import List

from ...core.errors import NotFoundError
from ...db.session import get_session
from ...schemas.user import UserBrief, UserIdentify, UserRead
from ...store import users as user_store

router = APIRouter()


@router.post("", response_model=UserBrief, status_code=status.HTTP_201_CREATED)
def create_or_get_user(user_identify: UserIdentify, session: Session = Depends(get_session)):
    return user_store.resolve_or_create(session, user_identify.email)


@router.get("", response_model=List[UserRead])
def list_users(session: Session = Depends(get_session)):
    return user_store.list_users(session)


@router.get("/{email}", response_model=UserRead)
def get_user_by_email(email: str, session: Session = Depends(get_session)):
    user = user_store.get_user_by_email(session, email.strip())
    if not user:
        raise NotFoundError("User not found")
    return user
