from fastapi import APIRouter, Depends, Query, Response, status
from sqlmodel import Session
from typing import List, Optional
import uuid

from ...core.config import Settings
from ...db.session import get_session
from ...schemas.task import TaskCreate, TaskRead, TaskUpdate
from ...store import tasks as task_store
from ...store import users as user_store
from ..deps import Identity, get_identity, get_settings

router = APIRouter()


def resolve_owner(session: Session, identity: Identity, user_id: Optional[uuid.UUID]) -> Optional[uuid.UUID]:
    # A resolved identity always wins over an explicit userId
    if not identity.is_anonymous:
        return identity.owner_id
    if user_id is not None:
        return user_store.get_user(session, user_id).id
    return None


@router.get("", response_model=List[TaskRead])
def list_todos(
    user_id: Optional[uuid.UUID] = Query(default=None, alias="userId"),
    identity: Identity = Depends(get_identity),
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
):
    owner_id = resolve_owner(session, identity, user_id)
    return task_store.list_tasks(
        session,
        owner_id,
        include_unowned=settings.ANONYMOUS_TASK_SCOPE == "unowned",
    )


@router.post("", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
def create_todo(
    task_create: TaskCreate,
    identity: Identity = Depends(get_identity),
    session: Session = Depends(get_session),
):
    owner_id = resolve_owner(session, identity, task_create.user_id)
    return task_store.create_task(session, task_create.text, owner_id)


@router.patch("/{task_id}", response_model=TaskRead)
def update_todo(
    task_id: uuid.UUID,
    task_update: TaskUpdate,
    identity: Identity = Depends(get_identity),
    session: Session = Depends(get_session),
):
    changes = task_update.model_dump(exclude_unset=True)
    return task_store.update_task(session, task_id, changes, owner_id=identity.owner_id)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_todo(
    task_id: uuid.UUID,
    identity: Identity = Depends(get_identity),
    session: Session = Depends(get_session),
):
    task_store.delete_task(session, task_id, owner_id=identity.owner_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
