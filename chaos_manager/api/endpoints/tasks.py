from fastapi import APIRouter, Depends
from sqlmodel import Session
from typing import List

from ...core.config import Settings
from ...db.session import get_session
from ...schemas.task import TaskSummary
from ...store import tasks as task_store
from ..deps import Identity, get_identity, get_settings

router = APIRouter()


@router.get("", response_model=List[TaskSummary])
def list_task_summaries(
    identity: Identity = Depends(get_identity),
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
):
    """Owner-scoped tasks in the compact ``{id, title, completed}`` shape."""
    tasks = task_store.list_tasks(
        session,
        identity.owner_id,
        include_unowned=settings.ANONYMOUS_TASK_SCOPE == "unowned",
    )
    return [TaskSummary(id=task.id, title=task.text, completed=task.completed) for task in tasks]
