from typing import Any, Dict, List, Optional
import uuid

import structlog
from sqlmodel import Session, col, desc, select

from ..core.errors import NotFoundError, ValidationError
from ..models.task import Task
from ..models.user import utcnow

log = structlog.get_logger()

UPDATABLE_FIELDS = ("text", "completed")


def _require_text(text: Optional[str]) -> str:
    if not isinstance(text, str) or not text.strip():
        raise ValidationError("Task text is required")
    return text


def list_tasks(session: Session, owner_id: Optional[uuid.UUID] = None,
               include_unowned: bool = True) -> List[Task]:
    """Tasks of ``owner_id``, newest first.

    Without an owner, ``include_unowned`` picks between the tasks nobody
    owns and an empty list.
    """
    if owner_id is None and not include_unowned:
        return []

    query = select(Task)
    if owner_id is not None:
        query = query.where(Task.user_id == owner_id)
    else:
        query = query.where(col(Task.user_id).is_(None))
    return list(session.exec(query.order_by(desc(Task.created_at), desc(Task.id))).all())


def create_task(session: Session, text: Optional[str], owner_id: Optional[uuid.UUID] = None) -> Task:
    task = Task(text=_require_text(text), completed=False, user_id=owner_id)
    session.add(task)
    session.commit()
    session.refresh(task)

    log.info("task_created", task_id=str(task.id), owner_id=str(owner_id) if owner_id else None)
    return task


def get_task(session: Session, task_id: uuid.UUID, owner_id: Optional[uuid.UUID] = None) -> Task:
    task = session.get(Task, task_id)
    if not task:
        raise NotFoundError("Task not found")
    # Another owner's task is reported exactly like a missing one
    if owner_id is not None and task.user_id != owner_id:
        raise NotFoundError("Task not found")
    return task


def update_task(session: Session, task_id: uuid.UUID, changes: Dict[str, Any],
                owner_id: Optional[uuid.UUID] = None) -> Task:
    """Apply only the fields present in ``changes``."""
    unknown = set(changes) - set(UPDATABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")
    if "text" in changes:
        _require_text(changes["text"])
    if "completed" in changes and not isinstance(changes["completed"], bool):
        raise ValidationError("completed must be a boolean")

    task = get_task(session, task_id, owner_id)
    for key, value in changes.items():
        setattr(task, key, value)

    task.updated_at = utcnow()
    session.add(task)
    session.commit()
    session.refresh(task)
    return task


def delete_task(session: Session, task_id: uuid.UUID, owner_id: Optional[uuid.UUID] = None) -> None:
    task = get_task(session, task_id, owner_id)
    session.delete(task)
    session.commit()
    log.info("task_deleted", task_id=str(task_id))
