"""Client-side task list with optimistic mutations.

Every create/toggle/delete changes ``TaskListView.tasks`` right away and
records a :class:`Mutation`. When the server answers, the mutation is
confirmed and the local task is replaced by the server's version; when the
call fails, the list is restored from the snapshot taken before the change
and the mutation is marked reverted. Nothing is retried.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional
import uuid

import structlog

from .api import ApiError, TodoApiClient

log = structlog.get_logger()


class MutationState(str, Enum):
    applied = "applied"
    confirmed = "confirmed"
    reverted = "reverted"


@dataclass
class TaskItem:
    id: str
    text: str
    completed: bool = False
    # True while the item only exists locally
    pending: bool = False

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "TaskItem":
        # /todos answers with "text", /tasks with "title"
        return cls(
            id=str(data["id"]),
            text=data.get("text", data.get("title", "")),
            completed=bool(data.get("completed", False)),
        )


@dataclass
class Mutation:
    kind: str
    task_id: str
    snapshot: List[TaskItem] = field(repr=False)
    state: MutationState = MutationState.applied
    error: Optional[str] = None

    def confirm(self) -> None:
        if self.state is not MutationState.applied:
            raise RuntimeError(f"Cannot confirm a {self.state.value} mutation")
        self.state = MutationState.confirmed

    def revert(self, error: str) -> None:
        if self.state is not MutationState.applied:
            raise RuntimeError(f"Cannot revert a {self.state.value} mutation")
        self.state = MutationState.reverted
        self.error = error


class TaskListView:
    def __init__(self, client: TodoApiClient):
        self.client = client
        self.tasks: List[TaskItem] = []
        self.error: Optional[str] = None
        self.loading = False
        self.mutations: List[Mutation] = []

    def load(self) -> bool:
        self.loading = True
        self.error = None
        try:
            self.tasks = [TaskItem.from_api(data) for data in self.client.list_todos()]
        except ApiError as exc:
            log.warning("task_list_load_failed", error=exc.message)
            self.error = "Could not load tasks"
            return False
        finally:
            self.loading = False
        return True

    def create(self, text: str) -> Optional[Mutation]:
        if not text or not text.strip():
            self.error = "Please enter the task text"
            return None

        placeholder = TaskItem(id=f"pending-{uuid.uuid4().hex}", text=text, pending=True)
        mutation = self._begin("create", placeholder.id)
        self.tasks.insert(0, placeholder)

        try:
            created = TaskItem.from_api(self.client.create_todo(text))
        except ApiError as exc:
            self._rollback(mutation, exc)
            return mutation

        self._replace(placeholder.id, created)
        mutation.task_id = created.id
        mutation.confirm()
        return mutation

    def toggle(self, task_id: str) -> Mutation:
        index = self._index(task_id)
        current = self.tasks[index]

        mutation = self._begin("toggle", task_id)
        self.tasks[index] = replace(current, completed=not current.completed)

        try:
            updated = TaskItem.from_api(self.client.update_todo(task_id, completed=not current.completed))
        except ApiError as exc:
            self._rollback(mutation, exc)
            return mutation

        self._replace(task_id, updated)
        mutation.confirm()
        return mutation

    def delete(self, task_id: str) -> Mutation:
        index = self._index(task_id)

        mutation = self._begin("delete", task_id)
        del self.tasks[index]

        try:
            self.client.delete_todo(task_id)
        except ApiError as exc:
            self._rollback(mutation, exc)
            return mutation

        mutation.confirm()
        return mutation

    def _begin(self, kind: str, task_id: str) -> Mutation:
        self.error = None
        mutation = Mutation(kind=kind, task_id=task_id, snapshot=[replace(task) for task in self.tasks])
        self.mutations.append(mutation)
        return mutation

    def _rollback(self, mutation: Mutation, exc: ApiError) -> None:
        self.tasks = [replace(task) for task in mutation.snapshot]
        mutation.revert(exc.message)
        self.error = exc.message
        log.warning(
            "task_mutation_reverted",
            kind=mutation.kind,
            task_id=mutation.task_id,
            status_code=exc.status_code,
            error=exc.message,
        )

    def _index(self, task_id: str) -> int:
        for index, task in enumerate(self.tasks):
            if task.id == task_id:
                return index
        raise KeyError(task_id)

    def _replace(self, task_id: str, task: TaskItem) -> None:
        # The item may be gone if the list was reloaded meanwhile
        self.tasks = [task if item.id == task_id else item for item in self.tasks]
