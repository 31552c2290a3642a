from sqlmodel import SQLModel, Field, Relationship
from typing import Optional
from datetime import datetime
import uuid

from .user import utcnow


class Task(SQLModel, table=True):
    __tablename__ = "todos"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    text: str = Field(nullable=False)
    completed: bool = Field(default=False, nullable=False)

    # Owner, set once at creation
    user_id: Optional[uuid.UUID] = Field(
        default=None, foreign_key="users.id", ondelete="CASCADE", nullable=True, index=True
    )

    created_at: datetime = Field(default_factory=utcnow, nullable=False, index=True)
    updated_at: datetime = Field(default_factory=utcnow, nullable=False)

    # Relationship to user
    owner: Optional["User"] = Relationship(back_populates="tasks")
