from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List
from datetime import datetime, timezone
import uuid


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    # Unique index is what settles concurrent first-sight creation
    email: str = Field(unique=True, index=True, nullable=False)
    # Users created from an email header never get a password
    password_hash: Optional[str] = Field(default=None, nullable=True)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)

    # Deleting a user deletes its tasks through ON DELETE CASCADE on todos.user_id
    tasks: List["Task"] = Relationship(back_populates="owner", passive_deletes="all")
