from pydantic import BaseModel, ConfigDict, StrictBool, StrictStr
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime
import uuid


class CamelModel(BaseModel):
    # JSON uses camelCase keys, Python code uses field names
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class TaskCreate(CamelModel):
    # Left optional so a missing text reaches the store and answers 400
    text: Optional[StrictStr] = None
    user_id: Optional[uuid.UUID] = None


class TaskUpdate(CamelModel):
    text: Optional[StrictStr] = None
    completed: Optional[StrictBool] = None


class TaskRead(CamelModel):
    id: uuid.UUID
    text: str
    completed: bool
    user_id: Optional[uuid.UUID] = None
    created_at: datetime
    updated_at: datetime


class TaskSummary(CamelModel):
    """Compact shape served by ``GET /api/tasks``."""
    id: uuid.UUID
    title: str
    completed: bool
