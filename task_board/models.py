"""Client-side task record as returned by GET /api/tasks."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class Task(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    completed: bool = False
    created_at: datetime
