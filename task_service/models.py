# task_service/models.py
"""Task table and request/response schemas."""

from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel


class Task(SQLModel, table=True):
    """Task database table."""
    __tablename__ = "tasks"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    completed: bool = Field(default=False)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class TaskCreate(SQLModel):
    """Body of POST /tasks. Title presence is checked by the route so a
    missing title yields 400 rather than a schema error."""
    title: Optional[str] = None


class TaskUpdate(SQLModel):
    """Body of PUT /tasks/{id}. Omitted fields are left unchanged."""
    title: Optional[str] = None
    completed: Optional[bool] = None


class TaskRead(SQLModel):
    id: int
    title: str
    completed: bool
    created_at: datetime


class TaskCreated(SQLModel):
    """Create response; ``created_at`` is not echoed back."""
    id: int
    title: str
    completed: bool = False


class TaskUpdated(SQLModel):
    id: int
    title: str
    completed: bool
