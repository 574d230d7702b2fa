# task_service/routes/tasks.py
"""CRUD endpoints for tasks."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlmodel import Session, select

from task_service.database import get_session
from task_service.models import (
    Task,
    TaskCreate,
    TaskCreated,
    TaskRead,
    TaskUpdate,
    TaskUpdated,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


def _require_title(title) -> str:
    if title is None or not title.strip():
        raise HTTPException(status_code=400, detail="title required")
    return title


@router.get("")
def list_tasks(session: Session = Depends(get_session)) -> list[TaskRead]:
    """List all tasks, newest inserted first (by id, not timestamp)."""
    statement = select(Task).order_by(Task.id.desc())
    return [TaskRead.model_validate(task) for task in session.exec(statement).all()]


@router.post("", status_code=201)
def create_task(body: TaskCreate, session: Session = Depends(get_session)) -> TaskCreated:
    """Create an incomplete task from a non-empty title."""
    title = _require_title(body.title)
    task = Task(title=title, completed=False)
    session.add(task)
    session.commit()
    session.refresh(task)
    logger.info("Created task %s", task.id)
    return TaskCreated(id=task.id, title=task.title, completed=False)


@router.put("/{task_id}")
def update_task(
    task_id: int, body: TaskUpdate, session: Session = Depends(get_session)
) -> TaskUpdated:
    """Update title and/or completed. Only provided fields are changed."""
    task = session.get(Task, task_id)
    if task is None:
        raise HTTPException(status_code=404, detail="Task not found")

    update_data = body.model_dump(exclude_unset=True, exclude_none=True)
    if "title" in update_data:
        update_data["title"] = _require_title(update_data["title"])
    for key, value in update_data.items():
        setattr(task, key, value)

    session.add(task)
    session.commit()
    session.refresh(task)
    logger.info("Updated task %s: %s", task_id, sorted(update_data))
    return TaskUpdated(id=task.id, title=task.title, completed=bool(task.completed))


@router.delete("/{task_id}", status_code=204)
def delete_task(task_id: int, session: Session = Depends(get_session)) -> Response:
    """Delete a task by ID."""
    task = session.get(Task, task_id)
    if task is None:
        raise HTTPException(status_code=404, detail="Task not found")
    session.delete(task)
    session.commit()
    logger.info("Deleted task %s", task_id)
    return Response(status_code=204)
