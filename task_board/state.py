"""Board view state and the pure reconcile pipeline.

``ViewState`` is immutable: the board replaces it with
``dataclasses.replace`` on every change, so a given state always
reconciles to the same view model.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from task_board.models import Task


class TaskFilter(str, Enum):
    all = "all"
    active = "active"
    completed = "completed"


class SortOrder(str, Enum):
    newest = "newest"
    oldest = "oldest"
    az = "az"
    za = "za"


@dataclass(frozen=True)
class ViewState:
    tasks: tuple[Task, ...] = ()
    filter: TaskFilter = TaskFilter.all
    search: str = ""
    sort: SortOrder = SortOrder.newest
    selected_id: Optional[int] = None
    selected_ids: frozenset[int] = frozenset()
    editing_id: Optional[int] = None
    load_error: Optional[str] = None


@dataclass(frozen=True)
class Row:
    task: Task
    checked: bool
    editing: bool


@dataclass(frozen=True)
class Viewer:
    """``task`` is None with ``missing`` False when nothing is selected."""
    task: Optional[Task] = None
    missing: bool = False


@dataclass(frozen=True)
class Stats:
    total: int
    completed: int

    @property
    def text(self) -> str:
        plural = "" if self.total == 1 else "s"
        return f"{self.total} task{plural} • {self.completed} completed"


@dataclass(frozen=True)
class ViewModel:
    rows: tuple[Row, ...]
    viewer: Viewer
    stats: Stats
    filter: TaskFilter
    search: str = ""
    sort: SortOrder = SortOrder.newest
    load_error: Optional[str] = None


def _title_key(task: Task) -> tuple[str, str]:
    return (task.title.casefold(), task.title)


def derive_view(
    tasks: Sequence[Task],
    task_filter: TaskFilter = TaskFilter.all,
    search: str = "",
    sort: SortOrder = SortOrder.newest,
) -> list[Task]:
    """Filter, search and sort without touching ``tasks``.

    Search is a case-insensitive substring match and is skipped when the
    query is blank. Ties keep the incoming (server) order.
    """
    items = list(tasks)

    if task_filter == TaskFilter.active:
        items = [t for t in items if not t.completed]
    elif task_filter == TaskFilter.completed:
        items = [t for t in items if t.completed]

    if search.strip():
        query = search.lower()
        items = [t for t in items if query in t.title.lower()]

    if sort == SortOrder.az:
        items.sort(key=_title_key)
    elif sort == SortOrder.za:
        items.sort(key=_title_key, reverse=True)
    elif sort == SortOrder.oldest:
        items.sort(key=lambda t: t.created_at)
    elif sort == SortOrder.newest:
        items.sort(key=lambda t: t.created_at, reverse=True)

    return items


def find_task(state: ViewState, task_id: Optional[int]) -> Optional[Task]:
    for task in state.tasks:
        if task.id == task_id:
            return task
    return None


def reconcile(state: ViewState) -> ViewModel:
    """Project the state into everything the page shows."""
    visible = derive_view(state.tasks, state.filter, state.search, state.sort)
    rows = tuple(
        Row(
            task=task,
            checked=task.id in state.selected_ids,
            editing=task.id == state.editing_id,
        )
        for task in visible
    )

    if state.selected_id is None:
        viewer = Viewer()
    else:
        task = find_task(state, state.selected_id)
        viewer = Viewer(task=task, missing=task is None)

    stats = Stats(
        total=len(state.tasks),
        completed=sum(1 for t in state.tasks if t.completed),
    )
    return ViewModel(
        rows=rows,
        viewer=viewer,
        stats=stats,
        filter=state.filter,
        search=state.search,
        sort=state.sort,
        load_error=state.load_error,
    )
