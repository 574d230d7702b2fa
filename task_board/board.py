"""Board controller: user events in, API calls and full re-renders out.

Every mutation is followed by ``refresh()``, which re-fetches the whole
task list and re-renders the page from it. There is no optimistic
patching, so the page never disagrees with the server once a call has
settled.
"""

import asyncio
import logging
from dataclasses import replace
from typing import Awaitable, Callable, Iterable, Optional, Union

from bs4 import Tag

from task_board.api import TaskApi, TaskApiError
from task_board.render import TaskPage
from task_board.state import (
    SortOrder,
    TaskFilter,
    ViewState,
    find_task,
    reconcile,
)

logger = logging.getLogger(__name__)

EMPTY_TITLE_ALERT = "Title cannot be empty."


class BulkActionError(Exception):
    """Some requests of a bulk action failed; the rest were applied."""

    def __init__(self, action: str, failed: dict[int, Exception]) -> None:
        ids = ", ".join(str(task_id) for task_id in sorted(failed))
        super().__init__(f"{action} failed for task(s) {ids}")
        self.action = action
        self.failed = failed


def _always_confirm(message: str) -> bool:
    return True


class TaskBoard:
    """Holds the view state and wires it to the API and the page.

    ``confirm`` and ``alert`` stand in for the browser dialogs; both take
    the message to show.
    """

    def __init__(
        self,
        api: TaskApi,
        page: Optional[TaskPage] = None,
        confirm: Callable[[str], bool] = _always_confirm,
        alert: Callable[[str], None] = logger.warning,
    ) -> None:
        self.api = api
        self.page = page or TaskPage()
        self.confirm = confirm
        self.alert = alert
        self.state = ViewState()

    # -- render cycle ----------------------------------------------------------

    def _update(self, **changes) -> None:
        self.state = replace(self.state, **changes)
        self.render()

    def render(self) -> None:
        self.page.render(reconcile(self.state))

    async def refresh(self) -> None:
        tasks = await self.api.list_tasks()
        self._update(tasks=tuple(tasks), load_error=None)

    async def load(self) -> bool:
        """Initial fetch. Failures are shown in the list area, not raised."""
        try:
            await self.refresh()
        except TaskApiError as e:
            logger.error("Initial load failed: %s", e)
            self._update(load_error=str(e))
            return False
        return True

    # -- top bar ---------------------------------------------------------------

    async def add_task(self, title: Optional[str] = None) -> bool:
        """Create a task from ``title``, or from the #newTitle input when omitted.

        The input is cleared once the task has been created.
        """
        if title is None:
            title = self.page.input_value("newTitle")
        title = title.strip()
        if not title:
            return False
        await self.api.create_task(title)
        self.page.set_input_value("newTitle", "")
        await self.refresh()
        return True

    def set_filter(self, task_filter: Union[TaskFilter, str]) -> None:
        self._update(filter=TaskFilter(task_filter))

    def set_search(self, search: str) -> None:
        self._update(search=search)

    def set_sort(self, sort: Union[SortOrder, str]) -> None:
        self._update(sort=SortOrder(sort))

    # -- rows ------------------------------------------------------------------

    def select(self, task_id: int, checked: bool) -> None:
        """Add or remove a task from the bulk selection."""
        selected = set(self.state.selected_ids)
        if checked:
            selected.add(task_id)
        else:
            selected.discard(task_id)
        self._update(selected_ids=frozenset(selected))

    def view(self, task_id: Optional[int]) -> None:
        self._update(selected_id=task_id)

    async def toggle(self, task_id: int) -> None:
        task = find_task(self.state, task_id)
        if task is None:
            return
        await self.api.update_task(task_id, completed=not task.completed)
        await self.refresh()
        self.view(task_id)

    async def delete(self, task_id: int) -> bool:
        if not self.confirm("Delete this task?"):
            return False
        await self.api.delete_task(task_id)
        self.state = replace(
            self.state,
            selected_ids=self.state.selected_ids - {task_id},
            selected_id=None if self.state.selected_id == task_id else self.state.selected_id,
        )
        await self.refresh()
        return True

    # -- inline edit -----------------------------------------------------------

    def start_edit(self, task_id: int) -> None:
        self._update(editing_id=task_id)

    async def commit_edit(self, value: str) -> bool:
        """Blur or Enter: persist a changed, non-blank title."""
        task = find_task(self.state, self.state.editing_id)
        if task is None:
            self.cancel_edit()
            return False

        title = value.strip()
        if not title or title == task.title:
            self.cancel_edit()
            return False

        self.state = replace(self.state, editing_id=None)
        await self.api.update_task(task.id, title=title)
        await self.refresh()
        self.view(task.id)
        return True

    def cancel_edit(self) -> None:
        self._update(editing_id=None)

    # -- detail viewer ---------------------------------------------------------

    async def save_viewer(self, title: str) -> bool:
        task = find_task(self.state, self.state.selected_id)
        if task is None:
            return False
        title = title.strip()
        if not title:
            self.alert(EMPTY_TITLE_ALERT)
            return False
        if title != task.title:
            await self.api.update_task(task.id, title=title)
        await self.refresh()
        self.view(task.id)
        return True

    async def toggle_viewer(self) -> None:
        if self.state.selected_id is not None:
            await self.toggle(self.state.selected_id)

    async def delete_viewer(self) -> bool:
        if self.state.selected_id is None:
            return False
        return await self.delete(self.state.selected_id)

    # -- bulk actions ----------------------------------------------------------

    async def _finish_bulk(self, action: str, ids: Iterable[int], outcomes: Iterable) -> None:
        failed = {
            task_id: outcome
            for task_id, outcome in zip(ids, outcomes)
            if isinstance(outcome, Exception)
        }
        await self.refresh()
        if failed:
            logger.warning("%s: %d request(s) failed", action, len(failed))
            raise BulkActionError(action, failed)

    async def _bulk_set_completed(self, action: str, completed: bool) -> None:
        ids = sorted(self.state.selected_ids)
        if not ids:
            return
        outcomes = await asyncio.gather(
            *(self.api.update_task(task_id, completed=completed) for task_id in ids),
            return_exceptions=True,
        )
        self.state = replace(self.state, selected_ids=frozenset())
        await self._finish_bulk(action, ids, outcomes)

    async def bulk_complete(self) -> None:
        await self._bulk_set_completed("bulk complete", True)

    async def bulk_undo(self) -> None:
        await self._bulk_set_completed("bulk undo", False)

    async def bulk_delete(self) -> bool:
        """Delete the selection one request at a time, continuing past failures."""
        ids = sorted(self.state.selected_ids)
        if not ids:
            return False
        if not self.confirm(f"Delete {len(ids)} selected task(s)?"):
            return False

        outcomes = []
        for task_id in ids:
            try:
                await self.api.delete_task(task_id)
                outcomes.append(None)
            except TaskApiError as e:
                outcomes.append(e)

        selected_id = self.state.selected_id
        self.state = replace(
            self.state,
            selected_ids=frozenset(),
            selected_id=None if selected_id in ids else selected_id,
        )
        await self._finish_bulk("bulk delete", ids, outcomes)
        return True

    # -- event delegation ------------------------------------------------------

    async def dispatch(
        self, act: str, task_id: Optional[int] = None, value=None
    ) -> None:
        """Run the operation named by a ``data-act`` attribute."""
        handlers: dict[str, Callable[[], Union[None, Awaitable]]] = {
            "add": lambda: self.add_task(value),
            "select": lambda: self.select(task_id, bool(value)),
            "edit": lambda: self.start_edit(task_id),
            "commit-edit": lambda: self.commit_edit(value or ""),
            "cancel-edit": self.cancel_edit,
            "toggle": lambda: self.toggle(task_id),
            "view": lambda: self.view(task_id),
            "delete": lambda: self.delete(task_id),
            "viewer-toggle": self.toggle_viewer,
            "viewer-save": lambda: self.save_viewer(value or ""),
            "viewer-delete": self.delete_viewer,
            "bulk-complete": self.bulk_complete,
            "bulk-undo": self.bulk_undo,
            "bulk-delete": self.bulk_delete,
            "filter": lambda: self.set_filter(value),
            "search": lambda: self.set_search(value or ""),
            "sort": lambda: self.set_sort(value),
        }
        handler = handlers.get(act)
        if handler is None:
            raise ValueError(f"Unknown action: {act}")

        try:
            result = handler()
            if asyncio.iscoroutine(result):
                await result
        except TaskApiError:
            logger.exception("Action %s failed", act)
            raise

    async def handle_event(self, target: Tag, value=None) -> None:
        """Delegated handler: resolve the event target, then dispatch."""
        act, task_id = self.page.resolve(target)
        if act is None:
            return
        if value is None and target.has_attr("data-filter"):
            value = target["data-filter"]
        await self.dispatch(act, task_id, value)
