"""Render a ``ViewModel`` into the board page.

The page is held as a BeautifulSoup tree. Each render replaces the
contents of ``#list``, ``#viewer`` and ``#stats`` wholesale. Actionable
elements carry ``data-act``; list rows and the viewer carry
``data-task-id`` so a single delegated handler can resolve any event.
"""

from datetime import datetime
from typing import Optional

from bs4 import BeautifulSoup, Tag

from task_board.config import load_page_template
from task_board.state import Row, ViewModel

EMPTY_LIST = "No tasks match your filters."
NO_SELECTION = "Select a task to view or edit."
TASK_NOT_FOUND = "Task not found."
LOAD_FAILED = "Failed to load tasks. Check API_BASE and CORS."


def format_timestamp(value: datetime) -> str:
    return value.astimezone().strftime("%Y-%m-%d %H:%M:%S")


class TaskPage:
    """The board document and the regions the board writes into."""

    def __init__(self, html: Optional[str] = None) -> None:
        self.soup = BeautifulSoup(html or load_page_template(), "lxml")

    def __str__(self) -> str:
        return str(self.soup)

    def region(self, element_id: str) -> Tag:
        tag = self.soup.find(id=element_id)
        if tag is None:
            raise LookupError(f"Page has no #{element_id} element")
        return tag

    def input_value(self, element_id: str) -> str:
        return self.region(element_id).get("value", "")

    def set_input_value(self, element_id: str, value: str) -> None:
        self.region(element_id)["value"] = value

    # -- building blocks -----------------------------------------------------

    def _tag(self, name: str, text: Optional[str] = None, **attrs) -> Tag:
        tag = self.soup.new_tag(name, attrs={k.replace("_", "-"): v for k, v in attrs.items()})
        if text is not None:
            tag.string = text
        return tag

    def _muted(self, text: str) -> Tag:
        return self._tag("div", text, **{"class": "muted"})

    def _button(self, label: str, act: str, css: str = "btn", **attrs) -> Tag:
        return self._tag("button", label, **{"class": css, "data_act": act}, **attrs)

    # -- regions -------------------------------------------------------------

    def render(self, view: ViewModel) -> None:
        self.render_controls(view)
        self.render_stats(view)
        self.render_list(view)
        self.render_viewer(view)

    def render_controls(self, view: ViewModel) -> None:
        for chip in self.soup.select(".chip"):
            classes = [c for c in chip.get("class", []) if c != "active"]
            if chip.get("data-filter") == view.filter.value:
                classes.append("active")
            chip["class"] = classes

        self.region("search")["value"] = view.search

        for option in self.region("sort").find_all("option"):
            if option.get("value") == view.sort.value:
                option["selected"] = ""
            elif option.has_attr("selected"):
                del option["selected"]

    def render_stats(self, view: ViewModel) -> None:
        self.region("stats").string = view.stats.text

    def render_list(self, view: ViewModel) -> None:
        list_el = self.region("list")
        list_el.clear()

        if view.load_error is not None:
            message = self._muted(LOAD_FAILED)
            message.append(self._tag("br"))
            message.append(view.load_error)
            list_el.append(message)
            return

        if not view.rows:
            list_el.append(self._muted(EMPTY_LIST))
            return

        for row in view.rows:
            list_el.append(self._row(row))

    def _row(self, row: Row) -> Tag:
        task = row.task
        item = self._tag("div", **{"class": "item", "data_task_id": str(task.id)})

        checkbox = self._tag("input", type="checkbox", data_act="select", **{"class": "sel"})
        if row.checked:
            checkbox["checked"] = ""
        item.append(checkbox)

        if row.editing:
            item.append(self._tag(
                "input",
                type="text",
                value=task.title,
                data_act="commit-edit",
                **{"class": "title-edit"},
            ))
        else:
            css = "title done" if task.completed else "title"
            item.append(self._tag(
                "div",
                task.title,
                title="Double-click to edit",
                data_act="edit",
                **{"class": css},
            ))

        item.append(self._tag("span", format_timestamp(task.created_at), **{"class": "badge"}))

        actions = self._tag("div", **{"class": "actions"})
        actions.append(self._button("Undo" if task.completed else "Done", "toggle"))
        actions.append(self._button("View", "view", "btn ghost"))
        actions.append(self._button("Delete", "delete", "btn ghost danger"))
        item.append(actions)
        return item

    def render_viewer(self, view: ViewModel) -> None:
        viewer_el = self.region("viewer")
        viewer_el.clear()

        if view.viewer.missing:
            viewer_el.append(self._muted(TASK_NOT_FOUND))
            return
        task = view.viewer.task
        if task is None:
            viewer_el.append(self._muted(NO_SELECTION))
            return

        title_row = self._tag("div", **{"class": "row"})
        title_row.append(self._tag("label", "Title", **{"class": "muted"}))
        title_row.append(self._tag("input", id="viewerTitle", type="text", value=task.title))
        viewer_el.append(title_row)

        viewer_el.append(self._tag(
            "div", f"Created: {format_timestamp(task.created_at)}", **{"class": "row muted"}
        ))

        actions = self._tag("div", **{"class": "row", "data_task_id": str(task.id)})
        toggle_label = "Mark as Active" if task.completed else "Mark as Done"
        actions.append(self._button(toggle_label, "viewer-toggle", id="viewerToggle"))
        actions.append(self._button("Save", "viewer-save", "btn brand", id="viewerSave"))
        actions.append(self._button("Delete", "viewer-delete", "btn ghost danger", id="viewerDelete"))
        viewer_el.append(actions)

    # -- event delegation ----------------------------------------------------

    def find(self, act: str, task_id: Optional[int] = None) -> Optional[Tag]:
        """Locate the element a user would interact with for ``act``."""
        for element in self.soup.find_all(attrs={"data-act": act}):
            if task_id is None or self.resolve(element)[1] == task_id:
                return element
        return None

    @staticmethod
    def resolve(element: Tag) -> tuple[Optional[str], Optional[int]]:
        """Walk up from an event target to its action and owning task id."""
        act = None
        task_id = None
        node = element
        while isinstance(node, Tag):
            if act is None and node.has_attr("data-act"):
                act = node["data-act"]
            if node.has_attr("data-task-id"):
                task_id = int(node["data-task-id"])
                break
            node = node.parent
        return act, task_id
