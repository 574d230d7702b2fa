import httpx
import pytest

from task_board.api import TaskApi
from task_board.board import TaskBoard
from task_board.render import TaskPage

from .fakes import API_BASE, FakeTaskServer


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def server() -> FakeTaskServer:
    return FakeTaskServer()


@pytest.fixture
async def api(server: FakeTaskServer):
    async with TaskApi(API_BASE, transport=httpx.MockTransport(server.handler)) as api:
        yield api


@pytest.fixture
def confirmations() -> list[str]:
    return []


@pytest.fixture
def board(api: TaskApi, confirmations: list[str]) -> TaskBoard:
    def confirm(message: str) -> bool:
        confirmations.append(message)
        return True

    return TaskBoard(api, TaskPage(), confirm=confirm)
