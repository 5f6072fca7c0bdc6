"""Tests for TaskGateway: rate limiting plus cache upkeep around the HTTP client."""
import asyncio
from unittest.mock import MagicMock

import pytest

from todo_dashboard.data.api_client import ApiError
from todo_dashboard.data.models import Task
from todo_dashboard.data.task_gateway import TaskGateway

DAY = "12/5/2024"


class CountingLimiter:
    def __init__(self):
        self.calls = 0

    async def wait_for_rate_limit(self):
        self.calls += 1


@pytest.fixture
def api():
    mock = MagicMock()
    mock.get_tasks_for_date.return_value = [Task(id="task-a", text="Buy milk", date=DAY)]
    return mock


@pytest.fixture
def gateway(api):
    return TaskGateway(api=api, rate_limiter=CountingLimiter())


def test_fetch_goes_through_limiter_and_cache(gateway, api):
    async def twice():
        await gateway.fetch_tasks_for_date(DAY)
        return await gateway.fetch_tasks_for_date(DAY)

    tasks = asyncio.run(twice())

    assert [task.id for task in tasks] == ["task-a"]
    api.get_tasks_for_date.assert_called_once_with(DAY)
    assert gateway.rate_limiter.calls == 1


def test_create_appends_to_cached_date(gateway, api):
    api.create_task.return_value = Task(id="task-b", text="Call mom", date=DAY)

    async def flow():
        await gateway.fetch_tasks_for_date(DAY)
        return await gateway.create_task("Call mom", DAY)

    created = asyncio.run(flow())

    assert created.id == "task-b"
    api.create_task.assert_called_once_with("Call mom", DAY, False, None)
    assert [task.id for task in gateway.cache.get_cached(DAY)] == ["task-a", "task-b"]
    assert gateway.rate_limiter.calls == 2


def test_create_for_uncached_date_leaves_cache_alone(gateway, api):
    api.create_task.return_value = Task(id="task-b", text="Call mom", date="12/6/2024")

    asyncio.run(gateway.create_task("Call mom", "12/6/2024"))

    assert gateway.cache.get_cached("12/6/2024") is None


def test_update_replaces_cached_task(gateway, api):
    api.update_task.return_value = Task(id="task-a", text="Buy milk", completed=True, date=DAY)

    async def flow():
        await gateway.fetch_tasks_for_date(DAY)
        await gateway.update_task("task-a", {"completed": True}, day=DAY)

    asyncio.run(flow())

    api.update_task.assert_called_once_with("task-a", {"completed": True})
    assert gateway.cache.get_cached(DAY)[0].completed is True


def test_update_that_moves_date_drops_from_old_date(gateway, api):
    api.update_task.return_value = Task(id="task-a", text="Buy milk", date="12/6/2024")

    async def flow():
        await gateway.fetch_tasks_for_date(DAY)
        await gateway.update_task("task-a", {"date": "12/6/2024"}, day=DAY)

    asyncio.run(flow())

    assert gateway.cache.get_cached(DAY) == []
    assert gateway.cache.get_cached("12/6/2024") is None


def test_delete_clears_every_cached_date(gateway, api):
    async def flow():
        await gateway.fetch_tasks_for_date(DAY)
        await gateway.delete_task("task-a")

    asyncio.run(flow())

    api.delete_task.assert_called_once_with("task-a")
    assert gateway.cache.cached_dates() == []


def test_failed_write_propagates_and_keeps_cache(gateway, api):
    api.update_task.side_effect = ApiError(500, "Failed to update task")

    async def flow():
        await gateway.fetch_tasks_for_date(DAY)
        await gateway.update_task("task-a", {"completed": True}, day=DAY)

    with pytest.raises(ApiError):
        asyncio.run(flow())

    assert gateway.cache.get_cached(DAY)[0].completed is False


def test_preload_fetches_every_date_once_in_order(gateway, api):
    days = ["12/4/2024", DAY, "12/6/2024"]

    async def flow():
        await gateway.preload(days)
        await gateway.preload(days)

    asyncio.run(flow())

    assert [call.args[0] for call in api.get_tasks_for_date.call_args_list] == days
    assert gateway.rate_limiter.calls == 3
    assert sorted(gateway.cache.cached_dates()) == sorted(days)
