import asyncio
import logging

from todo_dashboard.data import api_client
from todo_dashboard.data.rate_limiter import RateLimiter
from todo_dashboard.data.task_cache import TaskCache

logger = logging.getLogger(__name__)


class TaskGateway:
    """Rate-limited access to the task API with the per-date cache kept in step.

    The HTTP calls are blocking, so they run in a worker thread; cache and
    limiter state is only touched from the event loop.
    """

    def __init__(self, api=api_client, rate_limiter=None, cache=None):
        self._api = api
        self.rate_limiter = rate_limiter or RateLimiter.from_env()
        self.cache = cache or TaskCache(self._fetch, self.rate_limiter)

    async def _fetch(self, day):
        return await asyncio.to_thread(self._api.get_tasks_for_date, day)

    async def fetch_tasks_for_date(self, day):
        return await self.cache.fetch_tasks_for_date(day)

    async def preload(self, days):
        """Fetch each date in turn so every card has its tasks; the limiter paces the requests."""
        for day in days:
            await self.fetch_tasks_for_date(day)

    async def create_task(self, text, day, completed=False, time_spent=None):
        await self.rate_limiter.wait_for_rate_limit()
        task = await asyncio.to_thread(self._api.create_task, text, day, completed, time_spent)
        target_day = task.date or day
        if self.cache.get_cached(target_day) is not None:
            self.cache.add_task(target_day, task)
        return task

    async def update_task(self, task_id, updates, day=None):
        """PATCH ``updates`` onto the task; ``day`` is the date it was displayed under."""
        await self.rate_limiter.wait_for_rate_limit()
        task = await asyncio.to_thread(self._api.update_task, task_id, dict(updates))
        if day and task.date and task.date != day:
            self.cache.remove_task(day, task_id)
            self.cache.invalidate(task.date)
            return task
        target_day = task.date or day
        cached = self.cache.get_cached(target_day)
        if cached is not None and any(item.id == task_id for item in cached):
            self.cache.replace_task(target_day, task)
        else:
            self.cache.invalidate(target_day)
        return task

    async def delete_task(self, task_id):
        await self.rate_limiter.wait_for_rate_limit()
        await asyncio.to_thread(self._api.delete_task, task_id)
        # The caller may not know the task's date.
        self.cache.clear()
        logger.info("Deleted task %s; task cache cleared", task_id)
