import logging

from todo_dashboard.data.api_client import QuotaExceededError

logger = logging.getLogger(__name__)


class _InProgress:
    def __repr__(self):
        return "IN_PROGRESS"


IN_PROGRESS = _InProgress()


class TaskCache:
    """Per-date task lists for the current session.

    ``fetcher`` is an async callable taking a formatted date and returning the
    list of tasks for it.
    """

    def __init__(self, fetcher, rate_limiter):
        self._fetcher = fetcher
        self._rate_limiter = rate_limiter
        self._tasks_by_date = {}
        self._loading = set()

    async def fetch_tasks_for_date(self, day):
        """Return the tasks for ``day``, or ``IN_PROGRESS`` if a fetch is already running."""
        cached = self._tasks_by_date.get(day)
        if cached is not None:
            return cached
        if day in self._loading:
            return IN_PROGRESS

        self._loading.add(day)
        try:
            await self._rate_limiter.wait_for_rate_limit()
            tasks = list(await self._fetcher(day))
            self._tasks_by_date[day] = tasks
            return tasks
        except QuotaExceededError as exc:
            logger.warning("Quota exceeded fetching tasks for %s, will retry later: %s", day, exc)
            return []
        except Exception as exc:
            logger.error("Error fetching tasks for %s: %s", day, exc)
            self._tasks_by_date[day] = []
            return []
        finally:
            self._loading.discard(day)

    def get_cached(self, day):
        return self._tasks_by_date.get(day)

    def is_loading(self, day):
        return day in self._loading

    def cached_dates(self):
        return list(self._tasks_by_date)

    def set_tasks(self, day, tasks):
        self._tasks_by_date[day] = list(tasks)

    def invalidate(self, day):
        self._tasks_by_date.pop(day, None)

    def clear(self):
        self._tasks_by_date.clear()

    def add_task(self, day, task):
        self._tasks_by_date[day] = [*self._tasks_by_date.get(day, []), task]

    def update_task(self, day, task_id, **changes):
        cached = self._tasks_by_date.get(day)
        if cached is None:
            return
        self._tasks_by_date[day] = [
            task.with_changes(**changes) if task.id == task_id else task for task in cached
        ]

    def replace_task(self, day, task):
        cached = self._tasks_by_date.get(day)
        if cached is None:
            return
        self._tasks_by_date[day] = [task if item.id == task.id else item for item in cached]

    def remove_task(self, day, task_id):
        cached = self._tasks_by_date.get(day)
        if cached is None:
            return
        self._tasks_by_date[day] = [task for task in cached if task.id != task_id]
