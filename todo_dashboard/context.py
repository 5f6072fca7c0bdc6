import asyncio
from dataclasses import dataclass
from typing import List

from todo_dashboard.carousel import CardDay
from todo_dashboard.data.task_gateway import TaskGateway


@dataclass
class DashboardContext:
    gateway: TaskGateway
    card_days: List[CardDay]
    focused_index: int

    @property
    def focused_day(self):
        return self.card_days[self.focused_index]

    def run(self, coroutine):
        """Drive one UI action to completion; every rerun gets its own event loop."""
        return asyncio.run(coroutine)
