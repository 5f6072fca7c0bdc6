"""Optimistic task edits for a single date card.

Every mutation is applied to the card first and written to the sheet second.
Each entry tracks where its latest mutation stands: ``pending`` while the
write is outstanding, ``confirmed`` once the backend accepted it, ``reverted``
when the write failed and the local change was undone.
"""
import asyncio
import itertools
import logging
import time
from enum import Enum

from todo_dashboard.constants import TOTAL_ROWS
from todo_dashboard.data.models import EmptySlot, Task, TaskSlot
from todo_dashboard.state.text_block import CREATE, KEEP, UPDATE, plan_text_block, to_text_block

logger = logging.getLogger(__name__)

_provisional_counter = itertools.count()


class MutationStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    REVERTED = "reverted"


class CardEntry:
    def __init__(self, task, status=MutationStatus.CONFIRMED):
        self.task = task
        self.status = status

    def __repr__(self):
        return f"CardEntry({self.task!r}, {self.status.value})"


def provisional_id():
    return f"temp-{int(time.time() * 1000)}-{next(_provisional_counter)}"


def _log_notification(level, message):
    logger.log(logging.ERROR if level == "error" else logging.INFO, message)


class TaskCard:
    def __init__(self, day, gateway, tasks=(), notify=None):
        self.day = day
        self._gateway = gateway
        self._notify = notify or _log_notification
        self.entries = [CardEntry(task) for task in tasks]

    @property
    def tasks(self):
        return [entry.task for entry in self.entries]

    def find_entry(self, task_id):
        return next((entry for entry in self.entries if entry.task.id == task_id), None)

    def status_of(self, task_id):
        entry = self.find_entry(task_id)
        return entry.status if entry else None

    def replace_tasks(self, tasks):
        self.entries = [CardEntry(task) for task in tasks]

    def slots(self, total_rows=TOTAL_ROWS):
        shown = self.tasks[:total_rows]
        slots = [TaskSlot(task=task, index=index) for index, task in enumerate(shown)]
        slots.extend(EmptySlot(index=index) for index in range(len(shown), total_rows))
        return slots

    def text_block(self):
        return to_text_block(self.tasks)

    def _detach(self, entry):
        self.entries = [item for item in self.entries if item is not entry]

    async def add_task(self, text, insert_index=None):
        clean_text = (text or "").strip()
        if not clean_text:
            return None
        entry = CardEntry(
            Task(id=provisional_id(), text=clean_text, completed=False, date=self.day),
            MutationStatus.PENDING,
        )
        position = len(self.entries) if insert_index is None else max(0, min(insert_index, len(self.entries)))
        self.entries.insert(position, entry)

        try:
            created = await self._gateway.create_task(clean_text, self.day, completed=False)
        except Exception as exc:
            logger.error("Failed to save task to spreadsheet: %s", exc)
            self._detach(entry)
            entry.status = MutationStatus.REVERTED
            self._notify("error", "Failed to save task. Please try again.")
            return None

        entry.task = created
        entry.status = MutationStatus.CONFIRMED
        self._notify("success", "Task created successfully")
        return created

    async def toggle_task(self, task_id):
        entry = self.find_entry(task_id)
        if entry is None:
            return None
        previous = entry.task.completed
        entry.task = entry.task.with_changes(completed=not previous)
        entry.status = MutationStatus.PENDING

        try:
            await self._gateway.update_task(task_id, {"completed": not previous}, day=self.day)
        except Exception as exc:
            logger.error("Error toggling task %s: %s", task_id, exc)
            entry.task = entry.task.with_changes(completed=previous)
            entry.status = MutationStatus.REVERTED
            self._notify("error", "Failed to update task. Please try again.")
            return False

        entry.status = MutationStatus.CONFIRMED
        self._notify("success", "Task marked as incomplete" if previous else "Task marked as complete")
        return True

    async def edit_task(self, task_id, text):
        entry = self.find_entry(task_id)
        if entry is None:
            return None
        clean_text = (text or "").strip()
        if not clean_text:
            self._notify("error", "Task text cannot be empty")
            return False
        previous = entry.task.text
        if clean_text == previous:
            return True
        entry.task = entry.task.with_changes(text=clean_text)
        entry.status = MutationStatus.PENDING

        try:
            await self._gateway.update_task(task_id, {"text": clean_text}, day=self.day)
        except Exception as exc:
            logger.error("Error updating task %s: %s", task_id, exc)
            entry.task = entry.task.with_changes(text=previous)
            entry.status = MutationStatus.REVERTED
            self._notify("error", "Failed to update task. Please try again.")
            return False

        entry.status = MutationStatus.CONFIRMED
        self._notify("success", "Task updated successfully")
        return True

    async def remove_task(self, task_id):
        """Hide a task from the card by marking it completed; rows are never deleted here."""
        entry = self.find_entry(task_id)
        if entry is None:
            return None
        index = self.entries.index(entry)
        self._detach(entry)
        entry.status = MutationStatus.PENDING

        try:
            await self._gateway.update_task(task_id, {"completed": True}, day=self.day)
        except Exception as exc:
            logger.error("Error marking task %s as complete: %s", task_id, exc)
            self.entries.insert(min(index, len(self.entries)), entry)
            entry.status = MutationStatus.REVERTED
            self._notify("error", "Failed to mark task as complete. Please try again.")
            return False

        entry.task = entry.task.with_changes(completed=True)
        entry.status = MutationStatus.CONFIRMED
        self._notify("success", "Task marked as complete")
        return True

    async def _apply_line(self, operation, claimed):
        line = operation.line
        if operation.kind == KEEP:
            entry = self.find_entry(operation.existing.id)
            # Repeated lines matching the same task each get their own row.
            if entry is None or id(entry) in claimed:
                entry = CardEntry(operation.existing)
            claimed.add(id(entry))
            return entry

        if operation.kind == UPDATE:
            existing = operation.existing
            try:
                await self._gateway.update_task(existing.id, {"completed": line.completed}, day=self.day)
            except Exception as exc:
                logger.error("Failed to update task %s: %s", existing.id, exc)
                self._notify("error", "Failed to update task completion")
                return CardEntry(existing, MutationStatus.REVERTED)
            return CardEntry(existing.with_changes(completed=line.completed))

        try:
            created = await self._gateway.create_task(line.text, self.day, completed=line.completed)
        except Exception as exc:
            logger.error("Failed to save task %r: %s", line.text, exc)
            self._notify("error", "Failed to save task. Please try again.")
            unsaved = Task(id=provisional_id(), text=line.text, completed=line.completed, date=self.day)
            return CardEntry(unsaved, MutationStatus.REVERTED)
        return CardEntry(created)

    async def commit_text_block(self, text):
        """Reconcile the card with an edited text block and return the applied operations."""
        operations = plan_text_block(self.tasks, text)
        claimed = set()
        entries = await asyncio.gather(*(self._apply_line(operation, claimed) for operation in operations))
        self.entries = list(entries)
        created = sum(1 for operation in operations if operation.kind == CREATE)
        updated = sum(1 for operation in operations if operation.kind == UPDATE)
        logger.info("Text block for %s: %s created, %s updated", self.day, created, updated)
        return operations
