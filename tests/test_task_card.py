"""Tests for optimistic edits on a single card."""
import asyncio

from todo_dashboard.data.api_client import ApiError
from todo_dashboard.data.models import Task
from todo_dashboard.state.task_card import MutationStatus, TaskCard

DAY = "12/5/2024"


class FakeGateway:
    """Async gateway double; set ``fail`` to make the next writes raise."""

    def __init__(self):
        self.fail = False
        self.created = []
        self.updates = []
        self._counter = 0

    async def create_task(self, text, day, completed=False, time_spent=None):
        if self.fail:
            raise ApiError(500, "Failed to create task")
        self._counter += 1
        task = Task(id=f"task-{self._counter}", text=text, completed=completed, date=day)
        self.created.append(task)
        return task

    async def update_task(self, task_id, updates, day=None):
        if self.fail:
            raise ApiError(500, "Failed to update task")
        self.updates.append((task_id, dict(updates)))
        return Task(id=task_id, text="", date=day or "")


def _card(*tasks, gateway=None):
    notices = []
    card = TaskCard(DAY, gateway or FakeGateway(), tasks=tasks, notify=lambda level, message: notices.append((level, message)))
    return card, notices


def _tasks():
    return [
        Task(id="task-a", text="Buy milk", date=DAY),
        Task(id="task-b", text="Call mom", completed=True, date=DAY),
    ]


class TestAddTask:
    def test_success_replaces_provisional_entry(self):
        card, notices = _card(*_tasks())

        created = asyncio.run(card.add_task("  Walk the dog "))

        assert created.id == "task-1"
        assert [task.text for task in card.tasks] == ["Buy milk", "Call mom", "Walk the dog"]
        assert card.status_of("task-1") is MutationStatus.CONFIRMED
        assert notices == [("success", "Task created successfully")]

    def test_failure_removes_only_the_provisional_entry(self):
        gateway = FakeGateway()
        gateway.fail = True
        card, notices = _card(*_tasks(), gateway=gateway)

        result = asyncio.run(card.add_task("Walk the dog", insert_index=1))

        assert result is None
        assert [task.id for task in card.tasks] == ["task-a", "task-b"]
        assert notices == [("error", "Failed to save task. Please try again.")]

    def test_provisional_entry_is_pending_while_saving(self):
        card, _ = _card()
        seen = []

        class SlowGateway(FakeGateway):
            async def create_task(self, text, day, completed=False, time_spent=None):
                entry = card.entries[0]
                seen.append((entry.task.id, entry.status))
                return await super().create_task(text, day, completed, time_spent)

        card._gateway = SlowGateway()
        asyncio.run(card.add_task("Walk the dog"))

        assert seen[0][0].startswith("temp-")
        assert seen[0][1] is MutationStatus.PENDING

    def test_blank_text_is_ignored(self):
        card, notices = _card()

        assert asyncio.run(card.add_task("   ")) is None
        assert card.tasks == []
        assert notices == []


class TestToggleTask:
    def test_success_flips_completed(self):
        card, notices = _card(*_tasks())

        assert asyncio.run(card.toggle_task("task-a")) is True

        assert card.find_entry("task-a").task.completed is True
        assert card._gateway.updates == [("task-a", {"completed": True})]
        assert notices == [("success", "Task marked as complete")]

    def test_failure_restores_previous_value(self):
        gateway = FakeGateway()
        gateway.fail = True
        card, notices = _card(*_tasks(), gateway=gateway)

        assert asyncio.run(card.toggle_task("task-b")) is False

        assert card.find_entry("task-b").task.completed is True
        assert card.status_of("task-b") is MutationStatus.REVERTED
        assert notices[-1][0] == "error"

    def test_unknown_task_is_a_no_op(self):
        card, notices = _card(*_tasks())

        assert asyncio.run(card.toggle_task("task-z")) is None
        assert notices == []


class TestEditTask:
    def test_empty_text_is_rejected(self):
        card, notices = _card(*_tasks())

        assert asyncio.run(card.edit_task("task-a", "  ")) is False

        assert card.find_entry("task-a").task.text == "Buy milk"
        assert notices == [("error", "Task text cannot be empty")]

    def test_failure_restores_text(self):
        gateway = FakeGateway()
        gateway.fail = True
        card, _ = _card(*_tasks(), gateway=gateway)

        asyncio.run(card.edit_task("task-a", "Buy oat milk"))

        assert card.find_entry("task-a").task.text == "Buy milk"

    def test_success_sends_trimmed_text(self):
        card, _ = _card(*_tasks())

        asyncio.run(card.edit_task("task-a", " Buy oat milk "))

        assert card._gateway.updates == [("task-a", {"text": "Buy oat milk"})]
        assert card.find_entry("task-a").task.text == "Buy oat milk"


class TestRemoveTask:
    def test_remove_marks_completed_and_hides(self):
        card, _ = _card(*_tasks())

        assert asyncio.run(card.remove_task("task-a")) is True

        assert [task.id for task in card.tasks] == ["task-b"]
        assert card._gateway.updates == [("task-a", {"completed": True})]

    def test_failure_reinserts_at_original_index(self):
        gateway = FakeGateway()
        gateway.fail = True
        tasks = _tasks() + [Task(id="task-c", text="Walk", date=DAY)]
        card, _ = _card(*tasks, gateway=gateway)

        asyncio.run(card.remove_task("task-b"))

        assert [task.id for task in card.tasks] == ["task-a", "task-b", "task-c"]
        assert card.status_of("task-b") is MutationStatus.REVERTED


class TestSlots:
    def test_card_always_has_ten_rows(self):
        card, _ = _card(*_tasks())

        slots = card.slots()

        assert len(slots) == 10
        assert [slot.kind for slot in slots[:3]] == ["task", "task", "empty"]
        assert slots[1].task.id == "task-b"
        assert [slot.index for slot in slots] == list(range(10))

    def test_overflowing_tasks_are_cut_off(self):
        tasks = [Task(id=f"task-{i}", text=f"Task {i}", date=DAY) for i in range(12)]
        card, _ = _card(*tasks)

        assert all(slot.kind == "task" for slot in card.slots())
        assert len(card.slots()) == 10


class TestCommitTextBlock:
    def test_reconciles_lines_with_existing_tasks(self):
        card, _ = _card(*_tasks())

        asyncio.run(card.commit_text_block("✓ Buy milk\nWalk dog"))

        gateway = card._gateway
        assert gateway.updates == [("task-a", {"completed": True})]
        assert [(task.text, task.completed) for task in gateway.created] == [("Walk dog", False)]
        assert [(task.text, task.completed) for task in card.tasks] == [("Buy milk", True), ("Walk dog", False)]

    def test_failed_create_stays_visible_as_reverted(self):
        gateway = FakeGateway()
        gateway.fail = True
        card, notices = _card(gateway=gateway)

        asyncio.run(card.commit_text_block("Walk dog"))

        entry = card.entries[0]
        assert entry.task.text == "Walk dog"
        assert entry.status is MutationStatus.REVERTED
        assert ("error", "Failed to save task. Please try again.") in notices

    def test_repeated_lines_get_independent_rows(self):
        card, _ = _card(Task(id="task-a", text="Buy milk", date=DAY))

        asyncio.run(card.commit_text_block("Buy milk\nBuy milk"))

        first, second = card.entries
        assert first is not second
        first.task = first.task.with_changes(completed=True)
        assert second.task.completed is False
