from dataclasses import dataclass, field, replace
from typing import Optional, Union


@dataclass(frozen=True)
class Task:
    id: str
    text: str
    completed: bool = False
    date: str = ""
    created_at: str = ""
    time_spent: Optional[Union[str, int, float]] = None

    @classmethod
    def from_payload(cls, payload):
        payload = payload or {}
        time_spent = payload.get("timeSpent")
        return cls(
            id=str(payload.get("id") or ""),
            text=str(payload.get("text") or ""),
            completed=payload.get("completed") is True,
            date=str(payload.get("date") or ""),
            created_at=str(payload.get("created_at") or ""),
            time_spent=None if time_spent in (None, "") else time_spent,
        )

    def to_payload(self):
        payload = {
            "id": self.id,
            "text": self.text,
            "completed": self.completed,
            "date": self.date,
            "created_at": self.created_at,
        }
        if self.time_spent is not None:
            payload["timeSpent"] = self.time_spent
        return payload

    def with_changes(self, **changes):
        return replace(self, **changes)


@dataclass(frozen=True)
class TaskSlot:
    task: Task
    index: int
    kind: str = field(default="task", init=False)


@dataclass(frozen=True)
class EmptySlot:
    index: int
    kind: str = field(default="empty", init=False)

