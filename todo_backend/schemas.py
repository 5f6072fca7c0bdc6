from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

TimeSpent = Union[int, float, str]


class TaskCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: Optional[str] = None
    date: Optional[str] = None
    # Only the JSON literal true marks a task done; anything else is stored as false.
    completed: Any = None
    time_spent: Optional[TimeSpent] = Field(None, alias="timeSpent")


class TaskPatch(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: Optional[str] = None
    completed: Any = None
    date: Optional[str] = None
    time_spent: Optional[TimeSpent] = Field(None, alias="timeSpent")

    def changes(self) -> dict:
        """Fields the caller actually sent, keyed by their wire names."""
        return self.model_dump(exclude_unset=True, exclude_none=True, by_alias=True)


class Task(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    date: str = ""
    text: str = ""
    completed: bool = False
    created_at: str = ""
    time_spent: Optional[TimeSpent] = Field(None, alias="timeSpent")


class TaskListResponse(BaseModel):
    success: bool = True
    date: str
    tasks: list[Task]
    count: int


class TaskResponse(BaseModel):
    success: bool = True
    task: Task
