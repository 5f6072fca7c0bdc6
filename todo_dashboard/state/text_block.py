"""Edit a whole card as plain text, one task per line.

Lines starting with the check mark are completed tasks. On commit each line is
matched against the card's existing tasks by exact text; two tasks with the
same text cannot be told apart.
"""
from dataclasses import dataclass
from typing import Optional

from todo_dashboard.constants import COMPLETED_MARK

KEEP = "keep"
UPDATE = "update"
CREATE = "create"


@dataclass(frozen=True)
class TextLine:
    text: str
    completed: bool


@dataclass(frozen=True)
class LineOperation:
    kind: str
    line: TextLine
    existing: Optional[object] = None


def to_text_block(tasks):
    return "\n".join(f"{COMPLETED_MARK} {task.text}" if task.completed else task.text for task in tasks)


def parse_text_block(text):
    lines = []
    for raw_line in (text or "").split("\n"):
        line = raw_line.strip()
        if not line:
            continue
        completed = line.startswith(COMPLETED_MARK)
        task_text = line[len(COMPLETED_MARK):].strip() if completed else line
        if not task_text:
            continue
        lines.append(TextLine(text=task_text, completed=completed))
    return lines


def plan_text_block(existing_tasks, text):
    """Diff the submitted text against the card's tasks.

    Returns one operation per line, in line order. Existing tasks no line
    matched get no operation and drop off the card.
    """
    operations = []
    for line in parse_text_block(text):
        match = next((task for task in existing_tasks if task.text == line.text), None)
        if match is None:
            operations.append(LineOperation(CREATE, line))
        elif match.completed != line.completed:
            operations.append(LineOperation(UPDATE, line, match))
        else:
            operations.append(LineOperation(KEEP, line, match))
    return operations
