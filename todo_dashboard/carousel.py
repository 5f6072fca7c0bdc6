from dataclasses import dataclass
from datetime import date, timedelta

from todo_dashboard.constants import DAY_NAMES, DAYS_BEFORE, TOTAL_DAYS


@dataclass(frozen=True)
class CardDay:
    day: date
    formatted_date: str
    day_name: str
    is_today: bool


def format_card_date(value):
    """Sheet date key, e.g. ``12/5/2024`` (no zero padding)."""
    return f"{value.month}/{value.day}/{value.year}"


def day_name(value):
    return DAY_NAMES[value.weekday()]


def build_card_days(today=None, total_days=TOTAL_DAYS, days_before=DAYS_BEFORE):
    today = today or date.today()
    cards = []
    for offset in range(-days_before, total_days - days_before):
        current = today + timedelta(days=offset)
        cards.append(
            CardDay(
                day=current,
                formatted_date=format_card_date(current),
                day_name=day_name(current),
                is_today=offset == 0,
            )
        )
    return cards


def clamp_focus(index, total=TOTAL_DAYS):
    return max(0, min(int(index), total - 1))


def visible_window(focused_index, total=TOTAL_DAYS, width=3):
    """Indexes of the cards rendered around the focused one."""
    half = width // 2
    start = max(0, min(focused_index - half, total - width))
    return list(range(start, min(total, start + width)))
