from datetime import date
from unittest.mock import MagicMock

from todo_dashboard.carousel import build_card_days, clamp_focus, format_card_date, visible_window
from todo_dashboard.context import DashboardContext


def test_dates_are_not_zero_padded():
    assert format_card_date(date(2024, 12, 5)) == "12/5/2024"
    assert format_card_date(date(2025, 1, 9)) == "1/9/2025"


def test_ten_cards_centered_on_today():
    cards = build_card_days(today=date(2024, 12, 5))

    assert len(cards) == 10
    assert cards[0].formatted_date == "11/30/2024"
    assert cards[-1].formatted_date == "12/9/2024"
    assert [card.is_today for card in cards].index(True) == 5
    assert cards[5].day_name == "Thursday"


def test_focus_is_clamped():
    assert clamp_focus(-3) == 0
    assert clamp_focus(42) == 9
    assert clamp_focus(4) == 4


def test_visible_window_stays_in_range():
    assert visible_window(5) == [4, 5, 6]
    assert visible_window(0) == [0, 1, 2]
    assert visible_window(9) == [7, 8, 9]


def test_context_exposes_focused_day_and_runs_coroutines():
    cards = build_card_days(today=date(2024, 12, 5))
    ctx = DashboardContext(gateway=MagicMock(), card_days=cards, focused_index=5)

    async def answer():
        return 42

    assert ctx.focused_day.formatted_date == "12/5/2024"
    assert ctx.run(answer()) == 42
