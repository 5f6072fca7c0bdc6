import os

import streamlit as st

from todo_dashboard.cards import flush_notices, render_card
from todo_dashboard.carousel import build_card_days, clamp_focus, visible_window
from todo_dashboard.constants import APP_TITLE, DAYS_BEFORE, TOTAL_DAYS
from todo_dashboard.context import DashboardContext
from todo_dashboard.data import api_client
from todo_dashboard.data.task_cache import IN_PROGRESS
from todo_dashboard.data.task_gateway import TaskGateway
from todo_dashboard.header import render_global_header
from todo_dashboard.logging_config import configure_logging
from todo_dashboard.state import session_slices
from todo_dashboard.theme import inject_theme_css, render_theme_toggle

ENV_FALLBACK_KEYS = {
    ("app", "API_BASE_URL"): "API_BASE_URL",
    ("app", "API_KEY"): "API_KEY",
    ("app", "owner_name"): "OWNER_NAME",
}

FOCUS_KEY = "carousel.focused_index"


def get_secret(path, default=None):
    env_key = ENV_FALLBACK_KEYS.get(tuple(path))
    if env_key:
        env_value = os.getenv(env_key)
        if env_value:
            return env_value
    current = st.secrets
    for key in path:
        try:
            if key not in current:
                return default
            current = current[key]
        except Exception:
            # No secrets.toml at all is a normal local setup.
            return default
    return current


def get_gateway():
    return session_slices.get_or_create("runtime", "gateway", TaskGateway)


def render_focus_selector(card_days):
    if FOCUS_KEY not in st.session_state:
        st.session_state[FOCUS_KEY] = DAYS_BEFORE

    nav = st.columns([1, 6, 1])
    with nav[0]:
        if st.button("←", key="carousel.prev"):
            st.session_state[FOCUS_KEY] = clamp_focus(st.session_state[FOCUS_KEY] - 1, len(card_days))
    with nav[2]:
        if st.button("→", key="carousel.next"):
            st.session_state[FOCUS_KEY] = clamp_focus(st.session_state[FOCUS_KEY] + 1, len(card_days))
    with nav[1]:
        labels = [f"{card.day_name[:3]} {card.formatted_date}" for card in card_days]
        choice = st.select_slider(
            "Day",
            options=list(range(len(card_days))),
            value=clamp_focus(st.session_state[FOCUS_KEY], len(card_days)),
            format_func=lambda idx: labels[idx],
            label_visibility="collapsed",
        )
        st.session_state[FOCUS_KEY] = choice
    return st.session_state[FOCUS_KEY]


st.set_page_config(page_title=APP_TITLE, layout="wide")
logger = configure_logging()
api_client.configure(get_secret)
inject_theme_css()

gateway = get_gateway()
card_days = build_card_days(total_days=TOTAL_DAYS, days_before=DAYS_BEFORE)

header_cols = st.columns([16, 1])
with header_cols[0]:
    render_global_header(
        {
            "owner_name": get_secret(("app", "owner_name"), "Me"),
            "backend_ok": api_client.is_enabled(),
        }
    )
with header_cols[1]:
    render_theme_toggle()

focused_index = render_focus_selector(card_days)
ctx = DashboardContext(gateway=gateway, card_days=card_days, focused_index=focused_index)

focused_day = ctx.focused_day.formatted_date
if api_client.is_enabled():
    if not session_slices.get_value("runtime", "preloaded"):
        ctx.run(gateway.preload([card.formatted_date for card in card_days]))
        session_slices.set_value("runtime", "preloaded", True)
    result = ctx.run(gateway.fetch_tasks_for_date(focused_day))
    if result is IN_PROGRESS:
        logger.info("Fetch for %s already running", focused_day)
else:
    # Without a backend every card is shown empty rather than stuck loading.
    for card in card_days:
        if gateway.cache.get_cached(card.formatted_date) is None:
            gateway.cache.set_tasks(card.formatted_date, [])

window = visible_window(focused_index, total=len(card_days))
columns = st.columns(len(window), gap="medium")
for column, index in zip(columns, window):
    with column:
        render_card(ctx, card_days[index], focused=index == focused_index)

flush_notices()
