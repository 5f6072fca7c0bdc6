import html
import logging

import streamlit as st

from todo_dashboard.constants import (
    CARD_STYLE_LABELS,
    CARD_STYLE_LINE,
    CARD_STYLE_TEXTAREA,
    CARD_STYLES,
    TOTAL_ROWS,
)
from todo_dashboard.state import session_slices
from todo_dashboard.state.task_card import MutationStatus, TaskCard

logger = logging.getLogger(__name__)

CARDS_SLICE = "cards"
LOADED_SLICE = "cards_loaded"
STYLE_SLICE = "card_style"
NOTICE_SLICE = "notices"

TOAST_ICONS = {"success": "✅", "error": "❌"}


def queue_notice(level, message):
    notices = session_slices.get_or_create(NOTICE_SLICE, "pending", list)
    notices.append((level, message))


def flush_notices():
    for level, message in session_slices.pop_value(NOTICE_SLICE, "pending", []):
        st.toast(message, icon=TOAST_ICONS.get(level))


def get_card(ctx, day):
    card = session_slices.get_or_create(CARDS_SLICE, day, lambda: TaskCard(day, ctx.gateway, notify=queue_notice))
    if not session_slices.get_value(LOADED_SLICE, day):
        cached = ctx.gateway.cache.get_cached(day)
        if cached is not None:
            card.replace_tasks(cached)
            logger.debug("Seeded card %s with %s cached tasks", day, len(cached))
            session_slices.set_value(LOADED_SLICE, day, True)
    return card


def is_card_ready(day):
    return bool(session_slices.get_value(LOADED_SLICE, day))


def _key(card_day, *parts):
    safe_day = card_day.formatted_date.replace("/", "_")
    return ".".join(["card", safe_day, *[str(part) for part in parts]])


def _render_card_header(card_day, focused):
    label_class = "card-today" if card_day.is_today else ""
    focus_marker = " ●" if focused else ""
    st.markdown(
        (
            "<div class='card-header'>"
            f"<span class='{label_class}'>{html.escape(card_day.formatted_date)}{focus_marker}</span>"
            f"<span>{html.escape(card_day.day_name)}</span>"
            "<span class='card-dot'></span>"
            "</div>"
        ),
        unsafe_allow_html=True,
    )


def _render_skeleton():
    st.markdown(
        "".join("<div class='skeleton-line'></div>" for _ in range(TOTAL_ROWS)),
        unsafe_allow_html=True,
    )


def _commit_edit(ctx, card, task_id, widget_key):
    ok = ctx.run(card.edit_task(task_id, st.session_state.get(widget_key, "")))
    if not ok:
        entry = card.find_entry(task_id)
        if entry is not None:
            st.session_state[widget_key] = entry.task.text


def _render_line_style(ctx, card, card_day):
    for slot in card.slots(TOTAL_ROWS):
        if slot.kind == "empty":
            with st.form(key=_key(card_day, "add", slot.index), clear_on_submit=True, border=False):
                add_cols = st.columns([8, 1])
                with add_cols[0]:
                    new_text = st.text_input(
                        "New task",
                        key=_key(card_day, "add", "text", slot.index),
                        placeholder="",
                        label_visibility="collapsed",
                    )
                with add_cols[1]:
                    submitted = st.form_submit_button("+")
            if submitted and new_text.strip():
                ctx.run(card.add_task(new_text, insert_index=slot.index))
                st.rerun()
            continue

        task = slot.task
        status = card.status_of(task.id)
        row = st.columns([1, 7, 1])
        with row[0]:
            if st.button("◆" if task.completed else "◇", key=_key(card_day, "toggle", task.id)):
                ctx.run(card.toggle_task(task.id))
                st.rerun()
        with row[1]:
            text_key = _key(card_day, "text", task.id)
            st.text_input(
                "Task",
                value=task.text,
                key=text_key,
                label_visibility="collapsed",
                on_change=_commit_edit,
                args=(ctx, card, task.id, text_key),
            )
            if status is MutationStatus.REVERTED:
                st.markdown("<span class='task-unsaved'>not saved</span>", unsafe_allow_html=True)
        with row[2]:
            if st.button("✕", key=_key(card_day, "remove", task.id)):
                ctx.run(card.remove_task(task.id))
                st.rerun()


def _render_textarea_style(ctx, card, card_day):
    with st.form(key=_key(card_day, "block"), clear_on_submit=False, border=False):
        block = st.text_area(
            "Tasks",
            value=card.text_block(),
            height=320,
            key=_key(card_day, "block", "text"),
            label_visibility="collapsed",
            help="One task per line. Prefix a line with ✓ to mark it complete.",
        )
        saved = st.form_submit_button("Save")
    if saved:
        ctx.run(card.commit_text_block(block))
        st.rerun()


def render_card(ctx, card_day, focused=False):
    day = card_day.formatted_date
    card = get_card(ctx, day)

    with st.container(border=True):
        _render_card_header(card_day, focused)

        if not is_card_ready(day) or ctx.gateway.cache.is_loading(day):
            _render_skeleton()
            return

        style_key = _key(card_day, "style")
        current_style = session_slices.get_value(STYLE_SLICE, day, CARD_STYLE_LINE)
        style = st.radio(
            "Card style",
            CARD_STYLES,
            index=CARD_STYLES.index(current_style),
            format_func=lambda value: CARD_STYLE_LABELS[value],
            horizontal=True,
            key=style_key,
            label_visibility="collapsed",
        )
        session_slices.set_value(STYLE_SLICE, day, style)

        if style == CARD_STYLE_TEXTAREA:
            _render_textarea_style(ctx, card, card_day)
        else:
            _render_line_style(ctx, card, card_day)
