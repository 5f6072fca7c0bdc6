import streamlit as st

THEME_PRESETS = {
    "paper": {
        "bg_top": "#f5f3f0",
        "bg_bottom": "#d4d8d6",
        "bg_card": "#ffffff",
        "border": "#d1d5db",
        "focus_border": "#4728F5",
        "text_main": "#374151",
        "text_soft": "#9ca3af",
        "divider": "#d1d5db",
        "skeleton": "#ececec",
        "done_start": "#9333EA",
        "done_end": "#3B82F6",
    },
    "ink": {
        "bg_top": "#15131a",
        "bg_bottom": "#24222b",
        "bg_card": "#1e1b25",
        "border": "#3f3a4c",
        "focus_border": "#8b7bff",
        "text_main": "#ece9f3",
        "text_soft": "#8f8a9c",
        "divider": "#3f3a4c",
        "skeleton": "#2c2935",
        "done_start": "#b37bff",
        "done_end": "#6ba1ff",
    },
}


def ensure_theme_state():
    if "ui_theme" not in st.session_state:
        st.session_state["ui_theme"] = "paper"
    if st.session_state["ui_theme"] not in THEME_PRESETS:
        st.session_state["ui_theme"] = "paper"
    return st.session_state["ui_theme"]


def get_active_theme():
    name = ensure_theme_state()
    return name, THEME_PRESETS[name]


def inject_theme_css() -> dict:
    _, active_theme = get_active_theme()

    theme_vars_css = f"""
:root {{
    --bg-top: {active_theme['bg_top']};
    --bg-bottom: {active_theme['bg_bottom']};
    --bg-card: {active_theme['bg_card']};
    --border: {active_theme['border']};
    --focus-border: {active_theme['focus_border']};
    --text-main: {active_theme['text_main']};
    --text-soft: {active_theme['text_soft']};
    --divider: {active_theme['divider']};
    --skeleton: {active_theme['skeleton']};
    --done-start: {active_theme['done_start']};
    --done-end: {active_theme['done_end']};
}}
"""

    st.markdown(
        """
<style>
@import url('https://fonts.googleapis.com/css2?family=IBM+Plex+Sans:wght@300;400;500&family=IBM+Plex+Mono:wght@400;500&display=swap');
"""
        + theme_vars_css
        + """
.stApp {
    background: linear-gradient(180deg, var(--bg-top), var(--bg-bottom));
    font-family: 'IBM Plex Mono', monospace;
    color: var(--text-main);
}
.card-header {
    display: flex;
    justify-content: space-between;
    align-items: center;
    font-size: 12px;
    color: var(--text-main);
    margin-bottom: 10px;
}
.card-dot {
    width: 14px;
    height: 14px;
    border-radius: 50%;
    background: #F2F1ED;
    border: 2px solid var(--border);
}
.card-today {
    color: var(--focus-border);
    font-weight: 500;
}
.task-done {
    text-decoration: line-through;
    color: var(--text-soft);
}
.task-unsaved {
    font-style: italic;
    color: var(--text-soft);
}
.skeleton-line {
    height: 14px;
    margin: 14px 0;
    border-radius: 6px;
    background: var(--skeleton);
    animation: skeleton-pulse 1.4s ease-in-out infinite;
}
@keyframes skeleton-pulse {
    0% { opacity: 0.55; }
    50% { opacity: 1; }
    100% { opacity: 0.55; }
}
.app-header {
    display: flex;
    justify-content: space-between;
    align-items: center;
    padding: 8px 4px 18px 4px;
}
.app-title { font-family: 'IBM Plex Sans', sans-serif; font-size: 16px; }
.app-tagline { font-family: 'IBM Plex Sans', sans-serif; font-size: 13px; color: var(--text-soft); }
.app-avatar {
    width: 32px;
    height: 32px;
    border-radius: 50%;
    background: #e5e7eb;
    color: #4b5563;
    display: inline-flex;
    align-items: center;
    justify-content: center;
    font-size: 13px;
}
</style>
""",
        unsafe_allow_html=True,
    )
    return active_theme


def render_theme_toggle():
    active_name = ensure_theme_state()
    icon = "☾" if active_name == "paper" else "☀"
    if st.button(icon, key="toggle_theme_mode", help="Switch card theme"):
        st.session_state["ui_theme"] = "ink" if active_name == "paper" else "paper"
        st.rerun()
