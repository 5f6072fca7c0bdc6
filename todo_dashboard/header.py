import html

import streamlit as st

from todo_dashboard.constants import APP_TAGLINE, APP_TITLE


def render_global_header(ctx):
    owner_name = ctx.get("owner_name") or "Me"
    backend_ok = ctx.get("backend_ok", True)
    initial = html.escape(owner_name[:1].upper())

    st.markdown(
        (
            "<div class='app-header'>"
            "<div>"
            f"<div class='app-title'>{html.escape(APP_TITLE)}</div>"
            f"<div class='app-tagline'>{html.escape(APP_TAGLINE)}</div>"
            "</div>"
            f"<div><span class='app-tagline'>{html.escape(owner_name)}</span> "
            f"<span class='app-avatar'>{initial}</span></div>"
            "</div>"
        ),
        unsafe_allow_html=True,
    )
    if not backend_ok:
        st.warning("API_BASE_URL is not configured; cards will stay empty until the task API is reachable.")
