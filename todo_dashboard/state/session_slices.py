"""Named dictionaries in ``st.session_state``.

Card objects, per-date flags and queued toasts survive reruns here; they are
lost when the browser session ends.
"""
import streamlit as st


PREFIX = "analog"


def _slice_key(slice_name):
    return f"{PREFIX}.{slice_name}"


def get_slice(slice_name):
    return st.session_state.setdefault(_slice_key(slice_name), {})


def get_value(slice_name, name, default=None):
    return get_slice(slice_name).get(name, default)


def get_or_create(slice_name, name, factory):
    payload = get_slice(slice_name)
    if name not in payload:
        payload[name] = factory()
    return payload[name]


def set_value(slice_name, name, value):
    get_slice(slice_name)[name] = value


def pop_value(slice_name, name, default=None):
    return get_slice(slice_name).pop(name, default)
