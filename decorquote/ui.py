# decorquote/ui.py
from __future__ import annotations

import streamlit as st

from .catalog import seed_catalog
from .logging_config import setup_logging
from .store import DocumentStore, open_store


@st.cache_resource(show_spinner=False)
def get_store() -> DocumentStore:
    """
    The process-wide store, shared across reruns and pages.

    First call also configures logging and inserts the demo catalogue.
    """
    setup_logging()
    store = open_store()
    seed_catalog(store)
    return store


def page_header(title: str, icon: str) -> DocumentStore:
    st.set_page_config(page_title=title, page_icon=icon, layout="wide")
    st.title(title)
    return get_store()
