import streamlit as st
from memdash.config import settings
from memdash.db import DB_URL
from memdash.logging import get_session_id
from memdash.ui.state import get_user_id, use_memories
from memdash.views.export import EXPORT_VERSION
from memdash.views.stats import compute_stats

st.title("Settings")
st.caption("Configuration and system information")

memories, _ = use_memories()
stats = compute_stats(memories)

c1, c2 = st.columns(2)

with c1:
    st.subheader("Store")
    st.write(f"**Database:** `{DB_URL}`")
    st.write(f"**Poll interval:** {settings.POLL_INTERVAL_SECONDS}s")
    st.write(f"**Export format:** v{EXPORT_VERSION}")
    st.write(f"**Session:** `{get_session_id()}`")

with c2:
    st.subheader("Memories")
    st.write(f"**User:** {get_user_id() or '—'}")
    st.write(f"**Total:** {stats.total}")
    st.write(f"**Pinned:** {stats.pinned}")
    st.write(f"**Unique tags:** {len(stats.tags)}")

st.divider()
st.subheader("Search")
st.write(
    "Search is lexical: whole-word containment plus prefix credit, "
    f"capped at 95% and limited to {settings.SEARCH_RESULT_LIMIT} results."
)
