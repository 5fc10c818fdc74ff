import streamlit as st
from typing import List, Optional, Tuple
from memdash.config import settings
from memdash.live.collection import LiveCollectionView
from memdash.logging import bind_session_id, new_session_id
from memdash.models.record import MemoryRecord
from memdash.storage.subscription import PollingSource

# How long a page waits for the first snapshot before rendering "loading"
FIRST_SNAPSHOT_TIMEOUT = 3.0


def init_session():
    """Initialize session state variables and bind this browser session's log id."""
    if "user_id" not in st.session_state:
        st.session_state["user_id"] = settings.DEFAULT_USER_ID
    if "session_id" not in st.session_state:
        st.session_state["session_id"] = new_session_id()
    # Each script run executes on a fresh thread, so bind on every run
    bind_session_id(st.session_state["session_id"])


def get_user_id() -> Optional[str]:
    """Get the identity whose memories are shown."""
    return st.session_state.get("user_id")


def set_user_id(user_id: Optional[str]):
    """Switch identity; the live view drops the old subscription before opening a new one."""
    st.session_state["user_id"] = user_id or None
    view = st.session_state.get("live_view")
    if view is not None:
        view.set_identity(user_id or None)


def get_live_view() -> LiveCollectionView:
    """The session's live collection, created on first use."""
    view = st.session_state.get("live_view")
    if view is None:
        view = LiveCollectionView(PollingSource(), get_user_id())
        st.session_state["live_view"] = view
    else:
        view.set_identity(get_user_id())
    return view


def use_memories() -> Tuple[List[MemoryRecord], bool]:
    """Current records and loading flag for the active identity."""
    view = get_live_view()
    view.wait_until_loaded(FIRST_SNAPSHOT_TIMEOUT)
    if view.error is not None:
        st.error(f"Live updates stopped: {view.error}")
    return view.records, view.loading
