import streamlit as st
from sqlmodel import Session
from memdash.db import engine
from memdash.errors import MemdashError
from memdash.search.filters import filter_memories, all_tags
from memdash.storage.store import delete_memory, toggle_pin, update_memory
from memdash.ui.state import get_user_id, use_memories

st.title("Memory Explorer")
st.caption("Browse, search, and manage all memories")

user_id = get_user_id()
if not user_id:
    st.warning("Enter a User ID in the sidebar to view memories.")
    st.stop()

memories, loading = use_memories()
if loading:
    st.info("Loading memories...")
    st.stop()

# --- Filters ---
c1, c2, c3 = st.columns([3, 2, 1])
search_query = c1.text_input("Search memories...", placeholder="Filter by fact or tag")
tag_options = ["All tags"] + all_tags(memories)
filter_tag = c2.selectbox("Tag", tag_options)
filter_pinned = c3.toggle("Pinned")

filtered = filter_memories(
    memories,
    query=search_query,
    tag=None if filter_tag == "All tags" else filter_tag,
    pinned_only=filter_pinned,
)

st.caption(f"{len(filtered)} of {len(memories)} memories")
st.divider()


def _run(action, success: str):
    # Changes appear with the next snapshot pushed by the store
    try:
        with Session(engine) as session:
            action(session)
        st.toast(success)
    except MemdashError as e:
        st.error(f"Failed: {e}")
        return
    st.rerun()


if not filtered:
    st.info("No memories found.")

for m in filtered:
    col_pin, col_fact, col_meta, col_actions = st.columns([1, 8, 3, 2])

    pin_label = "📌" if m.pinned else "📍"
    if col_pin.button(pin_label, key=f"pin_{m.id}", help="Unpin" if m.pinned else "Pin"):
        _run(lambda s, m=m: toggle_pin(s, user_id, m.id, m.pinned), "Unpinned" if m.pinned else "Pinned")

    editing = st.session_state.get("editing_id") == m.id
    if editing:
        with col_fact.form(f"edit_{m.id}"):
            new_fact = st.text_input("Fact", value=m.fact)
            new_tags = st.text_input("Tags (comma separated)", value=", ".join(m.tags))
            save, cancel = st.columns(2)
            if save.form_submit_button("✅ Save"):
                st.session_state["editing_id"] = None
                tags = [t.strip() for t in new_tags.split(",") if t.strip()]
                fact = new_fact.strip()
                if fact and (fact != m.fact or tags != m.tags):
                    _run(lambda s, m=m: update_memory(s, user_id, m.id, fact=fact, tags=tags), "Saved")
                st.rerun()
            if cancel.form_submit_button("✖ Cancel"):
                st.session_state["editing_id"] = None
                st.rerun()
    else:
        col_fact.write(m.fact)
        if m.tags:
            col_fact.caption(" ".join(f"`{t}`" for t in m.tags))

    status = []
    if m.expires_at:
        status.append("⏰ Expires")
    if m.related_to:
        status.append(f"🔗 {len(m.related_to)}")
    status.append(str(m.created_at).split("T")[0] if m.created_at else "—")
    col_meta.caption(" · ".join(status))

    a1, a2 = col_actions.columns(2)
    if a1.button("✏️", key=f"edit_{m.id}_btn", help="Edit"):
        st.session_state["editing_id"] = m.id
        st.rerun()
    if a2.button("🗑️", key=f"del_{m.id}", help="Delete"):
        st.session_state["confirm_delete"] = m.id

    if st.session_state.get("confirm_delete") == m.id:
        st.warning(f"Delete this memory? _{m.fact[:80]}_")
        yes, no = st.columns(2)
        if yes.button("Delete", key=f"del_yes_{m.id}", type="primary"):
            st.session_state["confirm_delete"] = None
            _run(lambda s, m=m: delete_memory(s, user_id, m.id), "Deleted")
        if no.button("Keep", key=f"del_no_{m.id}"):
            st.session_state["confirm_delete"] = None
            st.rerun()
