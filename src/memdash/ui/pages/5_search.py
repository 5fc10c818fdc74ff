import streamlit as st
from memdash.config import settings
from memdash.search.relevance import rank_memories
from memdash.ui.state import get_user_id, use_memories

st.title("Search Lab")
st.caption("Test memory search with relevance scoring")

if not get_user_id():
    st.warning("Enter a User ID in the sidebar to view memories.")
    st.stop()

memories, _ = use_memories()

query = st.text_input("Search Query", placeholder="e.g. 'user preferences for dark themes'")

if query.strip():
    results = rank_memories(memories, query, limit=settings.SEARCH_RESULT_LIMIT)
    st.caption(f"{len(results)} results (lexical match, scores capped at 95%)")

    for res in results:
        m = res.record
        with st.container(border=True):
            st.progress(res.score, text=f"{res.score * 100:.0f}% match")
            st.markdown(f"{'📌 ' if m.pinned else ''}{m.fact}")
            if m.tags:
                st.caption(" ".join(f"`{t}`" for t in m.tags))
elif not memories:
    st.info("No memories yet.")
