import pandas as pd
import streamlit as st
from memdash.config import settings
from memdash.ui.state import get_user_id, use_memories
from memdash.views.stats import compute_stats, activity_by_day, top_tags

st.title("Dashboard")
st.caption("Overview of your AI memory system")

if not get_user_id():
    st.warning("Enter a User ID in the sidebar to view memories.")
    st.stop()

memories, loading = use_memories()
if loading:
    st.info("Loading memories...")
    st.stop()

stats = compute_stats(memories)

# --- Stat Cards ---
c1, c2, c3, c4 = st.columns(4)
c1.metric("Total Memories", stats.total)
c2.metric("Pinned", stats.pinned)
c3.metric("Expiring Soon", stats.expiring_soon, help="Expires within the next 24 hours")
c4.metric("Unique Tags", len(stats.tags))

if stats.newest_timestamp:
    st.caption(f"Newest: {stats.newest_timestamp} · Oldest: {stats.oldest_timestamp}")

st.divider()

left, right = st.columns([2, 1])

with left:
    st.subheader("Activity")
    days = activity_by_day(memories, settings.ACTIVITY_DAYS)
    if days:
        df = pd.DataFrame(days, columns=["day", "memories"]).set_index("day")
        st.bar_chart(df)
    else:
        st.info("No dated memories yet.")

    st.subheader("Recent Memories")
    if not memories:
        st.info("No memories yet. Start a conversation with your AI!")
    for m in memories[:8]:
        with st.container(border=True):
            pin = "📌 " if m.pinned else ""
            st.markdown(f"{pin}{m.fact}")
            meta = " ".join(f"`{t}`" for t in m.tags[:2])
            if m.created_at:
                meta += f" · {str(m.created_at).split('T')[0]}"
            st.caption(meta)

with right:
    st.subheader("Top Tags")
    tags = top_tags(stats.tags)
    if not tags:
        st.write("No tags yet")
    else:
        st.dataframe(
            pd.DataFrame(tags, columns=["tag", "count"]),
            hide_index=True,
            use_container_width=True,
        )
