import streamlit as st
from memdash.ui.state import get_user_id, use_memories
from memdash.views.graph import build_graph

st.title("Knowledge Graph")
st.caption("Visual map of memory relationships")

if not get_user_id():
    st.warning("Enter a User ID in the sidebar to view memories.")
    st.stop()

memories, loading = use_memories()
if loading:
    st.info("Loading memories...")
    st.stop()

if not memories:
    st.info("No memories to visualize yet.")
    st.stop()

graph = build_graph(memories)

c1, c2, c3 = st.columns(3)
c1.metric("Nodes", len(graph.nodes))
c2.metric("Connections", len(graph.edges))
c3.metric("Pinned", sum(1 for n in graph.nodes if n.pinned))

st.graphviz_chart(graph.to_dot(), use_container_width=True)
st.caption("🟠 Pinned · 🔵 Regular · node size grows with link count")

# --- Node Inspector ---
st.subheader("Inspect Memory")
labels = {n.id: n.label for n in graph.nodes}
selected = st.selectbox("Memory", list(labels), format_func=lambda i: labels[i])

if selected:
    node = next(n for n in graph.nodes if n.id == selected)
    with st.container(border=True):
        st.markdown(f"{'📌 ' if node.pinned else ''}**{node.label}**")
        if node.tags:
            st.caption(" ".join(f"`{t}`" for t in node.tags))
        st.write(f"Links: {node.link_count}")
        neighbours = graph.neighbours(node.id)
        if neighbours:
            st.write("Connected to:")
            for nid in neighbours:
                st.write(f"- {labels[nid]}")
