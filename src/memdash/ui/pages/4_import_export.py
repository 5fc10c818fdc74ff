import streamlit as st
from datetime import datetime, timezone
from sqlmodel import Session
from memdash.db import engine
from memdash.errors import MemdashError
from memdash.storage.store import import_records, ImportMode
from memdash.ui.state import get_user_id, use_memories
from memdash.views.export import dumps_export, export_filename, load_export

st.title("Import & Export")
st.caption("Backup and restore your memory data")

user_id = get_user_id()
if not user_id:
    st.warning("Enter a User ID in the sidebar to view memories.")
    st.stop()

memories, loading = use_memories()

col_export, col_import = st.columns(2)

with col_export:
    st.subheader("⬇️ Export Memories")
    st.write(f"Total memories: **{'...' if loading else len(memories)}**")
    st.write("Format: JSON")

    now = datetime.now(timezone.utc)
    st.download_button(
        "Export All Memories",
        data=dumps_export(memories, now),
        file_name=export_filename(now),
        mime="application/json",
        disabled=loading or not memories,
        use_container_width=True,
    )

with col_import:
    st.subheader("⬆️ Import Memories")
    uploaded = st.file_uploader("Export file", type=["json"])
    mode = st.radio(
        "Mode",
        [ImportMode.MERGE.value, ImportMode.REPLACE.value],
        captions=["Skip existing memories", "Overwrite all memories"],
        horizontal=True,
    )

    if uploaded is not None and st.button("Import", type="primary"):
        try:
            docs = load_export(uploaded.getvalue().decode("utf-8"))
            with Session(engine) as session:
                result = import_records(session, user_id, docs, ImportMode(mode))
            st.success(f"Imported {result.imported} memories ({result.skipped} skipped)")
        except (MemdashError, UnicodeDecodeError) as e:
            st.error(f"Import failed: {e}")
