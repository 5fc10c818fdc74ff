import streamlit as st
from memdash.ui.validation import run_all_checks
from memdash.ui.state import init_session, get_user_id, set_user_id

# Page configuration
st.set_page_config(
    page_title="Memory Dashboard",
    page_icon="🧠",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Run pre-flight checks
errors = run_all_checks()

if errors:
    st.error("🚨 System Configuration Errors")
    for err in errors:
        st.write(f"- {err}")
    st.stop()

# Initialize State
init_session()

# Identity
st.sidebar.title("🧠 Memories")
user_input = st.sidebar.text_input("User ID", value=get_user_id() or "", placeholder="e.g. alice")
if (user_input.strip() or None) != get_user_id():
    set_user_id(user_input.strip() or None)

if get_user_id():
    st.sidebar.success(f"Signed in as {get_user_id()}")
else:
    st.sidebar.warning("No user selected")

if st.sidebar.button("🔄 Refresh"):
    st.rerun()

# Multipage definition
pg = st.navigation([
    st.Page("src/memdash/ui/pages/1_overview.py", title="Dashboard", icon="📊"),
    st.Page("src/memdash/ui/pages/2_memories.py", title="Memories", icon="🧠"),
    st.Page("src/memdash/ui/pages/3_graph.py", title="Knowledge Graph", icon="🕸️"),
    st.Page("src/memdash/ui/pages/4_import_export.py", title="Import / Export", icon="🔁"),
    st.Page("src/memdash/ui/pages/5_search.py", title="Search Lab", icon="🔎"),
    st.Page("src/memdash/ui/pages/6_settings.py", title="Settings", icon="⚙️"),
])

pg.run()
