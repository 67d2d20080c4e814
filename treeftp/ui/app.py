from datetime import datetime
import threading
import time
import logging

import streamlit as st

from treeftp.config import ClientSettings
from treeftp.core.commands import ClientCommandHandler
from treeftp.core.connection import ControlConnectionManager
from treeftp.export import tree_to_json
from treeftp.traversal import ROOT_PATH, TreeWalker

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


st.set_page_config(page_title="treeftp", layout="wide")

# --- Helpers -----------------------------------------------------------------

def run_in_thread(fn, *args, **kwargs):
    """Runs a blocking network call in a thread and captures its result or exception."""
    result = {"value": None, "error": None}
    def target():
        try:
            result["value"] = fn(*args, **kwargs)
        except Exception as e:
            result["error"] = e
    t = threading.Thread(target=target, daemon=True)
    t.start()
    return t, result


def explore(host: str, port: int, username: str, password: str, max_depth, mode: str, settings: ClientSettings):
    """One full session: connect, login, walk, build the JSON tree, disconnect."""
    conn = ControlConnectionManager(host, port, timeout=settings.timeout, retry=settings.retry)
    handler = ClientCommandHandler(conn)
    conn.connect()
    try:
        handler.login(username, password)
        walker = TreeWalker(handler, max_depth=max_depth)
        lines = walker.render(mode, ROOT_PATH)
        tree = walker.build_tree(ROOT_PATH)
    finally:
        conn.disconnect()
    return {"lines": lines, "json": tree_to_json(tree), "history": handler.get_history()}


# --- UI ----------------------------------------------------------------------
st.title("treeftp: FTP tree explorer")

settings = ClientSettings.from_env()

with st.sidebar:
    st.header("Connection")
    host = st.text_input("Host", value="127.0.0.1")
    port = st.number_input("Port", min_value=1, max_value=65535, value=settings.port)
    username = st.text_input("Username", value="anonymous")
    password = st.text_input("Password", value="anonymous@example.com", type="password")
    st.header("Traversal")
    unbounded = st.checkbox("Unbounded depth", value=False)
    depth = st.number_input("Max depth", min_value=0, max_value=64, value=2, disabled=unbounded)
    mode = st.radio("Order", options=["dfs", "bfs"], horizontal=True)
    explore_clicked = st.button("Explore")

if explore_clicked:
    max_depth = None if unbounded else int(depth)
    logger.info("[UI] Explore clicked: %s:%s depth=%s mode=%s", host, port, max_depth, mode)
    t, result = run_in_thread(explore, host, int(port), username, password, max_depth, mode, settings)
    with st.spinner("Walking the remote tree..."):
        while t.is_alive():
            time.sleep(0.1)
    if result["error"]:
        logger.error("[UI] Exploration failed: %s", result["error"])
        st.error(f"Error: {result['error']}")
        st.session_state["last_run"] = None
    else:
        st.session_state["last_run"] = result["value"]

last_run = st.session_state.get("last_run")

col1, col2 = st.columns([3, 1])

with col1:
    st.subheader("Tree")
    if not last_run:
        st.info("Connect and press Explore to list the server.")
    else:
        st.code("\n".join([ROOT_PATH] + last_run["lines"]), language=None)
        st.download_button("Download JSON", data=last_run["json"],
                           file_name=settings.output_file, mime="application/json")

with col2:
    st.subheader("History")
    hist = last_run["history"] if last_run else []
    if not hist:
        st.info("No history yet")
    for entry in reversed(hist[-100:]):
        t = entry.get("time")
        time_str = t.isoformat() if isinstance(t, datetime) else str(t)
        with st.expander(f"{time_str} | {entry.get('command')}"):
            parsed = entry.get("parsed")
            if parsed:
                st.write(f"Code: {parsed.code}")
                st.write(f"Type: {parsed.type}")
            if entry.get("raw"):
                st.code(entry.get("raw"))
            if entry.get("data") is not None:
                st.text_area("Data", value=str(entry.get("data")), height=150)
            if entry.get("error"):
                st.error("This entry had an error")

st.markdown("---")
st.caption("treeftp viewer, one FTP session per exploration.")
