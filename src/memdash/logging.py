"""
Logging setup.

Every record carries the id of the session that produced it: one CLI
invocation, or one Streamlit browser session. Entry points bind the id with
bind_session_id(); threads started on a session's behalf copy its context.
"""
import logging
import sys
import uuid
from contextvars import ContextVar
from typing import Optional
from memdash.config import settings

_session_id: ContextVar[Optional[str]] = ContextVar("session_id", default=None)

# Records logged outside any bound session (imports, tests)
UNBOUND = "-"


def new_session_id() -> str:
    return uuid.uuid4().hex[:12]


def bind_session_id(session_id: Optional[str] = None) -> str:
    """Bind session_id (or a fresh one) to the current context and return it."""
    session_id = session_id or new_session_id()
    _session_id.set(session_id)
    return session_id


def get_session_id() -> str:
    return _session_id.get() or UNBOUND


class SessionContextFilter(logging.Filter):
    def filter(self, record):
        record.session_id = get_session_id()
        return True


def configure_logging(level: str = "INFO"):
    """Send everything to stderr with the session id in each line."""
    root = logging.getLogger()
    root.setLevel(level)

    # Reconfiguring replaces rather than stacks handlers
    if root.handlers:
        root.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s | %(levelname)-8s | [%(session_id)s] | %(name)s:%(funcName)s:%(lineno)d - %(message)s"
    ))
    handler.addFilter(SessionContextFilter())
    root.addHandler(handler)

    # Streamlit's file watcher is chatty at INFO
    logging.getLogger("watchdog").setLevel(logging.WARNING)


configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger("memdash")
