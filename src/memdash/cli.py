import sys
import typer
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional
from sqlmodel import Session
from memdash.config import settings
from memdash.db import engine
from memdash.errors import MemdashError
from memdash.live.collection import pinned_first
from memdash.live.normalize import normalize_snapshot
from memdash.models.record import MemoryRecord
from memdash.logging import logger, bind_session_id, get_session_id

app = typer.Typer(no_args_is_help=True)

UserOption = typer.Option(None, "--user", "-u", help="Identity whose memories to use (default: MEMDASH_DEFAULT_USER_ID)")


@app.callback()
def main():
    """
    Memory dashboard CLI.
    """
    bind_session_id()


def _user(user: Optional[str]) -> Optional[str]:
    return user or settings.DEFAULT_USER_ID


def _load_records(user_id: Optional[str]) -> List[MemoryRecord]:
    from memdash.storage.store import list_documents
    if not user_id:
        return []
    with Session(engine) as session:
        docs = [d.to_document() for d in list_documents(session, user_id)]
    return pinned_first(normalize_snapshot(docs))


def _fail(message: str, error: Exception):
    logger.error(f"{message}: {error}")
    print(f"❌ {message}: {error}")
    raise typer.Exit(code=1)


@app.command(name="doctor")
def doctor():
    """
    Check configuration and local store health.
    """
    logger.info("Running doctor check...")

    print("\n🩺 Memdash Doctor\n")
    print(f"Python: {sys.version.split()[0]}")
    print(f"Session ID: {get_session_id()}")

    print("\n[Configuration]")
    print(f"DATA_DIR:              {settings.DATA_DIR}")
    print(f"DB_NAME:               {settings.DB_NAME}")
    print(f"POLL_INTERVAL_SECONDS: {settings.POLL_INTERVAL_SECONDS}")
    print(f"SEARCH_RESULT_LIMIT:   {settings.SEARCH_RESULT_LIMIT}")
    user_status = f"✅ {settings.DEFAULT_USER_ID}" if settings.DEFAULT_USER_ID else "❌ Not set (pass --user)"
    print(f"DEFAULT_USER_ID:       {user_status}")

    data_dir = Path(settings.DATA_DIR)
    if data_dir.exists() and data_dir.is_dir():
        print(f"\n[Data Directory]       ✅ Found: {data_dir.absolute()}")
    else:
        print(f"\n[Data Directory]       ❌ Missing: {data_dir.absolute()} (run `memdash db init`)")

    print("\nDoctor check complete.")


db_app = typer.Typer(help="Database management commands.")
app.add_typer(db_app, name="db")


@db_app.command("init")
def init():
    """Create the local memory store."""
    from memdash.db import init_db
    try:
        init_db()
        logger.info("Database initialized successfully.")
        print("✅ Database initialized.")
    except Exception as e:
        _fail("Failed", e)


memories_app = typer.Typer(help="Browse and change memories.")
app.add_typer(memories_app, name="memories")


@memories_app.command("list")
def list_memories(
    user: Optional[str] = UserOption,
    query: str = typer.Option("", "--query", "-q", help="Substring filter on fact or tags"),
    tag: Optional[str] = typer.Option(None, "--tag", help="Only memories with this tag"),
    pinned: bool = typer.Option(False, "--pinned", help="Only pinned memories"),
):
    """List memories, pinned first then newest."""
    from memdash.search.filters import filter_memories
    records = filter_memories(_load_records(_user(user)), query=query, tag=tag, pinned_only=pinned)
    if not records:
        print("No memories found.")
        return
    for r in records:
        pin = "📌" if r.pinned else "  "
        created = r.created_at.split("T")[0] if isinstance(r.created_at, str) else "—"
        tags = f" [{', '.join(r.tags)}]" if r.tags else ""
        links = f" 🔗 {len(r.related_to)}" if r.related_to else ""
        print(f"{pin} {r.id}  {created}  {r.fact}{tags}{links}")


@memories_app.command("add")
def add(
    fact: str,
    user: Optional[str] = UserOption,
    tag: List[str] = typer.Option([], "--tag", "-t", help="Tag (repeatable)"),
    related: List[str] = typer.Option([], "--related", "-r", help="Related memory id (repeatable)"),
    pinned: bool = typer.Option(False, "--pinned"),
):
    """Store a new memory."""
    from memdash.storage.store import add_memory
    try:
        with Session(engine) as session:
            doc = add_memory(session, _user(user), fact, tags=tag, related_to=related, pinned=pinned)
            print(f"✅ Added {doc.id}")
    except MemdashError as e:
        _fail("Add failed", e)


@memories_app.command("pin")
def pin(memory_id: str, user: Optional[str] = UserOption):
    """Toggle a memory's pin."""
    from memdash.storage.store import toggle_pin
    try:
        with Session(engine) as session:
            now_pinned = toggle_pin(session, _user(user), memory_id)
        print(f"✅ {memory_id} {'pinned' if now_pinned else 'unpinned'}")
    except MemdashError as e:
        _fail("Pin failed", e)


@memories_app.command("edit")
def edit(
    memory_id: str,
    user: Optional[str] = UserOption,
    fact: Optional[str] = typer.Option(None, "--fact"),
    tag: Optional[List[str]] = typer.Option(None, "--tag", "-t", help="Replace tags (repeatable)"),
    clear_tags: bool = typer.Option(False, "--clear-tags", help="Remove all tags"),
):
    """Update a memory's fact and/or tags."""
    from memdash.storage.store import update_memory
    try:
        with Session(engine) as session:
            update_memory(session, _user(user), memory_id, fact=fact, tags=[] if clear_tags else (tag or None))
        print(f"✅ Updated {memory_id}")
    except MemdashError as e:
        _fail("Update failed", e)


@memories_app.command("delete")
def delete(memory_id: str, user: Optional[str] = UserOption):
    """Delete a memory."""
    from memdash.storage.store import delete_memory
    try:
        with Session(engine) as session:
            delete_memory(session, _user(user), memory_id)
        print(f"✅ Deleted {memory_id}")
    except MemdashError as e:
        _fail("Delete failed", e)


@app.command("search")
def search(query: str, user: Optional[str] = UserOption):
    """Rank memories against a free-text query."""
    from memdash.search.relevance import rank_memories
    results = rank_memories(_load_records(_user(user)), query, limit=settings.SEARCH_RESULT_LIMIT)
    if not results:
        print("No results found.")
        return

    print(f"Found {len(results)} results:")
    for i, res in enumerate(results, 1):
        print(f"{i}. [{res.score * 100:.0f}%] {res.record.fact} ({res.record.id})")


@app.command("stats")
def stats(user: Optional[str] = UserOption):
    """Show counts, top tags and recent activity."""
    from memdash.views.stats import compute_stats, activity_by_day, top_tags
    records = _load_records(_user(user))
    s = compute_stats(records)

    print(f"Total memories: {s.total}")
    print(f"Pinned:         {s.pinned}")
    print(f"Expiring soon:  {s.expiring_soon}")
    print(f"Unique tags:    {len(s.tags)}")
    print(f"Newest:         {s.newest_timestamp or '—'}")
    print(f"Oldest:         {s.oldest_timestamp or '—'}")

    if s.tags:
        print("\n[Top Tags]")
        for t, count in top_tags(s.tags):
            print(f"  {t}: {count}")

    activity = activity_by_day(records, settings.ACTIVITY_DAYS)
    if activity:
        print("\n[Activity]")
        peak = max(c for _, c in activity)
        for day, count in activity:
            bar = "█" * max(1, round(count / peak * 30))
            print(f"  {day} {bar} {count}")


@app.command("graph")
def graph(
    user: Optional[str] = UserOption,
    dot: bool = typer.Option(False, "--dot", help="Print Graphviz DOT instead of an edge list"),
):
    """Show the relationship graph."""
    from memdash.views.graph import build_graph
    g = build_graph(_load_records(_user(user)))
    if dot:
        print(g.to_dot())
        return

    print(f"{len(g.nodes)} nodes, {len(g.edges)} connections")
    labels = {n.id: n.label for n in g.nodes}
    for e in g.edges:
        print(f"  {labels[e.source]}  ——  {labels[e.target]}")


@app.command("export")
def export(
    user: Optional[str] = UserOption,
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="Output file (default: mcp-memories-<date>.json)"),
):
    """Export all memories as JSON."""
    from memdash.views.export import dumps_export, export_filename
    user_id = _user(user)
    if not user_id:
        print("❌ No identity: pass --user or set MEMDASH_DEFAULT_USER_ID")
        raise typer.Exit(code=1)

    now = datetime.now(timezone.utc)
    records = _load_records(user_id)
    path = out or Path(export_filename(now))
    path.write_text(dumps_export(records, now), encoding="utf-8")
    logger.info(f"Exported {len(records)} memories to {path}")
    print(f"✅ Exported {len(records)} memories to {path}")


@app.command("import")
def import_(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Export file to read"),
    user: Optional[str] = UserOption,
    mode: str = typer.Option("merge", "--mode", help="merge (skip existing) or replace (overwrite all)"),
):
    """Import memories from an export file."""
    from memdash.storage.store import import_records, ImportMode
    from memdash.views.export import load_export
    try:
        docs = load_export(path.read_text(encoding="utf-8"))
        with Session(engine) as session:
            result = import_records(session, _user(user), docs, ImportMode(mode))
        print(f"✅ Imported {result.imported} memories ({result.skipped} skipped)")
    except (MemdashError, ValueError) as e:
        _fail("Import failed", e)


if __name__ == "__main__":
    app()
