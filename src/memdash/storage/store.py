"""
Mutation requests against the local memory store.

Every operation is keyed by memory id and scoped to one identity. Without an
identity the request fails fast with NotAuthenticatedError. Callers do not
update their live view themselves: a successful mutation shows up in the next
pushed snapshot.
"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, List, Optional
from sqlmodel import Session, select, desc
from memdash.errors import NotAuthenticatedError, MemoryNotFoundError
from memdash.live.normalize import normalize_document, parse_timestamp
from memdash.models.base import utcnow
from memdash.models.memory import MemoryDoc
from memdash.logging import logger


class ImportMode(str, Enum):
    MERGE = "merge"  # Skip ids that already exist
    REPLACE = "replace"  # Delete every existing memory first


@dataclass
class ImportResult:
    imported: int = 0
    skipped: int = 0


def require_identity(user_id: Optional[str]) -> str:
    if not user_id:
        raise NotAuthenticatedError()
    return user_id


def list_documents(session: Session, user_id: str) -> List[MemoryDoc]:
    """All memories for user_id, newest first."""
    return list(session.exec(
        select(MemoryDoc)
        .where(MemoryDoc.user_id == user_id)
        .order_by(desc(MemoryDoc.created_at))
    ).all())


def get_memory(session: Session, user_id: Optional[str], memory_id: str) -> MemoryDoc:
    user_id = require_identity(user_id)
    doc = session.exec(
        select(MemoryDoc).where(MemoryDoc.user_id == user_id, MemoryDoc.id == memory_id)
    ).first()
    if doc is None:
        raise MemoryNotFoundError(memory_id)
    return doc


def add_memory(
    session: Session,
    user_id: Optional[str],
    fact: str,
    tags: Optional[List[str]] = None,
    related_to: Optional[List[str]] = None,
    pinned: bool = False,
    expires_at: Optional[datetime] = None,
) -> MemoryDoc:
    user_id = require_identity(user_id)
    doc = MemoryDoc(user_id=user_id, fact=fact, pinned=pinned, expires_at=expires_at)
    doc.set_tags(tags or [])
    doc.set_related_to(related_to or [])
    session.add(doc)
    session.commit()
    session.refresh(doc)
    logger.info(f"Added memory {doc.id} for {user_id}")
    return doc


def delete_memory(session: Session, user_id: Optional[str], memory_id: str):
    doc = get_memory(session, user_id, memory_id)
    session.delete(doc)
    session.commit()
    logger.info(f"Deleted memory {memory_id}")


def toggle_pin(
    session: Session,
    user_id: Optional[str],
    memory_id: str,
    current_pinned: Optional[bool] = None,
) -> bool:
    """
    Flip the pin flag and return the new value.

    current_pinned is the state the caller displayed; when given, the new
    state is its negation rather than the negation of whatever is stored.
    """
    doc = get_memory(session, user_id, memory_id)
    was_pinned = doc.pinned if current_pinned is None else current_pinned
    doc.pinned = not was_pinned
    session.add(doc)
    session.commit()
    return doc.pinned


def update_memory(
    session: Session,
    user_id: Optional[str],
    memory_id: str,
    fact: Optional[str] = None,
    tags: Optional[List[str]] = None,
) -> MemoryDoc:
    """Update fact and/or tags; always stamps a new updated_at."""
    doc = get_memory(session, user_id, memory_id)
    if fact is not None:
        doc.fact = fact
    if tags is not None:
        doc.set_tags(tags)
    doc.updated_at = utcnow()
    session.add(doc)
    session.commit()
    session.refresh(doc)
    return doc


def import_records(
    session: Session,
    user_id: Optional[str],
    docs: Iterable[Any],
    mode: ImportMode = ImportMode.MERGE,
) -> ImportResult:
    """
    Import raw documents (e.g. from load_export) into the store.

    Documents are normalized first, so malformed entries degrade to defaults.
    Ids are kept; an entry without one gets a fresh id.
    """
    user_id = require_identity(user_id)
    mode = ImportMode(mode)
    result = ImportResult()

    if mode == ImportMode.REPLACE:
        for existing in list_documents(session, user_id):
            session.delete(existing)
        session.flush()

    seen = set()
    for raw in docs:
        record = normalize_document(raw)
        if record.id:
            exists = record.id in seen or session.exec(
                select(MemoryDoc).where(MemoryDoc.user_id == user_id, MemoryDoc.id == record.id)
            ).first() is not None
            if exists:
                result.skipped += 1
                continue

        doc = MemoryDoc(
            user_id=user_id,
            fact=record.fact,
            pinned=record.pinned,
            expires_at=parse_timestamp(record.expires_at),
            updated_at=parse_timestamp(record.updated_at),
        )
        if record.id:
            doc.id = record.id
        created_at = parse_timestamp(record.created_at)
        if created_at is not None:
            doc.created_at = created_at
        doc.set_tags(record.tags)
        doc.set_related_to(record.related_to)

        session.add(doc)
        seen.add(doc.id)
        result.imported += 1

    session.commit()
    logger.info(f"Imported {result.imported} memories for {user_id} ({mode.value}, {result.skipped} skipped)")
    return result
