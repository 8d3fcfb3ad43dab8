"""
Integrity-error classification.

Turns a SQLAlchemy IntegrityError into an `IntegrityViolation`: what kind of
constraint failed, on which table and columns, and, for foreign keys, which
related row was missing (a conversation pointing at an unknown user, a tag link
pointing at a deleted tag, ...).

Postgres reports a SQLSTATE and the constraint name; the name follows
`Base.metadata`'s naming convention and is resolved back to table and column.
SQLite only reports text, which is parsed as a fallback.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum

from sqlalchemy.exc import IntegrityError

from wizeprompt.database.base import Base

logger = logging.getLogger(__name__)


class Violation(str, Enum):
    UNIQUE = "unique"
    NOT_NULL = "not_null"
    FOREIGN_KEY = "foreign_key"
    CHECK = "check"
    UNKNOWN = "unknown"


# https://www.postgresql.org/docs/current/errcodes-appendix.html
SQLSTATE_VIOLATIONS = {
    "23505": Violation.UNIQUE,
    "23502": Violation.NOT_NULL,
    "23503": Violation.FOREIGN_KEY,
    "23514": Violation.CHECK,
}

_MESSAGE_HINTS = (
    (Violation.UNIQUE, ("unique constraint", "duplicate key")),
    (Violation.NOT_NULL, ("not null constraint", "null value in column")),
    (Violation.FOREIGN_KEY, ("foreign key constraint", "is not present in table")),
    (Violation.CHECK, ("check constraint",)),
)

# (table, column) -> the entity the foreign key points at
REFERENCED_ENTITIES = {
    ("conversations", "user_id"): "User",
    ("conversations", "model_id"): "Model",
    ("messages", "conversation_id"): "Conversation",
    ("conversation_tags", "conversation_id"): "Conversation",
    ("conversation_tags", "tag_id"): "Tag",
    ("models", "provider_id"): "Provider",
}

_CONVENTION_PREFIXES = ("fk", "uq", "ix", "ck", "pk")


@dataclass(frozen=True)
class IntegrityViolation:
    kind: Violation
    table: str | None = None
    columns: list[str] = field(default_factory=list)
    constraint: str | None = None

    @property
    def referenced_entity(self) -> str | None:
        """For foreign-key violations on a known column, the missing parent entity."""
        if self.kind is not Violation.FOREIGN_KEY or not self.table:
            return None
        for column in self.columns:
            entity = REFERENCED_ENTITIES.get((self.table, column))
            if entity:
                return entity
        return None


def resolve_constraint_name(name: str) -> tuple[str | None, list[str]]:
    """
    Map a conventionally named constraint (e.g. "fk_conversations_user_id_users",
    "uq_tags_name") back to its table and column.
    """
    tables = sorted(Base.metadata.tables.values(), key=lambda t: len(t.name), reverse=True)
    for table in tables:
        for prefix in _CONVENTION_PREFIXES:
            head = f"{prefix}_{table.name}_"
            if not name.startswith(head):
                continue
            rest = name[len(head):]
            for column in sorted(table.columns, key=lambda c: len(c.name), reverse=True):
                if rest == column.name or rest.startswith(f"{column.name}_"):
                    return table.name, [column.name]
            return table.name, []
    return None, []


def _columns_from_message(msg: str) -> tuple[str | None, list[str]]:
    # SQLite: 'UNIQUE constraint failed: tags.name' / 'NOT NULL constraint failed: conversations.title'
    m = re.search(r'(?:UNIQUE|NOT NULL) constraint failed: (?P<cols>.+)$', msg, flags=re.IGNORECASE)
    if m:
        qualified = [c.strip() for c in m.group("cols").split(",")]
        table = qualified[0].split(".")[0] if "." in qualified[0] else None
        return table, [c.split(".")[-1] for c in qualified]

    # Postgres: 'null value in column "title" of relation "conversations" ...'
    m = re.search(r'null value in column "(?P<col>[^"]+)"(?: of relation "(?P<table>[^"]+)")?', msg, flags=re.IGNORECASE)
    if m:
        return m.group("table"), [m.group("col")]

    # Postgres DETAIL: 'Key (name)=(work) already exists.'
    m = re.search(r'key \((?P<cols>[^)]+)\)=', msg, flags=re.IGNORECASE)
    if m:
        return None, [c.strip().strip('"') for c in m.group("cols").split(",")]

    return None, []


def _kind_from_message(msg: str) -> Violation:
    normalized = msg.lower()
    for kind, hints in _MESSAGE_HINTS:
        if any(hint in normalized for hint in hints):
            return kind
    logger.warning("integrity.unknown_message", extra={"message_snippet": msg[:200]})
    return Violation.UNKNOWN


def classify_integrity_error(exc: IntegrityError) -> IntegrityViolation:
    """
    Classify an IntegrityError. SQLSTATE and constraint names are preferred;
    message text is the fallback.
    """
    orig = exc.orig
    msg = str(orig) if orig is not None else str(exc)

    # asyncpg exposes `sqlstate`, psycopg exposes `pgcode`
    sqlstate = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    kind = SQLSTATE_VIOLATIONS.get(sqlstate) if sqlstate else None
    if kind is None:
        kind = _kind_from_message(msg)

    diag = getattr(orig, "diag", None)
    constraint = getattr(diag, "constraint_name", None) if diag else getattr(orig, "constraint_name", None)

    table, columns = resolve_constraint_name(constraint) if constraint else (None, [])
    if table is None and not columns:
        table, columns = _columns_from_message(msg)

    return IntegrityViolation(kind=kind, table=table, columns=columns, constraint=constraint)
