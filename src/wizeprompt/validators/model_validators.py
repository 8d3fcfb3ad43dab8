from sqlalchemy import and_, inspect as sa_inspect, select, UniqueConstraint
from typing import Iterable


def find_unknown_model_kwargs(model, kwargs: dict) -> list[str]:
    """
    Return kwarg keys that are not mapped attributes (columns or relationships) of `model`.
    """
    mapper = sa_inspect(model)
    allowed = {attr.key for attr in mapper.attrs}
    return [k for k in kwargs.keys() if k not in allowed]


def get_required_columns(model) -> list[str]:
    """
    Columns that are NOT NULL, have no client/server default and are not autoincrement PKs.
    """
    cols = []
    for col in model.__table__.columns:
        has_default = col.default is not None or col.server_default is not None
        is_auto_pk = col.primary_key and col.autoincrement in (True, "auto")
        if not col.nullable and not has_default and not is_auto_pk:
            cols.append(col.key)
    return cols


def get_unique_column_sets(model) -> list[Iterable[str]]:
    """
    Unique column sets of the model's table: unique columns, UniqueConstraints and unique indexes.
    """
    unique_sets = []

    for col in model.__table__.columns:
        if col.unique:
            unique_sets.append([col.key])

    for constraint in model.__table__.constraints:
        if isinstance(constraint, UniqueConstraint):
            unique_sets.append([c.key for c in constraint.columns])

    for idx in model.__table__.indexes:
        if idx.unique:
            unique_sets.append([c.key for c in idx.columns])

    return unique_sets


async def find_unique_conflicts(db, model, kwargs: dict) -> set[str]:
    """
    Pre-insert lookup of rows that would violate a unique constraint.
    Returns the conflicting column names (best-effort; the database stays authoritative).
    """
    conflicts = set()

    for cols in get_unique_column_sets(model):
        if not all(c in kwargs for c in cols):
            continue

        conditions = [getattr(model, c) == kwargs[c] for c in cols]
        res = await db.execute(select(model).where(and_(*conditions)).limit(1))
        if res.scalars().first() is not None:
            conflicts.update(cols)

    return conflicts
