"""
Single-statement conditional upserts.

PostgreSQL and SQLite both support `INSERT ... ON CONFLICT DO UPDATE`, so a
row keyed by a unique constraint is created or updated in one round trip
instead of a read followed by an insert or update.
"""

from typing import Any, Dict, Iterable, Sequence

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def upsert(
    db: Session,
    model,
    values: Dict[str, Any],
    conflict_columns: Sequence[str],
    update_columns: Iterable[str],
) -> None:
    """
    Insert `values` into `model`'s table, or update `update_columns` on the row
    that already holds the same `conflict_columns` key.

    Python-side column defaults (ids, timestamps) are applied to the insert
    branch only. The caller owns the transaction.
    """
    dialect = db.get_bind().dialect.name
    insert = _INSERT_BY_DIALECT.get(dialect)
    if insert is None:
        raise NotImplementedError(f"Upsert is not supported for dialect '{dialect}'")

    stmt = insert(model).values(**values)
    update_set = {column: stmt.excluded[column] for column in update_columns}
    if update_set:
        stmt = stmt.on_conflict_do_update(
            index_elements=list(conflict_columns), set_=update_set
        )
    else:
        stmt = stmt.on_conflict_do_nothing(index_elements=list(conflict_columns))
    db.execute(stmt)
