"""Query filter helpers shared by the data access services."""

from typing import Any, Iterable, Optional

from sqlalchemy import String, and_, asc, cast, desc, or_
from sqlalchemy.sql.elements import ColumnElement


def json_tag_clause(column: Any, tags: Iterable[str], match_all: bool = False) -> Optional[ColumnElement]:
    """Match rows whose JSON tag list contains any (or all) of ``tags``.

    Tags are stored as JSON arrays of strings, so a quoted substring match works
    on both PostgreSQL and SQLite.
    """
    clauses = [cast(column, String).ilike(f'%"{tag}"%') for tag in tags if tag]
    if not clauses:
        return None
    return and_(*clauses) if match_all else or_(*clauses)


def ilike_any(columns: Iterable[Any], term: Optional[str]) -> Optional[ColumnElement]:
    """``col ILIKE %term%`` over several columns, joined with OR."""
    if not term:
        return None
    pattern = f"%{term}%"
    return or_(*[column.ilike(pattern) for column in columns])


def apply_sort(stmt, model, sort: Optional[str], order: str, allowed: Iterable[str], default):
    """Order by ``sort`` when it names an allowed column, else by ``default``."""
    if sort and sort in set(allowed):
        column = getattr(model, sort)
        return stmt.order_by(asc(column) if order == "asc" else desc(column))
    return stmt.order_by(default)
