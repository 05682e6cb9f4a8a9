# Overview: Shared paging and name-filter helpers for list queries.

from __future__ import annotations

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


def name_pattern(name: str | None) -> str:
    """Translate a '*' wildcard name filter into a SQL LIKE pattern."""
    if not name:
        return "%"
    return name.replace("\\", "\\\\").replace("%", r"\%").replace("_", r"\_").replace("*", "%")


def paginate(query, page: int | None, limit: int | None) -> tuple[list, bool]:
    """
    Fetch one page of query results.

    Pages are zero-based. One extra row is fetched to compute `more` without
    a COUNT query.
    """
    page = max(page or 0, 0)
    limit = min(max(limit or DEFAULT_PAGE_SIZE, 1), MAX_PAGE_SIZE)

    rows = query.offset(page * limit).limit(limit + 1).all()
    more = len(rows) > limit
    return rows[:limit], more
