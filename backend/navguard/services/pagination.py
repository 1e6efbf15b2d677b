# Overview: Shared pagination for list endpoints.

from typing import Callable

DEFAULT_PER_PAGE = 20
MAX_PER_PAGE = 1000  # the role-permission editor loads the whole catalog in one page


def paginate(query, page: int | None, per_page: int | None, serialize: Callable) -> dict:
    """
    Run a query with optional pagination.

    Returns:
        Dict with 'items', 'count', and pagination metadata if paginated.
    """
    if page is None:
        rows = query.all()
        return {
            "items": [serialize(row) for row in rows],
            "count": len(rows),
        }

    per_page = min(max(per_page or DEFAULT_PER_PAGE, 1), MAX_PER_PAGE)
    page = max(page, 1)

    total = query.order_by(None).count()
    total_pages = (total + per_page - 1) // per_page if total > 0 else 1

    rows = query.offset((page - 1) * per_page).limit(per_page).all()

    return {
        "items": [serialize(row) for row in rows],
        "count": len(rows),
        "pagination": {
            "page": page,
            "per_page": per_page,
            "total": total,
            "total_pages": total_pages,
            "has_next": page < total_pages,
            "has_prev": page > 1,
        },
    }
