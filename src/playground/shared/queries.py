"""Paging helpers shared by the aggregate repositories."""

SCAN_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


def scan(dao, order_by: str = "created_at", **filters) -> list:
    """Return every record matching ``filters``, fetched page by page."""
    results = []
    offset = 0
    while True:
        page = dao.query.filter(**filters).order_by(order_by).offset(offset).limit(SCAN_PAGE_SIZE).all()
        results.extend(page.items)
        if len(page.items) < SCAN_PAGE_SIZE:
            return results
        offset += SCAN_PAGE_SIZE


def paginate(dao, page: int = 1, limit: int = DEFAULT_PAGE_SIZE, order_by: str = "-created_at", **filters) -> dict:
    """Fetch one page of records, newest first by default."""
    page = max(1, int(page or 1))
    limit = min(MAX_PAGE_SIZE, max(1, int(limit or DEFAULT_PAGE_SIZE)))
    filters = {key: value for key, value in filters.items() if value is not None}

    result = dao.query.filter(**filters).order_by(order_by).offset((page - 1) * limit).limit(limit).all()
    total = result.total
    return {
        "items": list(result.items),
        "page": page,
        "limit": limit,
        "total": total,
        "pages": (total + limit - 1) // limit,
    }
