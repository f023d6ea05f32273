# academy/utils/paging.py


def _to_int(v, default=None):
    try:
        return int(v)
    except (TypeError, ValueError):
        return default


def normalize_paging(page, per_page, default_per_page=20, max_per_page=100):
    page = max(_to_int(page, 1), 1)
    per_page = min(max(_to_int(per_page, default_per_page), 1), max_per_page)
    return page, per_page


def paginate(query, page, per_page):
    """Flask-SQLAlchemy pagination over an ORM query. Returns meta + items."""
    items = query.paginate(page=page, per_page=per_page, error_out=False)
    return {
        "meta": {
            "page": items.page,
            "pages": items.pages or 1,
            "per_page": per_page,
            "total": items.total,
        },
        "items": items.items,
    }
