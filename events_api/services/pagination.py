import math
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session


def paginate(db: Session, stmt: Select, page: int, per_page: int) -> tuple[list[Any], dict[str, Any]]:
    """Execute one page of ``stmt`` and describe it.

    Returns the items of the requested page and a ``meta`` mapping
    (``current_page``, ``per_page``, ``total``, ``last_page``, ``from``,
    ``to``).  Pages past the end come back empty.
    """
    page = max(page, 1)
    offset = (page - 1) * per_page

    total = db.scalar(select(func.count()).select_from(stmt.order_by(None).subquery())) or 0
    items = list(db.scalars(stmt.limit(per_page).offset(offset)).all())

    meta = {
        "current_page": page,
        "per_page": per_page,
        "total": total,
        "last_page": max(math.ceil(total / per_page), 1),
        "from": offset + 1 if items else None,
        "to": offset + len(items) if items else None,
    }
    return items, meta
