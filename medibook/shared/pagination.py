"""Page/limit pagination shared by the listing endpoints"""

import math
from typing import Any

from sqlalchemy.orm import Query


def paginate(query: Query, page: int, limit: int) -> tuple[list[Any], dict]:
    """
    Apply 1-based page/limit to an ordered query.

    Returns:
        (items, {"page", "limit", "total", "pages"})
    """
    page = max(page, 1)
    limit = max(limit, 1)

    total = query.order_by(None).count()
    items = query.offset((page - 1) * limit).limit(limit).all()

    return items, {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit),
    }
