import math
from typing import List, Tuple

from pydantic import BaseModel
from sqlalchemy.orm import Query


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


def page_count(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit > 0 else 0


def paginate(query: Query, page: int, limit: int) -> Tuple[List, Pagination]:
    """Run ``query`` for one page.

    A page past the end is clamped to the last page (page 1 when empty), so
    ``page * limit <= total + limit`` always holds.
    """
    limit = max(1, limit)
    total = query.order_by(None).count()
    pages = page_count(total, limit)
    page = min(max(1, page), max(1, pages))
    items = query.offset((page - 1) * limit).limit(limit).all()
    return items, Pagination(page=page, limit=limit, total=total, pages=pages)
