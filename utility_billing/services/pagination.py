"""Offset pagination for list queries."""

import math
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.orm import Query


@dataclass
class Page:
    """One page of query results."""

    items: list[Any] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 50

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


def paginate(query: Query, page: int = 1, limit: int = 50) -> Page:
    """Apply offset/limit to an ordered query.

    Args:
        query: Query with ordering already applied
        page: 1-based page number
        limit: Page size

    Returns:
        Page with the requested slice and the unsliced total
    """
    page = max(page, 1)
    total = query.order_by(None).count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    return Page(items=items, total=total, page=page, limit=limit)


__all__ = ["Page", "paginate"]
