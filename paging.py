from typing import Any, Callable, Sequence, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

import settings
from models import Page

T = TypeVar("T")


def normalize_page(page: int) -> int:
    if page < 1:
        return 1
    return page


def normalize_per_page(per_page: int, *, min_value: int = 1, max_value: int | None = None) -> int:
    if max_value is None:
        max_value = settings.MAX_PER_PAGE
    if per_page < min_value:
        return min_value
    if per_page > max_value:
        return max_value
    return per_page


def paginate(
    db: Session,
    stmt: Select,
    *,
    order_by: Sequence[Any],
    page: int,
    per_page: int,
    to_schema: Callable[[Any], T],
) -> Page[T]:
    """Run ``stmt`` one page at a time.

    ``order_by`` must end with a unique column so that consecutive pages
    never overlap or skip rows.
    """
    page = normalize_page(page)
    per_page = normalize_per_page(per_page)

    count_stmt = select(func.count()).select_from(stmt.subquery())
    total = int(db.execute(count_stmt).scalar_one())
    total_pages = max(1, (total + per_page - 1) // per_page)

    rows = db.execute(
        stmt.order_by(*order_by).limit(per_page).offset((page - 1) * per_page)
    ).scalars().all()

    return Page(
        results=[to_schema(r) for r in rows],
        page_number=page,
        per_page=per_page,
        total=total,
        total_pages=total_pages,
    )
