from datetime import datetime, timezone
from math import ceil
from typing import Any, List, Optional

from sqlalchemy import func
from sqlmodel import Session, select


# Update only the fields that are provided in the request
# customFields = ["phone", "name"]
def updateOp(
    instance,
    request,
    session,
    customFields=None,
    exclude=None,
):
    if customFields:
        for field in customFields:
            if hasattr(request, field):
                value = getattr(request, field)
                if value is not None:
                    setattr(instance, field, value)
    else:
        data = request.model_dump(exclude_unset=True, exclude=exclude)
        for key, value in data.items():
            setattr(instance, key, value)
    if hasattr(instance, "updated_at"):
        instance.updated_at = datetime.now(timezone.utc)
    session.add(instance)

    return instance


def pagination_meta(page: int, limit: int, total: int) -> dict:
    total_pages = ceil(total / limit) if limit else 0
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "totalPages": total_pages,
        "hasNext": page < total_pages,
        "hasPrev": page > 1,
    }


def count_rows(session: Session, statement) -> int:
    count_stmt = select(func.count()).select_from(statement.order_by(None).subquery())
    return session.exec(count_stmt).one()


def paginate(
    session: Session,
    statement,
    page: int = 1,
    limit: int = 10,
    options: Optional[List[Any]] = None,
):
    """
    Run a select with offset/limit.
    Returns (rows, pagination dict).
    """
    total = count_rows(session, statement)

    paginated = statement.offset((page - 1) * limit).limit(limit)
    for option in options or []:
        paginated = paginated.options(option)
    rows = session.exec(paginated).all()

    return rows, pagination_meta(page, limit, total)
