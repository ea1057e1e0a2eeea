from sqlalchemy import exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from rallypoint.response import CustomHTTPException


async def validate_unique(
    session: AsyncSession,
    unique: dict[str, tuple],
    message: str = "Invalid Request",
    exclude_id: int | None = None,
    case_insensitive: bool = True,
):
    """
    Raise a 409 when any ``{key: (Model, value)}`` pair is already taken.

    ``exclude_id`` skips the row being updated.
    """
    errors = {}
    for key, (schema, value) in unique.items():
        if value is None:
            continue
        column = getattr(schema, key)
        if case_insensitive and isinstance(value, str):
            condition = func.lower(column) == value.lower()
        else:
            condition = column == value
        query = exists().where(condition)
        if exclude_id is not None:
            query = query.where(schema.id != exclude_id)
        if await session.scalar(select(query)):
            errors[key] = f"{key} already exists"
    if errors:
        raise CustomHTTPException(
            status_code=409, message=message, error_code="DUPLICATE", errors=errors
        )
    return True
