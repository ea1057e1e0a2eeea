from typing import Annotated, Any, Generic, Sequence, TypeVar, List, Type
from pydantic import BaseModel
from fastapi import Depends, Query as GetQuery

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


class _PaginationParams(BaseModel):
    """Pagination parameters as a Pydantic model"""

    page: int = 1
    limit: int = 10

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def get_pagination_params(
    page: Annotated[int, GetQuery(ge=1)] = 1,
    limit: Annotated[int, GetQuery(ge=1, le=100)] = 10,
) -> _PaginationParams:
    return _PaginationParams(page=page, limit=limit)


class PaginatedResponse(BaseModel, Generic[T]):
    total: int
    page: int
    limit: int
    items: List[T]


def paginated_response(
    result: Sequence[Any],
    total: int,
    pagination: _PaginationParams,
    schema: Type[M],
) -> PaginatedResponse[M]:
    """Wrap an already sliced result set, validating each row with `schema`."""
    return PaginatedResponse[schema](
        total=total,
        page=pagination.page,
        limit=pagination.limit,
        items=[schema.model_validate(item) for item in result],
    )


PaginationParams = Annotated[_PaginationParams, Depends(get_pagination_params)]
