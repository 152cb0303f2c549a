from __future__ import annotations

from typing import Sequence, TypeVar

from docshare.domain.exceptions import BadRequestError

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
MAX_LIMIT = 100


def parse_page_params(page: str | int | None, limit: str | int | None) -> tuple[int, int]:
    """Parse raw ``page``/``limit`` query values.

    Missing values fall back to the defaults. ``limit`` above ``MAX_LIMIT`` is
    clamped rather than rejected.

    Raises:
        BadRequestError: If either value is not an integer or is below 1.
    """
    try:
        page_num = DEFAULT_PAGE if page in (None, "") else int(page)
        limit_num = DEFAULT_LIMIT if limit in (None, "") else int(limit)
    except (TypeError, ValueError) as exc:
        raise BadRequestError(
            "Invalid 'page' or 'limit' query parameter. Must be positive integers."
        ) from exc
    if page_num < 1 or limit_num < 1:
        raise BadRequestError(
            "Invalid 'page' or 'limit' query parameter. Must be positive integers."
        )
    return page_num, min(limit_num, MAX_LIMIT)


def paginate(items: Sequence[T], page: int, limit: int) -> list[T]:
    # pages past the end are empty, not an error
    start = (page - 1) * limit
    if start >= len(items):
        return []
    end = min(start + limit, len(items))
    return list(items[start:end])
