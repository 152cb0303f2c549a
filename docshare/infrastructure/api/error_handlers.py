from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from docshare.domain.exceptions import DocShareError, UnauthorizedError

logger = logging.getLogger(__name__)


async def _docshare_error(request: Request, exc: DocShareError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthorizedError) else None
    return JSONResponse(
        status_code=exc.status_code, content={"detail": exc.message}, headers=headers
    )


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    # malformed bodies and query values are caller errors, reported as 400
    problems = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', '')}"
        for err in exc.errors()
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": f"Invalid request: {problems}"},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DocShareError, _docshare_error)
    app.add_exception_handler(RequestValidationError, _validation_error)
