from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Generator

from docshare.domain.exceptions import InternalError

logger = logging.getLogger(__name__)


@contextmanager
def store_errors(action: str) -> Generator[None, None, None]:
    """Surface a repository failure as InternalError, without retrying."""
    try:
        yield
    except RuntimeError as exc:
        logger.error("Record store failure while trying to %s", action, exc_info=True)
        raise InternalError(f"Failed to {action}: {exc}") from exc
