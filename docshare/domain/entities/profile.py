from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class ProfileEntity:
    id: str  # user id from the identity provider
    email: str
    first_name: str = ""
    last_name: str = ""
    password_hash: str | None = None  # never leaves the repository/use case layer
    created_at: datetime | None = None
    updated_at: datetime | None = None
    extra: Any = None  # opaque user-supplied JSON, never inspected
