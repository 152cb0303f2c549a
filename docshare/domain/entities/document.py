from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class DocumentEntity:
    id: str
    owner_id: str  # profile id of the creator, immutable
    content: Any
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class ShareRecordEntity:
    document_id: str
    # profile ids granted read access; set semantics, owner never present
    shared_with: list[str]

    def includes(self, profile_id: str) -> bool:
        return profile_id in self.shared_with
