from __future__ import annotations

from typing import Iterable

from docshare.domain.exceptions import BadRequestError


def normalize_share_list(raw: Iterable[str], owner_id: str) -> list[str]:
    """Turn a proposed share list into the set that gets stored.

    Each id is stripped and empty entries are dropped. Duplicates collapse to
    their first occurrence so the stored list keeps the caller's order.

    Raises:
        BadRequestError: If any normalized id is the document owner.
    """
    out: list[str] = []
    seen: set[str] = set()
    for profile_id in raw:
        profile_id = profile_id.strip()
        if not profile_id:
            continue
        if profile_id == owner_id:
            raise BadRequestError("Cannot share document with the owner.")
        if profile_id in seen:
            continue
        seen.add(profile_id)
        out.append(profile_id)
    return out
