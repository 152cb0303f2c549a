from __future__ import annotations

from typing import Iterable

from docshare.domain.entities.profile import ProfileEntity


class ProfileSearchService:
    """Pure filter and ordering rules for profile search.

    Filters are case-insensitive substring matches combined with AND; an empty
    filter matches everything. Results are ordered by email (case-insensitive)
    with the profile id as tie-break, so repeated searches page consistently.
    """

    @staticmethod
    def _contains(value: str | None, needle: str) -> bool:
        if not needle:
            return True
        return needle.lower() in (value or "").lower()

    @staticmethod
    def matches(
        profile: ProfileEntity,
        email: str = "",
        first_name: str = "",
        last_name: str = "",
    ) -> bool:
        return (
            ProfileSearchService._contains(profile.email, email)
            and ProfileSearchService._contains(profile.first_name, first_name)
            and ProfileSearchService._contains(profile.last_name, last_name)
        )

    @staticmethod
    def sort_key(profile: ProfileEntity) -> tuple[str, str]:
        return ((profile.email or "").lower(), profile.id)

    @staticmethod
    def filter_and_sort(
        profiles: Iterable[ProfileEntity],
        email: str = "",
        first_name: str = "",
        last_name: str = "",
    ) -> list[ProfileEntity]:
        matched = [
            p
            for p in profiles
            if ProfileSearchService.matches(p, email, first_name, last_name)
        ]
        matched.sort(key=ProfileSearchService.sort_key)
        return matched
