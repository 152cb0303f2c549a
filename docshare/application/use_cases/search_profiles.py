from __future__ import annotations

from dataclasses import dataclass

from docshare.application.use_cases.store_errors import store_errors
from docshare.domain.entities.profile import ProfileEntity
from docshare.domain.services.pagination import paginate, parse_page_params
from docshare.domain.services.profile_search_service import ProfileSearchService
from docshare.infrastructure.database.repositories.profile_repository import ProfileRepository


@dataclass(frozen=True)
class ProfileSearchResult:
    profiles: list[ProfileEntity]
    total: int  # matches before pagination
    page: int
    limit: int  # effective limit, after clamping


@dataclass
class SearchProfilesUseCase:
    profile_repo: ProfileRepository

    def execute(
        self,
        email: str = "",
        first_name: str = "",
        last_name: str = "",
        page: str | int | None = None,
        limit: str | int | None = None,
    ) -> ProfileSearchResult:
        """
        Filter, order and page the whole profile collection in memory.

        Raises:
            BadRequestError: If ``page`` or ``limit`` is not a positive integer.
        """
        page_num, limit_num = parse_page_params(page, limit)
        with store_errors("list profiles"):
            profiles = self.profile_repo.list_all()
        matched = ProfileSearchService.filter_and_sort(
            profiles, email or "", first_name or "", last_name or ""
        )
        return ProfileSearchResult(
            profiles=paginate(matched, page_num, limit_num),
            total=len(matched),
            page=page_num,
            limit=limit_num,
        )
