from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from docshare.application.use_cases.manage_documents import ManageDocumentsUseCase
from docshare.application.use_cases.manage_profile import ManageProfileUseCase
from docshare.application.use_cases.manage_shares import ManageSharesUseCase
from docshare.application.use_cases.search_profiles import SearchProfilesUseCase
from docshare.domain.exceptions import UnauthorizedError
from docshare.infrastructure.database.repositories.document_repository import DocumentRepository
from docshare.infrastructure.database.repositories.profile_repository import ProfileRepository
from docshare.infrastructure.database.repositories.share_repository import ShareRepository
from docshare.infrastructure.database.supabase_client import (
    SupabaseAuthAdapter,
    UserInfo,
    get_supabase_client,
)

_bearer_scheme = HTTPBearer(auto_error=False)


def get_auth_adapter() -> SupabaseAuthAdapter:
    return SupabaseAuthAdapter()


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Security(_bearer_scheme)] = None,
    auth: Annotated[SupabaseAuthAdapter, Depends(get_auth_adapter)] = None,
) -> UserInfo:
    if not credentials or not credentials.scheme or credentials.scheme.lower() != "bearer":
        raise UnauthorizedError("Missing bearer token")
    token = credentials.credentials
    if not token:
        raise UnauthorizedError("Missing bearer token")
    try:
        return auth.validate_token(token)
    except ValueError as exc:
        raise UnauthorizedError(str(exc)) from exc


def get_profile_repo() -> ProfileRepository:
    return ProfileRepository(get_supabase_client())


def get_document_repo() -> DocumentRepository:
    return DocumentRepository(get_supabase_client())


def get_share_repo() -> ShareRepository:
    return ShareRepository(get_supabase_client())


def get_manage_profile(
    profiles: Annotated[ProfileRepository, Depends(get_profile_repo)],
) -> ManageProfileUseCase:
    return ManageProfileUseCase(profile_repo=profiles)


def get_search_profiles(
    profiles: Annotated[ProfileRepository, Depends(get_profile_repo)],
) -> SearchProfilesUseCase:
    return SearchProfilesUseCase(profile_repo=profiles)


def get_manage_shares(
    documents: Annotated[DocumentRepository, Depends(get_document_repo)],
    shares: Annotated[ShareRepository, Depends(get_share_repo)],
) -> ManageSharesUseCase:
    return ManageSharesUseCase(document_repo=documents, share_repo=shares)


def get_manage_documents(
    documents: Annotated[DocumentRepository, Depends(get_document_repo)],
    shares: Annotated[ShareRepository, Depends(get_share_repo)],
) -> ManageDocumentsUseCase:
    return ManageDocumentsUseCase(document_repo=documents, share_repo=shares)
