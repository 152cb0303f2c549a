from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status

from docshare.application.dtos.common_dto import ErrorResponse
from docshare.application.dtos.profile_dto import (
    ProfileResponse,
    SearchProfilesResponse,
    UpdateProfileRequest,
)
from docshare.application.use_cases.manage_profile import ManageProfileUseCase
from docshare.application.use_cases.search_profiles import SearchProfilesUseCase
from docshare.infrastructure.api.dependencies import (
    get_current_user,
    get_manage_profile,
    get_search_profiles,
)

router = APIRouter(
    prefix="/profiles",
    tags=["Profiles"],
    responses={
        401: {"model": ErrorResponse, "description": "Unauthorized - Invalid or missing authentication token"},
        500: {"model": ErrorResponse, "description": "Internal Server Error - Record store failure"},
    },
)


@router.get(
    "/me",
    response_model=ProfileResponse,
    summary="Get Current User Profile",
    description="""
    Retrieve the profile of the authenticated caller.

    The password hash is never returned.

    **Authentication required**: Yes (Bearer token)
    """,
    responses={404: {"model": ErrorResponse, "description": "Not Found - Token is valid but the profile record is missing"}},
)
def get_me(
    user=Depends(get_current_user),
    uc: ManageProfileUseCase = Depends(get_manage_profile),
):
    """Get the caller's own profile."""
    return ProfileResponse.from_entity(uc.get_self(user.id))


@router.put(
    "/me",
    response_model=ProfileResponse,
    summary="Update Current User Profile",
    description="""
    Replace the caller's first name, last name and extra data.

    **Request Requirements:**
    - `first_name` and `last_name` are required and cannot be blank
    - `extra` may be any JSON value; it replaces what was stored

    Email, password and creation date cannot be changed here.

    **Authentication required**: Yes (Bearer token)
    """,
    responses={
        400: {"model": ErrorResponse, "description": "Bad Request - Missing or blank name"},
        404: {"model": ErrorResponse, "description": "Not Found - Profile record is missing"},
    },
)
def update_me(
    body: UpdateProfileRequest,
    user=Depends(get_current_user),
    uc: ManageProfileUseCase = Depends(get_manage_profile),
):
    """Update the caller's own profile."""
    prof = uc.update_self(user.id, body.first_name, body.last_name, body.extra)
    return ProfileResponse.from_entity(prof)


@router.delete(
    "/me",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Current User Profile",
    description="""
    Delete the caller's profile.

    **Note**: documents owned by the caller and their share lists are not
    removed, and the caller stays listed in other documents' share lists.

    **Authentication required**: Yes (Bearer token)
    """,
    responses={404: {"model": ErrorResponse, "description": "Not Found - Profile record is missing"}},
)
def delete_me(
    user=Depends(get_current_user),
    uc: ManageProfileUseCase = Depends(get_manage_profile),
):
    """Delete the caller's own profile."""
    uc.delete_self(user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "",
    response_model=SearchProfilesResponse,
    summary="Search Profiles",
    description="""
    Search all profiles with optional filters and pagination.

    **Features:**
    - `email`, `first_name`, `last_name`: case-insensitive substring filters, combined with AND
    - Results ordered by email (case-insensitive), then profile ID
    - `page` starts at 1; `limit` defaults to 20 and is capped at 100
    - A page past the end returns an empty list with the real total

    **Authentication required**: Yes (Bearer token)
    """,
    responses={400: {"model": ErrorResponse, "description": "Bad Request - page or limit is not a positive integer"}},
)
def search_profiles(
    user=Depends(get_current_user),
    uc: SearchProfilesUseCase = Depends(get_search_profiles),
    email: str = Query("", description="Substring to match in the email"),
    first_name: str = Query("", description="Substring to match in the first name"),
    last_name: str = Query("", description="Substring to match in the last name"),
    page: str | None = Query(None, description="Page number, starting at 1"),
    limit: str | None = Query(None, description="Page size (1-100, default 20)"),
):
    """Search profiles."""
    result = uc.execute(email, first_name, last_name, page, limit)
    return SearchProfilesResponse(
        data=[ProfileResponse.from_entity(p) for p in result.profiles],
        total=result.total,
        page=result.page,
        limit=result.limit,
    )
