from __future__ import annotations

from fastapi import APIRouter, Depends, status

from docshare.application.dtos.common_dto import ErrorResponse
from docshare.application.dtos.profile_dto import ValidateTokenResponse
from docshare.application.use_cases.manage_profile import ManageProfileUseCase
from docshare.infrastructure.api.dependencies import get_current_user, get_manage_profile

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
    responses={
        401: {"model": ErrorResponse, "description": "Unauthorized - Invalid or missing authentication token"},
    }
)


@router.post(
    "/validate",
    response_model=ValidateTokenResponse,
    status_code=status.HTTP_200_OK,
    summary="Validate Authentication Token",
    description="""
    Validate the provided token and ensure the caller has a profile.

    This endpoint:
    - Verifies the bearer token in the Authorization header
    - Creates the caller's profile on first use, with the identity provider's email
    - Returns basic user information

    **Authentication required**: Yes (Bearer token)
    """,
    response_description="User information confirming valid authentication",
    responses={
        409: {"model": ErrorResponse, "description": "Conflict - Email already used by another profile"},
    },
)
def validate_token(
    user=Depends(get_current_user),
    uc: ManageProfileUseCase = Depends(get_manage_profile),
):
    """Validate token and ensure the caller's profile exists."""
    prof = uc.ensure(user.id, user.email)
    return {"user_id": prof.id, "email": prof.email}
