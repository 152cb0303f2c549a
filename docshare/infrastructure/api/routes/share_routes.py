from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from docshare.application.dtos.common_dto import ErrorResponse
from docshare.application.dtos.document_dto import SetSharersRequest, SharersResponse
from docshare.application.use_cases.manage_shares import ManageSharesUseCase
from docshare.infrastructure.api.dependencies import get_current_user, get_manage_shares

router = APIRouter(
    prefix="/documents/{document_id}/shares",
    tags=["Sharing"],
    responses={
        401: {"model": ErrorResponse, "description": "Unauthorized - Invalid or missing authentication token"},
        403: {"model": ErrorResponse, "description": "Forbidden - Only the document owner can manage shares"},
        404: {"model": ErrorResponse, "description": "Not Found - Document does not exist"},
        500: {"model": ErrorResponse, "description": "Internal Server Error - Record store failure"},
    },
)


@router.get(
    "",
    response_model=SharersResponse,
    summary="List Document Sharers",
    description="""
    List the profile IDs a document is shared with.

    Returns an empty list if the document has never been shared.

    **Access control**: owner only.

    **Authentication required**: Yes (Bearer token)
    """,
)
def get_sharers(
    document_id: str,
    user=Depends(get_current_user),
    uc: ManageSharesUseCase = Depends(get_manage_shares),
):
    """Get who a document is shared with."""
    return SharersResponse(shared_with=uc.get_sharers(user.id, document_id))


@router.put(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Replace Document Sharers",
    description="""
    Replace the whole share list of a document.

    **Request Requirements:**
    - IDs are trimmed; blank IDs are ignored; duplicates collapse
    - The owner's own ID may not appear in the list
    - An empty list unshares the document from everyone

    **Access control**: owner only.

    **Authentication required**: Yes (Bearer token)
    """,
    responses={400: {"model": ErrorResponse, "description": "Bad Request - Owner ID in list or malformed body"}},
)
def set_sharers(
    document_id: str,
    body: SetSharersRequest,
    user=Depends(get_current_user),
    uc: ManageSharesUseCase = Depends(get_manage_shares),
):
    """Replace a document's share list."""
    uc.set_sharers(user.id, document_id, body.shared_with)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put(
    "/{profile_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Share Document With Profile",
    description="""
    Add one profile to a document's share list.

    Adding a profile that is already listed succeeds without change. The
    profile ID is not checked against existing profiles.

    **Access control**: owner only.

    **Authentication required**: Yes (Bearer token)
    """,
    responses={400: {"model": ErrorResponse, "description": "Bad Request - Cannot share with the owner"}},
)
def add_sharer(
    document_id: str,
    profile_id: str,
    user=Depends(get_current_user),
    uc: ManageSharesUseCase = Depends(get_manage_shares),
):
    """Share a document with one profile."""
    uc.add_sharer(user.id, document_id, profile_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{profile_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Unshare Document From Profile",
    description="""
    Remove one profile from a document's share list.

    Removing a profile that is not listed succeeds without change.

    **Access control**: owner only.

    **Authentication required**: Yes (Bearer token)
    """,
)
def remove_sharer(
    document_id: str,
    profile_id: str,
    user=Depends(get_current_user),
    uc: ManageSharesUseCase = Depends(get_manage_shares),
):
    """Unshare a document from one profile."""
    uc.remove_sharer(user.id, document_id, profile_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
