from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status

from docshare.application.dtos.common_dto import ErrorResponse
from docshare.application.dtos.document_dto import (
    DocumentContentRequest,
    DocumentResponse,
    ListDocumentsResponse,
)
from docshare.application.use_cases.manage_documents import ManageDocumentsUseCase
from docshare.infrastructure.api.dependencies import get_current_user, get_manage_documents

router = APIRouter(
    prefix="/documents",
    tags=["Documents"],
    responses={
        401: {"model": ErrorResponse, "description": "Unauthorized - Invalid or missing authentication token"},
        500: {"model": ErrorResponse, "description": "Internal Server Error - Record store failure"},
    },
)


@router.post(
    "",
    response_model=DocumentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Document",
    description="""
    Store a new document owned by the caller.

    `content` may be any JSON value (object, array, string, number, boolean).

    **Authentication required**: Yes (Bearer token)
    """,
    responses={400: {"model": ErrorResponse, "description": "Bad Request - content is missing"}},
)
def create_document(
    body: DocumentContentRequest,
    user=Depends(get_current_user),
    uc: ManageDocumentsUseCase = Depends(get_manage_documents),
):
    """Create a document owned by the caller."""
    return DocumentResponse.from_entity(uc.create(user.id, body.content))


@router.get(
    "",
    response_model=ListDocumentsResponse,
    summary="List Documents",
    description="""
    List documents the caller owns or that were shared with them.

    **Features:**
    - `scope`: `owned`, `shared` or `all` (default)
    - `sort_by`: `creation_date` (default) or `last_modified_date`
    - `order`: `desc` (default) or `asc`
    - `page` starts at 1; `limit` defaults to 20 and is capped at 100
    - `content_query`: repeatable content filter, e.g.
      `?content_query=status equals "active"&content_query=or&content_query=priority lessthan 3`.
      Conditions are `[path] operator value`; operators are `equals`, `notequals`,
      `greaterthan`, `greaterthanorequals`, `lessthan`, `lessthanorequals`,
      `contains`, `startswith`, `endswith`, and `-insensitive` variants of the
      string operators. `and`/`or` are applied left to right.

    **Authentication required**: Yes (Bearer token)
    """,
    responses={400: {"model": ErrorResponse, "description": "Bad Request - Invalid scope, sort, order, pagination value or content_query syntax"}},
)
def list_documents(
    user=Depends(get_current_user),
    uc: ManageDocumentsUseCase = Depends(get_manage_documents),
    scope: str = Query("all", description="owned, shared or all"),
    sort_by: str = Query("creation_date", description="creation_date or last_modified_date"),
    order: str = Query("desc", description="asc or desc"),
    page: str | None = Query(None, description="Page number, starting at 1"),
    limit: str | None = Query(None, description="Page size (1-100, default 20)"),
    content_query: list[str] | None = Query(
        None, description="Content filter parts: conditions interleaved with and/or"
    ),
):
    """List documents visible to the caller."""
    result = uc.list_visible(
        user.id, scope, sort_by, order, page, limit, content_query=content_query
    )
    return ListDocumentsResponse(
        data=[DocumentResponse.from_entity(d) for d in result.documents],
        total=result.total,
        page=result.page,
        limit=result.limit,
    )


@router.get(
    "/{document_id}",
    response_model=DocumentResponse,
    summary="Get Document",
    description="""
    Retrieve one document.

    **Access control**: the owner and profiles the document is shared with.

    **Authentication required**: Yes (Bearer token)
    """,
    responses={
        403: {"model": ErrorResponse, "description": "Forbidden - Caller is neither owner nor sharer"},
        404: {"model": ErrorResponse, "description": "Not Found - Document does not exist"},
    },
)
def get_document(
    document_id: str,
    user=Depends(get_current_user),
    uc: ManageDocumentsUseCase = Depends(get_manage_documents),
):
    """Get a document the caller can read."""
    return DocumentResponse.from_entity(uc.get(user.id, document_id))


@router.put(
    "/{document_id}",
    response_model=DocumentResponse,
    summary="Update Document",
    description="""
    Replace the content of a document.

    **Access control**: owner only.

    **Authentication required**: Yes (Bearer token)
    """,
    responses={
        400: {"model": ErrorResponse, "description": "Bad Request - content is missing"},
        403: {"model": ErrorResponse, "description": "Forbidden - Caller is not the owner"},
        404: {"model": ErrorResponse, "description": "Not Found - Document does not exist"},
    },
)
def update_document(
    document_id: str,
    body: DocumentContentRequest,
    user=Depends(get_current_user),
    uc: ManageDocumentsUseCase = Depends(get_manage_documents),
):
    """Replace a document's content."""
    return DocumentResponse.from_entity(uc.update(user.id, document_id, body.content))


@router.delete(
    "/{document_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Document",
    description="""
    Delete a document together with its share list.

    Deleting a document that does not exist also returns 204.

    **Access control**: owner only.

    **Authentication required**: Yes (Bearer token)
    """,
    responses={403: {"model": ErrorResponse, "description": "Forbidden - Caller is not the owner"}},
)
def delete_document(
    document_id: str,
    user=Depends(get_current_user),
    uc: ManageDocumentsUseCase = Depends(get_manage_documents),
):
    """Delete an owned document."""
    uc.delete(user.id, document_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
