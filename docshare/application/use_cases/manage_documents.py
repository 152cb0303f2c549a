from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from docshare.application.use_cases.check_document_owner import CheckDocumentOwnerUseCase
from docshare.application.use_cases.store_errors import store_errors
from docshare.domain.entities.document import DocumentEntity
from docshare.domain.exceptions import BadRequestError, ForbiddenError, NotFoundError
from docshare.domain.services.content_query import ContentQueryError, parse_content_query
from docshare.domain.services.pagination import paginate, parse_page_params
from docshare.infrastructure.database.repositories.document_repository import DocumentRepository
from docshare.infrastructure.database.repositories.share_repository import ShareRepository

logger = logging.getLogger(__name__)

SCOPES = ("owned", "shared", "all")
SORT_FIELDS = {"creation_date": "created_at", "last_modified_date": "updated_at"}
ORDERS = ("asc", "desc")


@dataclass(frozen=True)
class DocumentPage:
    documents: list[DocumentEntity]
    total: int
    page: int
    limit: int


@dataclass
class ManageDocumentsUseCase:
    """
    Document CRUD for the caller.

    Reads are allowed for the owner and for profiles in the document's share
    set; updates and deletes are owner-only.
    """

    document_repo: DocumentRepository
    share_repo: ShareRepository

    def _guard(self) -> CheckDocumentOwnerUseCase:
        return CheckDocumentOwnerUseCase(self.document_repo)

    def _is_shared_with(self, document_id: str, user_id: str) -> bool:
        with store_errors("load shares"):
            record = self.share_repo.get(document_id)
        return record is not None and record.includes(user_id)

    def create(self, user_id: str, content: Any) -> DocumentEntity:
        if content is None:
            raise BadRequestError("'content' must be provided.")
        with store_errors("create document"):
            doc = self.document_repo.create(owner_id=user_id, content=content)
        logger.info("Created document %s for owner %s", doc.id, user_id)
        return doc

    def get(self, user_id: str, document_id: str) -> DocumentEntity:
        if not document_id:
            raise BadRequestError("Document ID is required in the path.")
        with store_errors("load document"):
            doc = self.document_repo.get(document_id)
        if doc is None:
            raise NotFoundError(f"Document with ID '{document_id}' not found.")
        if doc.owner_id != user_id and not self._is_shared_with(document_id, user_id):
            logger.warning("Profile %s denied read access to document %s", user_id, document_id)
            raise ForbiddenError("You do not have permission to access this document.")
        return doc

    def update(self, user_id: str, document_id: str, content: Any) -> DocumentEntity:
        if not document_id:
            raise BadRequestError("Document ID is required in the path.")
        if content is None:
            raise BadRequestError("'content' must be provided.")
        self._guard().execute(user_id, document_id, action="update this document")
        with store_errors("update document"):
            doc = self.document_repo.update_content(document_id, content)
        if doc is None:
            raise NotFoundError(f"Document with ID '{document_id}' not found.")
        logger.info("Updated document %s", document_id)
        return doc

    def delete(self, user_id: str, document_id: str) -> None:
        """Delete an owned document and its share record.

        Deleting a document that does not exist succeeds.
        """
        if not document_id:
            raise BadRequestError("Document ID is required in the path.")
        try:
            self._guard().execute(user_id, document_id, action="delete this document")
        except NotFoundError:
            return
        with store_errors("delete document"):
            self.document_repo.delete(document_id)
            self.share_repo.delete(document_id)
        logger.info("Deleted document %s", document_id)

    def list_visible(
        self,
        user_id: str,
        scope: str | None = "all",
        sort_by: str | None = "creation_date",
        order: str | None = "desc",
        page: str | int | None = None,
        limit: str | int | None = None,
        content_query: list[str] | None = None,
    ) -> DocumentPage:
        """List documents the caller owns and/or can read, newest first by default.

        ``content_query`` filters on document content (see
        ``domain/services/content_query.py``). A document the query cannot be
        applied to, e.g. one lacking a queried path, is left out.

        Raises:
            BadRequestError: On an unknown scope, sort field or order, bad
                pagination values, or content query syntax.
        """
        scope = (scope or "all").lower()
        sort_by = (sort_by or "creation_date").lower()
        order = (order or "desc").lower()
        if scope not in SCOPES:
            raise BadRequestError(
                f"Invalid scope value: '{scope}', expected 'owned', 'shared', or 'all'."
            )
        if sort_by not in SORT_FIELDS:
            raise BadRequestError(
                f"Invalid sort_by value: '{sort_by}', expected 'creation_date' or 'last_modified_date'."
            )
        if order not in ORDERS:
            raise BadRequestError(f"Invalid order value: '{order}', expected 'asc' or 'desc'.")
        page_num, limit_num = parse_page_params(page, limit)
        query = parse_content_query(content_query)

        with store_errors("list documents"):
            docs = self.document_repo.list_all()
        visible: list[DocumentEntity] = []
        for doc in docs:
            owned = doc.owner_id == user_id
            shared = not owned and self._is_shared_with(doc.id, user_id)
            if not (
                (scope == "owned" and owned)
                or (scope == "shared" and shared)
                or (scope == "all" and (owned or shared))
            ):
                continue
            if query is not None:
                try:
                    if not query.matches(doc.content):
                        continue
                except ContentQueryError as exc:
                    logger.warning("Skipping document %s in content query: %s", doc.id, exc)
                    continue
            visible.append(doc)

        field = SORT_FIELDS[sort_by]
        visible.sort(key=lambda d: (getattr(d, field), d.id), reverse=order == "desc")
        return DocumentPage(
            documents=paginate(visible, page_num, limit_num),
            total=len(visible),
            page=page_num,
            limit=limit_num,
        )
