from __future__ import annotations

import logging
from dataclasses import dataclass

from docshare.application.use_cases.store_errors import store_errors
from docshare.domain.exceptions import ForbiddenError, NotFoundError
from docshare.infrastructure.database.repositories.document_repository import DocumentRepository

logger = logging.getLogger(__name__)


@dataclass
class CheckDocumentOwnerUseCase:
    """Gate for every mutation that only a document's owner may perform."""

    document_repo: DocumentRepository

    def execute(self, user_id: str, document_id: str, action: str = "manage shares") -> str:
        """
        Confirm the document exists and belongs to the caller.

        Returns:
            The owner id (equal to ``user_id``), for the caller to reuse.

        Raises:
            NotFoundError: If no document has ``document_id``.
            ForbiddenError: If the caller is not the owner.
        """
        with store_errors("load document"):
            doc = self.document_repo.get(document_id)
        if doc is None:
            raise NotFoundError(f"Document with ID '{document_id}' not found.")
        if doc.owner_id != user_id:
            logger.warning(
                "Profile %s denied owner access to document %s", user_id, document_id
            )
            raise ForbiddenError(f"Only the document owner can {action}.")
        return doc.owner_id
