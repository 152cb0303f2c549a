from __future__ import annotations

import logging
from dataclasses import dataclass

from docshare.application.use_cases.check_document_owner import CheckDocumentOwnerUseCase
from docshare.application.use_cases.store_errors import store_errors
from docshare.domain.exceptions import BadRequestError, NotFoundError
from docshare.domain.services.sharing_service import normalize_share_list
from docshare.infrastructure.database.repositories.document_repository import DocumentRepository
from docshare.infrastructure.database.repositories.share_repository import ShareRepository

logger = logging.getLogger(__name__)


@dataclass
class ManageSharesUseCase:
    """
    Read and change who a document is shared with.

    Every operation is owner-only and goes through CheckDocumentOwnerUseCase
    first. Adding an existing sharer or removing an absent one is a no-op,
    never an error. Profile ids are not checked against the profile table.

    An empty document id is a BadRequestError for ``get_sharers`` but a
    NotFoundError for the mutating operations, matching how the routes treat
    a missing path segment.
    """

    document_repo: DocumentRepository
    share_repo: ShareRepository

    def _owner(self, user_id: str, document_id: str) -> str:
        return CheckDocumentOwnerUseCase(self.document_repo).execute(user_id, document_id)

    def get_sharers(self, user_id: str, document_id: str) -> list[str]:
        if not document_id:
            raise BadRequestError("Document ID is required in the path.")
        self._owner(user_id, document_id)
        with store_errors("load shares"):
            record = self.share_repo.get(document_id)
        return list(record.shared_with) if record else []

    def set_sharers(self, user_id: str, document_id: str, proposed: list[str]) -> None:
        if not document_id:
            raise NotFoundError("Document ID is required in the path.")
        owner_id = self._owner(user_id, document_id)
        shared_with = normalize_share_list(proposed, owner_id)
        with store_errors("update shares"):
            self.share_repo.set(document_id, shared_with)
        logger.info(
            "Share set replaced for document %s (%d profiles)", document_id, len(shared_with)
        )

    def add_sharer(self, user_id: str, document_id: str, profile_id: str) -> None:
        if not document_id or not profile_id:
            raise NotFoundError("Document ID and Profile ID are required in the path.")
        owner_id = self._owner(user_id, document_id)
        if profile_id == owner_id:
            raise BadRequestError("Cannot share document with the owner.")
        with store_errors("add sharer"):
            added = self.share_repo.add(document_id, profile_id)
        if added:
            logger.info("Shared document %s with profile %s", document_id, profile_id)

    def remove_sharer(self, user_id: str, document_id: str, profile_id: str) -> None:
        if not document_id or not profile_id:
            raise NotFoundError("Document ID and Profile ID are required in the path.")
        self._owner(user_id, document_id)
        with store_errors("remove sharer"):
            removed = self.share_repo.remove(document_id, profile_id)
        if removed:
            logger.info("Unshared document %s from profile %s", document_id, profile_id)
