"""
Tests for the share list use case and the owner gate in front of it.
"""
from __future__ import annotations

from datetime import UTC, datetime
from unittest.mock import Mock

import pytest

from docshare.application.use_cases.check_document_owner import CheckDocumentOwnerUseCase
from docshare.application.use_cases.manage_shares import ManageSharesUseCase
from docshare.domain.entities.document import DocumentEntity, ShareRecordEntity
from docshare.domain.exceptions import (
    BadRequestError,
    ForbiddenError,
    InternalError,
    NotFoundError,
)


def _doc(doc_id: str = "doc_1", owner_id: str = "user_A") -> DocumentEntity:
    now = datetime.now(UTC)
    return DocumentEntity(id=doc_id, owner_id=owner_id, content={}, created_at=now, updated_at=now)


@pytest.fixture
def repos():
    """Document repo that knows doc_1 owned by user_A, and an empty share repo."""
    document_repo = Mock()
    share_repo = Mock()
    document_repo.get.side_effect = lambda doc_id: _doc(doc_id) if doc_id == "doc_1" else None
    share_repo.get.return_value = None
    share_repo.add.return_value = True
    share_repo.remove.return_value = True
    return document_repo, share_repo


class TestCheckDocumentOwner:
    def test_owner_passes(self, repos):
        document_repo, _ = repos
        assert CheckDocumentOwnerUseCase(document_repo).execute("user_A", "doc_1") == "user_A"

    def test_missing_document(self, repos):
        document_repo, _ = repos
        with pytest.raises(NotFoundError):
            CheckDocumentOwnerUseCase(document_repo).execute("user_A", "nope")

    def test_non_owner_is_forbidden(self, repos):
        document_repo, _ = repos
        with pytest.raises(ForbiddenError) as exc:
            CheckDocumentOwnerUseCase(document_repo).execute("user_B", "doc_1")
        assert exc.value.message == "Only the document owner can manage shares."

    def test_store_failure_becomes_internal_error(self):
        document_repo = Mock()
        document_repo.get.side_effect = RuntimeError("connection refused")
        with pytest.raises(InternalError):
            CheckDocumentOwnerUseCase(document_repo).execute("user_A", "doc_1")


class TestManageShares:
    def test_get_sharers_without_record_is_empty(self, repos):
        uc = ManageSharesUseCase(*repos)
        assert uc.get_sharers("user_A", "doc_1") == []

    def test_get_sharers_returns_record(self, repos):
        document_repo, share_repo = repos
        share_repo.get.return_value = ShareRecordEntity("doc_1", ["user_B", "user_C"])
        uc = ManageSharesUseCase(document_repo, share_repo)
        assert set(uc.get_sharers("user_A", "doc_1")) == {"user_B", "user_C"}

    def test_get_sharers_non_owner(self, repos):
        uc = ManageSharesUseCase(*repos)
        with pytest.raises(ForbiddenError):
            uc.get_sharers("user_B", "doc_1")

    def test_empty_document_id_read_vs_write(self, repos):
        uc = ManageSharesUseCase(*repos)
        with pytest.raises(BadRequestError):
            uc.get_sharers("user_A", "")
        with pytest.raises(NotFoundError):
            uc.set_sharers("user_A", "", ["user_B"])
        with pytest.raises(NotFoundError):
            uc.add_sharer("user_A", "", "user_B")
        with pytest.raises(NotFoundError):
            uc.remove_sharer("user_A", "doc_1", "")

    def test_set_sharers_normalizes_before_storing(self, repos):
        document_repo, share_repo = repos
        uc = ManageSharesUseCase(document_repo, share_repo)
        uc.set_sharers("user_A", "doc_1", [" user_B", "user_C", "", "user_B"])
        share_repo.set.assert_called_once_with("doc_1", ["user_B", "user_C"])

    def test_set_sharers_with_owner_stores_nothing(self, repos):
        document_repo, share_repo = repos
        uc = ManageSharesUseCase(document_repo, share_repo)
        with pytest.raises(BadRequestError):
            uc.set_sharers("user_A", "doc_1", ["user_B", "user_A"])
        share_repo.set.assert_not_called()

    def test_set_sharers_non_owner_stores_nothing(self, repos):
        document_repo, share_repo = repos
        uc = ManageSharesUseCase(document_repo, share_repo)
        with pytest.raises(ForbiddenError):
            uc.set_sharers("user_B", "doc_1", ["user_C"])
        share_repo.set.assert_not_called()

    def test_add_sharer_rejects_owner(self, repos):
        document_repo, share_repo = repos
        uc = ManageSharesUseCase(document_repo, share_repo)
        with pytest.raises(BadRequestError):
            uc.add_sharer("user_A", "doc_1", "user_A")
        share_repo.add.assert_not_called()

    def test_add_sharer_is_idempotent(self, repos):
        document_repo, share_repo = repos
        share_repo.add.return_value = False
        uc = ManageSharesUseCase(document_repo, share_repo)
        uc.add_sharer("user_A", "doc_1", "user_B")
        share_repo.add.assert_called_once_with("doc_1", "user_B")

    def test_remove_absent_sharer_is_a_noop(self, repos):
        document_repo, share_repo = repos
        share_repo.remove.return_value = False
        uc = ManageSharesUseCase(document_repo, share_repo)
        uc.remove_sharer("user_A", "doc_1", "user_Z")
        share_repo.remove.assert_called_once_with("doc_1", "user_Z")

    def test_add_sharer_missing_document(self, repos):
        uc = ManageSharesUseCase(*repos)
        with pytest.raises(NotFoundError):
            uc.add_sharer("user_A", "doc_404", "user_B")
