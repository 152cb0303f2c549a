"""
Tests for self-service profile operations and profile search.
"""
from __future__ import annotations

import math
import random
from unittest.mock import Mock

import pytest

from docshare.application.use_cases.manage_profile import ManageProfileUseCase
from docshare.application.use_cases.search_profiles import SearchProfilesUseCase
from docshare.domain.entities.profile import ProfileEntity
from docshare.domain.exceptions import (
    BadRequestError,
    ConflictError,
    InternalError,
    NotFoundError,
)


def _profile(pid: str = "user_A", email: str = "a@x.com", **kwargs) -> ProfileEntity:
    return ProfileEntity(id=pid, email=email, **kwargs)


class TestManageProfile:
    def test_ensure_returns_existing(self):
        repo = Mock()
        repo.get.return_value = _profile()
        out = ManageProfileUseCase(repo).ensure("user_A", "a@x.com")
        assert out.id == "user_A"
        repo.create.assert_not_called()

    def test_ensure_creates_on_first_sight(self):
        repo = Mock()
        repo.get.return_value = None
        repo.get_by_email.return_value = None
        repo.create.return_value = _profile()
        ManageProfileUseCase(repo).ensure("user_A", "a@x.com")
        repo.create.assert_called_once_with("user_A", "a@x.com")

    def test_ensure_rejects_taken_email(self):
        repo = Mock()
        repo.get.return_value = None
        repo.get_by_email.return_value = _profile("user_B")
        with pytest.raises(ConflictError):
            ManageProfileUseCase(repo).ensure("user_A", "a@x.com")

    def test_get_self_missing(self):
        repo = Mock()
        repo.get.return_value = None
        with pytest.raises(NotFoundError) as exc:
            ManageProfileUseCase(repo).get_self("user_A")
        assert exc.value.message == "Authenticated user profile not found."

    def test_update_self_keeps_immutable_fields(self):
        repo = Mock()
        repo.get.return_value = _profile(password_hash="secret", first_name="Old")
        repo.update.side_effect = lambda p: p
        out = ManageProfileUseCase(repo).update_self("user_A", " New ", "Name", {"k": 1})
        assert out.first_name == " New "
        assert out.last_name == "Name"
        assert out.extra == {"k": 1}
        assert out.email == "a@x.com"
        assert out.password_hash == "secret"

    @pytest.mark.parametrize(
        "first,last", [("", "Smith"), ("Alice", ""), (None, "Smith"), ("Alice", None)]
    )
    def test_update_self_requires_names(self, first, last):
        repo = Mock()
        with pytest.raises(BadRequestError):
            ManageProfileUseCase(repo).update_self("user_A", first, last)
        repo.update.assert_not_called()

    def test_update_self_stores_names_verbatim(self):
        repo = Mock()
        repo.get.return_value = _profile()
        repo.update.side_effect = lambda p: p
        out = ManageProfileUseCase(repo).update_self("user_A", "  Al ", "\tB")
        assert out.first_name == "  Al "
        assert out.last_name == "\tB"

    def test_update_self_profile_gone_before_write(self):
        repo = Mock()
        repo.get.return_value = _profile()
        repo.update.return_value = None
        with pytest.raises(NotFoundError):
            ManageProfileUseCase(repo).update_self("user_A", "A", "B")

    def test_delete_self(self):
        repo = Mock()
        repo.delete.return_value = True
        ManageProfileUseCase(repo).delete_self("user_A")
        repo.delete.assert_called_once_with("user_A")

    def test_delete_self_missing(self):
        repo = Mock()
        repo.delete.return_value = False
        with pytest.raises(NotFoundError):
            ManageProfileUseCase(repo).delete_self("user_A")

    def test_store_failure(self):
        repo = Mock()
        repo.delete.side_effect = RuntimeError("Failed to delete profile")
        with pytest.raises(InternalError):
            ManageProfileUseCase(repo).delete_self("user_A")


class TestSearchProfiles:
    @pytest.fixture
    def repo(self):
        repo = Mock()
        repo.list_all.return_value = [
            _profile("1", "alice@x.com"),
            _profile("2", "bob@x.com"),
            _profile("3", "Alice2@x.com"),
        ]
        return repo

    def test_pages_through_matches(self, repo):
        uc = SearchProfilesUseCase(repo)
        first = uc.execute(email="ALICE", page="1", limit="1")
        second = uc.execute(email="ALICE", page="2", limit="1")
        assert first.total == second.total == 2
        assert [p.email for p in first.profiles] == ["Alice2@x.com"]
        assert [p.email for p in second.profiles] == ["alice@x.com"]

    def test_page_past_end_keeps_total(self, repo):
        out = SearchProfilesUseCase(repo).execute(page="9")
        assert out.profiles == []
        assert out.total == 3
        assert out.page == 9
        assert out.limit == 20

    @pytest.mark.parametrize("limit", [1, 3, 7, 19, 50])
    def test_pages_cover_matches_exactly_once(self, limit):
        emails = [f"{name}@x.com" for name in ("Zed", "amy", "Bob", "carl", "AMY", "dana", "Eve")]
        profiles = [_profile(f"id{i:02d}", emails[i % len(emails)]) for i in range(20)]
        rng = random.Random(7)

        def shuffled():
            batch = list(profiles)
            rng.shuffle(batch)
            return batch

        repo = Mock()
        repo.list_all.side_effect = shuffled
        uc = SearchProfilesUseCase(repo)
        expected = sorted(profiles, key=lambda p: (p.email.lower(), p.id))

        pages = math.ceil(len(profiles) / limit)
        collected = []
        for page in range(1, pages + 1):
            out = uc.execute(page=page, limit=limit)
            assert out.total == len(profiles)
            collected.extend(out.profiles)
        assert [p.id for p in collected] == [p.id for p in expected]
        assert uc.execute(page=pages + 1, limit=limit).profiles == []

    def test_search_is_repeatable(self, repo):
        uc = SearchProfilesUseCase(repo)
        repo.list_all.side_effect = [
            list(repo.list_all.return_value),
            list(reversed(repo.list_all.return_value)),
        ]
        first = uc.execute(email="x.com")
        second = uc.execute(email="x.com")
        assert [p.id for p in first.profiles] == [p.id for p in second.profiles]

    def test_bad_page_never_touches_store(self, repo):
        with pytest.raises(BadRequestError):
            SearchProfilesUseCase(repo).execute(page="zero")
        repo.list_all.assert_not_called()
