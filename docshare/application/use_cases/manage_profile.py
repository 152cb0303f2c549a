from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any

from docshare.application.use_cases.store_errors import store_errors
from docshare.domain.entities.profile import ProfileEntity
from docshare.domain.exceptions import BadRequestError, ConflictError, NotFoundError
from docshare.infrastructure.database.repositories.profile_repository import ProfileRepository

logger = logging.getLogger(__name__)

_MISSING_SELF = "Authenticated user profile not found."


@dataclass
class ManageProfileUseCase:
    """Self-service operations on the caller's own profile."""

    profile_repo: ProfileRepository

    def ensure(self, user_id: str, email: str | None) -> ProfileEntity:
        """Return the caller's profile, creating it on first sight.

        Raises:
            ConflictError: If another profile already uses ``email``.
        """
        with store_errors("load profile"):
            existing = self.profile_repo.get(user_id)
        if existing is not None:
            return existing
        email = email or ""
        if email:
            with store_errors("check email"):
                taken = self.profile_repo.get_by_email(email)
            if taken is not None:
                raise ConflictError(f"Email '{email}' already exists.")
        with store_errors("create profile"):
            profile = self.profile_repo.create(user_id, email)
        logger.info("Created profile %s", user_id)
        return profile

    def get_self(self, user_id: str) -> ProfileEntity:
        with store_errors("load profile"):
            profile = self.profile_repo.get(user_id)
        if profile is None:
            # token was valid but the backing record is gone
            raise NotFoundError(_MISSING_SELF)
        return profile

    def update_self(
        self, user_id: str, first_name: str, last_name: str, extra: Any = None
    ) -> ProfileEntity:
        """
        Replace the caller's names and ``extra`` payload.

        Names are stored exactly as given; only empty names are rejected.

        Email, password hash and creation date are carried over from the
        stored profile; the store sets ``updated_at``. This is a plain
        read-modify-write: two concurrent updates to the same profile race and
        the last write wins.
        """
        if not first_name or not last_name:
            raise BadRequestError("'first_name' and 'last_name' are required.")

        existing = self.get_self(user_id)
        merged = replace(existing, first_name=first_name, last_name=last_name, extra=extra)
        with store_errors("update profile"):
            updated = self.profile_repo.update(merged)
        if updated is None:
            # deleted between the read and the write
            raise NotFoundError(_MISSING_SELF)
        logger.info("Updated profile %s", user_id)
        return updated

    def delete_self(self, user_id: str) -> None:
        """
        Delete the caller's profile.

        Owned documents, their share records and the caller's entries in other
        documents' share sets are left in place.
        """
        with store_errors("delete profile"):
            deleted = self.profile_repo.delete(user_id)
        if not deleted:
            raise NotFoundError(_MISSING_SELF)
        logger.info("Deleted profile %s", user_id)
