from __future__ import annotations

import json
import os
from datetime import UTC, datetime

from supabase import Client

from docshare.domain.entities.profile import ProfileEntity
from docshare.infrastructure.database.postgres_client import get_postgres_client

# module-level in-memory store for disabled mode
_MEM_PROFILES: dict[str, ProfileEntity] = {}


def escape_like(value: str) -> str:
    """Escape LIKE/ILIKE wildcards so ``value`` only matches itself."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class ProfileRepository:
    def __init__(self, client: Client | None) -> None:
        self.client = client
        self.disabled = os.getenv("SUPABASE_DISABLED", "0") == "1"
        self.use_local_db = os.getenv("USE_LOCAL_DB", "0") == "1"
        self.pg_client = get_postgres_client() if self.use_local_db else None

    def _row_to_entity(self, row: dict) -> ProfileEntity:
        """Convert database row to ProfileEntity."""
        created_at = row.get("created_at")
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        updated_at = row.get("updated_at")
        if isinstance(updated_at, str):
            updated_at = datetime.fromisoformat(updated_at)
        extra = row.get("extra")
        if isinstance(extra, str):
            extra = json.loads(extra)

        return ProfileEntity(
            id=row["id"],
            email=row.get("email") or "",
            first_name=row.get("first_name") or "",
            last_name=row.get("last_name") or "",
            password_hash=row.get("password_hash"),
            created_at=created_at,
            updated_at=updated_at,
            extra=extra,
        )

    def create(
        self,
        user_id: str,
        email: str,
        first_name: str = "",
        last_name: str = "",
        password_hash: str | None = None,
        extra=None,
    ) -> ProfileEntity:
        now = datetime.now(UTC)

        # PostgreSQL mode
        if self.use_local_db and self.pg_client:
            try:
                query = """
                    INSERT INTO profiles (
                        id, email, first_name, last_name, password_hash, extra,
                        created_at, updated_at
                    ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                    RETURNING *
                """
                row = self.pg_client.fetch_one(
                    query,
                    (
                        user_id, email, first_name, last_name, password_hash,
                        self.pg_client.json(extra), now, now,
                    ),
                )
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL insert profile failed: {exc}") from exc
            if row is None:
                raise RuntimeError("PostgreSQL insert profile returned no row")
            return self._row_to_entity(row)

        # In-memory mode
        if self.disabled or self.client is None:
            entity = ProfileEntity(
                id=user_id,
                email=email,
                first_name=first_name,
                last_name=last_name,
                password_hash=password_hash,
                created_at=now,
                updated_at=now,
                extra=extra,
            )
            _MEM_PROFILES[user_id] = entity
            return entity

        # Supabase mode
        try:  # pragma: no cover - network
            data = {
                "id": user_id,
                "email": email,
                "first_name": first_name,
                "last_name": last_name,
                "password_hash": password_hash,
                "extra": extra,
                "created_at": now.isoformat(),
                "updated_at": now.isoformat(),
            }
            res = self.client.table("profiles").insert(data).execute()
            return self._row_to_entity(res.data[0])
        except Exception as exc:
            raise RuntimeError(f"DB insert profile failed: {exc}") from exc

    def get(self, user_id: str) -> ProfileEntity | None:
        # PostgreSQL mode
        if self.use_local_db and self.pg_client:
            try:
                row = self.pg_client.fetch_one("SELECT * FROM profiles WHERE id = %s", (user_id,))
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL get profile failed: {exc}") from exc
            return self._row_to_entity(row) if row else None

        # In-memory mode
        if self.disabled or self.client is None:
            return _MEM_PROFILES.get(user_id)

        # Supabase mode
        try:  # pragma: no cover - network
            res = self.client.table("profiles").select("*").eq("id", user_id).maybe_single().execute()
        except Exception as exc:
            raise RuntimeError(f"DB get profile failed: {exc}") from exc
        row = res.data if res else None
        return self._row_to_entity(row) if row else None

    def get_by_email(self, email: str) -> ProfileEntity | None:
        """Case-insensitive email lookup."""
        # PostgreSQL mode
        if self.use_local_db and self.pg_client:
            try:
                row = self.pg_client.fetch_one(
                    "SELECT * FROM profiles WHERE lower(email) = lower(%s)", (email,)
                )
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL get profile by email failed: {exc}") from exc
            return self._row_to_entity(row) if row else None

        # In-memory mode
        if self.disabled or self.client is None:
            wanted = email.lower()
            for profile in _MEM_PROFILES.values():
                if profile.email.lower() == wanted:
                    return profile
            return None

        # Supabase mode
        try:
            res = (
                self.client.table("profiles")
                .select("*")
                .ilike("email", escape_like(email))
                .limit(1)
                .execute()
            )
        except Exception as exc:  # pragma: no cover - network
            raise RuntimeError(f"DB get profile by email failed: {exc}") from exc
        wanted = email.lower()
        for row in res.data or []:
            if (row.get("email") or "").lower() == wanted:
                return self._row_to_entity(row)
        return None

    def list_all(self) -> list[ProfileEntity]:
        # PostgreSQL mode
        if self.use_local_db and self.pg_client:
            try:
                rows = self.pg_client.fetch_all("SELECT * FROM profiles")
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL list profiles failed: {exc}") from exc
            return [self._row_to_entity(row) for row in rows]

        # In-memory mode
        if self.disabled or self.client is None:
            return list(_MEM_PROFILES.values())

        # Supabase mode
        try:  # pragma: no cover - network
            res = self.client.table("profiles").select("*").execute()
        except Exception as exc:
            raise RuntimeError(f"DB list profiles failed: {exc}") from exc
        return [self._row_to_entity(row) for row in res.data or []]

    def update(self, profile: ProfileEntity) -> ProfileEntity | None:
        """Replace a profile's mutable fields; returns None if it does not exist.

        ``created_at`` is kept from the stored row and ``updated_at`` is always
        set to now.
        """
        now = datetime.now(UTC)

        # PostgreSQL mode
        if self.use_local_db and self.pg_client:
            try:
                query = """
                    UPDATE profiles
                    SET email = %s, first_name = %s, last_name = %s,
                        password_hash = %s, extra = %s, updated_at = %s
                    WHERE id = %s
                    RETURNING *
                """
                row = self.pg_client.fetch_one(
                    query,
                    (
                        profile.email, profile.first_name, profile.last_name,
                        profile.password_hash, self.pg_client.json(profile.extra),
                        now, profile.id,
                    ),
                )
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL update profile failed: {exc}") from exc
            return self._row_to_entity(row) if row else None

        # In-memory mode
        if self.disabled or self.client is None:
            current = _MEM_PROFILES.get(profile.id)
            if current is None:
                return None
            updated = ProfileEntity(
                id=current.id,
                email=profile.email,
                first_name=profile.first_name,
                last_name=profile.last_name,
                password_hash=profile.password_hash,
                created_at=current.created_at,
                updated_at=now,
                extra=profile.extra,
            )
            _MEM_PROFILES[profile.id] = updated
            return updated

        # Supabase mode
        try:  # pragma: no cover - network
            data = {
                "email": profile.email,
                "first_name": profile.first_name,
                "last_name": profile.last_name,
                "password_hash": profile.password_hash,
                "extra": profile.extra,
                "updated_at": now.isoformat(),
            }
            res = self.client.table("profiles").update(data).eq("id", profile.id).execute()
        except Exception as exc:
            raise RuntimeError(f"DB update profile failed: {exc}") from exc
        rows = res.data or []
        return self._row_to_entity(rows[0]) if rows else None

    def delete(self, user_id: str) -> bool:
        # PostgreSQL mode
        if self.use_local_db and self.pg_client:
            try:
                affected = self.pg_client.execute("DELETE FROM profiles WHERE id = %s", (user_id,))
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL delete profile failed: {exc}") from exc
            return affected > 0

        # In-memory mode
        if self.disabled or self.client is None:
            return _MEM_PROFILES.pop(user_id, None) is not None

        # Supabase mode
        try:  # pragma: no cover - network
            res = self.client.table("profiles").delete().eq("id", user_id).execute()
        except Exception as exc:
            raise RuntimeError(f"DB delete profile failed: {exc}") from exc
        return bool(res.data)
