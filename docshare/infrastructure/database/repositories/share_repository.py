from __future__ import annotations

import os

from supabase import Client

from docshare.domain.entities.document import ShareRecordEntity
from docshare.infrastructure.database.postgres_client import get_postgres_client

# module-level in-memory store for disabled mode: document id -> profile ids
_MEM_SHARES: dict[str, list[str]] = {}


class ShareRepository:
    """Share records keyed by document id.

    A document with no sharers has no record; an empty set is never stored.
    """

    def __init__(self, client: Client | None) -> None:
        self.client = client
        self.disabled = os.getenv("SUPABASE_DISABLED", "0") == "1"
        self.use_local_db = os.getenv("USE_LOCAL_DB", "0") == "1"
        self.pg_client = get_postgres_client() if self.use_local_db else None

    def get(self, document_id: str) -> ShareRecordEntity | None:
        # PostgreSQL mode
        if self.use_local_db and self.pg_client:
            query = """
                SELECT profile_id FROM document_shares
                WHERE document_id = %s
                ORDER BY position, profile_id
            """
            try:
                rows = self.pg_client.fetch_all(query, (document_id,))
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL get shares failed: {exc}") from exc
            if not rows:
                return None
            return ShareRecordEntity(document_id, [row["profile_id"] for row in rows])

        # In-memory mode
        if self.disabled or self.client is None:
            shared = _MEM_SHARES.get(document_id)
            return ShareRecordEntity(document_id, list(shared)) if shared else None

        # Supabase mode
        try:  # pragma: no cover - network
            res = (
                self.client.table("document_shares")
                .select("profile_id")
                .eq("document_id", document_id)
                .order("position")
                .execute()
            )
        except Exception as exc:
            raise RuntimeError(f"DB get shares failed: {exc}") from exc
        rows = res.data or []
        if not rows:
            return None
        return ShareRecordEntity(document_id, [row["profile_id"] for row in rows])

    def set(self, document_id: str, profile_ids: list[str]) -> None:
        """Replace the whole share set; duplicates are dropped, order kept."""
        unique = list(dict.fromkeys(profile_ids))

        # PostgreSQL mode
        if self.use_local_db and self.pg_client:
            try:
                self.pg_client.replace_shares(document_id, unique)
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL set shares failed: {exc}") from exc
            return

        # In-memory mode
        if self.disabled or self.client is None:
            if unique:
                _MEM_SHARES[document_id] = unique
            else:
                _MEM_SHARES.pop(document_id, None)
            return

        # Supabase mode
        try:  # pragma: no cover - network
            table = self.client.table("document_shares")
            table.delete().eq("document_id", document_id).execute()
            if unique:
                rows = [
                    {"document_id": document_id, "profile_id": pid, "position": i}
                    for i, pid in enumerate(unique)
                ]
                table.insert(rows).execute()
        except Exception as exc:
            raise RuntimeError(f"DB set shares failed: {exc}") from exc

    def add(self, document_id: str, profile_id: str) -> bool:
        """Add one sharer; returns False if it was already present."""
        # PostgreSQL mode
        if self.use_local_db and self.pg_client:
            query = """
                INSERT INTO document_shares (document_id, profile_id, position)
                SELECT %s, %s, COALESCE(MAX(position) + 1, 0)
                FROM document_shares WHERE document_id = %s
                ON CONFLICT (document_id, profile_id) DO NOTHING
            """
            try:
                affected = self.pg_client.execute(query, (document_id, profile_id, document_id))
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL add sharer failed: {exc}") from exc
            return affected > 0

        # In-memory mode
        if self.disabled or self.client is None:
            shared = _MEM_SHARES.setdefault(document_id, [])
            if profile_id in shared:
                return False
            shared.append(profile_id)
            return True

        # Supabase mode
        try:  # pragma: no cover - network
            current = self.get(document_id)
            if current and current.includes(profile_id):
                return False
            position = len(current.shared_with) if current else 0
            self.client.table("document_shares").upsert(
                {"document_id": document_id, "profile_id": profile_id, "position": position},
                on_conflict="document_id,profile_id",
                ignore_duplicates=True,
            ).execute()
            return True
        except Exception as exc:
            raise RuntimeError(f"DB add sharer failed: {exc}") from exc

    def remove(self, document_id: str, profile_id: str) -> bool:
        """Remove one sharer; returns False if it was not present."""
        # PostgreSQL mode
        if self.use_local_db and self.pg_client:
            query = "DELETE FROM document_shares WHERE document_id = %s AND profile_id = %s"
            try:
                affected = self.pg_client.execute(query, (document_id, profile_id))
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL remove sharer failed: {exc}") from exc
            return affected > 0

        # In-memory mode
        if self.disabled or self.client is None:
            shared = _MEM_SHARES.get(document_id)
            if not shared or profile_id not in shared:
                return False
            shared.remove(profile_id)
            if not shared:
                del _MEM_SHARES[document_id]
            return True

        # Supabase mode
        try:  # pragma: no cover - network
            res = (
                self.client.table("document_shares")
                .delete()
                .eq("document_id", document_id)
                .eq("profile_id", profile_id)
                .execute()
            )
        except Exception as exc:
            raise RuntimeError(f"DB remove sharer failed: {exc}") from exc
        return bool(res.data)

    def delete(self, document_id: str) -> None:
        self.set(document_id, [])
