from __future__ import annotations

import os
import uuid
from datetime import UTC, datetime
from typing import Any

from supabase import Client

from docshare.domain.entities.document import DocumentEntity
from docshare.infrastructure.database.postgres_client import get_postgres_client

# module-level in-memory store for disabled mode
_MEM_DOCUMENTS: dict[str, DocumentEntity] = {}


class DocumentRepository:
    def __init__(self, client: Client | None) -> None:
        self.client = client
        self.disabled = os.getenv("SUPABASE_DISABLED", "0") == "1"
        self.use_local_db = os.getenv("USE_LOCAL_DB", "0") == "1"
        self.pg_client = get_postgres_client() if self.use_local_db else None

    def _row_to_entity(self, row: dict) -> DocumentEntity:
        """Convert database row to DocumentEntity."""
        # PostgreSQL returns datetime objects, Supabase returns ISO strings
        created_at = row["created_at"]
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        updated_at = row.get("updated_at") or created_at
        if isinstance(updated_at, str):
            updated_at = datetime.fromisoformat(updated_at)

        return DocumentEntity(
            id=row["id"],
            owner_id=row["owner_id"],
            content=row.get("content"),  # jsonb, already decoded by the driver
            created_at=created_at,
            updated_at=updated_at,
        )

    def create(self, owner_id: str, content: Any) -> DocumentEntity:
        now = datetime.now(UTC)
        doc_id = uuid.uuid4().hex

        # PostgreSQL mode
        if self.use_local_db and self.pg_client:
            try:
                query = """
                    INSERT INTO documents (id, owner_id, content, created_at, updated_at)
                    VALUES (%s, %s, %s, %s, %s)
                    RETURNING *
                """
                row = self.pg_client.fetch_one(
                    query, (doc_id, owner_id, self.pg_client.json(content), now, now)
                )
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL insert document failed: {exc}") from exc
            if row is None:
                raise RuntimeError("PostgreSQL insert document returned no row")
            return self._row_to_entity(row)

        # In-memory mode
        if self.disabled or self.client is None:
            entity = DocumentEntity(
                id=doc_id,
                owner_id=owner_id,
                content=content,
                created_at=now,
                updated_at=now,
            )
            _MEM_DOCUMENTS[entity.id] = entity
            return entity

        # Supabase mode
        try:  # pragma: no cover - network
            data = {
                "id": doc_id,
                "owner_id": owner_id,
                "content": content,
                "created_at": now.isoformat(),
                "updated_at": now.isoformat(),
            }
            res = self.client.table("documents").insert(data).execute()
            return self._row_to_entity(res.data[0])
        except Exception as exc:
            raise RuntimeError(f"DB insert document failed: {exc}") from exc

    def get(self, document_id: str) -> DocumentEntity | None:
        # PostgreSQL mode
        if self.use_local_db and self.pg_client:
            try:
                row = self.pg_client.fetch_one("SELECT * FROM documents WHERE id = %s", (document_id,))
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL get document failed: {exc}") from exc
            return self._row_to_entity(row) if row else None

        # In-memory mode
        if self.disabled or self.client is None:
            return _MEM_DOCUMENTS.get(document_id)

        # Supabase mode
        try:  # pragma: no cover - network
            res = (
                self.client.table("documents").select("*").eq("id", document_id).maybe_single().execute()
            )
        except Exception as exc:
            raise RuntimeError(f"DB get document failed: {exc}") from exc
        row = res.data if res else None
        return self._row_to_entity(row) if row else None

    def list_all(self) -> list[DocumentEntity]:
        # PostgreSQL mode
        if self.use_local_db and self.pg_client:
            try:
                rows = self.pg_client.fetch_all("SELECT * FROM documents")
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL list documents failed: {exc}") from exc
            return [self._row_to_entity(row) for row in rows]

        # In-memory mode
        if self.disabled or self.client is None:
            return list(_MEM_DOCUMENTS.values())

        # Supabase mode
        try:  # pragma: no cover - network
            res = self.client.table("documents").select("*").execute()
        except Exception as exc:
            raise RuntimeError(f"DB list documents failed: {exc}") from exc
        return [self._row_to_entity(row) for row in res.data or []]

    def update_content(self, document_id: str, content: Any) -> DocumentEntity | None:
        now = datetime.now(UTC)

        # PostgreSQL mode
        if self.use_local_db and self.pg_client:
            try:
                query = """
                    UPDATE documents SET content = %s, updated_at = %s
                    WHERE id = %s
                    RETURNING *
                """
                row = self.pg_client.fetch_one(
                    query, (self.pg_client.json(content), now, document_id)
                )
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL update document failed: {exc}") from exc
            return self._row_to_entity(row) if row else None

        # In-memory mode
        if self.disabled or self.client is None:
            current = _MEM_DOCUMENTS.get(document_id)
            if current is None:
                return None
            updated = DocumentEntity(
                id=current.id,
                owner_id=current.owner_id,
                content=content,
                created_at=current.created_at,
                updated_at=now,
            )
            _MEM_DOCUMENTS[document_id] = updated
            return updated

        # Supabase mode
        try:  # pragma: no cover - network
            res = (
                self.client.table("documents")
                .update({"content": content, "updated_at": now.isoformat()})
                .eq("id", document_id)
                .execute()
            )
        except Exception as exc:
            raise RuntimeError(f"DB update document failed: {exc}") from exc
        rows = res.data or []
        return self._row_to_entity(rows[0]) if rows else None

    def delete(self, document_id: str) -> bool:
        # PostgreSQL mode
        if self.use_local_db and self.pg_client:
            try:
                affected = self.pg_client.execute("DELETE FROM documents WHERE id = %s", (document_id,))
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL delete document failed: {exc}") from exc
            return affected > 0

        # In-memory mode
        if self.disabled or self.client is None:
            return _MEM_DOCUMENTS.pop(document_id, None) is not None

        # Supabase mode
        try:  # pragma: no cover - network
            res = self.client.table("documents").delete().eq("id", document_id).execute()
        except Exception as exc:
            raise RuntimeError(f"DB delete document failed: {exc}") from exc
        return bool(res.data)
