"""PostgreSQL document version repository implementation."""

from uuid import UUID

from psycopg import AsyncConnection
from psycopg.types.json import Jsonb

from quillsync.domain.entities import DocumentVersion


class PostgresDocumentVersionRepository:
    """Append-only snapshots."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def append(self, version: DocumentVersion) -> DocumentVersion:
        await self._conn.execute(
            "INSERT INTO document_version (id, document_id, content, derived_text, "
            "word_count, character_count, page_count, size_bytes, created_at, "
            "is_autosave, change_description) "
            "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)",
            (
                version.id,
                version.document_id,
                Jsonb(version.content),
                version.derived_text,
                version.word_count,
                version.character_count,
                version.page_count,
                version.size_bytes,
                version.created_at,
                version.is_autosave,
                version.change_description,
            ),
        )
        return version

    async def list_for_document(
        self, document_id: UUID, *, limit: int = 20
    ) -> list[DocumentVersion]:
        cur = await self._conn.execute(
            "SELECT id, document_id, content, derived_text, word_count, character_count, "
            "page_count, size_bytes, created_at, is_autosave, change_description "
            "FROM document_version WHERE document_id = %s "
            "ORDER BY created_at DESC LIMIT %s",
            (document_id, limit),
        )
        return [
            DocumentVersion(
                id=r[0],
                document_id=r[1],
                content=r[2],
                derived_text=r[3],
                word_count=r[4],
                character_count=r[5],
                page_count=r[6],
                size_bytes=r[7],
                created_at=r[8],
                is_autosave=r[9],
                change_description=r[10],
            )
            for r in await cur.fetchall()
        ]
