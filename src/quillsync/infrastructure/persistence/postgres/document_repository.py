"""PostgreSQL document repository implementation."""

from datetime import datetime
from uuid import UUID

from psycopg import AsyncConnection
from psycopg.types.json import Jsonb

from quillsync.domain.entities import Document

_COLUMNS = (
    "id, owner_id, title, content, derived_text, word_count, character_count, "
    "page_count, size_bytes, archived, external_index_id, external_index_fingerprint, "
    "created_at, updated_at, last_edited_at"
)


def _row_to_document(r: tuple) -> Document:
    return Document(
        id=r[0],
        owner_id=r[1],
        title=r[2],
        content=r[3],
        derived_text=r[4],
        word_count=r[5],
        character_count=r[6],
        page_count=r[7],
        size_bytes=r[8],
        archived=r[9],
        external_index_id=r[10],
        external_index_fingerprint=r[11],
        created_at=r[12],
        updated_at=r[13],
        last_edited_at=r[14],
    )


def _like_pattern(query: str) -> str:
    escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class PostgresDocumentRepository:
    """Document repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_for_owner(
        self, document_id: UUID, owner_id: str, include_archived: bool = False
    ) -> Document | None:
        """Get document by id, scoped to its owner."""
        q = f"SELECT {_COLUMNS} FROM document WHERE id = %s AND owner_id = %s"
        if not include_archived:
            q += " AND archived = false"
        cur = await self._conn.execute(q, (document_id, owner_id))
        r = await cur.fetchone()
        return _row_to_document(r) if r else None

    async def list_for_owner(
        self,
        owner_id: str,
        *,
        limit: int = 10,
        offset: int = 0,
        include_archived: bool = False,
    ) -> tuple[list[Document], int]:
        """List documents, most recently updated first, with total count.

        Archived documents are left out unless ``include_archived``.
        """
        where = "owner_id = %s" if include_archived else "owner_id = %s AND archived = false"
        cur = await self._conn.execute(f"SELECT COUNT(*) FROM document WHERE {where}", (owner_id,))
        total = (await cur.fetchone())[0]
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM document WHERE {where} "
            "ORDER BY updated_at DESC, id LIMIT %s OFFSET %s",
            (owner_id, limit, offset),
        )
        rows = await cur.fetchall()
        return [_row_to_document(r) for r in rows], total

    async def get_many_for_owner(self, document_ids: list[UUID], owner_id: str) -> list[Document]:
        if not document_ids:
            return []
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM document "
            "WHERE id = ANY(%s) AND owner_id = %s AND archived = false",
            (document_ids, owner_id),
        )
        return [_row_to_document(r) for r in await cur.fetchall()]

    async def search_text(self, owner_id: str, query: str, limit: int = 10) -> list[Document]:
        """Case-insensitive substring match on title and derived text."""
        pattern = _like_pattern(query)
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM document "
            "WHERE owner_id = %s AND archived = false "
            "AND (derived_text ILIKE %s OR title ILIKE %s) "
            "ORDER BY updated_at DESC LIMIT %s",
            (owner_id, pattern, pattern, limit),
        )
        return [_row_to_document(r) for r in await cur.fetchall()]

    async def create(self, document: Document) -> Document:
        """Insert document with all derived fields in one statement."""
        await self._conn.execute(
            f"INSERT INTO document ({_COLUMNS}) "
            "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)",
            (
                document.id,
                document.owner_id,
                document.title,
                Jsonb(document.content),
                document.derived_text,
                document.word_count,
                document.character_count,
                document.page_count,
                document.size_bytes,
                document.archived,
                document.external_index_id,
                document.external_index_fingerprint,
                document.created_at,
                document.updated_at,
                document.last_edited_at,
            ),
        )
        return document

    async def update(self, document: Document) -> int | None:
        """Rewrite content columns of a live row; return the size_bytes it replaced."""
        cur = await self._conn.execute(
            "WITH previous AS ("
            "  SELECT id, size_bytes FROM document"
            "  WHERE id = %s AND owner_id = %s AND archived = false FOR UPDATE"
            ") "
            "UPDATE document d SET title = %s, content = %s, derived_text = %s, "
            "word_count = %s, character_count = %s, page_count = %s, size_bytes = %s, "
            "updated_at = %s, last_edited_at = %s "
            "FROM previous WHERE d.id = previous.id "
            "RETURNING previous.size_bytes",
            (
                document.id,
                document.owner_id,
                document.title,
                Jsonb(document.content),
                document.derived_text,
                document.word_count,
                document.character_count,
                document.page_count,
                document.size_bytes,
                document.updated_at,
                document.last_edited_at,
            ),
        )
        r = await cur.fetchone()
        return r[0] if r else None

    async def archive(self, document_id: UUID, owner_id: str, now: datetime) -> int | None:
        cur = await self._conn.execute(
            "UPDATE document SET archived = true, updated_at = %s "
            "WHERE id = %s AND owner_id = %s AND archived = false "
            "RETURNING size_bytes",
            (now, document_id, owner_id),
        )
        r = await cur.fetchone()
        return r[0] if r else None

    async def record_sync(
        self, document_id: UUID, external_index_id: str, fingerprint: str, synced_text: str
    ) -> bool:
        cur = await self._conn.execute(
            """
            UPDATE document SET
                external_index_id = %(external_index_id)s,
                external_index_fingerprint = CASE
                    WHEN derived_text = %(synced_text)s THEN %(fingerprint)s
                    ELSE external_index_fingerprint
                END
            WHERE id = %(id)s
            RETURNING derived_text = %(synced_text)s
            """,
            {
                "id": document_id,
                "external_index_id": external_index_id,
                "fingerprint": fingerprint,
                "synced_text": synced_text,
            },
        )
        row = await cur.fetchone()
        return bool(row and row[0])

    async def clear_sync(self, document_id: UUID) -> None:
        await self._conn.execute(
            "UPDATE document SET external_index_id = NULL, external_index_fingerprint = NULL "
            "WHERE id = %s",
            (document_id,),
        )
