"""PostgreSQL quota account repository implementation."""

from psycopg import AsyncConnection

from quillsync.domain.entities import QuotaAccount
from quillsync.domain.value_objects import LedgerAdjustment, LedgerDelta

_COLUMNS = (
    "owner_id, max_documents, max_document_size_bytes, max_document_pages, "
    "current_document_count, total_storage_used_bytes, created_at, updated_at"
)


class PostgresQuotaAccountRepository:
    """Quota accounts; totals move only by relative, zero-floored adjustments."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get(self, owner_id: str) -> QuotaAccount | None:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM quota_account WHERE owner_id = %s",
            (owner_id,),
        )
        r = await cur.fetchone()
        if not r:
            return None
        return QuotaAccount(
            owner_id=r[0],
            max_documents=r[1],
            max_document_size_bytes=r[2],
            max_document_pages=r[3],
            current_document_count=r[4],
            total_storage_used_bytes=r[5],
            created_at=r[6],
            updated_at=r[7],
        )

    async def create_if_missing(self, account: QuotaAccount) -> QuotaAccount:
        """Insert unless another writer got there first; return the stored row."""
        await self._conn.execute(
            f"INSERT INTO quota_account ({_COLUMNS}) "
            "VALUES (%s, %s, %s, %s, %s, %s, %s, %s) "
            "ON CONFLICT (owner_id) DO NOTHING",
            (
                account.owner_id,
                account.max_documents,
                account.max_document_size_bytes,
                account.max_document_pages,
                account.current_document_count,
                account.total_storage_used_bytes,
                account.created_at,
                account.updated_at,
            ),
        )
        stored = await self.get(account.owner_id)
        return stored or account

    async def apply_delta(self, owner_id: str, delta: LedgerDelta) -> LedgerAdjustment | None:
        """Adjust totals in place, floored at zero, returning before/after values."""
        cur = await self._conn.execute(
            "UPDATE quota_account AS q SET "
            "current_document_count = GREATEST(0, q.current_document_count + %(documents)s), "
            "total_storage_used_bytes = GREATEST(0, q.total_storage_used_bytes + %(bytes)s), "
            "updated_at = NOW() "
            "FROM ("
            "  SELECT owner_id, current_document_count, total_storage_used_bytes"
            "  FROM quota_account WHERE owner_id = %(owner_id)s FOR UPDATE"
            ") AS prev "
            "WHERE q.owner_id = prev.owner_id "
            "RETURNING prev.current_document_count, prev.total_storage_used_bytes, "
            "q.current_document_count, q.total_storage_used_bytes",
            {"owner_id": owner_id, "documents": delta.documents, "bytes": delta.storage_bytes},
        )
        r = await cur.fetchone()
        if not r:
            return None
        return LedgerAdjustment(
            previous_document_count=r[0],
            previous_storage_bytes=r[1],
            document_count=r[2],
            storage_bytes=r[3],
            delta=delta,
        )
