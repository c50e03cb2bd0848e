"""Document repository port."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from quillsync.domain.entities import Document


class DocumentRepository(Protocol):
    """Port for document persistence, always scoped to an owner.

    Content writes (``create``, ``update``, ``archive``) never touch the sync
    columns; ``record_sync`` and ``clear_sync`` touch nothing else.
    """

    async def get_for_owner(
        self, document_id: UUID, owner_id: str, include_archived: bool = False
    ) -> Document | None: ...

    async def list_for_owner(
        self,
        owner_id: str,
        *,
        limit: int = 10,
        offset: int = 0,
        include_archived: bool = False,
    ) -> tuple[list[Document], int]: ...

    async def get_many_for_owner(self, document_ids: list[UUID], owner_id: str) -> list[Document]: ...

    async def search_text(self, owner_id: str, query: str, limit: int = 10) -> list[Document]: ...

    async def create(self, document: Document) -> Document: ...

    async def update(self, document: Document) -> int | None:
        """Write title, content and derived fields; return the replaced size_bytes.

        Returns None when no live (non-archived) row matched.
        """
        ...

    async def archive(self, document_id: UUID, owner_id: str, now: datetime) -> int | None:
        """Archive a live document; return its size_bytes, or None if none matched."""
        ...

    async def record_sync(
        self, document_id: UUID, external_index_id: str, fingerprint: str, synced_text: str
    ) -> bool:
        """Store the remote id; store the fingerprint only if the text is still ``synced_text``.

        Returns False when the text changed since it was read for the push.
        """
        ...

    async def clear_sync(self, document_id: UUID) -> None: ...
