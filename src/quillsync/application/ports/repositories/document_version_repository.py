"""Document version repository port."""

from typing import Protocol
from uuid import UUID

from quillsync.domain.entities import DocumentVersion


class DocumentVersionRepository(Protocol):
    """Append-only snapshot storage."""

    async def append(self, version: DocumentVersion) -> DocumentVersion: ...

    async def list_for_document(
        self, document_id: UUID, *, limit: int = 20
    ) -> list[DocumentVersion]: ...
