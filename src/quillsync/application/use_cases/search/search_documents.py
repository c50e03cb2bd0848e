"""Search documents use case - semantic index with plain-text fallback."""

import logging
from uuid import UUID

from quillsync.application.dto.search_dto import SearchInput, SearchResult
from quillsync.application.ports import IndexHit, SemanticIndex
from quillsync.application.services.sync_reconciler import SyncReconciler
from quillsync.domain.entities import Document
from quillsync.domain.exceptions import SemanticIndexError, ValidationError

logger = logging.getLogger(__name__)

MAX_LIMIT = 50
SNIPPET_LENGTH = 200


class SearchDocumentsUseCase:
    """Search an owner's documents.

    Uses the semantic index when it is enabled and reachable; otherwise falls
    back to a substring match over derived text.
    """

    def __init__(
        self,
        unit_of_work_factory: type,
        semantic_index: SemanticIndex,
        sync_reconciler: SyncReconciler,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._index = semantic_index
        self._reconciler = sync_reconciler

    async def execute(self, owner_id: str, input_data: SearchInput) -> list[SearchResult]:
        query = (input_data.query or "").strip()
        if not query:
            raise ValidationError("Search query is required")
        limit = min(max(input_data.limit, 1), MAX_LIMIT)

        if self._index.enabled:
            try:
                hits = await self._index.search(
                    query, group_tag=self._reconciler.group_tag(owner_id), limit=limit
                )
            except SemanticIndexError as e:
                logger.warning("Semantic search failed, using text search: %s", e)
            else:
                return await self._from_hits(owner_id, hits)
        return await self._text_search(owner_id, query, limit)

    async def _from_hits(self, owner_id: str, hits: list[IndexHit]) -> list[SearchResult]:
        ids: dict[UUID, IndexHit] = {}
        for hit in hits:
            document_id = self._reconciler.document_id_from_key(hit.stable_key)
            if document_id is not None and document_id not in ids:
                ids[document_id] = hit
        if not ids:
            return []
        async with self._uow_factory() as uow:
            documents = await uow.documents.get_many_for_owner(list(ids), owner_id)
        by_id = {d.id: d for d in documents}
        # Keep index ranking; drop hits for archived or foreign documents.
        return [
            _result(by_id[document_id], hit.score, hit.chunks)
            for document_id, hit in ids.items()
            if document_id in by_id
        ]

    async def _text_search(self, owner_id: str, query: str, limit: int) -> list[SearchResult]:
        async with self._uow_factory() as uow:
            documents = await uow.documents.search_text(owner_id, query, limit)
        return [_result(d, 1.0, [d.derived_text[:SNIPPET_LENGTH]]) for d in documents]


def _result(document: Document, score: float, chunks: list[str]) -> SearchResult:
    return SearchResult(
        document_id=document.id,
        title=document.title,
        score=score,
        word_count=document.word_count,
        updated_at=document.updated_at,
        matched_chunks=chunks,
    )
