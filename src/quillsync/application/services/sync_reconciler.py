"""Sync reconciler - keeps the external semantic index in step with documents.

State lives on the document itself: ``external_index_id`` (null until the first
successful upsert) and ``external_index_fingerprint`` (hash of the text last
pushed). Nothing here raises into the caller; every outcome is a ``SyncResult``.
"""

import logging
from uuid import UUID

from quillsync.application.dto.sync_dto import SyncOptions, SyncResult
from quillsync.application.ports import SemanticIndex
from quillsync.domain.entities import Document
from quillsync.domain.exceptions import SemanticIndexError
from quillsync.domain.value_objects import ContentFingerprint, SkipReason

logger = logging.getLogger(__name__)

DOCUMENT_TYPE = "quillsync"


class SyncReconciler:
    """Idempotent, best-effort push of document text into the semantic index."""

    def __init__(
        self,
        unit_of_work_factory: type,
        semantic_index: SemanticIndex,
        *,
        key_prefix: str = "quillsync",
        group_prefix: str = "user_",
        min_word_count: int = 0,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._index = semantic_index
        self._key_prefix = key_prefix
        self._group_prefix = group_prefix
        self._min_word_count = min_word_count

    @property
    def enabled(self) -> bool:
        return self._index.enabled

    def stable_key(self, document_id: UUID) -> str:
        """Remote upsert key derived only from the document id."""
        return f"{self._key_prefix}-{document_id}"

    def document_id_from_key(self, stable_key: str | None) -> UUID | None:
        """Inverse of ``stable_key``; None for keys this service did not issue."""
        prefix = f"{self._key_prefix}-"
        if not stable_key or not stable_key.startswith(prefix):
            return None
        try:
            return UUID(stable_key[len(prefix) :])
        except ValueError:
            return None

    def group_tag(self, owner_id: str) -> str:
        return f"{self._group_prefix}{owner_id}"

    async def reconcile(
        self, document_id: UUID, owner_id: str, options: SyncOptions | None = None
    ) -> SyncResult:
        """Create or update the document's remote record when its text changed."""
        if not self._index.enabled:
            logger.debug("Sync skipped: semantic index disabled")
            return SyncResult.skip(document_id, SkipReason.FEATURE_DISABLED)
        try:
            return await self._reconcile(document_id, owner_id, options or SyncOptions())
        except SemanticIndexError as e:
            return self._failed(document_id, owner_id, str(e))
        except Exception as e:
            logger.exception(
                "Unexpected error during sync",
                extra={"ctx_document_id": str(document_id), "ctx_owner_id": owner_id},
            )
            return SyncResult.failure(document_id, str(e) or type(e).__name__)

    async def reconcile_many(
        self, document_ids: list[UUID], owner_id: str, options: SyncOptions | None = None
    ) -> list[SyncResult]:
        """Reconcile each id in turn; one failure never stops the rest."""
        results = []
        for document_id in document_ids:
            results.append(await self.reconcile(document_id, owner_id, options))
        return results

    async def remove(self, document_id: UUID, owner_id: str) -> SyncResult:
        """Delete the remote record of an archived document, best effort."""
        if not self._index.enabled:
            return SyncResult.skip(document_id, SkipReason.FEATURE_DISABLED)
        try:
            async with self._uow_factory() as uow:
                document = await uow.documents.get_for_owner(
                    document_id, owner_id, include_archived=True
                )
            if document is None:
                return SyncResult.failure(document_id, "Document not found")
            if not document.external_index_id:
                return SyncResult.skip(document_id, SkipReason.NOT_SYNCED)

            await self._index.delete(document.external_index_id)
            async with self._uow_factory() as uow:
                await uow.documents.clear_sync(document_id)
            logger.info(
                "Removed document from semantic index",
                extra={"ctx_document_id": str(document_id)},
            )
            return SyncResult(document_id=document_id, success=True)
        except SemanticIndexError as e:
            return self._failed(document_id, owner_id, str(e))
        except Exception as e:
            logger.exception(
                "Unexpected error during index removal",
                extra={"ctx_document_id": str(document_id), "ctx_owner_id": owner_id},
            )
            return SyncResult.failure(document_id, str(e) or type(e).__name__)

    async def _reconcile(
        self, document_id: UUID, owner_id: str, options: SyncOptions
    ) -> SyncResult:
        async with self._uow_factory() as uow:
            document = await uow.documents.get_for_owner(
                document_id, owner_id, include_archived=True
            )
        if document is None:
            return SyncResult.failure(document_id, "Document not found")

        current_id = document.external_index_id
        if document.archived and not options.include_archived:
            return SyncResult.skip(document_id, SkipReason.DOCUMENT_ARCHIVED, current_id)
        min_word_count = (
            options.min_word_count if options.min_word_count is not None else self._min_word_count
        )
        if document.word_count < min_word_count:
            return SyncResult.skip(document_id, SkipReason.BELOW_MINIMUM_WORD_COUNT, current_id)
        # A synced record whose text was cleared still gets the update.
        if not document.derived_text and current_id is None:
            return SyncResult.skip(document_id, SkipReason.EMPTY_CONTENT)

        fingerprint = ContentFingerprint.of(document.derived_text)
        if (
            current_id
            and not options.force
            and fingerprint.matches(document.external_index_fingerprint)
        ):
            return SyncResult.skip(document_id, SkipReason.UNCHANGED, current_id)

        remote_id = await self._index.upsert(
            stable_key=self.stable_key(document.id),
            text=document.derived_text,
            metadata=self._metadata(document),
            group_tag=self.group_tag(owner_id),
            remote_id=current_id,
        )
        async with self._uow_factory() as uow:
            recorded = await uow.documents.record_sync(
                document.id, remote_id, fingerprint.value, document.derived_text
            )
        if not recorded:
            logger.info(
                "Document text changed during sync; fingerprint not recorded",
                extra={"ctx_document_id": str(document.id)},
            )

        logger.info(
            "Synced document to semantic index",
            extra={
                "ctx_document_id": str(document.id),
                "ctx_external_index_id": remote_id,
                "ctx_created": current_id is None,
            },
        )
        return SyncResult(document_id=document.id, success=True, external_index_id=remote_id)

    def _failed(self, document_id: UUID, owner_id: str, error: str) -> SyncResult:
        logger.warning(
            "Semantic index sync failed: %s",
            error,
            extra={"ctx_document_id": str(document_id), "ctx_owner_id": owner_id},
        )
        return SyncResult.failure(document_id, error)

    @staticmethod
    def _metadata(document: Document) -> dict[str, str | int | bool]:
        return {
            "title": document.title,
            "owner_id": document.owner_id,
            "word_count": document.word_count,
            "created_at": document.created_at.isoformat(),
            "last_edited_at": document.last_edited_at.isoformat(),
            "archived": "true" if document.archived else "false",
            "document_type": DOCUMENT_TYPE,
        }
