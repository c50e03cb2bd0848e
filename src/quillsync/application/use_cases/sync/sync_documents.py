"""Manual and batch resync use case."""

from uuid import UUID

from quillsync.application.dto.sync_dto import SyncOptions, SyncResult
from quillsync.application.services.sync_reconciler import SyncReconciler
from quillsync.domain.exceptions import NotFound

BATCH_PAGE_SIZE = 100


class SyncDocumentsUseCase:
    """Reconcile documents on demand, awaiting the outcome.

    Used by the resync endpoints and the scheduled retry job; the write path
    itself never retries.
    """

    def __init__(self, unit_of_work_factory: type, sync_reconciler: SyncReconciler) -> None:
        self._uow_factory = unit_of_work_factory
        self._reconciler = sync_reconciler

    async def execute_one(
        self, owner_id: str, document_id: UUID, options: SyncOptions | None = None
    ) -> SyncResult:
        async with self._uow_factory() as uow:
            document = await uow.documents.get_for_owner(
                document_id, owner_id, include_archived=True
            )
        if document is None:
            raise NotFound("Document", str(document_id))
        return await self._reconciler.reconcile(document_id, owner_id, options)

    async def execute(
        self,
        owner_id: str,
        document_ids: list[UUID] | None = None,
        options: SyncOptions | None = None,
    ) -> list[SyncResult]:
        """Reconcile the given ids, or every document of the owner.

        Without ids, archived documents are listed only when ``include_archived``.
        """
        if document_ids is None:
            include_archived = bool(options and options.include_archived)
            document_ids = await self._owner_document_ids(owner_id, include_archived)
        return await self._reconciler.reconcile_many(document_ids, owner_id, options)

    async def _owner_document_ids(self, owner_id: str, include_archived: bool) -> list[UUID]:
        ids: list[UUID] = []
        offset = 0
        while True:
            async with self._uow_factory() as uow:
                documents, total = await uow.documents.list_for_owner(
                    owner_id,
                    limit=BATCH_PAGE_SIZE,
                    offset=offset,
                    include_archived=include_archived,
                )
            ids.extend(d.id for d in documents)
            offset += BATCH_PAGE_SIZE
            if not documents or offset >= total:
                return ids
