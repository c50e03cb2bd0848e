"""Archive document use case - the only supported deletion."""

from datetime import UTC, datetime
from uuid import UUID

from quillsync.application.dto.document_dto import ArchiveOutput
from quillsync.application.ports import BackgroundRunner
from quillsync.application.services.quota_ledger import QuotaLedger
from quillsync.application.services.sync_reconciler import SyncReconciler
from quillsync.application.use_cases.document.side_effects import (
    commit_ledger,
    schedule_removal,
)
from quillsync.domain.exceptions import NotFound
from quillsync.domain.value_objects import LedgerDelta


class ArchiveDocumentUseCase:
    """Flag a document archived, release its quota and drop it from the index."""

    def __init__(
        self,
        unit_of_work_factory: type,
        quota_ledger: QuotaLedger,
        sync_reconciler: SyncReconciler,
        background_runner: BackgroundRunner,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._ledger = quota_ledger
        self._reconciler = sync_reconciler
        self._runner = background_runner

    async def execute(self, owner_id: str, document_id: UUID) -> ArchiveOutput:
        async with self._uow_factory() as uow:
            size_bytes = await uow.documents.archive(document_id, owner_id, datetime.now(UTC))
        # None also covers an already archived document, so the ledger is released once.
        if size_bytes is None:
            raise NotFound("Document", str(document_id))

        await commit_ledger(
            self._ledger.commit_deletion(owner_id, size_bytes),
            owner_id=owner_id,
            document_id=document_id,
            delta=LedgerDelta.for_deletion(size_bytes),
        )
        schedule_removal(self._runner, self._reconciler, document_id, owner_id)
        return ArchiveOutput(success=True)
