"""Update document use case."""

from datetime import UTC, datetime
from uuid import UUID, uuid4

from quillsync.application.dto.document_dto import DocumentOutput, DocumentUpdateInput
from quillsync.application.ports import BackgroundRunner
from quillsync.application.services.quota_ledger import QuotaLedger
from quillsync.application.services.sync_reconciler import SyncReconciler
from quillsync.application.use_cases.document.side_effects import (
    commit_ledger,
    schedule_reconcile,
)
from quillsync.application.use_cases.document.validation import validate_content, validate_title
from quillsync.domain.entities import DocumentVersion
from quillsync.domain.exceptions import NotFound, ValidationError
from quillsync.domain.value_objects import ContentMetrics, LedgerDelta
from quillsync.domain.value_objects.content_metrics import DEFAULT_WORDS_PER_PAGE


class UpdateDocumentUseCase:
    """Update title and/or content of an owned, non-archived document.

    Autosave writes update the row, its metrics and the ledger, but create no
    snapshot and trigger no semantic index sync.
    """

    def __init__(
        self,
        unit_of_work_factory: type,
        quota_ledger: QuotaLedger,
        sync_reconciler: SyncReconciler,
        background_runner: BackgroundRunner,
        words_per_page: int = DEFAULT_WORDS_PER_PAGE,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._ledger = quota_ledger
        self._reconciler = sync_reconciler
        self._runner = background_runner
        self._words_per_page = words_per_page

    async def execute(
        self, owner_id: str, document_id: UUID, input_data: DocumentUpdateInput
    ) -> DocumentOutput:
        title = validate_title(input_data.title) if input_data.title is not None else None
        content = validate_content(input_data.content) if input_data.content is not None else None
        if title is None and content is None:
            raise ValidationError("Title or content is required")

        async with self._uow_factory() as uow:
            existing = await uow.documents.get_for_owner(document_id, owner_id)
        if existing is None:
            raise NotFound("Document", str(document_id))

        now = datetime.now(UTC)
        snapshot = None
        if content is None:
            updated = existing.with_title(title, now)
        else:
            metrics = ContentMetrics.from_content(content, self._words_per_page)
            admission = await self._ledger.check_update_admission(owner_id, metrics)
            admission.raise_if_denied()
            updated = existing.with_content(content, metrics, now, title=title)
            if not input_data.is_autosave:
                snapshot = DocumentVersion.snapshot(
                    id=uuid4(),
                    document_id=document_id,
                    content=content,
                    metrics=metrics,
                    created_at=now,
                )

        async with self._uow_factory() as uow:
            previous_size = await uow.documents.update(updated)
            if previous_size is None:
                raise NotFound("Document", str(document_id))
            if snapshot is not None:
                await uow.versions.append(snapshot)

        # The size actually replaced, so a concurrent writer cannot skew the delta.
        await commit_ledger(
            self._ledger.commit_update(owner_id, previous_size, updated.size_bytes),
            owner_id=owner_id,
            document_id=document_id,
            delta=LedgerDelta.for_update(previous_size, updated.size_bytes),
        )
        if not input_data.is_autosave:
            schedule_reconcile(self._runner, self._reconciler, document_id, owner_id)
        return DocumentOutput.from_entity(updated)
