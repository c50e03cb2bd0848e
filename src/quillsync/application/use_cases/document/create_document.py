"""Create document use case."""

from datetime import UTC, datetime
from uuid import uuid4

from quillsync.application.dto.document_dto import DocumentCreateInput, DocumentOutput
from quillsync.application.ports import BackgroundRunner
from quillsync.application.services.quota_ledger import QuotaLedger
from quillsync.application.services.sync_reconciler import SyncReconciler
from quillsync.application.use_cases.document.side_effects import (
    commit_ledger,
    schedule_reconcile,
)
from quillsync.application.use_cases.document.validation import validate_content, validate_title
from quillsync.domain.entities import Document, DocumentVersion
from quillsync.domain.value_objects import ContentMetrics, LedgerDelta
from quillsync.domain.value_objects.content_metrics import DEFAULT_WORDS_PER_PAGE


class CreateDocumentUseCase:
    """Validate, admit, write document and first snapshot, count it, then sync."""

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

    async def execute(self, owner_id: str, input_data: DocumentCreateInput) -> DocumentOutput:
        """Create a document owned by ``owner_id``."""
        title = validate_title(input_data.title)
        content = validate_content(input_data.content)
        metrics = ContentMetrics.from_content(content, self._words_per_page)

        admission = await self._ledger.check_creation_admission(owner_id, metrics)
        admission.raise_if_denied()

        now = datetime.now(UTC)
        document = Document.new(
            id=uuid4(),
            owner_id=owner_id,
            title=title,
            content=content,
            metrics=metrics,
            now=now,
        )
        async with self._uow_factory() as uow:
            await uow.documents.create(document)
            await uow.versions.append(
                DocumentVersion.snapshot(
                    id=uuid4(),
                    document_id=document.id,
                    content=content,
                    metrics=metrics,
                    created_at=now,
                    change_description="Created",
                )
            )

        await commit_ledger(
            self._ledger.commit_creation(owner_id, metrics.size_bytes),
            owner_id=owner_id,
            document_id=document.id,
            delta=LedgerDelta.for_creation(metrics.size_bytes),
        )
        schedule_reconcile(self._runner, self._reconciler, document.id, owner_id)
        return DocumentOutput.from_entity(document)
