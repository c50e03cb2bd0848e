"""Best-effort steps that run after the canonical write is durable."""

import logging
from collections.abc import Awaitable
from uuid import UUID

from quillsync.application.ports import BackgroundResult, BackgroundRunner
from quillsync.application.services.sync_reconciler import SyncReconciler
from quillsync.domain.value_objects import LedgerDelta

logger = logging.getLogger(__name__)


async def commit_ledger(
    commit: Awaitable[object], *, owner_id: str, document_id: UUID, delta: LedgerDelta
) -> bool:
    """Await a ledger commit; on failure log the drift and report False.

    The canonical write is not rolled back. The logged delta is what an operator
    needs to repair the owner's totals by hand.
    """
    try:
        await commit
    except Exception:
        logger.warning(
            "Ledger drift: document write committed but quota ledger update failed",
            exc_info=True,
            extra={
                "ctx_owner_id": owner_id,
                "ctx_document_id": str(document_id),
                "ctx_delta_documents": delta.documents,
                "ctx_delta_bytes": delta.storage_bytes,
            },
        )
        return False
    return True


def schedule_reconcile(
    runner: BackgroundRunner, reconciler: SyncReconciler, document_id: UUID, owner_id: str
) -> BackgroundResult | None:
    if not reconciler.enabled:
        return None
    return runner.submit(f"reconcile:{document_id}", reconciler.reconcile(document_id, owner_id))


def schedule_removal(
    runner: BackgroundRunner, reconciler: SyncReconciler, document_id: UUID, owner_id: str
) -> BackgroundResult | None:
    if not reconciler.enabled:
        return None
    return runner.submit(f"unindex:{document_id}", reconciler.remove(document_id, owner_id))
