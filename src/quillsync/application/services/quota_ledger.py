"""Quota ledger - per-owner admission checks and running totals.

Admission checks are advisory pre-flight reads, not locks: two concurrent writers
for the same owner can both pass a check before either commits. Commits are
relative adjustments, so the totals stay exact even when that happens; only the
ceiling can be overshot by the racing writes.
"""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime

from quillsync.application.ports import UnitOfWork
from quillsync.domain.entities import QuotaAccount, QuotaDefaults
from quillsync.domain.exceptions import QuotaExceeded
from quillsync.domain.value_objects import (
    ContentMetrics,
    LedgerAdjustment,
    LedgerDelta,
    QuotaConstraint,
    QuotaViolation,
)

logger = logging.getLogger(__name__)


@dataclass
class AdmissionResult:
    """Outcome of an admission check with every violated ceiling."""

    violations: list[QuotaViolation] = field(default_factory=list)

    @property
    def allowed(self) -> bool:
        return not self.violations

    @property
    def errors(self) -> list[str]:
        return [v.message for v in self.violations]

    def raise_if_denied(self) -> None:
        if self.violations:
            raise QuotaExceeded(self.violations)


def _kb(size_bytes: int) -> int:
    return round(size_bytes / 1024)


def _content_violations(account: QuotaAccount, metrics: ContentMetrics) -> list[QuotaViolation]:
    violations = []
    if metrics.size_bytes > account.max_document_size_bytes:
        violations.append(
            QuotaViolation(
                QuotaConstraint.DOCUMENT_SIZE,
                f"Content size ({_kb(metrics.size_bytes)}KB) exceeds limit "
                f"({_kb(account.max_document_size_bytes)}KB)",
            )
        )
    if metrics.page_count > account.max_document_pages:
        violations.append(
            QuotaViolation(
                QuotaConstraint.PAGE_COUNT,
                f"Page count ({metrics.page_count}) exceeds limit "
                f"({account.max_document_pages} pages)",
            )
        )
    return violations


class QuotaLedger:
    """Gates document mutations against per-owner ceilings and keeps totals."""

    def __init__(self, unit_of_work_factory: type, defaults: QuotaDefaults | None = None) -> None:
        self._uow_factory = unit_of_work_factory
        self._defaults = defaults or QuotaDefaults()

    async def ensure_account_exists(self, owner_id: str) -> QuotaAccount:
        """Return the owner's account, creating it with defaults on first use."""
        async with self._uow_factory() as uow:
            return await self._ensure(uow, owner_id)

    async def check_creation_admission(
        self, owner_id: str, metrics: ContentMetrics
    ) -> AdmissionResult:
        account = await self.ensure_account_exists(owner_id)
        violations = []
        if account.current_document_count >= account.max_documents:
            violations.append(
                QuotaViolation(
                    QuotaConstraint.DOCUMENT_COUNT,
                    f"Document limit reached "
                    f"({account.current_document_count}/{account.max_documents})",
                )
            )
        violations.extend(_content_violations(account, metrics))
        return AdmissionResult(violations)

    async def check_update_admission(
        self, owner_id: str, metrics: ContentMetrics
    ) -> AdmissionResult:
        """Same per-document ceilings as creation; an existing document is not a new slot."""
        account = await self.ensure_account_exists(owner_id)
        return AdmissionResult(_content_violations(account, metrics))

    async def commit_creation(self, owner_id: str, size_bytes: int) -> LedgerAdjustment:
        """Count one new document. Call at most once per durable creation."""
        return await self._apply(owner_id, LedgerDelta.for_creation(size_bytes))

    async def commit_update(
        self, owner_id: str, old_size_bytes: int, new_size_bytes: int
    ) -> LedgerAdjustment | None:
        delta = LedgerDelta.for_update(old_size_bytes, new_size_bytes)
        if delta.is_zero:
            return None
        return await self._apply(owner_id, delta)

    async def commit_deletion(self, owner_id: str, size_bytes: int) -> LedgerAdjustment:
        return await self._apply(owner_id, LedgerDelta.for_deletion(size_bytes))

    async def _apply(self, owner_id: str, delta: LedgerDelta) -> LedgerAdjustment:
        async with self._uow_factory() as uow:
            adjustment = await uow.quotas.apply_delta(owner_id, delta)
            if adjustment is None:
                await self._ensure(uow, owner_id)
                adjustment = await uow.quotas.apply_delta(owner_id, delta)
        if adjustment is None:
            raise RuntimeError(f"Quota account for {owner_id} vanished during adjustment")
        if adjustment.clamped:
            logger.warning(
                "Quota ledger clamped at zero; totals were lower than the adjustment",
                extra={
                    "ctx_owner_id": owner_id,
                    "ctx_delta_documents": delta.documents,
                    "ctx_delta_bytes": delta.storage_bytes,
                    "ctx_previous_documents": adjustment.previous_document_count,
                    "ctx_previous_bytes": adjustment.previous_storage_bytes,
                },
            )
        return adjustment

    async def _ensure(self, uow: UnitOfWork, owner_id: str) -> QuotaAccount:
        account = await uow.quotas.get(owner_id)
        if account is not None:
            return account
        return await uow.quotas.create_if_missing(
            QuotaAccount.with_defaults(owner_id, self._defaults, datetime.now(UTC))
        )
