"""Quota account repository port."""

from typing import Protocol

from quillsync.domain.entities import QuotaAccount
from quillsync.domain.value_objects import LedgerAdjustment, LedgerDelta


class QuotaAccountRepository(Protocol):
    """Port for quota accounts. Totals change only through ``apply_delta``."""

    async def get(self, owner_id: str) -> QuotaAccount | None: ...

    async def create_if_missing(self, account: QuotaAccount) -> QuotaAccount: ...

    async def apply_delta(self, owner_id: str, delta: LedgerDelta) -> LedgerAdjustment | None: ...
