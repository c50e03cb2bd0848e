"""Get usage use case."""

from quillsync.application.dto.usage_dto import UsageOutput
from quillsync.application.services.quota_ledger import QuotaLedger


class GetUsageUseCase:
    """Owner's quota ceilings and running totals."""

    def __init__(self, quota_ledger: QuotaLedger) -> None:
        self._ledger = quota_ledger

    async def execute(self, owner_id: str) -> UsageOutput:
        account = await self._ledger.ensure_account_exists(owner_id)
        return UsageOutput.from_account(account)
