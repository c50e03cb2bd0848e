"""Unit of Work port - transactional boundary."""

from collections.abc import AsyncIterator
from typing import Protocol

from quillsync.application.ports.repositories.document_repository import DocumentRepository
from quillsync.application.ports.repositories.document_version_repository import (
    DocumentVersionRepository,
)
from quillsync.application.ports.repositories.quota_account_repository import (
    QuotaAccountRepository,
)


class UnitOfWork(Protocol):
    """Unit of Work - manages transaction and repository access."""

    @property
    def documents(self) -> DocumentRepository: ...

    @property
    def versions(self) -> DocumentVersionRepository: ...

    @property
    def quotas(self) -> QuotaAccountRepository: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


class UnitOfWorkFactory(Protocol):
    """Factory for creating UnitOfWork instances."""

    async def __call__(self) -> AsyncIterator[UnitOfWork]: ...
