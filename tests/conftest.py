"""Pytest fixtures for Quillsync tests."""

from __future__ import annotations

from collections.abc import AsyncIterator, Coroutine
from contextlib import asynccontextmanager
from dataclasses import replace
from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

import pytest

from quillsync.application.ports import BackgroundResult, IndexHit
from quillsync.application.services.quota_ledger import QuotaLedger
from quillsync.application.services.sync_reconciler import SyncReconciler
from quillsync.domain.entities import Document, DocumentVersion, QuotaAccount, QuotaDefaults
from quillsync.domain.exceptions import SemanticIndexError
from quillsync.domain.value_objects import ContentMetrics, LedgerAdjustment, LedgerDelta


def rich_text(*paragraphs: str) -> dict:
    """Rich-text tree with one paragraph node per string."""
    return {
        "type": "doc",
        "content": [
            {"type": "paragraph", "content": [{"type": "text", "text": p}]} for p in paragraphs
        ],
    }


def make_document(owner_id: str = "user-1", content: Any = None, **overrides: Any) -> Document:
    content = content if content is not None else rich_text("hello world")
    doc = Document.new(
        id=overrides.pop("id", uuid4()),
        owner_id=owner_id,
        title=overrides.pop("title", "Untitled"),
        content=content,
        metrics=ContentMetrics.from_content(content),
        now=datetime.now(UTC),
    )
    return replace(doc, **overrides) if overrides else doc


# --- Fake repositories ---


class FakeDocumentRepository:
    """In-memory document repository."""

    def __init__(self) -> None:
        self._by_id: dict[UUID, Document] = {}
        self.record_sync_calls = 0

    def add(self, document: Document) -> Document:
        self._by_id[document.id] = document
        return document

    async def get_for_owner(
        self, document_id: UUID, owner_id: str, include_archived: bool = False
    ) -> Document | None:
        doc = self._by_id.get(document_id)
        if not doc or doc.owner_id != owner_id:
            return None
        if doc.archived and not include_archived:
            return None
        return doc

    async def list_for_owner(
        self,
        owner_id: str,
        *,
        limit: int = 10,
        offset: int = 0,
        include_archived: bool = False,
    ) -> tuple[list[Document], int]:
        items = [
            d
            for d in self._by_id.values()
            if d.owner_id == owner_id and (include_archived or not d.archived)
        ]
        items.sort(key=lambda d: d.updated_at, reverse=True)
        return items[offset : offset + limit], len(items)

    async def get_many_for_owner(self, document_ids: list[UUID], owner_id: str) -> list[Document]:
        return [
            d
            for i in document_ids
            if (d := self._by_id.get(i)) and d.owner_id == owner_id and not d.archived
        ]

    async def search_text(self, owner_id: str, query: str, limit: int = 10) -> list[Document]:
        q = query.lower()
        items, _ = await self.list_for_owner(owner_id, limit=len(self._by_id) or 1)
        return [d for d in items if q in d.derived_text.lower() or q in d.title.lower()][:limit]

    async def create(self, document: Document) -> Document:
        self._by_id[document.id] = document
        return document

    async def update(self, document: Document) -> int | None:
        current = self._by_id.get(document.id)
        if not current or current.owner_id != document.owner_id or current.archived:
            return None
        # Sync columns belong to the reconciler.
        self._by_id[document.id] = replace(
            document,
            external_index_id=current.external_index_id,
            external_index_fingerprint=current.external_index_fingerprint,
        )
        return current.size_bytes

    async def archive(self, document_id: UUID, owner_id: str, now: datetime) -> int | None:
        current = self._by_id.get(document_id)
        if not current or current.owner_id != owner_id or current.archived:
            return None
        self._by_id[document_id] = replace(current, archived=True, updated_at=now)
        return current.size_bytes

    async def record_sync(
        self, document_id: UUID, external_index_id: str, fingerprint: str, synced_text: str
    ) -> bool:
        self.record_sync_calls += 1
        current = self._by_id[document_id]
        unchanged = current.derived_text == synced_text
        self._by_id[document_id] = replace(
            current,
            external_index_id=external_index_id,
            external_index_fingerprint=(
                fingerprint if unchanged else current.external_index_fingerprint
            ),
        )
        return unchanged

    async def clear_sync(self, document_id: UUID) -> None:
        current = self._by_id[document_id]
        self._by_id[document_id] = replace(
            current, external_index_id=None, external_index_fingerprint=None
        )


class FakeDocumentVersionRepository:
    """In-memory append-only version store."""

    def __init__(self) -> None:
        self.items: list[DocumentVersion] = []

    async def append(self, version: DocumentVersion) -> DocumentVersion:
        self.items.append(version)
        return version

    async def list_for_document(
        self, document_id: UUID, *, limit: int = 20
    ) -> list[DocumentVersion]:
        found = [v for v in self.items if v.document_id == document_id]
        return list(reversed(found))[:limit]


class FakeQuotaAccountRepository:
    """In-memory quota accounts with zero-floored relative adjustments."""

    def __init__(self) -> None:
        self._by_owner: dict[str, QuotaAccount] = {}
        self.fail_adjustments = False

    def add(self, account: QuotaAccount) -> QuotaAccount:
        self._by_owner[account.owner_id] = account
        return account

    async def get(self, owner_id: str) -> QuotaAccount | None:
        return self._by_owner.get(owner_id)

    async def create_if_missing(self, account: QuotaAccount) -> QuotaAccount:
        return self._by_owner.setdefault(account.owner_id, account)

    async def apply_delta(self, owner_id: str, delta: LedgerDelta) -> LedgerAdjustment | None:
        if self.fail_adjustments:
            raise ConnectionError("quota store unavailable")
        account = self._by_owner.get(owner_id)
        if account is None:
            return None
        updated = replace(
            account,
            current_document_count=max(0, account.current_document_count + delta.documents),
            total_storage_used_bytes=max(0, account.total_storage_used_bytes + delta.storage_bytes),
        )
        self._by_owner[owner_id] = updated
        return LedgerAdjustment(
            previous_document_count=account.current_document_count,
            previous_storage_bytes=account.total_storage_used_bytes,
            document_count=updated.current_document_count,
            storage_bytes=updated.total_storage_used_bytes,
            delta=delta,
        )


class FakeUnitOfWork:
    """In-memory Unit of Work with fake repositories."""

    def __init__(self) -> None:
        self.documents = FakeDocumentRepository()
        self.versions = FakeDocumentVersionRepository()
        self.quotas = FakeQuotaAccountRepository()

    async def commit(self) -> None:
        pass

    async def rollback(self) -> None:
        pass


def shared_uow_factory(uow: FakeUnitOfWork):
    """Factory that yields the same FakeUnitOfWork on every call."""

    @asynccontextmanager
    async def _factory() -> AsyncIterator[FakeUnitOfWork]:
        yield uow

    return _factory


# --- Fake collaborators ---


class FakeSemanticIndex:
    """Records calls; ``fail`` makes every remote call raise."""

    def __init__(self, enabled: bool = True) -> None:
        self._enabled = enabled
        self.fail = False
        self.records: dict[str, dict] = {}
        self.upserts: list[dict] = []
        self.deleted: list[str] = []
        self.hits: list[IndexHit] = []

    @property
    def enabled(self) -> bool:
        return self._enabled

    async def upsert(
        self,
        *,
        stable_key: str,
        text: str,
        metadata: dict,
        group_tag: str,
        remote_id: str | None = None,
    ) -> str:
        if self.fail:
            raise SemanticIndexError("index unavailable", status_code=503)
        call = {
            "stable_key": stable_key,
            "text": text,
            "metadata": metadata,
            "group_tag": group_tag,
            "remote_id": remote_id,
        }
        self.upserts.append(call)
        new_id = remote_id or f"remote-{stable_key}"
        self.records[new_id] = call
        return new_id

    async def delete(self, remote_id: str) -> None:
        if self.fail:
            raise SemanticIndexError("index unavailable", status_code=503)
        self.deleted.append(remote_id)
        self.records.pop(remote_id, None)

    async def search(self, query: str, *, group_tag: str, limit: int = 10) -> list[IndexHit]:
        if self.fail:
            raise SemanticIndexError("index unavailable", status_code=503)
        return self.hits[:limit]


class RecordingBackgroundRunner:
    """Keeps submitted work for the test to run (or not) explicitly."""

    def __init__(self) -> None:
        self.submitted: list[tuple[str, Coroutine]] = []

    def submit(self, name: str, work: Coroutine) -> BackgroundResult:
        self.submitted.append((name, work))
        return BackgroundResult(name=name)

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self.submitted]

    async def run_all(self) -> list[Any]:
        pending, self.submitted = self.submitted, []
        return [await work for _, work in pending]

    async def drain(self) -> None:
        await self.run_all()

    def discard(self) -> None:
        for _, work in self.submitted:
            work.close()
        self.submitted = []


# --- Fixtures ---


@pytest.fixture
def fake_uow() -> FakeUnitOfWork:
    """Fresh in-memory UnitOfWork for each test."""
    return FakeUnitOfWork()


@pytest.fixture
def uow_factory(fake_uow: FakeUnitOfWork):
    """Factory returning async context manager over the test's FakeUnitOfWork."""
    return shared_uow_factory(fake_uow)


@pytest.fixture
def semantic_index() -> FakeSemanticIndex:
    return FakeSemanticIndex()


@pytest.fixture
def runner():
    runner = RecordingBackgroundRunner()
    yield runner
    runner.discard()


@pytest.fixture
def quota_ledger(uow_factory) -> QuotaLedger:
    return QuotaLedger(uow_factory, QuotaDefaults())


@pytest.fixture
def reconciler(uow_factory, semantic_index) -> SyncReconciler:
    return SyncReconciler(uow_factory, semantic_index, key_prefix="quillsync")
