"""Unit tests for the sync reconciler."""

import asyncio
from uuid import uuid4

import pytest

from quillsync.application.dto.sync_dto import SyncOptions
from quillsync.application.services.sync_reconciler import SyncReconciler
from quillsync.domain.value_objects import (
    ContentFingerprint,
    ContentMetrics,
    SkipReason,
    SyncState,
)

from tests.conftest import FakeSemanticIndex, FakeUnitOfWork, make_document, rich_text


@pytest.mark.asyncio
async def test_first_sync_creates_remote_record(
    reconciler: SyncReconciler, fake_uow: FakeUnitOfWork, semantic_index: FakeSemanticIndex
) -> None:
    doc = fake_uow.documents.add(make_document(title="Notes"))
    result = await reconciler.reconcile(doc.id, "user-1")

    assert result.success and not result.skipped
    assert len(semantic_index.upserts) == 1
    call = semantic_index.upserts[0]
    assert call["stable_key"] == f"quillsync-{doc.id}"
    assert call["group_tag"] == "user_user-1"
    assert call["remote_id"] is None
    assert call["text"] == "hello world"
    assert call["metadata"]["title"] == "Notes"
    assert call["metadata"]["archived"] == "false"

    stored = await fake_uow.documents.get_for_owner(doc.id, "user-1")
    assert stored.sync_state == SyncState.SYNCED
    assert stored.external_index_id == result.external_index_id
    assert stored.external_index_fingerprint == ContentFingerprint.of("hello world").value


@pytest.mark.asyncio
async def test_reconcile_is_idempotent(
    reconciler: SyncReconciler, fake_uow: FakeUnitOfWork, semantic_index: FakeSemanticIndex
) -> None:
    doc = fake_uow.documents.add(make_document())
    await reconciler.reconcile(doc.id, "user-1")
    second = await reconciler.reconcile(doc.id, "user-1")

    assert second.skipped and second.reason == SkipReason.UNCHANGED
    assert len(semantic_index.upserts) == 1
    assert len(semantic_index.records) == 1


@pytest.mark.asyncio
async def test_changed_text_updates_same_remote_record(
    reconciler: SyncReconciler, fake_uow: FakeUnitOfWork, semantic_index: FakeSemanticIndex
) -> None:
    doc = fake_uow.documents.add(make_document())
    first = await reconciler.reconcile(doc.id, "user-1")
    stored = await fake_uow.documents.get_for_owner(doc.id, "user-1")
    content = rich_text("new words")
    fake_uow.documents.add(
        stored.with_content(content, ContentMetrics.from_content(content), stored.updated_at)
    )

    second = await reconciler.reconcile(doc.id, "user-1")
    assert second.success and not second.skipped
    assert semantic_index.upserts[1]["remote_id"] == first.external_index_id
    assert second.external_index_id == first.external_index_id
    assert len(semantic_index.records) == 1


@pytest.mark.asyncio
async def test_force_pushes_unchanged_text(
    reconciler: SyncReconciler, fake_uow: FakeUnitOfWork, semantic_index: FakeSemanticIndex
) -> None:
    doc = fake_uow.documents.add(make_document())
    await reconciler.reconcile(doc.id, "user-1")
    result = await reconciler.reconcile(doc.id, "user-1", SyncOptions(force=True))
    assert result.success and not result.skipped
    assert len(semantic_index.upserts) == 2


@pytest.mark.asyncio
async def test_remote_failure_keeps_previous_state(
    reconciler: SyncReconciler, fake_uow: FakeUnitOfWork, semantic_index: FakeSemanticIndex
) -> None:
    doc = fake_uow.documents.add(
        make_document(external_index_id="remote-1", external_index_fingerprint="0" * 32)
    )
    semantic_index.fail = True

    result = await reconciler.reconcile(doc.id, "user-1")

    assert not result.success
    assert "index unavailable" in result.error
    stored = await fake_uow.documents.get_for_owner(doc.id, "user-1")
    assert stored.external_index_id == "remote-1"
    assert stored.external_index_fingerprint == "0" * 32


@pytest.mark.asyncio
async def test_unexpected_error_becomes_failed_result(
    fake_uow: FakeUnitOfWork, uow_factory
) -> None:
    class BrokenIndex(FakeSemanticIndex):
        async def upsert(self, **kwargs):
            raise KeyError("boom")

    reconciler = SyncReconciler(uow_factory, BrokenIndex())
    doc = fake_uow.documents.add(make_document())
    result = await reconciler.reconcile(doc.id, "user-1")
    assert not result.success


@pytest.mark.asyncio
async def test_disabled_index_skips(fake_uow: FakeUnitOfWork, uow_factory) -> None:
    index = FakeSemanticIndex(enabled=False)
    reconciler = SyncReconciler(uow_factory, index)
    doc = fake_uow.documents.add(make_document())
    result = await reconciler.reconcile(doc.id, "user-1")
    assert result.skipped and result.reason == SkipReason.FEATURE_DISABLED
    assert index.upserts == []


@pytest.mark.asyncio
async def test_missing_or_foreign_document_fails(
    reconciler: SyncReconciler, fake_uow: FakeUnitOfWork
) -> None:
    doc = fake_uow.documents.add(make_document(owner_id="someone-else"))
    assert not (await reconciler.reconcile(uuid4(), "user-1")).success
    result = await reconciler.reconcile(doc.id, "user-1")
    assert result.error == "Document not found"


@pytest.mark.asyncio
async def test_archived_document_skipped_unless_included(
    reconciler: SyncReconciler, fake_uow: FakeUnitOfWork, semantic_index: FakeSemanticIndex
) -> None:
    doc = fake_uow.documents.add(make_document(archived=True))
    result = await reconciler.reconcile(doc.id, "user-1")
    assert result.reason == SkipReason.DOCUMENT_ARCHIVED

    included = await reconciler.reconcile(doc.id, "user-1", SyncOptions(include_archived=True))
    assert included.success and not included.skipped
    assert semantic_index.upserts[0]["metadata"]["archived"] == "true"


@pytest.mark.asyncio
async def test_short_and_empty_documents_skipped(
    fake_uow: FakeUnitOfWork, uow_factory, semantic_index: FakeSemanticIndex
) -> None:
    reconciler = SyncReconciler(uow_factory, semantic_index, min_word_count=5)
    short = fake_uow.documents.add(make_document())
    empty = fake_uow.documents.add(make_document(content={"type": "doc", "content": []}))

    assert (await reconciler.reconcile(short.id, "user-1")).reason == (
        SkipReason.BELOW_MINIMUM_WORD_COUNT
    )
    result = await reconciler.reconcile(empty.id, "user-1", SyncOptions(min_word_count=0))
    assert result.reason == SkipReason.EMPTY_CONTENT
    assert semantic_index.upserts == []


@pytest.mark.asyncio
async def test_reconcile_many_continues_after_failure(
    reconciler: SyncReconciler, fake_uow: FakeUnitOfWork
) -> None:
    doc = fake_uow.documents.add(make_document())
    results = await reconciler.reconcile_many([uuid4(), doc.id], "user-1")
    assert [r.success for r in results] == [False, True]


@pytest.mark.asyncio
async def test_remove_deletes_and_clears(
    reconciler: SyncReconciler, fake_uow: FakeUnitOfWork, semantic_index: FakeSemanticIndex
) -> None:
    doc = fake_uow.documents.add(make_document())
    synced = await reconciler.reconcile(doc.id, "user-1")

    result = await reconciler.remove(doc.id, "user-1")

    assert result.success
    assert semantic_index.deleted == [synced.external_index_id]
    stored = await fake_uow.documents.get_for_owner(doc.id, "user-1")
    assert stored.sync_state == SyncState.UNSYNCED


@pytest.mark.asyncio
async def test_remove_unsynced_document_skips(
    reconciler: SyncReconciler, fake_uow: FakeUnitOfWork
) -> None:
    doc = fake_uow.documents.add(make_document())
    result = await reconciler.remove(doc.id, "user-1")
    assert result.skipped and result.reason == SkipReason.NOT_SYNCED


@pytest.mark.asyncio
async def test_remove_failure_is_reported(
    reconciler: SyncReconciler, fake_uow: FakeUnitOfWork, semantic_index: FakeSemanticIndex
) -> None:
    doc = fake_uow.documents.add(make_document(external_index_id="remote-1"))
    semantic_index.fail = True
    result = await reconciler.remove(doc.id, "user-1")
    assert not result.success
    stored = await fake_uow.documents.get_for_owner(doc.id, "user-1")
    assert stored.external_index_id == "remote-1"


def test_stable_key_round_trip(reconciler: SyncReconciler) -> None:
    doc_id = uuid4()
    assert reconciler.document_id_from_key(reconciler.stable_key(doc_id)) == doc_id
    assert reconciler.document_id_from_key("other-prefix-x") is None
    assert reconciler.document_id_from_key("quillsync-not-a-uuid") is None
    assert reconciler.document_id_from_key(None) is None


@pytest.mark.asyncio
async def test_cleared_text_updates_synced_record(
    reconciler: SyncReconciler, fake_uow: FakeUnitOfWork, semantic_index: FakeSemanticIndex
) -> None:
    doc = fake_uow.documents.add(make_document())
    first = await reconciler.reconcile(doc.id, "user-1")
    stored = await fake_uow.documents.get_for_owner(doc.id, "user-1")
    empty = {"type": "doc", "content": []}
    fake_uow.documents.add(
        stored.with_content(empty, ContentMetrics.from_content(empty), stored.updated_at)
    )

    second = await reconciler.reconcile(doc.id, "user-1")

    assert second.success and not second.skipped
    assert len(semantic_index.upserts) == 2
    assert semantic_index.upserts[1]["remote_id"] == first.external_index_id
    assert semantic_index.records[first.external_index_id]["text"] == ""
    stored = await fake_uow.documents.get_for_owner(doc.id, "user-1")
    assert stored.external_index_fingerprint == ContentFingerprint.of("").value


@pytest.mark.asyncio
async def test_concurrent_first_syncs_share_stable_key(
    fake_uow: FakeUnitOfWork, uow_factory
) -> None:
    class SlowIndex(FakeSemanticIndex):
        async def upsert(self, **kwargs) -> str:
            await asyncio.sleep(0)
            return await super().upsert(**kwargs)

    index = SlowIndex()
    reconciler = SyncReconciler(uow_factory, index)
    doc = fake_uow.documents.add(make_document())

    results = await asyncio.gather(
        reconciler.reconcile(doc.id, "user-1"), reconciler.reconcile(doc.id, "user-1")
    )

    assert all(r.success for r in results)
    assert len(index.upserts) == 2
    assert all(call["remote_id"] is None for call in index.upserts)
    assert {call["stable_key"] for call in index.upserts} == {f"quillsync-{doc.id}"}
    assert len(index.records) == 1


@pytest.mark.asyncio
async def test_edit_during_push_keeps_fingerprint_stale(
    fake_uow: FakeUnitOfWork, uow_factory
) -> None:
    doc = fake_uow.documents.add(make_document())

    class EditingIndex(FakeSemanticIndex):
        edit_pending = True

        async def upsert(self, **kwargs) -> str:
            remote_id = await super().upsert(**kwargs)
            if self.edit_pending:
                self.edit_pending = False
                current = await fake_uow.documents.get_for_owner(doc.id, "user-1")
                content = rich_text("edited meanwhile")
                fake_uow.documents.add(
                    current.with_content(
                        content, ContentMetrics.from_content(content), current.updated_at
                    )
                )
            return remote_id

    index = EditingIndex()
    reconciler = SyncReconciler(uow_factory, index)

    result = await reconciler.reconcile(doc.id, "user-1")

    assert result.success
    stored = await fake_uow.documents.get_for_owner(doc.id, "user-1")
    assert stored.external_index_id == result.external_index_id
    assert stored.external_index_fingerprint is None

    follow_up = await reconciler.reconcile(doc.id, "user-1")
    assert follow_up.success and not follow_up.skipped
    assert index.upserts[-1]["text"] == "edited meanwhile"
    assert index.upserts[-1]["remote_id"] == result.external_index_id
    stored = await fake_uow.documents.get_for_owner(doc.id, "user-1")
    assert stored.external_index_fingerprint == ContentFingerprint.of("edited meanwhile").value
