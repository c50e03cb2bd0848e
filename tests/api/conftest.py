"""Fixtures for API tests."""

import pytest
from falcon.testing import TestClient

from quillsync.application.services.quota_ledger import QuotaLedger
from quillsync.application.services.sync_reconciler import SyncReconciler
from quillsync.application.use_cases.document.archive_document import ArchiveDocumentUseCase
from quillsync.application.use_cases.document.create_document import CreateDocumentUseCase
from quillsync.application.use_cases.document.get_document import GetDocumentUseCase
from quillsync.application.use_cases.document.list_documents import ListDocumentsUseCase
from quillsync.application.use_cases.document.list_versions import ListDocumentVersionsUseCase
from quillsync.application.use_cases.document.update_document import UpdateDocumentUseCase
from quillsync.application.use_cases.search.search_documents import SearchDocumentsUseCase
from quillsync.application.use_cases.sync.sync_documents import SyncDocumentsUseCase
from quillsync.application.use_cases.usage.get_usage import GetUsageUseCase
from quillsync.interfaces.api.app import create_app
from quillsync.interfaces.api.middleware.identity import IdentityMiddleware
from quillsync.interfaces.api.resources.documents import (
    DocumentResource,
    DocumentsResource,
    DocumentVersionsResource,
)
from quillsync.interfaces.api.resources.health import HealthResource
from quillsync.interfaces.api.resources.search import SearchResource
from quillsync.interfaces.api.resources.sync import DocumentSyncResource, DocumentsSyncResource
from quillsync.interfaces.api.resources.usage import UsageResource

USER_HEADERS = {"X-User-Id": "test-user-1"}


@pytest.fixture
def app(uow_factory, semantic_index, runner):
    """Falcon ASGI app wired to in-memory fakes."""
    ledger = QuotaLedger(uow_factory)
    reconciler = SyncReconciler(uow_factory, semantic_index)
    sync_documents = SyncDocumentsUseCase(uow_factory, reconciler)
    return create_app(
        documents_resource=DocumentsResource(
            CreateDocumentUseCase(uow_factory, ledger, reconciler, runner),
            ListDocumentsUseCase(uow_factory),
        ),
        document_resource=DocumentResource(
            GetDocumentUseCase(uow_factory),
            UpdateDocumentUseCase(uow_factory, ledger, reconciler, runner),
            ArchiveDocumentUseCase(uow_factory, ledger, reconciler, runner),
        ),
        versions_resource=DocumentVersionsResource(ListDocumentVersionsUseCase(uow_factory)),
        document_sync_resource=DocumentSyncResource(sync_documents),
        documents_sync_resource=DocumentsSyncResource(sync_documents),
        search_resource=SearchResource(
            SearchDocumentsUseCase(uow_factory, semantic_index, reconciler)
        ),
        usage_resource=UsageResource(GetUsageUseCase(ledger)),
        health_resource=HealthResource(),
        middleware=[IdentityMiddleware("X-User-Id")],
    )


@pytest.fixture
def client(app) -> TestClient:
    """Falcon ASGI test client."""
    return TestClient(app, headers=USER_HEADERS)
