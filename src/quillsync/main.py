"""Application entry point and composition root."""

import logging

from quillsync import __version__
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
from quillsync.config import Settings, get_settings
from quillsync.domain.entities import QuotaDefaults
from quillsync.infrastructure.background.asyncio_runner import AsyncioBackgroundRunner
from quillsync.infrastructure.persistence.postgres.connection import create_pool
from quillsync.infrastructure.persistence.postgres.unit_of_work import create_uow_factory
from quillsync.infrastructure.semantic_index.http_index import (
    DisabledSemanticIndex,
    HttpSemanticIndex,
)
from quillsync.interfaces.api.app import create_app
from quillsync.interfaces.api.middleware.cors import CORSMiddleware
from quillsync.interfaces.api.middleware.identity import IdentityMiddleware
from quillsync.interfaces.api.middleware.lifespan import LifespanMiddleware
from quillsync.interfaces.api.resources.documents import (
    DocumentResource,
    DocumentsResource,
    DocumentVersionsResource,
)
from quillsync.interfaces.api.resources.health import HealthResource
from quillsync.interfaces.api.resources.search import SearchResource
from quillsync.interfaces.api.resources.sync import DocumentSyncResource, DocumentsSyncResource
from quillsync.interfaces.api.resources.usage import UsageResource
from quillsync.logging_config import configure_logging

logger = logging.getLogger(__name__)


def _semantic_index(settings: Settings):
    if not settings.semantic_index_enabled:
        logger.info("Semantic index sync disabled")
        return DisabledSemanticIndex()
    return HttpSemanticIndex(
        base_url=settings.semantic_index_url,
        api_key=settings.semantic_index_api_key,
        timeout_seconds=settings.semantic_index_timeout_seconds,
    )


def create_quillsync_app(settings: Settings | None = None):
    """Composition root - build Falcon app with all dependencies."""
    settings = settings or get_settings()
    pool = create_pool(
        settings.database_url,
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
    )
    uow_factory = create_uow_factory(pool)
    semantic_index = _semantic_index(settings)
    runner = AsyncioBackgroundRunner(timeout_seconds=settings.sync_timeout_seconds)

    quota_ledger = QuotaLedger(
        unit_of_work_factory=uow_factory,
        defaults=QuotaDefaults(
            max_documents=settings.default_max_documents,
            max_document_size_bytes=settings.default_max_document_size_bytes,
            max_document_pages=settings.default_max_document_pages,
        ),
    )
    reconciler = SyncReconciler(
        unit_of_work_factory=uow_factory,
        semantic_index=semantic_index,
        key_prefix=settings.semantic_index_key_prefix,
        group_prefix=settings.semantic_index_group_prefix,
        min_word_count=settings.sync_min_word_count,
    )

    create_document = CreateDocumentUseCase(
        unit_of_work_factory=uow_factory,
        quota_ledger=quota_ledger,
        sync_reconciler=reconciler,
        background_runner=runner,
        words_per_page=settings.words_per_page,
    )
    update_document = UpdateDocumentUseCase(
        unit_of_work_factory=uow_factory,
        quota_ledger=quota_ledger,
        sync_reconciler=reconciler,
        background_runner=runner,
        words_per_page=settings.words_per_page,
    )
    archive_document = ArchiveDocumentUseCase(
        unit_of_work_factory=uow_factory,
        quota_ledger=quota_ledger,
        sync_reconciler=reconciler,
        background_runner=runner,
    )
    sync_documents = SyncDocumentsUseCase(
        unit_of_work_factory=uow_factory,
        sync_reconciler=reconciler,
    )
    search_documents = SearchDocumentsUseCase(
        unit_of_work_factory=uow_factory,
        semantic_index=semantic_index,
        sync_reconciler=reconciler,
    )

    cors_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    return create_app(
        documents_resource=DocumentsResource(
            create_document, ListDocumentsUseCase(uow_factory)
        ),
        document_resource=DocumentResource(
            GetDocumentUseCase(uow_factory), update_document, archive_document
        ),
        versions_resource=DocumentVersionsResource(ListDocumentVersionsUseCase(uow_factory)),
        document_sync_resource=DocumentSyncResource(sync_documents),
        documents_sync_resource=DocumentsSyncResource(sync_documents),
        search_resource=SearchResource(search_documents),
        usage_resource=UsageResource(GetUsageUseCase(quota_ledger)),
        health_resource=HealthResource(pool),
        middleware=[
            CORSMiddleware(cors_origins, settings.trusted_user_header),
            LifespanMiddleware(pool, runner, semantic_index),
            IdentityMiddleware(settings.trusted_user_header),
        ],
    )


def main() -> None:
    """CLI entry point - run the API with uvicorn."""
    import uvicorn

    settings = get_settings()
    configure_logging(
        settings.log_level, use_json=settings.log_json, environment=settings.environment
    )
    logger.info("Starting Quillsync v%s", __version__)
    uvicorn.run(create_quillsync_app(settings), host="0.0.0.0", port=8000, log_config=None)
