"""Falcon ASGI application."""

import logging

import falcon
import falcon.asgi
from falcon.asgi import App

from quillsync.domain.exceptions import NotFound, QuotaExceeded, ValidationError
from quillsync.interfaces.api.resources.documents import (
    DocumentResource,
    DocumentsResource,
    DocumentVersionsResource,
)
from quillsync.interfaces.api.resources.health import HealthResource
from quillsync.interfaces.api.resources.search import SearchResource
from quillsync.interfaces.api.resources.sync import DocumentSyncResource, DocumentsSyncResource
from quillsync.interfaces.api.resources.usage import UsageResource

logger = logging.getLogger(__name__)


async def _handle_validation(req, resp, ex, params):
    resp.status = falcon.HTTP_400
    resp.media = {"error": str(ex)}


async def _handle_not_found(req, resp, ex, params):
    resp.status = falcon.HTTP_404
    resp.media = {"error": "Not found"}


async def _handle_quota(req, resp, ex, params):
    resp.status = falcon.HTTP_403
    resp.media = {"error": "Quota exceeded", "errors": ex.errors}


async def _handle_unexpected(req, resp, ex, params):
    logger.error(
        "Unhandled error on %s %s",
        req.method,
        req.path,
        exc_info=ex,
        extra={"ctx_method": req.method, "ctx_path": req.path},
    )
    resp.status = falcon.HTTP_500
    resp.media = {"error": "Internal server error"}


def create_app(
    documents_resource: DocumentsResource,
    document_resource: DocumentResource,
    versions_resource: DocumentVersionsResource,
    document_sync_resource: DocumentSyncResource,
    documents_sync_resource: DocumentsSyncResource,
    search_resource: SearchResource,
    usage_resource: UsageResource,
    health_resource: HealthResource,
    middleware: list | None = None,
) -> App:
    """Create Falcon ASGI app with routes and error mapping."""
    app = falcon.asgi.App(middleware=middleware or [])
    app.add_error_handler(Exception, _handle_unexpected)
    app.add_error_handler(ValidationError, _handle_validation)
    app.add_error_handler(NotFound, _handle_not_found)
    app.add_error_handler(QuotaExceeded, _handle_quota)

    app.add_route("/v1/health", health_resource)
    app.add_route("/v1/health/ready", health_resource, suffix="ready")
    app.add_route("/v1/documents", documents_resource)
    app.add_route("/v1/documents/sync", documents_sync_resource)
    app.add_route("/v1/documents/{document_id}", document_resource)
    app.add_route("/v1/documents/{document_id}/versions", versions_resource)
    app.add_route("/v1/documents/{document_id}/sync", document_sync_resource)
    app.add_route("/v1/search", search_resource)
    app.add_route("/v1/usage", usage_resource)
    return app
