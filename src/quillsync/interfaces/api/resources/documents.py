"""Document API resources."""

from uuid import UUID

import falcon.asgi

from quillsync.application.dto.document_dto import (
    DocumentCreateInput,
    DocumentOutput,
    DocumentUpdateInput,
    DocumentVersionOutput,
)
from quillsync.application.use_cases.document.archive_document import ArchiveDocumentUseCase
from quillsync.application.use_cases.document.create_document import CreateDocumentUseCase
from quillsync.application.use_cases.document.get_document import GetDocumentUseCase
from quillsync.application.use_cases.document.list_documents import ListDocumentsUseCase
from quillsync.application.use_cases.document.list_versions import ListDocumentVersionsUseCase
from quillsync.application.use_cases.document.update_document import UpdateDocumentUseCase
from quillsync.domain.exceptions import NotFound, QuotaExceeded, ValidationError


def _unauthorized(resp: falcon.asgi.Response) -> None:
    resp.status = falcon.HTTP_401
    resp.media = {"error": "Unauthorized"}


def _parse_uuid(value: str, resp: falcon.asgi.Response) -> UUID | None:
    try:
        return UUID(value)
    except ValueError:
        resp.status = falcon.HTTP_400
        resp.media = {"error": "Invalid document ID"}
        return None


def _int_param(req: falcon.asgi.Request, name: str, default: int) -> int:
    raw = req.get_param(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValidationError(f"{name} must be an integer") from e


def _bool_field(body: dict, name: str, default: bool = False) -> bool:
    value = body.get(name, default)
    if not isinstance(value, bool):
        raise ValidationError(f"{name} must be a boolean")
    return value


async def _json_body(req: falcon.asgi.Request) -> dict:
    try:
        body = await req.get_media()
    except falcon.MediaMalformedError as e:
        raise ValidationError("Invalid JSON body") from e
    if not isinstance(body, dict):
        raise ValidationError("JSON object expected")
    return body


def _quota_exceeded(resp: falcon.asgi.Response, e: QuotaExceeded) -> None:
    resp.status = falcon.HTTP_403
    resp.media = {"error": "Quota exceeded", "errors": e.errors}


class DocumentsResource:
    """GET /v1/documents - list; POST /v1/documents - create."""

    def __init__(
        self,
        create_document: CreateDocumentUseCase,
        list_documents: ListDocumentsUseCase,
    ) -> None:
        self._create_document = create_document
        self._list_documents = list_documents

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """List the caller's documents, most recently updated first."""
        user = getattr(req.context, "user", None)
        if not user:
            _unauthorized(resp)
            return
        try:
            page = await self._list_documents.execute(
                user.user_id,
                page=_int_param(req, "page", 1),
                limit=_int_param(req, "limit", 10),
            )
        except ValidationError as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
            return
        resp.media = {
            "documents": [_document_to_dict(d) for d in page.items],
            "pagination": {
                "page": page.page,
                "limit": page.limit,
                "total": page.total,
                "pages": page.pages,
            },
        }
        resp.status = falcon.HTTP_200

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Create a document. Body: title, content."""
        user = getattr(req.context, "user", None)
        if not user:
            _unauthorized(resp)
            return
        try:
            body = await _json_body(req)
            result = await self._create_document.execute(
                user.user_id,
                DocumentCreateInput(title=body.get("title"), content=body.get("content")),
            )
            resp.media = _document_to_dict(result)
            resp.status = falcon.HTTP_201
        except ValidationError as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
        except QuotaExceeded as e:
            _quota_exceeded(resp, e)


class DocumentResource:
    """GET, PATCH, DELETE /v1/documents/{id}."""

    def __init__(
        self,
        get_document: GetDocumentUseCase,
        update_document: UpdateDocumentUseCase,
        archive_document: ArchiveDocumentUseCase,
    ) -> None:
        self._get_document = get_document
        self._update_document = update_document
        self._archive_document = archive_document

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, document_id: str
    ) -> None:
        user = getattr(req.context, "user", None)
        if not user:
            _unauthorized(resp)
            return
        doc_id = _parse_uuid(document_id, resp)
        if doc_id is None:
            return
        try:
            result = await self._get_document.execute(user.user_id, doc_id)
            resp.media = _document_to_dict(result)
            resp.status = falcon.HTTP_200
        except NotFound:
            resp.status = falcon.HTTP_404
            resp.media = {"error": "Document not found"}

    async def on_patch(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, document_id: str
    ) -> None:
        """Save a document. Body: title?, content?, is_autosave."""
        user = getattr(req.context, "user", None)
        if not user:
            _unauthorized(resp)
            return
        doc_id = _parse_uuid(document_id, resp)
        if doc_id is None:
            return
        try:
            body = await _json_body(req)
            result = await self._update_document.execute(
                user.user_id,
                doc_id,
                DocumentUpdateInput(
                    title=body.get("title"),
                    content=body.get("content"),
                    is_autosave=_bool_field(body, "is_autosave"),
                ),
            )
            resp.media = _document_to_dict(result)
            resp.status = falcon.HTTP_200
        except ValidationError as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
        except NotFound:
            resp.status = falcon.HTTP_404
            resp.media = {"error": "Document not found"}
        except QuotaExceeded as e:
            _quota_exceeded(resp, e)

    async def on_delete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, document_id: str
    ) -> None:
        """Archive a document; it stops counting against the quota."""
        user = getattr(req.context, "user", None)
        if not user:
            _unauthorized(resp)
            return
        doc_id = _parse_uuid(document_id, resp)
        if doc_id is None:
            return
        try:
            result = await self._archive_document.execute(user.user_id, doc_id)
            resp.media = {"success": result.success}
            resp.status = falcon.HTTP_200
        except NotFound:
            resp.status = falcon.HTTP_404
            resp.media = {"error": "Document not found"}


class DocumentVersionsResource:
    """GET /v1/documents/{id}/versions - snapshots, newest first."""

    def __init__(self, list_versions: ListDocumentVersionsUseCase) -> None:
        self._list_versions = list_versions

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, document_id: str
    ) -> None:
        user = getattr(req.context, "user", None)
        if not user:
            _unauthorized(resp)
            return
        doc_id = _parse_uuid(document_id, resp)
        if doc_id is None:
            return
        try:
            versions = await self._list_versions.execute(
                user.user_id, doc_id, limit=_int_param(req, "limit", 20)
            )
            resp.media = {"versions": [_version_to_dict(v) for v in versions]}
            resp.status = falcon.HTTP_200
        except ValidationError as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
        except NotFound:
            resp.status = falcon.HTTP_404
            resp.media = {"error": "Document not found"}


def _document_to_dict(d: DocumentOutput) -> dict:
    return {
        "id": str(d.id),
        "title": d.title,
        "content": d.content,
        "content_text": d.derived_text,
        "word_count": d.word_count,
        "character_count": d.character_count,
        "page_count": d.page_count,
        "created_at": d.created_at.isoformat(),
        "updated_at": d.updated_at.isoformat(),
        "last_edited_at": d.last_edited_at.isoformat(),
    }


def _version_to_dict(v: DocumentVersionOutput) -> dict:
    return {
        "id": str(v.id),
        "document_id": str(v.document_id),
        "content": v.content,
        "content_text": v.derived_text,
        "word_count": v.word_count,
        "character_count": v.character_count,
        "page_count": v.page_count,
        "is_autosave": v.is_autosave,
        "created_at": v.created_at.isoformat(),
    }
