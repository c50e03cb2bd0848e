"""Semantic index resync resources."""

from uuid import UUID

import falcon.asgi

from quillsync.application.dto.sync_dto import SyncOptions
from quillsync.application.use_cases.sync.sync_documents import SyncDocumentsUseCase
from quillsync.domain.exceptions import NotFound

MAX_BATCH_SIZE = 500


def _flag(body: dict, name: str, default: bool) -> bool:
    value = body.get(name, default)
    if not isinstance(value, bool):
        raise ValueError(f"{name} must be a boolean")
    return value


def _options(body: dict, *, default_force: bool) -> SyncOptions:
    min_word_count = body.get("min_word_count")
    if min_word_count is not None and (
        not isinstance(min_word_count, int) or isinstance(min_word_count, bool) or min_word_count < 0
    ):
        raise ValueError("min_word_count must be a non-negative integer")
    return SyncOptions(
        force=_flag(body, "force", default_force),
        include_archived=_flag(body, "include_archived", False),
        min_word_count=min_word_count,
    )


async def _optional_body(req: falcon.asgi.Request) -> dict:
    body = await req.get_media(default_when_empty={})
    if not isinstance(body, dict):
        raise ValueError("JSON object expected")
    return body


class DocumentSyncResource:
    """POST /v1/documents/{id}/sync - reconcile one document now (forced by default)."""

    def __init__(self, sync_documents: SyncDocumentsUseCase) -> None:
        self._sync_documents = sync_documents

    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, document_id: str
    ) -> None:
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return
        try:
            doc_id = UUID(document_id)
            options = _options(await _optional_body(req), default_force=True)
        except (ValueError, falcon.MediaMalformedError) as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
            return
        try:
            result = await self._sync_documents.execute_one(user.user_id, doc_id, options)
        except NotFound:
            resp.status = falcon.HTTP_404
            resp.media = {"error": "Document not found"}
            return
        resp.media = result.to_dict()
        resp.status = falcon.HTTP_200 if result.success else falcon.HTTP_502


class DocumentsSyncResource:
    """POST /v1/documents/sync - batch reconcile.

    Body: document_ids (optional, all live documents when omitted), force,
    include_archived, min_word_count.
    """

    def __init__(self, sync_documents: SyncDocumentsUseCase) -> None:
        self._sync_documents = sync_documents

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return
        try:
            body = await _optional_body(req)
            options = _options(body, default_force=False)
            raw_ids = body.get("document_ids")
            document_ids = [UUID(str(i)) for i in raw_ids] if raw_ids is not None else None
        except (ValueError, TypeError, falcon.MediaMalformedError) as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
            return
        if document_ids is not None and len(document_ids) > MAX_BATCH_SIZE:
            resp.status = falcon.HTTP_400
            resp.media = {"error": f"At most {MAX_BATCH_SIZE} document_ids per request"}
            return

        results = await self._sync_documents.execute(user.user_id, document_ids, options)
        resp.media = {
            "results": [r.to_dict() for r in results],
            "synced": sum(1 for r in results if r.success and not r.skipped),
            "skipped": sum(1 for r in results if r.skipped),
            "failed": sum(1 for r in results if not r.success),
        }
        resp.status = falcon.HTTP_200
