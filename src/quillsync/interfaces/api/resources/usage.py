"""Usage API resource."""

import falcon.asgi

from quillsync.application.use_cases.usage.get_usage import GetUsageUseCase


class UsageResource:
    """GET /v1/usage - the caller's ceilings and running totals."""

    def __init__(self, get_usage: GetUsageUseCase) -> None:
        self._get_usage = get_usage

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return
        usage = await self._get_usage.execute(user.user_id)
        resp.media = {
            "limits": {
                "max_documents": usage.max_documents,
                "max_document_size_bytes": usage.max_document_size_bytes,
                "max_document_pages": usage.max_document_pages,
            },
            "usage": {
                "current_document_count": usage.current_document_count,
                "total_storage_used_bytes": usage.total_storage_used_bytes,
                "document_limit_remaining": usage.document_limit_remaining,
            },
        }
        resp.status = falcon.HTTP_200
