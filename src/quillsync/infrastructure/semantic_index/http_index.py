"""Semantic index adapter over a Supermemory-compatible HTTP API."""

import logging
from typing import Any

import httpx

from quillsync.application.ports import IndexHit
from quillsync.domain.exceptions import SemanticIndexError

logger = logging.getLogger(__name__)


class HttpSemanticIndex:
    """Semantic index backed by the remote documents/search API.

    New records are created with ``customId`` set to the stable key, so the
    remote side collapses racing creates into one record.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={"Authorization": f"Bearer {api_key}"},
            timeout=timeout_seconds,
            transport=transport,
        )

    @property
    def enabled(self) -> bool:
        return True

    async def upsert(
        self,
        *,
        stable_key: str,
        text: str,
        metadata: dict[str, str | int | bool],
        group_tag: str,
        remote_id: str | None = None,
    ) -> str:
        body: dict[str, Any] = {
            "content": text,
            "containerTag": group_tag,
            "metadata": {**metadata, "custom_id": stable_key},
        }
        if remote_id:
            data = await self._request("PATCH", f"/v3/documents/{remote_id}", json=body)
        else:
            body["customId"] = stable_key
            data = await self._request("POST", "/v3/documents", json=body)
        new_id = data.get("id") if isinstance(data, dict) else None
        if not new_id:
            raise SemanticIndexError("Semantic index response missing document id")
        return str(new_id)

    async def delete(self, remote_id: str) -> None:
        try:
            await self._request("DELETE", f"/v3/documents/{remote_id}")
        except SemanticIndexError as e:
            if e.status_code == 404:
                logger.debug("Remote record %s already gone", remote_id)
                return
            raise

    async def search(self, query: str, *, group_tag: str, limit: int = 10) -> list[IndexHit]:
        data = await self._request(
            "POST",
            "/v3/search",
            json={"q": query, "containerTags": [group_tag], "limit": limit},
        )
        results = data.get("results", []) if isinstance(data, dict) else []
        hits = []
        for r in results:
            remote_id = r.get("documentId") or r.get("id")
            if not remote_id:
                continue
            metadata = r.get("metadata") or {}
            hits.append(
                IndexHit(
                    remote_id=str(remote_id),
                    stable_key=r.get("customId") or metadata.get("custom_id"),
                    score=float(r.get("score") or 0.0),
                    title=r.get("title"),
                    chunks=[c.get("content", "") for c in r.get("chunks") or [] if c.get("content")],
                )
            )
        return hits

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise SemanticIndexError(f"{method} {path} failed: {e}") from e
        if response.status_code >= 400:
            raise SemanticIndexError(
                f"{method} {path} returned {response.status_code}",
                status_code=response.status_code,
            )
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise SemanticIndexError(f"{method} {path} returned invalid JSON") from e


class DisabledSemanticIndex:
    """Stand-in when no API key is configured; reports disabled."""

    @property
    def enabled(self) -> bool:
        return False

    async def upsert(self, **kwargs: Any) -> str:
        raise SemanticIndexError("Semantic index is disabled")

    async def delete(self, remote_id: str) -> None:
        raise SemanticIndexError("Semantic index is disabled")

    async def search(self, query: str, *, group_tag: str, limit: int = 10) -> list[IndexHit]:
        raise SemanticIndexError("Semantic index is disabled")

    async def aclose(self) -> None:
        return None
