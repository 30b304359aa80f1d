"""
Cloudflare Stream "copy from URL" client — async httpx REST calls.

Stream downloads the video from the URL we give it, so a successful call only
means the copy job was created; the returned `uid` identifies that job.
"""
from __future__ import annotations

import logging

import httpx

from stream_relay.config import Settings
from stream_relay.exceptions import IngestionRequestFailed
from stream_relay.schemas import CopyMeta, CopyRequest, IngestionJob

logger = logging.getLogger(__name__)


class StreamCopyClient:
    def __init__(self, settings: Settings, http_client: httpx.AsyncClient | None = None) -> None:
        self.settings = settings
        # Injected client is reused and owned by the caller; otherwise one per request.
        self._http_client = http_client

    def _copy_url(self) -> str:
        base = self.settings.cloudflare_api_base_url.rstrip("/")
        return f"{base}/accounts/{self.settings.cloudflare_account_id}/stream/copy"

    async def _post(self, client: httpx.AsyncClient, payload: dict) -> httpx.Response:
        return await client.post(
            self._copy_url(),
            json=payload,
            headers={"Authorization": f"Bearer {self.settings.cloudflare_api_token}"},
        )

    async def copy_from_url(self, url: str, *, name: str, bucket: str) -> IngestionJob:
        """Ask Stream to ingest the video at `url`.

        Returns the job Stream created. Transport errors, HTTP error statuses and
        envelopes without a result raise IngestionRequestFailed.
        """
        payload = CopyRequest(url=url, meta=CopyMeta(name=name, bucket=bucket)).model_dump()
        try:
            if self._http_client is not None:
                r = await self._post(self._http_client, payload)
            else:
                async with httpx.AsyncClient(
                    timeout=self.settings.stream_request_timeout_seconds,
                ) as client:
                    r = await self._post(client, payload)
        except httpx.HTTPError as exc:
            raise IngestionRequestFailed(name, str(exc)) from exc

        if r.status_code >= 400:
            logger.error("Stream copy error %s: %s", r.status_code, r.text[:300])
            raise IngestionRequestFailed(name, f"HTTP {r.status_code}")

        try:
            envelope = r.json()
        except ValueError as exc:
            raise IngestionRequestFailed(name, "response is not JSON") from exc

        result = envelope.get("result") if isinstance(envelope, dict) else None
        if not isinstance(result, dict):
            errors = envelope.get("errors") if isinstance(envelope, dict) else None
            raise IngestionRequestFailed(name, f"no result in response (errors: {errors})")

        return IngestionJob.model_validate(result)
