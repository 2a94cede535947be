"""
Share sheet stand-in for headless deployments.

WebhookShare posts {"text": ...} to SHARE_WEBHOOK_URL (chat bot, notes app,
automation hook). LogShare only records the hand-off.
"""
import httpx
from ocrscan.adapters.share.base import ShareAdapter
from ocrscan.orchestrator.errors import ShareFailed


class WebhookShare(ShareAdapter):
    def __init__(self, status_store, url: str, timeout: float = 15.0, transport=None):
        self.status = status_store
        self.url = url
        self.timeout = timeout
        self._transport = transport

    async def share(self, text: str):
        self.status.log(f"share: POST {self.url}")
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(self.url, json={"text": text})
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise ShareFailed(str(e)) from e
        self.status.log("share: delivered")


class LogShare(ShareAdapter):
    def __init__(self, status_store):
        self.status = status_store
        self.shared = []

    async def share(self, text: str):
        self.shared.append(text)
        self.status.log(f"share(log): {len(text)} chars")
