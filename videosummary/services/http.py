from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from videosummary.core.logging import get_logger, redact_url
from videosummary.errors import HttpError, ProtocolViolationError, TransportError


logger = get_logger(__name__)


def decode_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as e:
        raise ProtocolViolationError(f"response from {redact_url(response.request.url)} is not valid JSON: {e}")


class ServiceTransport:
    """Every request the SDK makes goes through here.

    Calls to the service carry the bearer token and a JSON content type;
    pre-signed links (transcript artifacts, upload targets) are requested
    without them.
    """

    def __init__(self, api_key: str, base_url: str, client: httpx.AsyncClient) -> None:
        self._api_key = api_key
        self.base_url = base_url.rstrip("/")
        self._client = client

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def auth_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._api_key}",
        }

    async def request(self, method: str, url: str, *, authenticated: bool = True, **kwargs: Any) -> httpx.Response:
        headers = dict(kwargs.pop("headers", None) or {})
        if authenticated:
            headers.update(self.auth_headers())
        logged_url = redact_url(url)
        logger.debug("request", extra={"component": "http", "method": method, "url": logged_url})
        try:
            return await self._client.request(method, url, headers=headers, **kwargs)
        except httpx.RequestError as e:
            logger.warning("request failed", extra={"component": "http", "method": method, "url": logged_url, "error": str(e)})
            raise TransportError(f"{method} {logged_url} failed: {e}") from e

    async def get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        url = self.url(path)
        response = await self.request("GET", url, params=params)
        _raise_for_status(response)
        return decode_json(response)

    async def post_json(self, path: str, payload: Dict[str, Any]) -> Any:
        url = self.url(path)
        response = await self.request("POST", url, json=payload)
        _raise_for_status(response)
        return decode_json(response)

    async def fetch_artifact(self, url: str) -> Any:
        response = await self.request("GET", url, authenticated=False)
        _raise_for_status(response)
        return decode_json(response)


def _raise_for_status(response: httpx.Response) -> None:
    if not response.is_success:
        url = redact_url(response.request.url)
        logger.warning(
            "non-success status",
            extra={"component": "http", "status": response.status_code, "url": url},
        )
        raise HttpError(response.status_code, url)
