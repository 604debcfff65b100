"""
OneTap API client

Thin async wrapper over httpx that injects the API-key headers, targets an
explicit base URL (production or staging) and turns failures into
``OneTapAPIError``. Each call is attempted exactly once.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from onetap.config import settings
from onetap.credentials.models import OneTapCredential
from onetap.credentials.service import build_auth_headers, resolve_credential

logger = logging.getLogger(__name__)


class OneTapAPIError(RuntimeError):
    """A request to the OneTap API failed (transport error or non-2xx status)."""

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


def _error_message(response: httpx.Response, payload: Any) -> str:
    detail = None
    if isinstance(payload, dict):
        detail = payload.get("message") or payload.get("error")
    if not detail:
        detail = response.reason_phrase or response.text[:200]
    return f"OneTap API returned {response.status_code}: {detail}"


class OneTapClient:
    """
    Authenticated client for one OneTap environment.

    Usage:
        async with OneTapClient(credential, base_url) as client:
            profiles = await client.get("/api/profiles", query={"page": 0})
    """

    def __init__(
        self,
        credential: OneTapCredential,
        base_url: str,
        *,
        source_app: Optional[str] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT
        self.headers = build_auth_headers(credential, source_app)
        self._client = http_client
        self._owns_client = http_client is None

    @classmethod
    def from_context(cls, context, environment: Optional[str] = None) -> "OneTapClient":
        """
        Build a client from a node context: its OneTap credential, the base URL
        for ``environment`` and the host's HTTP client when one is supplied.
        """
        credential = resolve_credential(context.credentials)
        return cls(
            credential,
            settings.base_url_for(environment or settings.ENVIRONMENT),
            http_client=context.http_client,
        )

    async def __aenter__(self) -> "OneTapClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def request(
        self,
        method: str,
        path: str,
        *,
        query: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Perform one request and return the decoded JSON payload.

        An empty response body decodes to ``{}``; a non-JSON body to ``{"text": ...}``.

        Raises:
            OneTapAPIError: On transport failure or a non-2xx status
        """
        url = f"{self.base_url}{path}"
        params = {k: v for k, v in (query or {}).items() if v is not None}
        logger.debug(f"{method} {path} params={params}")

        try:
            response = await self._http().request(
                method,
                url,
                params=params or None,
                json=body,
                headers=self.headers,
                timeout=self.timeout,
            )
        except httpx.TimeoutException:
            raise OneTapAPIError(f"Request to OneTap timed out after {self.timeout:g} seconds")
        except httpx.HTTPError as e:
            raise OneTapAPIError(f"Request to OneTap failed: {e}")

        if not response.content:
            payload: Any = {}
        else:
            try:
                payload = response.json()
            except ValueError:
                payload = {"text": response.text}

        if response.is_error:
            raise OneTapAPIError(_error_message(response, payload), response.status_code, payload)

        return payload

    async def get(self, path: str, query: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("GET", path, query=query)

    async def post(self, path: str, body: Optional[Dict[str, Any]] = None, query: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("POST", path, query=query, body=body)

    async def put(self, path: str, body: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("PUT", path, body=body)

    async def delete(self, path: str, query: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("DELETE", path, query=query)
