"""
Credential service functions for resolving and testing the OneTap API key.
"""
import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from onetap.config import settings
from onetap.credentials.models import CREDENTIAL_NAME, OneTapCredential

logger = logging.getLogger(__name__)

CREDENTIAL_TEST_PATH = "/api/public/me"


def resolve_credential(credentials: Optional[Dict[str, Any]]) -> OneTapCredential:
    """
    Pick the OneTap credential out of the credentials handed to a node.

    Accepts either ``{"onetap": {"apiKey": ...}}`` or a flat ``{"apiKey": ...}``.

    Raises:
        ValueError: If no usable API key is present
    """
    data = credentials or {}
    if isinstance(data.get(CREDENTIAL_NAME), dict):
        data = data[CREDENTIAL_NAME]

    if "apiKey" not in data and "api_key" in data:
        data = {**data, "apiKey": data["api_key"]}

    try:
        return OneTapCredential.model_validate(data)
    except ValidationError:
        raise ValueError("No OneTap credential configured: an API key is required") from None


def build_auth_headers(credential: OneTapCredential, source_app: Optional[str] = None) -> Dict[str, str]:
    """Headers every OneTap API request carries."""
    return {
        "X-API-Key": credential.secret(),
        "x-sourceapp": source_app or settings.ONETAP_SOURCE_APP,
        "Accept": "application/json",
        "Content-Type": "application/json",
    }


async def test_credential(
    credential: OneTapCredential,
    environment: Optional[str] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> Dict[str, Any]:
    """
    Validate an API key by calling the public account endpoint.

    Returns:
        Dict with 'status' ("OK" or "Error"), 'message' and, on success, 'account'
    """
    url = f"{settings.base_url_for(environment or settings.ENVIRONMENT)}{CREDENTIAL_TEST_PATH}"
    headers = build_auth_headers(credential)

    try:
        if http_client is not None:
            resp = await http_client.get(url, headers=headers, timeout=settings.HTTP_TIMEOUT)
        else:
            async with httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT) as client:
                resp = await client.get(url, headers=headers)
    except httpx.HTTPError as e:
        logger.warning(f"Credential test request failed: {e}")
        return {"status": "Error", "message": f"Could not reach OneTap: {e}"}

    if resp.status_code != 200:
        logger.info(f"Credential test rejected with status {resp.status_code}")
        return {"status": "Error", "message": f"OneTap rejected the API key ({resp.status_code})"}

    try:
        account = resp.json()
    except ValueError:
        account = {}
    return {"status": "OK", "message": "Connection successful", "account": account}
