"""
OneTap credential type

Defines the API-key credential the OneTap nodes authenticate with, and the
helpers that turn it into request headers or test it against the API.
"""

from .models import ONETAP_CREDENTIAL_TYPE, OneTapCredential
from .service import build_auth_headers, resolve_credential, test_credential

__all__ = [
    "ONETAP_CREDENTIAL_TYPE",
    "OneTapCredential",
    "build_auth_headers",
    "resolve_credential",
    "test_credential",
]
