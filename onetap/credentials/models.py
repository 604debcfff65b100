"""
Credential models for the OneTap API key.
"""
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, SecretStr

CREDENTIAL_NAME = "onetap"


class OneTapCredential(BaseModel):
    """API key issued by OneTap for an organization."""
    model_config = ConfigDict(populate_by_name=True)

    api_key: SecretStr = Field(alias="apiKey", min_length=1)

    def secret(self) -> str:
        return self.api_key.get_secret_value()


# Declarative definition shown to the host's credential UI
ONETAP_CREDENTIAL_TYPE: Dict[str, Any] = {
    "name": CREDENTIAL_NAME,
    "displayName": "OneTap API",
    "documentationUrl": "https://apidocs.onetapcheckin.io",
    "properties": [
        {
            "name": "apiKey",
            "label": "API Key",
            "type": "string",
            "typeOptions": {"password": True},
            "default": "",
            "required": True,
        }
    ],
    "authenticate": {
        "headers": {
            "X-API-Key": "{{ apiKey }}",
            "x-sourceapp": "{{ sourceApp }}",
        }
    },
    "test": {"method": "GET", "url": "/api/public/me"},
}
