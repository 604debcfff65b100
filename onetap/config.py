from typing import Literal, Optional

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["production", "staging"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_ignore_empty=True, extra="ignore"
    )
    PROJECT_NAME: str = "OneTap Nodes"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: Environment = "production"

    # OneTap API servers
    ONETAP_PRODUCTION_URL: str = "https://api-beta.onetapcheckin.com"
    ONETAP_STAGING_URL: str = "http://localhost:1337"

    # Sent as the x-sourceapp header; the API uses it to attribute traffic
    ONETAP_SOURCE_APP: str = "n8n-integration"

    # Only used by the CLI when no --api-key is given
    ONETAP_API_KEY: Optional[str] = None

    HTTP_TIMEOUT: float = 30.0
    LOG_LEVEL: str = "INFO"

    # Set to point discovery at a different node_packages directory
    NODE_PACKAGES_DIR: Optional[str] = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def default_base_url(self) -> str:
        return self.base_url_for(self.ENVIRONMENT)

    def base_url_for(self, environment: Optional[str]) -> str:
        """
        Map an environment name to the OneTap API base URL.

        Anything other than "staging" resolves to production.
        """
        if environment == "staging":
            return self.ONETAP_STAGING_URL.rstrip("/")
        return self.ONETAP_PRODUCTION_URL.rstrip("/")


settings = Settings()  # type: ignore
