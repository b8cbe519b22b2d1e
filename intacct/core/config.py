"""Client configuration using Pydantic Settings."""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ENDPOINT = "https://api.intacct.com/ia/xml/xmlgw.phtml"
DEFAULT_DTD_VERSION = "3.0"


class Settings(BaseSettings):
    """Client settings loaded from INTACCT_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="INTACCT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    debug: bool = False

    # Gateway
    endpoint: str = DEFAULT_ENDPOINT
    dtd_version: str = DEFAULT_DTD_VERSION
    request_timeout: float = 30.0  # seconds
    max_retries: int = 0  # connection failures only
    page_size: int = 100

    # Session cache
    session_expiry_delta: int = 0  # seconds

    # Credentials, all optional; see service_from_settings
    sender_id: str = ""
    sender_password: str = ""
    user_id: str = ""
    company_id: str = ""
    user_password: str = ""
    client_id: str = ""
    location_id: str = ""
    session_id: Optional[str] = None


# Create settings instance
settings = Settings()
