"""
Application settings and configuration management.
"""
from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""
    # Base
    PROJECT_NAME: str = "Pragati SMS Relay"
    PROJECT_DESCRIPTION: str = "Bulk SMS relay for the Pragati gateway"
    VERSION: str = "0.1.0"
    API_PREFIX: str = "/api"
    DEBUG: bool = False

    # Caller authentication
    API_SECRET_KEY: Optional[str] = None
    API_KEY_HEADER: str = "X-API-Key"

    # Pragati gateway
    PRAGATI_API_BASE_URL: Optional[str] = None
    PRAGATI_API_KEY: Optional[str] = None
    SMS_SENDER_ID: Optional[str] = None
    SMS_DEFAULT_TEMPLATE_ID: Optional[str] = None
    SMS_CATEGORY: str = "bulk"
    GATEWAY_TIMEOUT_SECONDS: float = 30.0

    # Session token
    TOKEN_VALIDITY_DAYS: int = 7  # as documented by the gateway
    TOKEN_SAFETY_MARGIN_DAYS: int = 1
    TOKEN_CACHE_FILE: str = ".token-cache.json"

    # SMS Processing
    GATEWAY_RECIPIENT_CAP: int = 100
    MAX_RECIPIENTS_PER_REQUEST: int = 1000
    BATCH_DELAY_SECONDS: float = 0.5

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        """Pydantic config."""
        case_sensitive = True
        env_file = ".env"


# Create singleton settings instance
settings = Settings()
