from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Server settings loaded from environment variables.

    All settings can be configured via environment variables or .env file.
    """

    # Notion integration token. Empty means "not configured".
    notion_api_key: str = Field(default="", validation_alias="NOTION_API_KEY")

    # Remote endpoint and API version header
    notion_base_url: str = "https://api.notion.com/v1"
    notion_version: str = "2022-06-28"

    # Outbound admission control (sliding window)
    rate_limit_max_requests: int = 3
    rate_limit_window_seconds: float = 1.0
    rate_limit_margin_seconds: float = 0.05

    # 429 handling
    throttle_default_retry_after: float = 1.0  # Used when Retry-After is missing
    throttle_max_retries: int | None = None  # None retries until the server lets us through

    # HTTP Client connection pool settings
    httpx_timeout: float = 60.0
    httpx_connect_timeout: float = 10.0
    httpx_read_timeout: float = 60.0
    httpx_write_timeout: float = 10.0
    httpx_pool_timeout: float = 5.0
    httpx_keepalive_expiry: float = 30.0
    httpx_max_connections: int = 20
    httpx_max_keepalive_connections: int = 5

    # Logging settings
    log_level: str = "INFO"
    log_format: str = "text"  # text | structured | json

    # MCP server name advertised to clients
    server_name: str = "notion"

    @field_validator("rate_limit_max_requests")
    @classmethod
    def validate_rate_limit_positive(cls, v: int) -> int:
        """Validate rate limit values are positive."""
        if v < 1:
            raise ValueError("rate_limit_max_requests must be at least 1")
        return v

    @field_validator("rate_limit_window_seconds")
    @classmethod
    def validate_window_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("rate_limit_window_seconds must be positive")
        return v

    @field_validator("rate_limit_margin_seconds", "throttle_default_retry_after")
    @classmethod
    def validate_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("delay values must not be negative")
        return v

    @field_validator("throttle_max_retries")
    @classmethod
    def validate_max_retries(cls, v: int | None) -> int | None:
        """Validate the optional retry cap."""
        if v is not None and v < 0:
            raise ValueError("throttle_max_retries must not be negative")
        return v

    @field_validator("httpx_timeout", "httpx_connect_timeout", "httpx_read_timeout")
    @classmethod
    def validate_timeout_positive(cls, v: float) -> float:
        """Validate timeout values are positive."""
        if v <= 0:
            raise ValueError("Timeout values must be positive")
        return v

    model_config = SettingsConfigDict(
        env_file=".env", extra="ignore", populate_by_name=True
    )


# Global settings instance
settings = Settings()
