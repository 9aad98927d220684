"""Application settings and configuration.

This module defines all configuration options for the Huddle application.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    Credentials for external services (push, geocoding) are read here once and
    handed to their clients through explicit config objects.
    """

    # Application metadata
    app_name: str = Field(default="Huddle API", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")

    # Security
    secret_key: str = Field(alias="SECRET_KEY")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Database configuration
    database_url: str = Field(default="sqlite:///./huddle.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Anonymous session cookie
    session_cookie_name: str = Field(default="huddle_session", alias="SESSION_COOKIE_NAME")
    session_cookie_max_age_days: int = Field(default=365, alias="SESSION_COOKIE_MAX_AGE_DAYS")
    session_cookie_secure: bool = Field(default=False, alias="SESSION_COOKIE_SECURE")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")

    # Visibility query
    visibility_radius_miles: float = Field(default=200.0, alias="VISIBILITY_RADIUS_MILES")
    earth_radius_miles: float = Field(default=3958.8, alias="EARTH_RADIUS_MILES")
    post_min_hours: int = Field(default=1, alias="POST_MIN_HOURS")
    post_max_hours: int = Field(default=24, alias="POST_MAX_HOURS")

    # Web push (VAPID)
    vapid_public_key: str | None = Field(default=None, alias="VAPID_PUBLIC_KEY")
    vapid_private_key: str | None = Field(default=None, alias="VAPID_PRIVATE_KEY")
    vapid_contact_email: str = Field(
        default="mailto:admin@example.com",
        alias="VAPID_CONTACT_EMAIL",
    )
    push_ttl_seconds: int = Field(default=3600, alias="PUSH_TTL_SECONDS")
    notification_queue_size: int = Field(default=100, alias="NOTIFICATION_QUEUE_SIZE")

    # Reverse geocoding (place names for posts)
    geocoding_api_key: str | None = Field(default=None, alias="GEOCODING_API_KEY")
    geocoding_base_url: str = Field(
        default="https://maps.googleapis.com",
        alias="GEOCODING_BASE_URL",
    )
    geocoding_timeout_seconds: float = Field(default=5.0, alias="GEOCODING_TIMEOUT_SECONDS")

    # IP geolocation (default observer location)
    ip_geolocation_base_url: str = Field(
        default="http://ip-api.com",
        alias="IP_GEOLOCATION_BASE_URL",
    )
    ip_geolocation_timeout_seconds: float = Field(
        default=3.0,
        alias="IP_GEOLOCATION_TIMEOUT_SECONDS",
    )

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def database_url_sync(self) -> str:
        """Return a sync-compatible database URL for tooling.

        Converts asyncpg URLs to psycopg for synchronous database operations
        like Alembic migrations.
        """
        url = self.effective_database_url
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql+psycopg", 1)
        return url

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url

    @property
    def session_cookie_max_age_seconds(self) -> int:
        """Cookie lifetime in seconds."""
        return max(1, self.session_cookie_max_age_days) * 86_400

    @property
    def push_configured(self) -> bool:
        """Return True when both VAPID keys are present."""
        return bool(self.vapid_public_key and self.vapid_private_key)


settings = Settings()  # type: ignore[call-arg]
