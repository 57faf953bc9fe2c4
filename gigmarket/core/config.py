"""Application configuration with environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    ENV: str = "dev"

    # App Version (format: major.minor.patch)
    VERSION: str = "0.1.0"

    # Database
    DATABASE_URL: str = "sqlite+pysqlite:///./gigmarket.db"

    # Bearer tokens issued by the auth provider (supports key rotation)
    AUTH_JWT_SECRET: str = "change-this-in-production"
    AUTH_JWT_SECRET_PREVIOUS: str = ""  # Set during rotation, clear after
    AUTH_JWT_ALGORITHM: str = "HS256"
    AUTH_JWT_AUDIENCE: str = ""  # Empty = audience not checked
    AUTH_JWT_EXPIRES_HOURS: int = 4  # Only used when minting dev/test tokens

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000"

    # Logging
    LOG_LEVEL: str = "INFO"

    # Error Tracking (optional, set in production)
    SENTRY_DSN: str = ""

    # Rate Limiting (requests per minute)
    RATE_LIMIT_API: int = 60
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    # Live notification push
    NOTIFICATION_PUSH_TIMEOUT_SECONDS: float = 5.0

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list."""
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def jwt_secrets(self) -> list[str]:
        """Returns list of valid secrets (current first, then previous if set)."""
        secrets = [self.AUTH_JWT_SECRET]
        if self.AUTH_JWT_SECRET_PREVIOUS:
            secrets.append(self.AUTH_JWT_SECRET_PREVIOUS)
        return secrets


settings = Settings()
