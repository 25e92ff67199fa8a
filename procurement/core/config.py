from pydantic import Field
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application configuration loaded from environment variables / .env file."""

    app_name: str = "NEEPCO Procurement API"
    app_env: str = "development"
    app_port: int = 8000
    frontend_url: str = "http://localhost:3000"

    # Database (SQLite for local dev, any async SQLAlchemy URL in production)
    database_url: str = Field(
        default="sqlite+aiosqlite:///./procurement_dev.db",
        alias="DATABASE_URL",
    )
    db_auto_create: bool = Field(default=True, alias="DB_AUTO_CREATE")
    db_reset_on_startup: bool = Field(
        default=False, alias="DB_RESET_ON_STARTUP",
    )  # drop + create, tests only

    # Auth
    jwt_secret: str = Field(default="change-me", alias="JWT_SECRET")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    jwt_expire_minutes: int = Field(default=60 * 24, alias="JWT_EXPIRE_MINUTES")

    # First admin account, created on startup when both are set
    bootstrap_admin_email: str | None = Field(default=None, alias="BOOTSTRAP_ADMIN_EMAIL")
    bootstrap_admin_password: str | None = Field(
        default=None, alias="BOOTSTRAP_ADMIN_PASSWORD",
    )

    audit_enabled: bool = Field(default=True, alias="AUDIT_ENABLED")

    # Client notification feed
    notification_poll_seconds: float = Field(default=30.0, alias="NOTIFICATION_POLL_SECONDS")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "populate_by_name": True,
        "extra": "ignore",
    }

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

    @property
    def bootstrap_admin_enabled(self) -> bool:
        """The startup admin is created only when both credentials are configured."""
        return bool(self.bootstrap_admin_email and self.bootstrap_admin_password)

settings = Settings()
