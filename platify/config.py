"""Application configuration using pydantic-settings."""

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Upstream API
    api_base_url: str = "https://platify.aukespot.com"
    http_timeout: float = 10.0  # seconds

    # Server
    port: int = 8080
    host: str = "0.0.0.0"
    app_mode: str = "debug"  # "release" disables the preview routes

    # Logging
    log_level: str = "INFO"

    # Uploads
    upload_dir: Path = Path("static/uploads")
    upload_url_prefix: str = "/static/uploads"
    max_upload_bytes: int = 10 * 1024 * 1024  # 10MB

    # Assets
    templates_dir: Path = PACKAGE_DIR / "templates"
    static_dir: Path = PACKAGE_DIR / "static"
    testdata_dir: Path = PACKAGE_DIR / "testdata"
    privacy_policy_path: Path = PACKAGE_DIR / "privacy-policy" / "index.html"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("api_base_url", "upload_url_prefix")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @property
    def is_release(self) -> bool:
        """Whether the app runs in release mode (no preview routes)."""
        return self.app_mode.lower() == "release"


# Global settings instance
settings = Settings()
