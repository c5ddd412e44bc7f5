"""Application configuration.

Loads settings from environment variables (prefixed ``CATALOG_``)
with sensible defaults.
"""

from pydantic_settings import BaseSettings

from catalog_admin.domain.normalization import CoercionPolicy


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_version: str = "0.1.0"
    debug: bool = False
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:5174"]

    # Database
    database_url: str = "postgresql+asyncpg://catalog:catalog_dev_password@db:5432/catalog"
    create_tables_on_startup: bool = True

    # Write coercion
    numeric_coercion: CoercionPolicy = CoercionPolicy.PERMISSIVE

    # Authentication
    jwt_secret: str = "dev-jwt-secret-change-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expires_minutes: int = 60 * 24
    require_admin_auth: bool = False
    seed_default_admin: bool = True
    default_admin_email: str = "admin@example.com"
    default_admin_password: str = "password"

    # Media (Cloudinary)
    cloudinary_cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: str = ""
    cloudinary_api_url: str = "https://api.cloudinary.com/v1_1"
    media_timeout_seconds: float = 30.0
    product_image_folder: str = "product-images"
    hero_slide_folder: str = "hero-slides"
    allowed_image_formats: list[str] = ["jpg", "jpeg", "png"]

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    class Config:
        """Pydantic configuration."""

        env_prefix = "CATALOG_"
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
