from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "vouchers"
    db_username: str = "vouchers"
    db_password: str = "secret"
    db_pool_min_size: int = Field(default=1, ge=1)
    db_pool_max_size: int = Field(default=10, ge=1)
    db_pool_timeout_seconds: float = Field(default=30.0, gt=0)

    pdf_engine: str = "pdfplumber"
    max_document_size_bytes: int = Field(default=5 * 1024 * 1024, gt=0)
    accepted_media_type: str = "application/pdf"

    raster_scale: float = Field(default=2.0, gt=0)
    visual_code_path_fragment: str = "vale/"

    audit_action_kind: str = "verification"

    batch_workers: int = Field(default=4, ge=1)
