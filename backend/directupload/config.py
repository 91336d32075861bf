from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # We load .env manually in get_settings() so missing/unreadable env files don't break
    # test runs / CI / production containers.
    model_config = SettingsConfigDict(extra="ignore")

    app_env: str = "dev"
    allowed_origins: str = "http://localhost:3000"

    s3_bucket: str = "uploads-locale"
    s3_endpoint_url: str | None = None
    s3_region: str = "auto"
    s3_addressing_style: str = "auto"  # "path" for MinIO-style endpoints
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None
    upload_url_expires_s: int = 360  # 6 minutes

    # Client side (tracker)
    api_base_url: str = "http://localhost:8000"
    max_files_per_drop: int = 5
    max_file_size_bytes: int = 1024 * 1024 * 10  # 10mb
    accepted_content_types: str = "image/*"
    upload_chunk_size: int = 64 * 1024
    http_timeout_s: float = 30.0

    def origins(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    def accept(self) -> tuple[str, ...]:
        return tuple(t.strip().lower() for t in self.accepted_content_types.split(",") if t.strip())


@lru_cache
def get_settings() -> Settings:
    try:
        from dotenv import load_dotenv

        load_dotenv(".env", override=False)
    except Exception:
        pass
    return Settings()
