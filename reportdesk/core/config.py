from __future__ import annotations

import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

load_dotenv()


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    api_key: str | None = None
    report_api_base_url: str = "http://localhost/api/"
    report_generate_path: str = "generate_report.php"
    report_insights_path: str = "ai_report_insights.php"
    report_export_path: str = "export_report.php"
    default_user_id: str = "1"
    http_timeout_seconds: float | None = None
    message_ttl_seconds: float = 3.0
    session_idle_seconds: float = 1800.0
    download_backend: str = "local"
    download_dir: str = "downloads"
    azure_storage_account_url: str | None = None
    azure_storage_account_key: str | None = None
    azure_storage_container: str | None = None
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings(
        api_key=os.getenv("API_KEY"),
        report_api_base_url=os.getenv("REPORT_API_BASE_URL", "http://localhost/api/"),
        report_generate_path=os.getenv("REPORT_GENERATE_PATH", "generate_report.php"),
        report_insights_path=os.getenv("REPORT_INSIGHTS_PATH", "ai_report_insights.php"),
        report_export_path=os.getenv("REPORT_EXPORT_PATH", "export_report.php"),
        default_user_id=os.getenv("REPORT_DEFAULT_USER_ID", "1"),
        http_timeout_seconds=_optional_float(os.getenv("REPORT_HTTP_TIMEOUT_SECONDS")),
        message_ttl_seconds=_optional_float(os.getenv("REPORT_MESSAGE_TTL_SECONDS")) or 3.0,
        session_idle_seconds=_optional_float(os.getenv("REPORT_SESSION_IDLE_SECONDS")) or 1800.0,
        download_backend=os.getenv("REPORT_DOWNLOAD_BACKEND", "local").strip().lower(),
        download_dir=os.getenv("REPORT_DOWNLOAD_DIR", "downloads"),
        azure_storage_account_url=os.getenv("AZURE_STORAGE_ACCOUNT_URL"),
        azure_storage_account_key=os.getenv("AZURE_STORAGE_ACCOUNT_KEY"),
        azure_storage_container=os.getenv("AZURE_STORAGE_CONTAINER"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


def _optional_float(raw: str | None) -> float | None:
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"invalid number in environment: {raw}") from exc
