from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from reportdesk.core.config import Settings, get_settings
from reportdesk.core.logging import get_logger
from reportdesk.models import ExportedFile, SavedDownload

if TYPE_CHECKING:  # pragma: no cover
    from azure.storage.blob import BlobSasPermissions, BlobServiceClient

logger = get_logger(__name__)


class DownloadSink(Protocol):
    def save(self, file: ExportedFile, *, user_id: str) -> SavedDownload:
        ...


class LocalDownloadSink(DownloadSink):
    def __init__(self, directory: str | Path = "downloads") -> None:
        self.directory = Path(directory)

    def save(self, file: ExportedFile, *, user_id: str) -> SavedDownload:
        self.directory.mkdir(parents=True, exist_ok=True)
        target = self.directory / Path(file.filename).name
        target.write_bytes(file.content)
        logger.info("Saved %s (%d bytes) for user %s", target, file.size_bytes, user_id)
        return SavedDownload(
            filename=file.filename,
            location=str(target),
            content_type=file.content_type,
            size_bytes=file.size_bytes,
            saved_at=datetime.now(timezone.utc),
        )


class AzureBlobDownloadSink(DownloadSink):
    def __init__(self, settings: Settings | None = None) -> None:
        from azure.storage.blob import BlobSasPermissions, BlobServiceClient, generate_blob_sas  # type: ignore

        settings = settings or get_settings()
        if not settings.azure_storage_account_url or not settings.azure_storage_account_key:
            raise RuntimeError("Azure storage account configuration missing")
        if not settings.azure_storage_container:
            raise RuntimeError("Azure storage container not configured")

        self._account_url = settings.azure_storage_account_url.rstrip("/")
        self._account_key = settings.azure_storage_account_key
        self._container = settings.azure_storage_container
        self._BlobSasPermissions: type[BlobSasPermissions] = BlobSasPermissions  # type: ignore[name-defined]
        self._generate_blob_sas = generate_blob_sas
        self._service_client: BlobServiceClient = BlobServiceClient(  # type: ignore[name-defined]
            account_url=self._account_url,
            credential=self._account_key,
        )
        self._account_name = self._service_client.account_name

    def save(self, file: ExportedFile, *, user_id: str) -> SavedDownload:
        now = datetime.now(timezone.utc)
        blob_path = self._build_blob_path(now=now, user_id=user_id, filename=file.filename)

        blob_client = self._service_client.get_blob_client(
            container=self._container,
            blob=blob_path,
        )
        blob_client.upload_blob(file.content, overwrite=True, content_type=file.content_type)

        sas_token = self._generate_blob_sas(
            account_name=self._account_name,
            container_name=self._container,
            blob_name=blob_path,
            account_key=self._account_key,
            permission=self._BlobSasPermissions(read=True),
            expiry=now + timedelta(days=1),
        )
        url = f"{self._account_url}/{self._container}/{blob_path}?{sas_token}"
        logger.info("Uploaded %s (%d bytes) to blob storage", blob_path, file.size_bytes)
        return SavedDownload(
            filename=file.filename,
            location=url,
            content_type=file.content_type,
            size_bytes=file.size_bytes,
            saved_at=now,
        )

    @staticmethod
    def _build_blob_path(*, now: datetime, user_id: str, filename: str) -> str:
        path = Path(
            "report-desk",
            f"yyyy={now:%Y}",
            f"mm={now:%m}",
            f"dd={now:%d}",
            f"user_id={user_id}",
        ) / Path(filename).name
        return str(path).replace("\\", "/")


def build_download_sink(settings: Settings | None = None) -> DownloadSink:
    settings = settings or get_settings()
    if settings.download_backend == "azure":
        return AzureBlobDownloadSink(settings)
    if settings.download_backend == "local":
        return LocalDownloadSink(settings.download_dir)
    raise RuntimeError(f"unknown download backend: {settings.download_backend}")
