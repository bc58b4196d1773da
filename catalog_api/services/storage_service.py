"""
Сервис для работы с хранилищами файлов.

Поддерживает локальное хранилище и S3-совместимые хранилища
(Amazon S3, Cloudflare R2, MinIO). Обеспечивает единый интерфейс
для работы с файлами независимо от типа хранилища.
"""

import logging
from abc import ABC, abstractmethod
from io import BytesIO
from pathlib import Path
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import Request

from catalog_api.core.config import Settings, settings
from catalog_api.core.errors import StorageError

logger = logging.getLogger(__name__)


class StorageProvider(ABC):
    """
    Абстрактный базовый класс для провайдеров хранилища.
    """

    @abstractmethod
    def save_file(
        self, file_path: str, data: bytes, content_type: Optional[str] = None
    ) -> str:
        """Сохранить файл и вернуть его публичный URL (StorageError при сбое)."""

    @abstractmethod
    def get_file_url(self, file_path: str) -> str:
        pass

    @abstractmethod
    def delete_file(self, file_path: str) -> bool:
        pass

    def close(self) -> None:
        """Освободить ресурсы провайдера."""


class LocalStorageProvider(StorageProvider):
    """
    Локальное хранилище файлов, раздаваемых через /static.
    """

    def __init__(self, base_path: Optional[str] = None, public_base_url: str = ""):
        self.base_path = Path(base_path or settings.STORAGE_PATH)
        self.base_path.mkdir(parents=True, exist_ok=True)
        self.public_base_url = public_base_url.rstrip("/")

    def _full_path(self, file_path: str) -> Path:
        full_path = (self.base_path / file_path).resolve()
        if self.base_path.resolve() not in full_path.parents:
            raise StorageError("Invalid storage key")
        return full_path

    def save_file(
        self, file_path: str, data: bytes, content_type: Optional[str] = None
    ) -> str:
        full_path = self._full_path(file_path)
        try:
            full_path.parent.mkdir(parents=True, exist_ok=True)
            full_path.write_bytes(data)
        except OSError as e:
            logger.error("Local storage: error saving %s: %s", file_path, e)
            raise StorageError() from e

        logger.info("Local storage: saved %s (%d bytes)", file_path, len(data))
        return self.get_file_url(file_path)

    def get_file_url(self, file_path: str) -> str:
        return f"{self.public_base_url}/static/{file_path.lstrip('/')}"

    def delete_file(self, file_path: str) -> bool:
        try:
            full_path = self._full_path(file_path)
            if full_path.exists():
                full_path.unlink()
                return True
            return False
        except (OSError, StorageError) as e:
            logger.error("Local storage: error deleting %s: %s", file_path, e)
            return False


class S3StorageProvider(StorageProvider):
    """
    Amazon S3 хранилище (или совместимые сервисы: R2, MinIO).
    """

    def __init__(
        self,
        bucket_name: str,
        region: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        public_url: Optional[str] = None,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        client=None,
    ):
        self.bucket_name = bucket_name
        self.region = region or "auto"
        self.endpoint_url = endpoint_url or None
        self.public_url = (public_url or "").rstrip("/")

        if client is None:
            config = Config(
                retries={"max_attempts": 3, "mode": "adaptive"},
                connect_timeout=10,
                read_timeout=30,
                signature_version="s3v4",
                s3={"addressing_style": "path"},
            )
            client = boto3.client(
                "s3",
                region_name=self.region,
                endpoint_url=self.endpoint_url,
                aws_access_key_id=access_key_id or None,
                aws_secret_access_key=secret_access_key or None,
                config=config,
            )
        self.s3_client = client

    def save_file(
        self, file_path: str, data: bytes, content_type: Optional[str] = None
    ) -> str:
        extra_args = {"ContentLength": len(data)}
        if content_type:
            extra_args["ContentType"] = content_type

        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=file_path,
                Body=BytesIO(data),
                **extra_args,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error("S3 storage: upload of %s failed: %s", file_path, e)
            raise StorageError() from e

        logger.info("S3 storage: uploaded %s to bucket %s", file_path, self.bucket_name)
        return self.get_file_url(file_path)

    def get_file_url(self, file_path: str) -> str:
        if self.public_url:
            return f"{self.public_url}/{file_path}"
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket_name}/{file_path}"
        return f"https://{self.bucket_name}.s3.amazonaws.com/{file_path}"

    def delete_file(self, file_path: str) -> bool:
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=file_path)
            logger.info("S3 storage: deleted %s", file_path)
            return True
        except (ClientError, BotoCoreError) as e:
            logger.error("S3 storage: error deleting %s: %s", file_path, e)
            return False

    def close(self) -> None:
        self.s3_client.close()


def build_storage(config: Settings = settings) -> StorageProvider:
    """Создать провайдер хранилища по настройкам (STORAGE_TYPE)."""
    if config.STORAGE_TYPE == "s3":
        logger.info(
            "Using S3 storage: bucket=%s endpoint=%s",
            config.S3_BUCKET_NAME,
            config.S3_ENDPOINT_URL or "aws",
        )
        return S3StorageProvider(
            bucket_name=config.S3_BUCKET_NAME,
            region=config.AWS_REGION,
            endpoint_url=config.S3_ENDPOINT_URL,
            public_url=config.S3_PUBLIC_URL,
            access_key_id=config.AWS_ACCESS_KEY_ID,
            secret_access_key=config.AWS_SECRET_ACCESS_KEY,
        )

    logger.info("Using local storage at %s", config.STORAGE_PATH)
    return LocalStorageProvider(config.STORAGE_PATH, config.PUBLIC_BASE_URL)


def get_storage(request: Request) -> StorageProvider:
    """Dependency: провайдер хранилища, созданный при старте приложения."""
    return request.app.state.storage
