"""
Сервис для работы с загружаемыми изображениями.

Обеспечивает валидацию файлов, генерацию ключей хранилища,
загрузку в хранилище и откат загрузки при ошибке записи в БД.
"""

import logging
import mimetypes
import re
import time
import uuid
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Dict, Optional

from fastapi import UploadFile
from PIL import Image, UnidentifiedImageError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from catalog_api.core.config import settings
from catalog_api.core.errors import StorageError, ValidationError
from catalog_api.services.storage_service import StorageProvider

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


@dataclass(frozen=True)
class StoredImage:
    """Загруженное изображение: ключ в хранилище и публичный URL."""

    key: str
    url: str


class ImageService:
    """
    Сервис для работы с изображениями категорий, объявлений и баннеров.
    """

    SUPPORTED_MIME_TYPES = {
        "image/jpeg", "image/jpg", "image/png", "image/webp",
    }

    def __init__(self, max_size: Optional[int] = None, extensions=None):
        self.max_size = max_size or settings.MAX_IMAGE_SIZE
        self.extensions = extensions or settings.allowed_image_extensions

    def validate(self, field: str, filename: str, content_type: Optional[str], data: bytes) -> None:
        """
        Валидация загруженного файла.

        Raises:
            ValidationError: Если файл пустой, слишком большой,
                недопустимого типа или не является изображением
        """
        if not data:
            raise ValidationError("File is empty", errors={field: "File is empty"})

        if len(data) > self.max_size:
            message = f"File size exceeds maximum allowed size of {self.max_size} bytes"
            raise ValidationError(message, errors={field: message})

        ext = Path(filename or "").suffix.lower().lstrip(".")
        mime_type = content_type
        if mime_type not in self.SUPPORTED_MIME_TYPES:
            # application/octet-stream и т.п.: определяем по имени файла
            mime_type = mimetypes.guess_type(filename or "")[0]
        if ext not in self.extensions or mime_type not in self.SUPPORTED_MIME_TYPES:
            message = (
                "Invalid file type. Allowed: "
                + ", ".join(sorted(self.extensions))
            )
            raise ValidationError(message, errors={field: message})

        try:
            with Image.open(BytesIO(data)) as img:
                img.verify()
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            logger.info("Rejected upload %s: not a valid image (%s)", filename, e)
            raise ValidationError(
                "File is not a valid image", errors={field: "File is not a valid image"}
            ) from e

    def generate_path(self, entity: str, filename: str) -> str:
        """
        Генерация ключа хранилища.

        Структура: {entity}/{timestamp_ms}-{token}-{filename}
        """
        safe_name = _UNSAFE_CHARS.sub("-", Path(filename or "image").name).strip("-.")
        token = uuid.uuid4().hex[:8]
        return f"{entity}/{int(time.time() * 1000)}-{token}-{safe_name or 'image'}"

    def store(
        self,
        storage: StorageProvider,
        upload: UploadFile,
        entity: str,
        field: str = "image",
        failure_message: Optional[str] = None,
    ) -> StoredImage:
        """
        Провалидировать и загрузить файл в хранилище.

        Raises:
            ValidationError: Некорректный файл
            StorageError: Ошибка хранилища
        """
        upload.file.seek(0)
        data = upload.file.read()
        self.validate(field, upload.filename, upload.content_type, data)

        key = self.generate_path(entity, upload.filename)
        try:
            url = storage.save_file(key, data, upload.content_type)
        except StorageError as e:
            raise StorageError(failure_message or e.message) from e
        return StoredImage(key=key, url=url)

    def discard(self, storage: StorageProvider, key: Optional[str]) -> None:
        """Удалить файл из хранилища (при откате или замене)."""
        if key and not storage.delete_file(key):
            logger.warning("Could not delete stored object %s", key)

    def commit_or_discard(
        self,
        db: Session,
        storage: StorageProvider,
        stored: Optional[StoredImage],
        conflict: Optional[Dict[str, str]] = None,
    ) -> None:
        """
        Зафиксировать транзакцию; при ошибке удалить только что
        загруженный файл, чтобы не оставлять объектов без записи.

        Args:
            conflict: Ошибка по полю для нарушения уникальности

        Raises:
            ValidationError: При нарушении уникальности (если задан conflict)
        """
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            self.discard(storage, stored.key if stored else None)
            if conflict:
                raise ValidationError(next(iter(conflict.values())), errors=conflict) from e
            raise
        except Exception:
            db.rollback()
            self.discard(storage, stored.key if stored else None)
            raise


# Глобальный экземпляр сервиса
image_service = ImageService()
