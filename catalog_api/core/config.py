"""
Конфигурация приложения.

Содержит настройки подключения к БД, токенов, хранилища изображений
и пагинации.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Настройки приложения, загружаемые из переменных окружения.

    Attributes:
        DATABASE_URL: URL подключения к базе данных
        DEBUG: Режим отладки
        LOG_LEVEL: Уровень логирования
    """

    DATABASE_URL: str = Field(
        default="sqlite:///./catalog.db",
        description="URL подключения к базе данных (SQLite или PostgreSQL)",
    )
    DEBUG: bool = Field(default=False, description="Режим отладки")
    LOG_LEVEL: str = Field(default="INFO", description="Уровень логирования")
    CORS_ORIGINS: str = Field(
        default="*", description="Разрешенные origins для CORS (через запятую)"
    )

    # JWT
    SECRET_KEY: str = Field(
        default="your-secret-key-here", description="Секрет для подписи JWT"
    )
    ALGORITHM: str = Field(default="HS256", description="Алгоритм подписи JWT")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(
        default=30 * 24 * 60, description="Время жизни токена пользователя (30 дней)"
    )
    ADMIN_TOKEN_EXPIRE_MINUTES: int = Field(
        default=24 * 60, description="Время жизни токена администратора (1 день)"
    )
    BCRYPT_ROUNDS: int = Field(default=12, description="Стоимость bcrypt")

    # Пагинация
    DEFAULT_PAGE_SIZE: int = Field(default=10, description="Размер страницы по умолчанию")
    MAX_PAGE_SIZE: int = Field(default=100, description="Максимальный размер страницы")

    # Настройки хранилища изображений
    STORAGE_TYPE: str = Field(default="local", description="Тип хранилища: local/s3")
    STORAGE_PATH: str = Field(
        default="./uploads", description="Путь для локального хранения файлов"
    )
    PUBLIC_BASE_URL: str = Field(
        default="", description="Базовый URL для ссылок на локальные файлы"
    )
    MAX_IMAGE_SIZE: int = Field(
        default=5 * 1024 * 1024,  # 5MB
        description="Максимальный размер изображения в байтах",
    )
    ALLOWED_IMAGE_TYPES: str = Field(
        default="jpg,jpeg,png,webp",
        description="Разрешенные типы изображений (через запятую)",
    )

    # Настройки S3 (R2, MinIO и т.д.)
    S3_BUCKET_NAME: str = Field(
        default="catalog-images", description="Имя S3 bucket для хранения файлов"
    )
    AWS_REGION: str = Field(default="auto", description="Регион S3 (auto для R2)")
    S3_ENDPOINT_URL: str = Field(
        default="", description="Кастомный endpoint URL для S3 (R2, MinIO)"
    )
    S3_PUBLIC_URL: str = Field(
        default="", description="Публичный базовый URL bucket'а"
    )
    AWS_ACCESS_KEY_ID: str = Field(default="", description="AWS Access Key ID")
    AWS_SECRET_ACCESS_KEY: str = Field(default="", description="AWS Secret Access Key")

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def allowed_image_extensions(self) -> set[str]:
        return {
            ext.strip().lower().lstrip(".")
            for ext in self.ALLOWED_IMAGE_TYPES.split(",")
            if ext.strip()
        }

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


# Глобальный экземпляр настроек
settings = Settings()
