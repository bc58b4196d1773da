"""
Тесты провайдеров хранилища и валидации изображений.
"""

import re

import pytest
from botocore.exceptions import ClientError

from catalog_api.core.config import Settings
from catalog_api.core.errors import StorageError, ValidationError
from catalog_api.services.image_service import ImageService
from catalog_api.services.storage_service import (
    LocalStorageProvider,
    S3StorageProvider,
    build_storage,
)


class FakeS3Client:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.objects = {}
        self.closed = False

    def put_object(self, Bucket, Key, Body, **kwargs):
        if self.fail:
            raise ClientError({"Error": {"Code": "AccessDenied"}}, "PutObject")
        self.objects[(Bucket, Key)] = (Body.read(), kwargs)

    def delete_object(self, Bucket, Key):
        self.objects.pop((Bucket, Key), None)

    def close(self):
        self.closed = True


def test_local_storage_roundtrip(tmp_path):
    provider = LocalStorageProvider(str(tmp_path), "http://localhost:8000/")

    url = provider.save_file("banners/a.png", b"data", "image/png")

    assert url == "http://localhost:8000/static/banners/a.png"
    assert (tmp_path / "banners" / "a.png").read_bytes() == b"data"
    assert provider.delete_file("banners/a.png")
    assert not (tmp_path / "banners" / "a.png").exists()
    assert not provider.delete_file("banners/a.png")


def test_local_storage_rejects_path_escape(tmp_path):
    provider = LocalStorageProvider(str(tmp_path / "uploads"))

    with pytest.raises(StorageError):
        provider.save_file("../outside.png", b"data")


def test_s3_upload_uses_public_url():
    client = FakeS3Client()
    provider = S3StorageProvider(
        "catalog", public_url="https://img.example.com/", client=client
    )

    url = provider.save_file("categories/x.png", b"abc", "image/png")

    assert url == "https://img.example.com/categories/x.png"
    body, extra = client.objects[("catalog", "categories/x.png")]
    assert body == b"abc"
    assert extra == {"ContentLength": 3, "ContentType": "image/png"}

    assert provider.delete_file("categories/x.png")
    assert client.objects == {}


def test_s3_url_falls_back_to_endpoint():
    provider = S3StorageProvider(
        "catalog", endpoint_url="http://minio:9000/", client=FakeS3Client()
    )

    assert provider.get_file_url("a.png") == "http://minio:9000/catalog/a.png"


def test_s3_failure_raises_storage_error():
    provider = S3StorageProvider("catalog", client=FakeS3Client(fail=True))

    with pytest.raises(StorageError):
        provider.save_file("a.png", b"abc")


def test_s3_close():
    client = FakeS3Client()
    S3StorageProvider("catalog", client=client).close()

    assert client.closed


def test_build_storage_local(tmp_path):
    config = Settings(STORAGE_TYPE="local", STORAGE_PATH=str(tmp_path))

    assert isinstance(build_storage(config), LocalStorageProvider)


def test_image_validation_rejects_large_file(png_bytes):
    service = ImageService(max_size=10)

    with pytest.raises(ValidationError) as exc_info:
        service.validate("image", "a.png", "image/png", png_bytes)

    assert "image" in exc_info.value.errors


def test_image_validation_rejects_extension(png_bytes):
    with pytest.raises(ValidationError):
        ImageService().validate("logo", "a.gif", "image/png", png_bytes)


def test_image_validation_guesses_mime_from_filename(png_bytes):
    ImageService().validate("image", "a.png", "application/octet-stream", png_bytes)


def test_image_validation_rejects_empty_file():
    with pytest.raises(ValidationError):
        ImageService().validate("image", "a.png", "image/png", b"")


def test_generate_path():
    key = ImageService().generate_path("banners", "My Summer Sale!.png")

    assert re.fullmatch(r"banners/\d+-[0-9a-f]{8}-My-Summer-Sale-.png", key)
