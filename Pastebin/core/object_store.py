from __future__ import annotations

from abc import ABC, abstractmethod
from io import BytesIO
from typing import Dict, Optional

from anyio import to_thread
from minio import Minio
from minio.error import S3Error

from .config import Settings
from .errors import BackendError

MISSING_OBJECT_CODES = {"NoSuchKey", "NoSuchObject", "NoSuchBucket"}


class ObjectStore(ABC):
    """Byte store for the large-object tier, addressed by paste key."""

    @abstractmethod
    async def put(self, key: str, data: bytes) -> None:
        raise NotImplementedError

    @abstractmethod
    async def get(self, key: str) -> Optional[bytes]:
        raise NotImplementedError

    @abstractmethod
    async def delete(self, key: str) -> None:
        raise NotImplementedError


class InMemoryObjectStore(ObjectStore):
    def __init__(self) -> None:
        self._mem: Dict[str, bytes] = {}

    async def put(self, key: str, data: bytes) -> None:
        self._mem[key] = bytes(data)

    async def get(self, key: str) -> Optional[bytes]:
        return self._mem.get(key)

    async def delete(self, key: str) -> None:
        self._mem.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._mem


class MinioObjectStore(ObjectStore):
    def __init__(self, settings: Settings, client: Optional[Minio] = None):
        self.client = client or Minio(
            settings.MINIO_ENDPOINT,
            access_key=settings.MINIO_ACCESS_KEY,
            secret_key=settings.MINIO_SECRET_KEY,
            secure=settings.MINIO_SECURE,
        )
        self.bucket_name = settings.MINIO_BUCKET
        self._bucket_ready = False

    def _ensure_bucket(self) -> None:
        if self._bucket_ready:
            return
        if not self.client.bucket_exists(bucket_name=self.bucket_name):
            self.client.make_bucket(bucket_name=self.bucket_name)
        self._bucket_ready = True

    def _put(self, key: str, data: bytes) -> None:
        self._ensure_bucket()
        self.client.put_object(
            bucket_name=self.bucket_name,
            object_name=key,
            data=BytesIO(data),
            length=len(data),
            content_type="application/octet-stream",
        )

    def _get(self, key: str) -> Optional[bytes]:
        try:
            response = self.client.get_object(bucket_name=self.bucket_name, object_name=key)
        except S3Error as exc:
            if exc.code in MISSING_OBJECT_CODES:
                return None
            raise
        try:
            return response.read()
        finally:
            response.close()
            response.release_conn()

    def _delete(self, key: str) -> None:
        self.client.remove_object(bucket_name=self.bucket_name, object_name=key)

    async def put(self, key: str, data: bytes) -> None:
        try:
            await to_thread.run_sync(self._put, key, data)
        except S3Error as exc:
            raise BackendError(f"Failed to store object {key}") from exc

    async def get(self, key: str) -> Optional[bytes]:
        try:
            return await to_thread.run_sync(self._get, key)
        except S3Error as exc:
            raise BackendError(f"Failed to read object {key}") from exc

    async def delete(self, key: str) -> None:
        try:
            await to_thread.run_sync(self._delete, key)
        except S3Error as exc:
            raise BackendError(f"Failed to delete object {key}") from exc
