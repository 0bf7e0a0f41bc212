from datetime import timedelta
from functools import lru_cache
from io import BytesIO
from pathlib import PurePosixPath
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from minio import Minio
from minio.error import S3Error
from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from app.config.settings import settings
from app.schemas.storage_schemas import (
    FileKind,
    FileUploadResponse,
    StoredFile,
    StudentFilesResponse,
)
from app.utils.errors import BadRequestError, NotFoundError, StorageError
from app.utils.logging import get_logger

logger = get_logger()

MAX_UPLOAD_BYTES = 10 * 1024 * 1024
PRESIGNED_URL_EXPIRY = timedelta(hours=1)


def student_prefix(user_id: str) -> str:
    return f"{user_id}/"


def clean_filename(filename: Optional[str]) -> str:
    """Keep only the final path component of a client-supplied filename"""
    name = PurePosixPath((filename or "").replace("\\", "/")).name.strip()
    if not name or name in (".", ".."):
        raise BadRequestError("A file name is required")
    return name


class StorageService:
    """
    Student documents in one object storage bucket.

    Objects live at `{user_id}/{kind}-{filename}` where kind is essay or
    transcript. The MinIO client is synchronous, so calls run in the threadpool.
    """

    def __init__(self, client: Minio, bucket_name: Optional[str] = None):
        self.client = client
        self.bucket_name = bucket_name or settings.STORAGE_BUCKET_NAME

    async def _ensure_bucket_exists(self):
        """Ensure the bucket exists, create if it doesn't."""

        def _ensure_sync():
            if not self.client.bucket_exists(bucket_name=self.bucket_name):
                self.client.make_bucket(bucket_name=self.bucket_name)

        try:
            await run_in_threadpool(_ensure_sync)
        except S3Error as e:
            logger.error(f"Failed to ensure bucket {self.bucket_name} exists: {e}")
            raise StorageError("Failed to prepare file storage")

    async def object_url(self, object_name: str) -> str:
        """Public URL when a public base is configured, otherwise a presigned GET URL"""
        if settings.STORAGE_PUBLIC_BASE_URL:
            base = settings.STORAGE_PUBLIC_BASE_URL.rstrip("/")
            return f"{base}/{self.bucket_name}/{quote(object_name)}"

        return await run_in_threadpool(
            self.client.presigned_get_object,
            bucket_name=self.bucket_name,
            object_name=object_name,
            expires=PRESIGNED_URL_EXPIRY,
        )

    async def upload_student_file(
        self, user_id: str, kind: FileKind, file: UploadFile
    ) -> Dict[str, Any]:
        filename = clean_filename(file.filename)
        too_large = BadRequestError(
            f"File must be smaller than {MAX_UPLOAD_BYTES // (1024 * 1024)} MB"
        )
        if file.size is not None and file.size > MAX_UPLOAD_BYTES:
            raise too_large
        # Never buffer more than one byte past the cap
        data = await file.read(MAX_UPLOAD_BYTES + 1)
        if not data:
            raise BadRequestError("Uploaded file is empty")
        if len(data) > MAX_UPLOAD_BYTES:
            raise too_large

        object_name = f"{student_prefix(user_id)}{kind.value}-{filename}"
        content_type = file.content_type or "application/octet-stream"

        await self._ensure_bucket_exists()
        try:
            result = await run_in_threadpool(
                self.client.put_object,
                bucket_name=self.bucket_name,
                object_name=object_name,
                data=BytesIO(data),
                length=len(data),
                content_type=content_type,
            )
        except S3Error as e:
            logger.error(f"Failed to upload {object_name}: {e}")
            raise StorageError("Failed to upload file")

        logger.info(f"Uploaded {object_name} ({len(data)} bytes)")
        return FileUploadResponse(
            object_name=object_name,
            bucket_name=self.bucket_name,
            size=len(data),
            content_type=content_type,
            etag=result.etag,
            url=await self.object_url(object_name),
        ).model_dump()

    async def list_student_files(self, user_id: str) -> Dict[str, Any]:
        """Split the student's objects into essays and transcripts"""
        prefix = student_prefix(user_id)

        def _list_sync() -> List[str]:
            return [
                obj.object_name
                for obj in self.client.list_objects(
                    bucket_name=self.bucket_name, prefix=prefix
                )
                if not obj.is_dir
            ]

        try:
            object_names = await run_in_threadpool(_list_sync)
        except S3Error as e:
            if e.code == "NoSuchBucket":
                return StudentFilesResponse().model_dump()
            logger.error(f"Failed to list files under {prefix}: {e}")
            raise StorageError("Failed to list files")

        files = StudentFilesResponse()
        for full_name in sorted(object_names):
            name = full_name[len(prefix):]
            for kind, bucket in (
                (FileKind.ESSAY, files.essays),
                (FileKind.TRANSCRIPT, files.transcripts),
            ):
                marker = f"{kind.value}-"
                if name.startswith(marker):
                    bucket.append(
                        StoredFile(
                            name=name[len(marker):],
                            url=await self.object_url(full_name),
                            object_name=name,
                        )
                    )
        return files.model_dump()

    async def delete_student_file(self, user_id: str, object_name: str) -> str:
        """Delete `{user_id}/{object_name}`; names outside the caller's own prefix are rejected"""
        if (
            not object_name
            or "/" in object_name
            or "\\" in object_name
            or not object_name.startswith(tuple(f"{k.value}-" for k in FileKind))
        ):
            raise BadRequestError("Invalid file name")

        full_name = f"{student_prefix(user_id)}{object_name}"

        def _delete_sync():
            self.client.stat_object(bucket_name=self.bucket_name, object_name=full_name)
            self.client.remove_object(
                bucket_name=self.bucket_name, object_name=full_name
            )

        try:
            await run_in_threadpool(_delete_sync)
        except S3Error as e:
            if e.code in ("NoSuchKey", "NoSuchBucket", "NoSuchObject"):
                raise NotFoundError("File not found", "FILE_NOT_FOUND")
            logger.error(f"Failed to delete {full_name}: {e}")
            raise StorageError("Failed to delete file")

        logger.info(f"Deleted {full_name}")
        return full_name


@lru_cache
def get_minio_client() -> Minio:
    """Created on first use; building the client does not contact the server"""
    return Minio(
        endpoint=settings.MINIO_ENDPOINT,
        access_key=settings.MINIO_ACCESS_KEY,
        secret_key=settings.MINIO_SECRET_KEY,
        secure=settings.MINIO_SECURE,
        region=settings.MINIO_REGION,
    )


def get_storage_service() -> StorageService:
    """Dependency to get storage service instance"""
    return StorageService(get_minio_client())
