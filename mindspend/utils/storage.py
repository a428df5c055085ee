"""
File storage for receipts and avatars.
"""
import logging
import time
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import BinaryIO, Dict, Optional

import boto3
from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import BotoCoreError, ClientError

from mindspend.core.config import settings

logger = logging.getLogger(__name__)


class FileStorage(ABC):
    @abstractmethod
    def upload(self, key: str, fileobj: BinaryIO, content_type: str) -> Optional[str]:
        """Store the file under key and return its public URL, or None on failure."""


class S3Storage(FileStorage):
    def __init__(self, bucket: Optional[str] = None, region: Optional[str] = None, client=None) -> None:
        self.bucket = bucket or settings.S3_BUCKET_NAME
        self.region = region or settings.S3_REGION
        # Default AWS credential chain (environment, credentials file or IAM role)
        self._s3 = client or boto3.client("s3", region_name=self.region)

    def upload(self, key: str, fileobj: BinaryIO, content_type: str) -> Optional[str]:
        try:
            self._s3.upload_fileobj(fileobj, self.bucket, key, ExtraArgs={"ContentType": content_type})
            return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"
        except (ClientError, BotoCoreError, S3UploadFailedError) as e:
            logger.error(f"Failed to upload {key}: {e}")
            return None


class MemoryStorage(FileStorage):
    def __init__(self, base_url: str = "memory://uploads") -> None:
        self.base_url = base_url
        self.files: Dict[str, bytes] = {}

    def upload(self, key: str, fileobj: BinaryIO, content_type: str) -> Optional[str]:
        self.files[key] = fileobj.read()
        return f"{self.base_url}/{key}"


@lru_cache()
def get_storage() -> FileStorage:
    if settings.STORAGE_BACKEND == "memory":
        return MemoryStorage()
    return S3Storage()


def file_extension(filename: Optional[str], default: str = "bin") -> str:
    if filename and "." in filename:
        return filename.rsplit(".", 1)[-1].lower()
    return default


def receipt_key(user_id: str, filename: Optional[str], now_ms: Optional[int] = None) -> str:
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    return f"{user_id}/{stamp}.{file_extension(filename)}"


def avatar_key(user_id: str, filename: Optional[str]) -> str:
    return f"{user_id}/avatar.{file_extension(filename, 'png')}"
