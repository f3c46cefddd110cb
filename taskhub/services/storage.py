"""Object storage for task attachments (S3 pre-signed URLs)."""

import logging
import time
from urllib.parse import urlsplit

from botocore.exceptions import BotoCoreError, ClientError
from ulid import ULID

from ..errors import ObjectStorageError
from ..models import UploadTarget

logger = logging.getLogger(__name__)

DEFAULT_URL_EXPIRY = 3600  # 1 hour


def key_from_url(key_or_url: str) -> str:
    """
    Return the object key for a bare key or a URL.

    Anything containing a path separator is reduced to its last path
    segment (query string and fragment dropped for full URLs). Keys minted
    by `ObjectStorage` never contain "/", so the round trip is exact for them.
    """
    if "/" not in key_or_url:
        return key_or_url
    path = urlsplit(key_or_url).path if "://" in key_or_url else key_or_url
    return path.rsplit("/", 1)[-1]


class ObjectStorage:
    """
    Mints time-bounded upload/download URLs and deletes objects in one bucket.

    The service never handles file bytes; clients PUT/GET directly against
    the pre-signed URLs. `client` is a boto3 S3 client built once by the caller.
    """

    def __init__(
        self,
        client,
        bucket: str,
        region: str,
        expires_in: int = DEFAULT_URL_EXPIRY,
    ):
        self._client = client
        self._bucket = bucket
        self._region = region
        self.expires_in = expires_in

    @staticmethod
    def new_key() -> str:
        """Random, time-stamped key with no path separators."""
        return f"{ULID()}-{int(time.time() * 1000)}"

    def generate_upload_target(self, content_type: str) -> UploadTarget:
        """Pre-signed PUT URL for a fresh key, bound to `content_type`."""
        key = self.new_key()
        try:
            upload_url = self._client.generate_presigned_url(
                "put_object",
                Params={"Bucket": self._bucket, "Key": key, "ContentType": content_type},
                ExpiresIn=self.expires_in,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error("Failed to generate upload URL: %s", e)
            raise ObjectStorageError("Failed to generate file upload URL") from e
        logger.info("Issued upload URL key=%s content_type=%s", key, content_type)
        return UploadTarget(upload_url=upload_url, file_key=key)

    def generate_download_target(self, key: str) -> str:
        """Pre-signed GET URL for `key`."""
        try:
            return self._client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self._bucket, "Key": key},
                ExpiresIn=self.expires_in,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error("Failed to generate download URL for key %s: %s", key, e)
            raise ObjectStorageError("Failed to generate file download URL") from e

    def public_url(self, key: str) -> str:
        """Permanent URL for `key`. Pure: no I/O."""
        return f"https://{self._bucket}.s3.{self._region}.amazonaws.com/{key}"

    def delete(self, key_or_url: str) -> None:
        """Delete an object given its key or any URL ending in its key."""
        key = key_from_url(key_or_url)
        if not key:
            raise ObjectStorageError(f"Cannot derive an object key from {key_or_url!r}")
        try:
            self._client.delete_object(Bucket=self._bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            logger.error("Failed to delete object %s: %s", key, e)
            raise ObjectStorageError("Failed to delete file from storage") from e
        logger.info("Deleted object %s", key)
