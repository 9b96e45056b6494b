"""S3 manager: signed URLs and prefix listings."""

from typing import Any

from .log_manager import Logger
from .paths import split_object_path

# Signed URLs for downloads are valid for a week (the SigV4 maximum)
PRESIGNED_URL_EXPIRY_SECONDS = 60 * 60 * 24 * 7


class S3Manager:
    """Async adapter over an aioboto3 S3 client."""

    def __init__(self, s3_client: Any, logger: Logger | None = None) -> None:
        self._s3_client = s3_client
        self._logger = logger

    async def get_signed_url(self, bucket: str, key: str, expires: int) -> str:
        """
        Create a presigned GET URL for an object.

        Args:
            bucket: Bucket name
            key: Object key
            expires: Validity in seconds

        Returns:
            The presigned URL
        """
        params = {
            "Bucket": bucket,
            "Key": key,
        }

        try:
            return await self._s3_client.generate_presigned_url(
                "get_object",
                Params=params,
                ExpiresIn=expires,
            )
        except Exception as e:
            if self._logger is not None:
                self._logger.error(e, bucket=bucket, key=key)
            raise

    async def query_sentinel_bucket(
        self,
        bucket: str,
        prefix: str,
        delimiter: str = "/",
    ) -> dict[str, Any]:
        """List one level of a bucket below ``prefix`` (ListObjectsV2 response)."""
        return await self._s3_client.list_objects_v2(
            Bucket=bucket,
            Prefix=prefix,
            Delimiter=delimiter,
        )

    async def presigned_s3_url(self, file_location: str) -> str:
        """
        Create a week-long presigned URL for a ``bucket/key`` location.

        Raises:
            InvalidInputError: If the location lacks a bucket or key
        """
        bucket, key = split_object_path(file_location)
        return await self.get_signed_url(
            bucket=bucket,
            key=key,
            expires=PRESIGNED_URL_EXPIRY_SECONDS,
        )
