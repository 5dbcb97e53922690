"""Object store adapter implementations."""

from prepis.infrastructure.storage.s3_object_store import S3Client, S3ObjectStore

__all__ = ["S3Client", "S3ObjectStore"]
