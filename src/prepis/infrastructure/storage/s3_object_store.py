"""boto3-backed object store adapter."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any, Protocol, cast

from prepis.domain.errors import CredentialsError
from prepis.domain.transfer_types import CompletedPart, MultipartSession


class S3Client(Protocol):
    """Subset of S3 client operations used by the object store."""

    def list_buckets(self) -> dict[str, Any]:
        """List buckets visible to the caller."""

    def put_object(self, *, Bucket: str, Key: str, Body: bytes) -> dict[str, Any]:
        """Store an object in one request."""

    def create_multipart_upload(self, *, Bucket: str, Key: str) -> dict[str, Any]:
        """Start multipart upload."""

    def upload_part(
        self,
        *,
        Bucket: str,
        Key: str,
        UploadId: str,
        PartNumber: int,
        Body: bytes,
    ) -> dict[str, Any]:
        """Upload one multipart segment."""

    def complete_multipart_upload(
        self,
        *,
        Bucket: str,
        Key: str,
        UploadId: str,
        MultipartUpload: dict[str, list[dict[str, str | int]]],
    ) -> dict[str, Any]:
        """Finalize multipart upload."""

    def abort_multipart_upload(self, *, Bucket: str, Key: str, UploadId: str) -> dict[str, Any]:
        """Abort multipart upload."""

    def delete_object(self, *, Bucket: str, Key: str) -> dict[str, Any]:
        """Delete one object."""


class S3ObjectStore:
    """Object store backed by a blocking boto3 S3 client.

    Every client call runs in a worker thread so concurrent part uploads do
    not block the event loop.
    """

    def __init__(
        self,
        region: str | None = None,
        s3_client_factory: Callable[[str | None], S3Client] | None = None,
    ) -> None:
        self._region = region
        self._s3_client_factory = s3_client_factory or _build_default_s3_client
        self._client: S3Client | None = None

    @property
    def client(self) -> S3Client:
        """Return the S3 client, creating it on first use."""

        if self._client is None:
            self._client = self._s3_client_factory(self._region)
        return self._client

    async def verify_credentials(self) -> None:
        """Make one cheap authenticated call to validate credentials."""

        try:
            await asyncio.to_thread(self.client.list_buckets)
        except Exception as exc:  # noqa: BLE001
            raise CredentialsError(
                f"Failed to validate AWS credentials: {exc}. Please check your AWS configuration."
            ) from exc

    async def put_object(self, bucket: str, key: str, body: bytes) -> None:
        await asyncio.to_thread(self.client.put_object, Bucket=bucket, Key=key, Body=body)

    async def create_multipart(self, bucket: str, key: str) -> MultipartSession:
        response = await asyncio.to_thread(
            self.client.create_multipart_upload,
            Bucket=bucket,
            Key=key,
        )
        upload_id = response.get("UploadId")
        if not isinstance(upload_id, str) or not upload_id:
            raise RuntimeError("create_multipart_upload did not return UploadId")
        return MultipartSession(bucket=bucket, key=key, upload_id=upload_id)

    async def upload_part(
        self,
        session: MultipartSession,
        part_number: int,
        body: bytes,
    ) -> CompletedPart:
        response = await asyncio.to_thread(
            self.client.upload_part,
            Bucket=session.bucket,
            Key=session.key,
            UploadId=session.upload_id,
            PartNumber=part_number,
            Body=body,
        )
        return CompletedPart(part_number=part_number, etag=_extract_etag(response, part_number))

    async def complete_multipart(
        self,
        session: MultipartSession,
        parts: list[CompletedPart],
    ) -> None:
        await asyncio.to_thread(
            self.client.complete_multipart_upload,
            Bucket=session.bucket,
            Key=session.key,
            UploadId=session.upload_id,
            MultipartUpload={
                "Parts": [{"PartNumber": part.part_number, "ETag": part.etag} for part in parts]
            },
        )

    async def abort_multipart(self, session: MultipartSession) -> None:
        await asyncio.to_thread(
            self.client.abort_multipart_upload,
            Bucket=session.bucket,
            Key=session.key,
            UploadId=session.upload_id,
        )

    async def delete_object(self, bucket: str, key: str) -> None:
        await asyncio.to_thread(self.client.delete_object, Bucket=bucket, Key=key)


def _extract_etag(response: dict[str, Any], part_number: int) -> str:
    """Extract part ETag from an upload_part response."""

    etag = response.get("ETag")
    if not isinstance(etag, str) or not etag:
        raise RuntimeError(f"upload_part did not return an ETag for part {part_number}")
    return etag


def _build_default_s3_client(region: str | None) -> S3Client:
    """Create a boto3 S3 client lazily to avoid import-time hard dependency."""

    try:
        import boto3  # type: ignore[import-not-found]
    except ModuleNotFoundError as exc:
        raise RuntimeError(
            "boto3 is required for S3 uploads. Install project dependencies first."
        ) from exc

    client = boto3.client("s3", region_name=region)
    return cast(S3Client, client)


__all__ = ["S3Client", "S3ObjectStore"]
