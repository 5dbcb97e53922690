"""Whole-object and multipart uploads with progress reporting."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import BinaryIO

from prepis.application.services.progress_tracker import ProgressTracker
from prepis.domain.errors import (
    AssembleFailedError,
    ChunkFailedError,
    SourceTooLargeError,
    TransferFailedError,
)
from prepis.domain.ports import ObjectStore
from prepis.domain.progress_models import ProgressOutcome
from prepis.domain.transfer_types import (
    DEFAULT_MAX_OBJECT_SIZE_BYTES,
    CompletedPart,
    MultipartSession,
    TransferHandle,
    TransferStrategy,
)

_DEFAULT_MULTIPART_CONCURRENCY = 4

logger = logging.getLogger(__name__)


class Uploader:
    """Store a byte stream as one object and return its handle.

    - Small sources are read fully and stored with one `put_object` call.
    - Large sources and streams of unknown length use multipart upload with
      up to `concurrency` parts in flight.
    - Failed multipart uploads are aborted before the error is raised.
    """

    def __init__(
        self,
        object_store: ObjectStore,
        strategy: TransferStrategy | None = None,
        *,
        max_object_size_bytes: int = DEFAULT_MAX_OBJECT_SIZE_BYTES,
        concurrency: int = _DEFAULT_MULTIPART_CONCURRENCY,
    ) -> None:
        self._object_store = object_store
        self._strategy = strategy or TransferStrategy()
        self._max_object_size_bytes = max_object_size_bytes
        self._concurrency = max(1, concurrency)

    async def upload_file(
        self,
        path: Path,
        bucket: str,
        key: str,
        tracker: ProgressTracker | None = None,
    ) -> TransferHandle:
        """Upload a local file using its on-disk size for strategy selection."""

        size = path.stat().st_size
        with path.open("rb") as source:
            return await self.upload(source, bucket, key, size=size, tracker=tracker)

    async def upload(
        self,
        source: BinaryIO,
        bucket: str,
        key: str,
        *,
        size: int | None = None,
        tracker: ProgressTracker | None = None,
    ) -> TransferHandle:
        """Upload `source` to `bucket`/`key`.

        `size` is the expected stream length, or None when unknown.
        """

        if tracker is not None:
            tracker.start()
        try:
            handle = await self._upload(source, bucket, key, size, tracker)
        except BaseException:
            if tracker is not None:
                tracker.finish(ProgressOutcome.ABORTED)
            raise

        if tracker is not None:
            tracker.finish(ProgressOutcome.SUCCESS)
        return handle

    async def _upload(
        self,
        source: BinaryIO,
        bucket: str,
        key: str,
        size: int | None,
        tracker: ProgressTracker | None,
    ) -> TransferHandle:
        if size is not None and size > self._max_object_size_bytes:
            raise SourceTooLargeError(size, self._max_object_size_bytes)

        if size is not None:
            choice = self._strategy.determine(size)
            chunk_size = choice.chunk_size
        else:
            choice = None
            chunk_size = self._strategy.chunk_size_bytes

        if choice is not None and not choice.is_chunked:
            logger.info("Uploading s3://%s/%s in a single request (%s bytes).", bucket, key, size)
            await self._upload_whole(source, bucket, key, tracker)
        else:
            assert chunk_size is not None
            logger.info(
                "Uploading s3://%s/%s with multipart upload (%s byte parts, %s workers).",
                bucket,
                key,
                chunk_size,
                self._concurrency,
            )
            await self._upload_multipart(source, bucket, key, chunk_size, tracker)
        return TransferHandle(bucket=bucket, key=key)

    async def _upload_whole(
        self,
        source: BinaryIO,
        bucket: str,
        key: str,
        tracker: ProgressTracker | None,
    ) -> None:
        """Read the full stream and store it; progress jumps to 100% on success."""

        body = await asyncio.to_thread(source.read)
        if len(body) > self._max_object_size_bytes:
            raise SourceTooLargeError(len(body), self._max_object_size_bytes)

        try:
            await self._object_store.put_object(bucket, key, body)
        except Exception as exc:  # noqa: BLE001
            raise TransferFailedError(f"Failed to upload s3://{bucket}/{key}: {exc}") from exc

        if tracker is not None:
            tracker.advance(len(body))

    async def _upload_multipart(
        self,
        source: BinaryIO,
        bucket: str,
        key: str,
        chunk_size: int,
        tracker: ProgressTracker | None,
    ) -> None:
        """Upload parts in bounded batches and assemble them by part number."""

        try:
            session = await self._object_store.create_multipart(bucket, key)
        except Exception as exc:  # noqa: BLE001
            raise TransferFailedError(
                f"Failed to create multipart upload for s3://{bucket}/{key}: {exc}"
            ) from exc

        try:
            parts = await self._upload_parts(session, source, chunk_size, tracker)
            if not parts:
                raise AssembleFailedError("No parts were uploaded.")
            try:
                await self._object_store.complete_multipart(session, parts)
            except Exception as exc:  # noqa: BLE001
                raise AssembleFailedError(
                    f"Failed to complete multipart upload for s3://{bucket}/{key}: {exc}"
                ) from exc
        except BaseException:
            await self._abort_multipart(session)
            raise

    async def _upload_parts(
        self,
        session: MultipartSession,
        source: BinaryIO,
        chunk_size: int,
        tracker: ProgressTracker | None,
    ) -> list[CompletedPart]:
        """Upload every chunk of `source` and return parts sorted by part number."""

        completed: dict[int, CompletedPart] = {}
        next_part_number = 1
        total_read = 0

        while True:
            batch: list[tuple[int, bytes]] = []
            while len(batch) < self._concurrency:
                chunk = await asyncio.to_thread(_read_chunk, source, chunk_size)
                if not chunk:
                    break
                total_read += len(chunk)
                if total_read > self._max_object_size_bytes:
                    raise SourceTooLargeError(total_read, self._max_object_size_bytes)
                batch.append((next_part_number, chunk))
                next_part_number += 1

            if not batch:
                break

            results = await asyncio.gather(
                *[
                    self._upload_part(session, part_number, chunk, tracker)
                    for part_number, chunk in batch
                ],
                return_exceptions=True,
            )
            for (part_number, _), result in zip(batch, results, strict=True):
                if isinstance(result, CompletedPart):
                    completed[part_number] = result
                    continue
                if not isinstance(result, Exception):
                    raise result
                raise ChunkFailedError(part_number, str(result) or type(result).__name__) from result

            if len(batch) < self._concurrency:
                break

        return [completed[number] for number in sorted(completed)]

    async def _upload_part(
        self,
        session: MultipartSession,
        part_number: int,
        chunk: bytes,
        tracker: ProgressTracker | None,
    ) -> CompletedPart:
        part = await self._object_store.upload_part(session, part_number, chunk)
        if tracker is not None:
            tracker.advance(len(chunk))
        return part

    async def _abort_multipart(self, session: MultipartSession) -> None:
        """Abort an unfinished multipart upload; failures are only logged."""

        try:
            await self._object_store.abort_multipart(session)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "Failed to abort multipart upload '%s' for s3://%s/%s: %s",
                session.upload_id,
                session.bucket,
                session.key,
                exc,
            )


def _read_chunk(source: BinaryIO, size: int) -> bytes:
    """Read up to `size` bytes, looping over short reads until EOF."""

    buffer = bytearray()
    while len(buffer) < size:
        data = source.read(size - len(buffer))
        if not data:
            break
        buffer.extend(data)
    return bytes(buffer)


__all__ = ["Uploader"]
