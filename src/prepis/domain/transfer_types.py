"""Transfer strategy and object location helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

MIB = 1024 * 1024
DEFAULT_MULTIPART_THRESHOLD_BYTES = 100 * MIB
DEFAULT_CHUNK_SIZE_BYTES = 16 * MIB
MIN_CHUNK_SIZE_BYTES = 5 * MIB
DEFAULT_MAX_OBJECT_SIZE_BYTES = 2 * 1024 * MIB


class TransferMode(StrEnum):
    """How an object is written to the store."""

    WHOLE = "WHOLE"
    CHUNKED = "CHUNKED"


@dataclass(slots=True, frozen=True)
class TransferStrategyChoice:
    """Resolved transfer mode with the chunk size used by chunked transfers."""

    mode: TransferMode
    chunk_size: int | None = None

    @classmethod
    def whole(cls) -> TransferStrategyChoice:
        return cls(mode=TransferMode.WHOLE)

    @classmethod
    def chunked(cls, chunk_size: int) -> TransferStrategyChoice:
        return cls(mode=TransferMode.CHUNKED, chunk_size=chunk_size)

    @property
    def is_chunked(self) -> bool:
        return self.mode is TransferMode.CHUNKED


class TransferStrategy:
    """Pick whole-object or multipart transfer from the object size.

    Sizes at or above the threshold are chunked.
    """

    def __init__(
        self,
        threshold_bytes: int = DEFAULT_MULTIPART_THRESHOLD_BYTES,
        chunk_size_bytes: int = DEFAULT_CHUNK_SIZE_BYTES,
    ) -> None:
        if threshold_bytes < 1:
            raise ValueError("Multipart threshold must be >= 1 byte.")
        if chunk_size_bytes < 1:
            raise ValueError("Chunk size must be >= 1 byte.")
        self._threshold_bytes = threshold_bytes
        self._chunk_size_bytes = chunk_size_bytes

    @property
    def threshold_bytes(self) -> int:
        return self._threshold_bytes

    @property
    def chunk_size_bytes(self) -> int:
        return self._chunk_size_bytes

    def determine(self, size: int) -> TransferStrategyChoice:
        """Return the transfer choice for an object of `size` bytes."""

        if size < self._threshold_bytes:
            return TransferStrategyChoice.whole()
        return TransferStrategyChoice.chunked(self._chunk_size_bytes)


@dataclass(slots=True, frozen=True)
class TransferHandle:
    """Location of a fully uploaded object."""

    bucket: str
    key: str

    @property
    def uri(self) -> str:
        return f"s3://{self.bucket}/{self.key}"


@dataclass(slots=True, frozen=True)
class MultipartSession:
    """In-progress multipart upload on the object store."""

    bucket: str
    key: str
    upload_id: str


@dataclass(slots=True, frozen=True)
class CompletedPart:
    """Stored multipart segment identified by part number and ETag."""

    part_number: int
    etag: str


__all__ = [
    "CompletedPart",
    "DEFAULT_CHUNK_SIZE_BYTES",
    "DEFAULT_MAX_OBJECT_SIZE_BYTES",
    "DEFAULT_MULTIPART_THRESHOLD_BYTES",
    "MIB",
    "MIN_CHUNK_SIZE_BYTES",
    "MultipartSession",
    "TransferHandle",
    "TransferMode",
    "TransferStrategy",
    "TransferStrategyChoice",
]
