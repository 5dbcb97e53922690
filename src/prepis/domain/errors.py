"""Domain exceptions for the upload, polling and result stages."""

from __future__ import annotations


class PrepisError(Exception):
    """Base class for transcription workflow errors."""


class MediaValidationError(PrepisError):
    """Raised when the input media file cannot be transcribed."""


class CredentialsError(PrepisError):
    """Raised when AWS credentials cannot be validated."""


class UploadError(PrepisError):
    """Base class for object upload failures."""


class SourceTooLargeError(UploadError):
    """Raised when the source exceeds the maximum object size."""

    def __init__(self, size: int, max_size: int) -> None:
        super().__init__(
            f"Source size ({size} bytes) exceeds maximum object size of {max_size} bytes."
        )
        self.size = size
        self.max_size = max_size


class TransferFailedError(UploadError):
    """Raised when bytes could not be stored in the destination."""


class ChunkFailedError(TransferFailedError):
    """Raised when storing one multipart chunk fails."""

    def __init__(self, part_number: int, reason: str) -> None:
        super().__init__(f"Failed to upload part {part_number}: {reason}")
        self.part_number = part_number
        self.reason = reason


class AssembleFailedError(UploadError):
    """Raised when a multipart upload cannot be completed."""


class JobSubmissionError(PrepisError):
    """Raised when the transcription job cannot be started."""


class PollError(PrepisError):
    """Base class for job polling failures."""


class PollTimeoutError(PollError):
    """Raised when no terminal state was observed within the attempt budget.

    The remote job state is unknown, which is not the same as a failure.
    """

    def __init__(self, job_name: str, attempts: int) -> None:
        super().__init__(
            f"Transcription job '{job_name}' did not finish after {attempts} status checks."
        )
        self.job_name = job_name
        self.attempts = attempts


class RemoteJobFailedError(PollError):
    """Raised when the remote service reports the job as failed."""

    def __init__(self, job_name: str, reason: str) -> None:
        super().__init__(f"Transcription job '{job_name}' failed: {reason}")
        self.job_name = job_name
        self.reason = reason


class PollCancelledError(PollError):
    """Raised when polling was cancelled by the caller."""


class JobStatusError(PollError):
    """Raised when a status query fails or returns an unusable answer."""


class InvalidJobTransitionError(PollError):
    """Raised when a job state change would leave a terminal state."""


class FetchError(PrepisError):
    """Base class for transcript retrieval failures."""


class ResultNotFoundError(FetchError):
    """Raised when the result payload does not exist."""


class ResultUnavailableError(FetchError):
    """Raised when the result payload cannot be retrieved."""


class MalformedResultError(FetchError):
    """Raised when the result payload does not have the expected structure."""


class CleanupError(PrepisError):
    """Raised in strict cleanup mode when the temporary object survives."""


__all__ = [
    "AssembleFailedError",
    "ChunkFailedError",
    "CleanupError",
    "CredentialsError",
    "FetchError",
    "InvalidJobTransitionError",
    "JobStatusError",
    "JobSubmissionError",
    "MalformedResultError",
    "MediaValidationError",
    "PollCancelledError",
    "PollError",
    "PollTimeoutError",
    "PrepisError",
    "RemoteJobFailedError",
    "ResultNotFoundError",
    "ResultUnavailableError",
    "SourceTooLargeError",
    "TransferFailedError",
    "UploadError",
]
