"""Domain public API."""

from prepis.domain.errors import (
    AssembleFailedError,
    ChunkFailedError,
    CleanupError,
    CredentialsError,
    FetchError,
    InvalidJobTransitionError,
    JobStatusError,
    JobSubmissionError,
    MalformedResultError,
    MediaValidationError,
    PollCancelledError,
    PollError,
    PollTimeoutError,
    PrepisError,
    RemoteJobFailedError,
    ResultNotFoundError,
    ResultUnavailableError,
    SourceTooLargeError,
    TransferFailedError,
    UploadError,
)
from prepis.domain.job_states import (
    TERMINAL_JOB_STATUSES,
    JobHandle,
    JobState,
    JobStatus,
    PollSchedule,
)
from prepis.domain.naming import generate_job_name, generate_s3_key
from prepis.domain.ports import (
    Clock,
    CredentialsVerifier,
    JobService,
    ObjectStore,
    ProgressSink,
    ResultStore,
)
from prepis.domain.progress_models import ProgressOutcome, ProgressSnapshot
from prepis.domain.transcript_models import (
    TranscriptAlternative,
    TranscriptPayload,
    TranscriptResults,
)
from prepis.domain.transfer_types import (
    CompletedPart,
    MultipartSession,
    TransferHandle,
    TransferMode,
    TransferStrategy,
    TransferStrategyChoice,
)

__all__ = [
    "AssembleFailedError",
    "ChunkFailedError",
    "CleanupError",
    "Clock",
    "CompletedPart",
    "CredentialsError",
    "CredentialsVerifier",
    "FetchError",
    "InvalidJobTransitionError",
    "JobHandle",
    "JobService",
    "JobState",
    "JobStatus",
    "JobStatusError",
    "JobSubmissionError",
    "MalformedResultError",
    "MediaValidationError",
    "MultipartSession",
    "ObjectStore",
    "PollCancelledError",
    "PollError",
    "PollSchedule",
    "PollTimeoutError",
    "PrepisError",
    "ProgressOutcome",
    "ProgressSink",
    "ProgressSnapshot",
    "RemoteJobFailedError",
    "ResultNotFoundError",
    "ResultStore",
    "ResultUnavailableError",
    "SourceTooLargeError",
    "TERMINAL_JOB_STATUSES",
    "TranscriptAlternative",
    "TranscriptPayload",
    "TranscriptResults",
    "TransferFailedError",
    "TransferHandle",
    "TransferMode",
    "TransferStrategy",
    "TransferStrategyChoice",
    "UploadError",
    "generate_job_name",
    "generate_s3_key",
]
