"""Object key and job name generation."""

from __future__ import annotations

import re
import time
from pathlib import Path

_DEFAULT_KEY_PREFIX = "transcribe-temp"
_JOB_NAME_PREFIX = "transcribe-job"
_MAX_JOB_NAME_LENGTH = 200
_INVALID_JOB_NAME_CHARS = re.compile(r"[^0-9A-Za-z._-]")


def generate_s3_key(
    path: Path,
    prefix: str = _DEFAULT_KEY_PREFIX,
    now: float | None = None,
) -> str:
    """Return `<prefix>/<epoch>-<file name>` for a temporary upload."""

    timestamp = int(time.time() if now is None else now)
    filename = path.name or "unknown"
    normalized_prefix = prefix.strip().strip("/")
    if not normalized_prefix:
        return f"{timestamp}-{filename}"
    return f"{normalized_prefix}/{timestamp}-{filename}"


def generate_job_name(path: Path, now: float | None = None) -> str:
    """Return a job name unique per second and source file stem.

    Transcribe only accepts `[0-9A-Za-z._-]` in job names.
    """

    timestamp = int(time.time() if now is None else now)
    stem = _INVALID_JOB_NAME_CHARS.sub("-", path.stem) or "unknown"
    return f"{_JOB_NAME_PREFIX}-{timestamp}-{stem}"[:_MAX_JOB_NAME_LENGTH]


__all__ = ["generate_job_name", "generate_s3_key"]
