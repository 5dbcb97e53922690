"""Transcript payload retrieval and decoding."""

from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from prepis.domain.errors import MalformedResultError
from prepis.domain.ports import ResultStore
from prepis.domain.transcript_models import TranscriptPayload

logger = logging.getLogger(__name__)


class ResultFetcher:
    """Turn a completed job's result locator into transcript text."""

    def __init__(self, result_store: ResultStore) -> None:
        self._result_store = result_store

    async def fetch(self, result_locator: str) -> str:
        """Return the concatenated transcript, or "" when it has no segments."""

        raw = await self._result_store.get(result_locator)
        payload = decode_transcript_payload(raw)
        text = payload.text()
        logger.info(
            "Retrieved transcript with %s segment(s) from result payload.",
            len(payload.results.transcripts),
        )
        return text


def decode_transcript_payload(raw: bytes) -> TranscriptPayload:
    """Parse raw result bytes into a `TranscriptPayload`."""

    try:
        document = json.loads(raw.decode("utf-8"))
    except UnicodeDecodeError as exc:
        raise MalformedResultError(f"Transcription result is not valid UTF-8: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise MalformedResultError(f"Failed to parse transcription JSON: {exc}") from exc

    try:
        return TranscriptPayload.model_validate(document)
    except ValidationError as exc:
        raise MalformedResultError(
            f"Transcription result has an unexpected structure: {exc.error_count()} error(s)."
        ) from exc


__all__ = ["ResultFetcher", "decode_transcript_payload"]
