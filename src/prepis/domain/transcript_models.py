"""Transcript result payload models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class TranscriptModel(BaseModel):
    """Base model for transcript payloads; unknown fields are ignored."""

    model_config = ConfigDict(extra="ignore")


class TranscriptAlternative(TranscriptModel):
    """One transcript text segment."""

    transcript: str


class TranscriptResults(TranscriptModel):
    """Result section holding the transcript segments."""

    transcripts: list[TranscriptAlternative]


class TranscriptPayload(TranscriptModel):
    """Top-level transcription job output document."""

    results: TranscriptResults

    def text(self) -> str:
        """Concatenate segment texts in document order."""

        return "".join(item.transcript for item in self.results.transcripts)


__all__ = [
    "TranscriptAlternative",
    "TranscriptPayload",
    "TranscriptResults",
]
