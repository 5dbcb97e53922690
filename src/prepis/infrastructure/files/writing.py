"""Transcript output files."""

from __future__ import annotations

from pathlib import Path


def save_transcription(path: Path, content: str) -> None:
    """Write the transcript to `path` as UTF-8 text."""

    path.write_text(content, encoding="utf-8")


__all__ = ["save_transcription"]
