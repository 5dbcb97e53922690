"""Transcribe media files with Amazon Transcribe from the command line."""

__version__ = "0.2.1"

__all__ = ["__version__"]
