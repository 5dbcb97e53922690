"""Application layer public API."""
