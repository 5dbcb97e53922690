"""Result store adapters."""

from prepis.infrastructure.results.http_result_store import HttpResultStore

__all__ = ["HttpResultStore"]
