"""HTTP client for transcription result payloads."""

from __future__ import annotations

import httpx

from prepis.domain.errors import ResultNotFoundError, ResultUnavailableError


class HttpResultStore:
    """Download result documents from (pre-signed) HTTPS locators."""

    def __init__(
        self,
        timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout_seconds = timeout_seconds
        self._transport = transport

    async def get(self, result_locator: str) -> bytes:
        """GET `result_locator` and return the response body."""

        url = result_locator.strip()
        if not url:
            raise ResultNotFoundError("Result locator cannot be empty.")

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout_seconds,
                transport=self._transport,
                follow_redirects=True,
            ) as http_client:
                response = await http_client.get(url)
        except httpx.HTTPError as exc:
            raise ResultUnavailableError(
                f"Failed to fetch transcription results: {exc}"
            ) from exc

        if response.status_code == httpx.codes.NOT_FOUND:
            raise ResultNotFoundError("Transcription results not found: HTTP 404")
        if not response.is_success:
            raise ResultUnavailableError(
                f"Failed to fetch transcription results: HTTP {response.status_code}"
            )
        return response.content


__all__ = ["HttpResultStore"]
