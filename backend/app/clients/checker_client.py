"""
Checker HTTP client — synchronous "bulk check" command on the external checker.
Version: 1.0.0
"""
from typing import Any, Dict, List

import httpx

from app.core.config import Settings
from app.core.exceptions import (
    CheckerTimeoutError,
    UpstreamProtocolError,
    UpstreamTransportError,
)

DEFAULT_MODE = "official"


class CheckerClient:
    def __init__(self, settings: Settings) -> None:
        self._bulk_check_url = settings.checker_bulk_check_url
        self._api_key = settings.checker_api_key
        self._timeout = settings.checker_timeout_seconds

    async def bulk_check(self, urls: List[str], mode: str = DEFAULT_MODE) -> Dict[str, Any]:
        """
        Ask the checker to scan `urls` now and return its verdicts.

        The server-held API key is attached here and never leaves the backend.
        """
        if not (self._bulk_check_url and self._api_key):
            raise UpstreamTransportError(
                "CHECKER_BULK_CHECK_URL and CHECKER_API_KEY env vars are required"
            )

        body = {"apiKey": self._api_key, "urls": urls, "mode": mode}

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.post(
                    self._bulk_check_url,
                    json=body,
                    headers={"Content-Type": "application/json"},
                )
        except httpx.TimeoutException as e:
            raise CheckerTimeoutError(
                f"Checker did not answer within {self._timeout:g}s"
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamTransportError(f"Checker request failed: {e}") from e

        if resp.status_code != 200:
            raise UpstreamTransportError(f"Checker error {resp.status_code}: {resp.text}")

        try:
            return resp.json()
        except ValueError as e:
            raise UpstreamProtocolError("Checker returned a non-JSON response") from e
