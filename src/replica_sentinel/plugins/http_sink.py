"""HTTP sink — POSTs each message to a controller endpoint."""

from __future__ import annotations

import httpx

from replica_sentinel.plugins.contracts.sink import Sink


class HttpSink(Sink):
    """Built once at startup, reuses one ``httpx.Client`` for every message."""

    def __init__(
        self, url: str, *, timeout: float = 3.0, client: httpx.Client | None = None,
    ) -> None:
        self._url = url
        self._client = client if client is not None else httpx.Client(timeout=timeout)

    def send(self, message: bytes) -> None:
        """POST the message body.

        Raises:
            OSError: On transport failure or a non-2xx response.
        """
        try:
            response = self._client.post(
                self._url,
                content=message,
                headers={"Content-Type": "application/octet-stream"},
            )
            response.raise_for_status()
        except httpx.HTTPError as error:
            raise OSError(f"POST {self._url} failed: {error}") from error

    def close(self) -> None:
        self._client.close()
