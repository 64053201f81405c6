"""Lazily opened file downloads."""

from typing import AsyncIterator, Awaitable, Callable

import httpx

from ..errors import TransportError

ResponseOpener = Callable[[], Awaitable[httpx.Response]]


class LazyDownload:
    """Byte stream of a remote file that is only fetched on first read."""

    def __init__(self, opener: ResponseOpener):
        self._opener = opener
        self._response: httpx.Response | None = None
        self._chunks: AsyncIterator[bytes] | None = None
        self._buffer = bytearray()
        self._eof = False

    @property
    def opened(self) -> bool:
        return self._response is not None

    async def read(self, size: int = -1) -> bytes:
        """Read up to `size` bytes, everything left if `size` is negative."""
        await self._ensure_open()

        while not self._eof and (size < 0 or len(self._buffer) < size):
            try:
                chunk = await anext(self._chunks)
            except StopAsyncIteration:
                self._eof = True
                break
            self._buffer.extend(chunk)

        if size < 0 or size >= len(self._buffer):
            data = bytes(self._buffer)
            self._buffer.clear()
        else:
            data = bytes(self._buffer[:size])
            del self._buffer[:size]
        return data

    async def aclose(self) -> None:
        if self._response is not None:
            await self._response.aclose()
            self._response = None
            self._chunks = None
        self._eof = True

    async def __aenter__(self) -> "LazyDownload":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _ensure_open(self) -> None:
        if self._response is not None or self._eof:
            return

        response = await self._opener()
        if response.status_code >= 400:
            await response.aclose()
            raise TransportError(
                f"download failed: {response.status_code} {response.reason_phrase}"
            )
        self._response = response
        self._chunks = response.aiter_bytes()
