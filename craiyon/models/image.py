"""
Single generated image, held as base64 text.
"""
import base64
import os
from collections.abc import Iterator

import aiofiles

DEFAULT_CHUNK_SIZE = 64 * 1024


class ImageAsset:
    """One image from a Craiyon generation output."""

    __slots__ = ("_base64",)

    def __init__(self, base64_data: str) -> None:
        # Backend responses may wrap the base64 payload across lines.
        self._base64 = base64_data.replace("\n", "")

    def __repr__(self) -> str:
        return f"ImageAsset(length={len(self._base64)})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ImageAsset):
            return NotImplemented
        return self._base64 == other._base64

    def __hash__(self) -> int:
        return hash(self._base64)

    def as_base64(self) -> str:
        return self._base64

    def as_bytes(self) -> bytes:
        """Decode the stored base64 string to raw image bytes."""
        return base64.b64decode(self._base64)

    def save_to_file(self, path: str | os.PathLike[str]) -> None:
        """Write the decoded image to path (blocking)."""
        content = self.as_bytes()
        with open(path, "wb") as f:
            f.write(content)

    async def save_to_file_async(self, path: str | os.PathLike[str]) -> None:
        """Write the decoded image to path without blocking the event loop."""
        content = self.as_bytes()
        async with aiofiles.open(path, "wb") as f:
            await f.write(content)

    def stream(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
        """
        Lazy single-pass iterator over the decoded bytes.
        Decoding happens on first next(); an exhausted iterator stays exhausted.
        """
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        return self._iter_chunks(chunk_size)

    def _iter_chunks(self, chunk_size: int) -> Iterator[bytes]:
        content = self.as_bytes()
        for offset in range(0, len(content), chunk_size):
            yield content[offset:offset + chunk_size]
