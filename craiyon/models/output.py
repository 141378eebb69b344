"""
Craiyon generation output: ordered images plus the model version tag reported by the backend.
"""
import os
from collections.abc import Iterator, Mapping, Sequence
from pathlib import Path
from typing import Any

from craiyon.errors import MalformedResponseError
from craiyon.models.image import ImageAsset


class GenerationResult:
    """Represents one Craiyon response."""

    __slots__ = ("_images", "_version")

    def __init__(self, images: Sequence[ImageAsset], version: str | None) -> None:
        self._images = tuple(images)
        self._version = version

    @classmethod
    def from_response(cls, raw: Any) -> "GenerationResult":
        """
        Build a result from a parsed response body.

        Expects a mapping with a non-empty `images` list of base64 strings and an
        optional `version` string, which is kept as-is.

        Raises:
            MalformedResponseError: body is not a mapping, or `images` is missing,
                empty, or holds anything other than strings.
        """
        if not isinstance(raw, Mapping):
            raise MalformedResponseError(
                f"Expected a JSON object, got {type(raw).__name__}",
                detail={"body_type": type(raw).__name__},
            )
        images = raw.get("images")
        if not isinstance(images, list):
            raise MalformedResponseError("Response has no images array")
        if not images:
            raise MalformedResponseError("Response contains no images")
        if not all(isinstance(image, str) for image in images):
            raise MalformedResponseError("Response images must be base64 strings")
        version = raw.get("version")
        if version is not None and not isinstance(version, str):
            raise MalformedResponseError("Response version must be a string")
        return cls([ImageAsset(image) for image in images], version)

    def __repr__(self) -> str:
        return f"GenerationResult(images={len(self._images)}, version={self._version!r})"

    def __len__(self) -> int:
        return len(self._images)

    def __iter__(self) -> Iterator[ImageAsset]:
        return iter(self._images)

    @property
    def images(self) -> tuple[ImageAsset, ...]:
        return self._images

    @property
    def version(self) -> str | None:
        return self._version

    def as_base64(self) -> list[str]:
        return [image.as_base64() for image in self._images]

    def as_bytes(self) -> list[bytes]:
        return [image.as_bytes() for image in self._images]

    def _paths(self, directory: str | os.PathLike[str], prefix: str, extension: str) -> list[Path]:
        base = Path(directory)
        return [base / f"{prefix}_{index}.{extension}" for index in range(len(self._images))]

    def save_all(
        self,
        directory: str | os.PathLike[str],
        prefix: str = "craiyon",
        extension: str = "webp",
    ) -> list[Path]:
        """Save every image into directory as <prefix>_<index>.<extension>; returns the paths in order."""
        paths = self._paths(directory, prefix, extension)
        for image, path in zip(self._images, paths):
            image.save_to_file(path)
        return paths

    async def save_all_async(
        self,
        directory: str | os.PathLike[str],
        prefix: str = "craiyon",
        extension: str = "webp",
    ) -> list[Path]:
        paths = self._paths(directory, prefix, extension)
        for image, path in zip(self._images, paths):
            await image.save_to_file_async(path)
        return paths
