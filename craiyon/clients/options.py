"""
Request and client configuration types shared by all protocol variants.
"""
from dataclasses import dataclass
from enum import Enum

from craiyon.errors import RATE_LIMIT_BACKOFF_SECONDS


class CraiyonModel(str, Enum):
    """Drawing styles the v3 backend can use."""

    NONE = "none"
    ART = "art"
    DRAWING = "drawing"
    PHOTO = "photo"


@dataclass(frozen=True)
class RequestOptions:
    """Options for a single generation request. Never changes the client it is passed to."""
    prompt: str
    max_retries: int | None = None  # overrides the client default for this call only
    negative_prompt: str | None = None  # v3 only
    model: CraiyonModel | None = None  # v3 only

    def __post_init__(self) -> None:
        if not isinstance(self.prompt, str) or not self.prompt.strip():
            raise ValueError("prompt must be a non-empty string")
        if self.max_retries is not None and self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.model is not None and not isinstance(self.model, CraiyonModel):
            # Accept plain strings like "photo"; unknown values raise ValueError.
            object.__setattr__(self, "model", CraiyonModel(self.model))


@dataclass(frozen=True)
class ClientConfig:
    """Connection settings owned by a client. Read-only while requests are in flight."""
    base_url: str
    max_retries: int = 3
    model_version: str | None = None
    api_token: str | None = None
    image_host: str = "https://img.craiyon.com"
    timeout: float = 120.0
    rate_limit_backoff_seconds: float = RATE_LIMIT_BACKOFF_SECONDS

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))
        object.__setattr__(self, "image_host", self.image_host.rstrip("/"))
