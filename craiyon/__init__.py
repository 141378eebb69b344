"""
Async client for the Craiyon text-to-image backend.
"""
from .clients import (
    ClientConfig,
    ClientFactory,
    ClientV1,
    ClientV3,
    CraiyonModel,
    GenerationClient,
    RequestOptions,
)
from .errors import (
    BackendError,
    MalformedResponseError,
    RateLimitedError,
    RequestError,
    TransportError,
)
from .models.image import ImageAsset
from .models.output import GenerationResult

# Recommended client for the current backend
Client = ClientV3

__all__ = [
    "Client",
    "ClientV1",
    "ClientV3",
    "ClientConfig",
    "ClientFactory",
    "CraiyonModel",
    "GenerationClient",
    "RequestOptions",
    "GenerationResult",
    "ImageAsset",
    "RequestError",
    "TransportError",
    "BackendError",
    "RateLimitedError",
    "MalformedResponseError",
]
