"""
Craiyon protocol clients (v1 and v3) with shared retry handling.
"""
from .base import GenerationClient
from .options import ClientConfig, CraiyonModel, RequestOptions
from .v1 import ClientV1
from .v3 import ClientV3
from .factory import ClientFactory
from .runner import generate_with_retry

__all__ = [
    "GenerationClient",
    "ClientConfig",
    "CraiyonModel",
    "RequestOptions",
    "ClientV1",
    "ClientV3",
    "ClientFactory",
    "generate_with_retry",
]
