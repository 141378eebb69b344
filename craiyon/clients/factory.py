"""
Factory for creating Craiyon protocol clients based on configuration.
"""
import logging

import httpx

from craiyon.clients.base import GenerationClient
from craiyon.clients.options import ClientConfig
from craiyon.clients.v1 import ClientV1
from craiyon.clients.v3 import ClientV3
from craiyon.core.config import Settings

logger = logging.getLogger(__name__)


class ClientFactory:
    """Factory for creating protocol clients."""

    # Closed set of supported backend protocol generations
    PROTOCOLS: dict[str, type[GenerationClient]] = {
        "v1": ClientV1,
        "v3": ClientV3,
    }

    @classmethod
    def create(
        cls,
        protocol: str,
        config: ClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> GenerationClient:
        """
        Create client instance by protocol name.

        Args:
            protocol: Protocol name (v1, v3)
            config: Client configuration; the protocol's defaults when None
            transport: Optional httpx transport shared by every request of the client

        Returns:
            Initialized client instance

        Raises:
            ValueError: If protocol name is unknown
        """
        client_class = cls.PROTOCOLS.get(protocol.strip().lower())

        if not client_class:
            available = ", ".join(cls.PROTOCOLS.keys())
            raise ValueError(
                f"Unknown protocol: {protocol}. "
                f"Available protocols: {available}"
            )

        logger.info(f"Creating Craiyon client: {protocol}")
        return client_class(config, transport=transport)

    @classmethod
    def create_from_settings(
        cls,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> GenerationClient:
        """Create a client for settings.protocol with endpoints and retry budget from settings."""
        protocol = settings.protocol

        if protocol == "v1":
            config = ClientConfig(
                base_url=settings.v1_base_url,
                max_retries=settings.max_retries,
                timeout=settings.request_timeout,
                rate_limit_backoff_seconds=settings.rate_limit_backoff_seconds,
            )
        elif protocol == "v3":
            config = ClientConfig(
                base_url=settings.v3_base_url,
                max_retries=settings.max_retries,
                model_version=settings.model_version,
                api_token=settings.api_token,
                image_host=settings.image_host,
                timeout=settings.request_timeout,
                rate_limit_backoff_seconds=settings.rate_limit_backoff_seconds,
            )
        else:
            raise ValueError(f"Protocol {protocol} not supported in settings")

        return cls.create(protocol, config, transport=transport)

    @classmethod
    def get_available_protocols(cls) -> list[str]:
        return list(cls.PROTOCOLS.keys())
