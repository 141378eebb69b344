"""
Base class for Craiyon protocol clients.
Used by factory and both protocol variants (v1, v3).
"""
import dataclasses
from abc import ABC, abstractmethod
from typing import Any, ClassVar, TypeVar

import httpx

from craiyon.clients.options import ClientConfig, RequestOptions
from craiyon.clients.runner import generate_with_retry
from craiyon.errors import (
    MalformedResponseError,
    error_from_transport,
    raise_for_response,
)
from craiyon.models.output import GenerationResult

JSON_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}

ClientT = TypeVar("ClientT", bound="GenerationClient")


class GenerationClient(ABC):
    """
    Base class for one backend protocol generation.

    Configuration is immutable: the with_* builders return a new client and leave
    this one untouched, so a client can be shared by concurrent generate() calls.
    """

    VERSION: ClassVar[int]
    GENERATE_IMAGES_PATH: ClassVar[str]
    DEFAULT_CONFIG: ClassVar[ClientConfig]

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or self.DEFAULT_CONFIG
        # Used by tests (httpx.MockTransport); None means the httpx default transport.
        self._transport = transport

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base_url={self.config.base_url!r}, max_retries={self.config.max_retries})"

    def _replace(self: ClientT, **changes: Any) -> ClientT:
        return type(self)(dataclasses.replace(self.config, **changes), transport=self._transport)

    def with_base_url(self: ClientT, base_url: str) -> ClientT:
        """Return a client for another backend instance; base_url excludes the endpoint path."""
        return self._replace(base_url=base_url)

    def with_max_retries(self: ClientT, max_retries: int) -> ClientT:
        return self._replace(max_retries=max_retries)

    def with_timeout(self: ClientT, timeout: float) -> ClientT:
        return self._replace(timeout=timeout)

    @property
    def generate_images_url(self) -> str:
        return f"{self.config.base_url}{self.GENERATE_IMAGES_PATH}"

    async def generate(self, options: RequestOptions | str, **overrides: Any) -> GenerationResult:
        """
        Generate images for a prompt.

        Args:
            options: RequestOptions, or a bare prompt string.
            overrides: RequestOptions fields used when options is a string
                (max_retries, negative_prompt, model).

        Returns:
            GenerationResult with the images in backend order.

        Raises:
            RequestError: the last failure once the retry budget is spent.
                A 429 waits config.rate_limit_backoff_seconds before the next attempt.
            MalformedResponseError: unexpected response body (never retried).
        """
        if isinstance(options, str):
            options = RequestOptions(prompt=options, **overrides)
        elif overrides:
            options = dataclasses.replace(options, **overrides)

        max_retries = self.config.max_retries if options.max_retries is None else options.max_retries
        return await generate_with_retry(
            lambda: self._attempt(options),
            max_retries,
            backoff_seconds=self.config.rate_limit_backoff_seconds,
            client_version=self.VERSION,
        )

    async def _attempt(self, options: RequestOptions) -> GenerationResult:
        async with httpx.AsyncClient(timeout=self.config.timeout, transport=self._transport) as http:
            return await self._generate_once(http, options)

    @abstractmethod
    async def _generate_once(self, http: httpx.AsyncClient, options: RequestOptions) -> GenerationResult:
        """One request/response cycle. Raises RequestError on failure."""

    @abstractmethod
    def build_payload(self, options: RequestOptions) -> dict[str, Any]:
        """JSON body for the generate endpoint."""

    async def _post_json(self, http: httpx.AsyncClient, url: str, payload: dict[str, Any]) -> Any:
        try:
            response = await http.post(url, json=payload, headers=JSON_HEADERS)
        except httpx.RequestError as e:
            raise error_from_transport(e, url) from e
        raise_for_response(response)
        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponseError(
                f"Response from {url} is not valid JSON",
                status_code=response.status_code,
                url=url,
            ) from e
