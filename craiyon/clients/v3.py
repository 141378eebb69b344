"""
Protocol v3 client.
The generate endpoint answers with image reference ids; each id is fetched from the
image host in a second phase and re-encoded to base64.
"""
import asyncio
import base64
import dataclasses
import logging
from typing import Any, ClassVar

import httpx

from craiyon.clients.base import GenerationClient
from craiyon.clients.options import ClientConfig, CraiyonModel, RequestOptions
from craiyon.errors import (
    MalformedResponseError,
    error_from_transport,
    raise_for_response,
)
from craiyon.models.output import GenerationResult

logger = logging.getLogger(__name__)


class ClientV3(GenerationClient):
    """Client for the current Craiyon API (POST /v3 + image host fetches)."""

    VERSION = 3
    GENERATE_IMAGES_PATH = "/v3"
    MODELS: ClassVar[type[CraiyonModel]] = CraiyonModel
    DEFAULT_CONFIG = ClientConfig(
        base_url="https://api.craiyon.com",
        model_version="35s5hfwn9n78gb06",
    )

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if config is not None and config.model_version is None:
            config = dataclasses.replace(config, model_version=self.DEFAULT_CONFIG.model_version)
        super().__init__(config, transport=transport)

    def with_model_version(self, model_version: str) -> "ClientV3":
        return self._replace(model_version=model_version)

    def with_api_token(self, api_token: str | None) -> "ClientV3":
        return self._replace(api_token=api_token)

    def build_payload(self, options: RequestOptions) -> dict[str, Any]:
        model = options.model or CraiyonModel.NONE
        return {
            "prompt": options.prompt,
            "version": self.config.model_version,
            "token": self.config.api_token,
            "model": model.value,
            "negative_prompt": options.negative_prompt or "",
        }

    def image_url(self, reference: str) -> str:
        return f"{self.config.image_host}/{reference}"

    async def _generate_once(self, http: httpx.AsyncClient, options: RequestOptions) -> GenerationResult:
        body = await self._post_json(http, self.generate_images_url, self.build_payload(options))
        references = _parse_references(body)
        logger.debug(
            "craiyon_fetching_images",
            extra={"client_version": self.VERSION, "reference_count": len(references)},
        )
        images = await self._fetch_images(http, references)
        version = body.get("version")
        if version is None:
            version = self.config.model_version
        return GenerationResult.from_response({"images": images, "version": version})

    async def _fetch_images(self, http: httpx.AsyncClient, references: list[str]) -> list[str]:
        """
        Fetch all references concurrently and return base64 strings in reference order.
        Waits for every fetch; if any failed, the first failure in reference order is raised.
        """
        outcomes = await asyncio.gather(
            *(self._fetch_image(http, reference) for reference in references),
            return_exceptions=True,
        )
        images: list[str] = []
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                raise outcome
            images.append(outcome)
        return images

    async def _fetch_image(self, http: httpx.AsyncClient, reference: str) -> str:
        url = self.image_url(reference)
        try:
            response = await http.get(url)
        except httpx.RequestError as e:
            raise error_from_transport(e, url) from e
        raise_for_response(response)
        return base64.b64encode(response.content).decode("ascii")


def _parse_references(body: Any) -> list[str]:
    if not isinstance(body, dict):
        raise MalformedResponseError(f"Expected a JSON object, got {type(body).__name__}")
    references = body.get("images")
    if not isinstance(references, list) or not references:
        raise MalformedResponseError("Response has no image references")
    if not all(isinstance(reference, str) for reference in references):
        raise MalformedResponseError("Image references must be strings")
    return references
