"""
Protocol v1 client: images come back inline as base64 in the generate response.
"""
from typing import Any

import httpx

from craiyon.clients.base import GenerationClient
from craiyon.clients.options import ClientConfig, RequestOptions
from craiyon.models.output import GenerationResult


class ClientV1(GenerationClient):
    """Client for the original Craiyon backend (POST /generate)."""

    VERSION = 1
    GENERATE_IMAGES_PATH = "/generate"
    DEFAULT_CONFIG = ClientConfig(base_url="https://backend.craiyon.com")

    def build_payload(self, options: RequestOptions) -> dict[str, Any]:
        # v1 has no model selector or negative prompt.
        return {"prompt": options.prompt}

    async def _generate_once(self, http: httpx.AsyncClient, options: RequestOptions) -> GenerationResult:
        body = await self._post_json(http, self.generate_images_url, self.build_payload(options))
        return GenerationResult.from_response(body)
