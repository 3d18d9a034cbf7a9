"""
GenerationClient submits prompts to the Stability AI text-to-image REST API.
It only returns decoded results; applying them to session state is the orchestrator's job.
"""

import json
import logging

from .aiohttp_request_manager import AiohttpRequestManager
from .errors import DecodeError, GenerationError, NetworkError
from .generation_types import Artifact, GenerationRequest, GenerationResult
from .settings import Settings

logger = logging.getLogger(__name__)


class GenerationClient:
    """
    Client for `POST {host}/v1/generation/{engine}/text-to-image`.
    """

    def __init__(
        self,
        settings: Settings,
        requests: AiohttpRequestManager | None = None,
    ):
        self._settings = settings
        self._requests = requests or AiohttpRequestManager()

    @property
    def url(self) -> str:
        host = self._settings.api_host.rstrip("/")
        return f"{host}/v1/generation/{self._settings.engine_id}/text-to-image"

    async def generate(self, prompt: str) -> GenerationResult:
        """
        Request one image for the prompt.

        Raises:
            ConfigurationError: No API key configured.
            GenerationError: The API answered with a non-success status.
            NetworkError: The API could not be reached.
            DecodeError: The success body is not a usable artifact list.
        """
        api_key = self._settings.require_api_key()
        request = GenerationRequest(prompt=prompt)
        self._requests.set_auth(api_key)

        logger.info(f"Submitting text-to-image request to {self._settings.engine_id}")
        try:
            response = await self._requests.post(
                self.url,
                request.to_payload(),
                headers={"Accept": "application/json"},
            )
        except NetworkError as e:
            if e.status is None:
                raise
            logger.error(f"Generation failed with status {e.status}: {e.body}")
            raise GenerationError(e.status, e.body) from e

        return parse_generation_result(response)

    async def close(self):
        await self._requests.close()


def parse_generation_result(response: dict | list | bytes) -> GenerationResult:
    """Decode a success body into a GenerationResult."""
    if isinstance(response, bytes):
        try:
            response = json.loads(response)
        except ValueError as e:
            raise DecodeError(f"Generation response is not JSON: {e}") from e

    if not isinstance(response, dict):
        raise DecodeError("Generation response is not a JSON object")

    raw_artifacts = response.get("artifacts")
    if not isinstance(raw_artifacts, list):
        raise DecodeError("Generation response has no artifacts array")
    if not raw_artifacts:
        raise DecodeError("Generation response contains no artifacts")

    artifacts = []
    for raw in raw_artifacts:
        if not isinstance(raw, dict) or not isinstance(raw.get("base64"), str):
            raise DecodeError("Generation artifact is missing its base64 payload")
        artifacts.append(
            Artifact(
                base64=raw["base64"],
                seed=raw.get("seed", 0),
                finish_reason=raw.get("finishReason", ""),
            )
        )
    return GenerationResult(artifacts=artifacts)
