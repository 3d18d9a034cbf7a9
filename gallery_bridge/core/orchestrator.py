"""
GenerationOrchestrator ties the generation client, the storage gateway and the
session state together: generate, save and gallery refresh flows.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .errors import BridgeError, GenerationInProgressError
from .gallery import assemble_gallery, filter_placeholders
from .generation_client import GenerationClient
from .generation_types import GalleryEntry
from .naming import sanitize_file_name
from .settings import Settings
from .state import SessionState
from .storage_gateway import StorageGateway
from .transcoding import to_bytes, to_data_uri

logger = logging.getLogger(__name__)

IMAGE_CONTENT_TYPE = "image/png"


@dataclass
class SaveResult:
    """Outcome of a save. `error` is set when `ok` is False."""

    ok: bool
    key: str = ""
    error: Optional[str] = None


class GenerationOrchestrator:
    """Runs the session flows. The flows are independent and not serialized."""

    def __init__(
        self,
        client: GenerationClient,
        storage: StorageGateway,
        state: SessionState | None = None,
        signed_url_ttl: int = 60,
    ):
        self.client = client
        self.storage = storage
        self.state = state if state is not None else SessionState()
        self.signed_url_ttl = signed_url_ttl

    @staticmethod
    def from_settings(settings: Settings, state: SessionState | None = None) -> "GenerationOrchestrator":
        return GenerationOrchestrator(
            GenerationClient(settings),
            StorageGateway(settings),
            state=state,
            signed_url_ttl=settings.signed_url_ttl,
        )

    def set_prompt(self, prompt: str):
        self.state.prompt = prompt

    async def start(self) -> list[GalleryEntry]:
        """Session start: populate the gallery once."""
        return await self.refresh_gallery()

    async def generate(self, prompt: str | None = None) -> str:
        """
        Generate an image for the current prompt and hold it as data URI.

        Raises:
            GenerationInProgressError: Another generate call is still running.
            BridgeError: Any generation failure, after busy state was cleared.
        """
        if self.state.is_generating:
            raise GenerationInProgressError("An image is already being generated")
        if prompt is not None:
            self.set_prompt(prompt)

        self.state.begin_generation()
        try:
            result = await self.client.generate(self.state.prompt)
        except BridgeError as e:
            self.state.apply_generation_error(str(e))
            raise
        except Exception as e:
            logger.exception(f"Unexpected generation error: {e}")
            self.state.apply_generation_error(str(e))
            raise
        finally:
            # Cancellation skips the handlers above
            if self.state.is_generating:
                self.state.end_generation()

        image = to_data_uri(result.first.base64)
        self.state.apply_generated_image(image)
        logger.info(f"Generated image (seed={result.first.seed}, finish={result.first.finish_reason})")
        return image

    async def save(self) -> SaveResult:
        """
        Upload the current image under a key derived from the current prompt.
        Never raises; failures are logged and reported in the result.
        """
        image = self.state.generated_image
        if not image:
            return SaveResult(ok=False, error="No generated image to save")

        key = sanitize_file_name(self.state.prompt)
        try:
            data = to_bytes(image)
            await self.storage.upload(key, data, IMAGE_CONTENT_TYPE)
        except Exception as e:
            logger.error(f"Error uploading image: {e}")
            return SaveResult(ok=False, key=key, error=str(e))

        logger.info("Image uploaded successfully")
        return SaveResult(ok=True, key=key)

    async def refresh_gallery(self) -> list[GalleryEntry]:
        """
        Rebuild the gallery from the bucket listing.
        A failed listing keeps the previous gallery.
        """
        try:
            objects = await self.storage.list_objects()
        except BridgeError as e:
            logger.error(f"Error fetching images: {e}")
            return self.state.gallery

        names = filter_placeholders(obj.name for obj in objects)

        async def resolve(name: str) -> str:
            return await self.storage.create_signed_url(name, self.signed_url_ttl)

        entries = await assemble_gallery(names, resolve)
        self.state.apply_gallery(entries)
        return entries

    async def close(self):
        await self.client.close()
        await self.storage.close()
