"""
StorageGateway talks to a Supabase Storage bucket over its REST API.
Provides upload, listing and signed URL creation for generated images.
"""

import logging
from urllib.parse import quote

from .aiohttp_request_manager import AiohttpRequestManager
from .errors import NetworkError, SignedUrlError, StorageError, UploadError
from .generation_types import StoredObject
from .settings import Settings

logger = logging.getLogger(__name__)

# Page size used when listing a bucket
LIST_LIMIT = 100


class StorageGateway:
    """Uploads objects to one bucket and hands out time-limited URLs for them."""

    def __init__(
        self,
        settings: Settings,
        requests: AiohttpRequestManager | None = None,
    ):
        self._settings = settings
        self._requests = requests or AiohttpRequestManager()

    @property
    def bucket(self) -> str:
        return self._settings.bucket

    def _connection(self) -> tuple[str, dict]:
        """Resolve the storage endpoint and auth headers for one request."""
        url, key = self._settings.require_storage()
        self._requests.set_auth(key)
        return f"{url}/storage/v1", {"apikey": key}

    async def upload(self, key: str, data: bytes, content_type: str = "image/png") -> None:
        """
        Upload bytes under `key`. Existing objects are never overwritten.

        Raises:
            UploadError: Empty key, or the store rejected the upload.
        """
        if not key:
            raise UploadError("Cannot upload an object with an empty key")

        endpoint, headers = self._connection()
        url = f"{endpoint}/object/{self.bucket}/{quote(key)}"
        headers["x-upsert"] = "false"
        try:
            await self._requests.post_bytes(url, data, content_type, headers=headers)
        except NetworkError as e:
            raise UploadError(f"Upload of '{key}' failed: {e.message}", status=e.status) from e

        logger.info(f"Uploaded {len(data)} bytes to {self.bucket}/{key}")

    async def list_objects(self, prefix: str = "") -> list[StoredObject]:
        """
        List objects in the bucket. May include the empty-folder placeholder.

        Raises:
            StorageError: The listing request failed or returned an unexpected body.
        """
        endpoint, headers = self._connection()
        url = f"{endpoint}/object/list/{self.bucket}"
        body = {
            "prefix": prefix,
            "limit": LIST_LIMIT,
            "offset": 0,
            "sortBy": {"column": "name", "order": "asc"},
        }
        try:
            response = await self._requests.post(url, body, headers=headers)
        except NetworkError as e:
            raise StorageError(f"Listing {self.bucket} failed: {e.message}", status=e.status) from e

        if not isinstance(response, list):
            raise StorageError(f"Unexpected listing response for {self.bucket}")
        return [StoredObject.from_dict(item) for item in response if isinstance(item, dict) and "name" in item]

    async def create_signed_url(self, name: str, ttl_seconds: int | None = None) -> str:
        """
        Create a signed URL for one object.

        Raises:
            SignedUrlError: The store refused or returned no signed path.
        """
        ttl = ttl_seconds if ttl_seconds is not None else self._settings.signed_url_ttl
        endpoint, headers = self._connection()
        url = f"{endpoint}/object/sign/{self.bucket}/{quote(name)}"
        try:
            response = await self._requests.post(url, {"expiresIn": ttl}, headers=headers)
        except NetworkError as e:
            raise SignedUrlError(f"Signing '{name}' failed: {e.message}", status=e.status) from e

        signed_path = response.get("signedURL") if isinstance(response, dict) else None
        if not signed_path:
            raise SignedUrlError(f"No signed URL returned for '{name}'")
        return f"{endpoint}{signed_path}"

    async def close(self):
        await self._requests.close()
