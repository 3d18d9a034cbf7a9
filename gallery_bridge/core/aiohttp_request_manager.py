"""
Aiohttp request manager shared by the generation and storage clients.
Owns one lazily created ClientSession and turns every failure into NetworkError.
"""

import asyncio
import json
import ssl

import aiohttp
import certifi

from .errors import DecodeError, NetworkError


class AiohttpRequestManager:
    """
    Thin async HTTP helper around a single aiohttp session.
    Clients keep one instance each so default headers don't leak between services.
    """

    def __init__(self, headers: dict | None = None):
        self._session: aiohttp.ClientSession | None = None
        self._bearer_token: str | None = None
        self._default_headers = dict(headers or {})

    @property
    def is_open(self) -> bool:
        return self._session is not None and not self._session.closed

    async def ensure_session(self):
        """Lazy session creation with proper SSL context."""
        if self._session is None or self._session.closed:
            # Create SSL context using certifi's CA bundle
            ssl_context = ssl.create_default_context(cafile=certifi.where())
            connector = aiohttp.TCPConnector(ssl=ssl_context)
            self._session = aiohttp.ClientSession(connector=connector)

    def set_auth(self, bearer: str | None):
        """Set default bearer token for all requests."""
        self._bearer_token = bearer

    def _get_headers(self, headers: dict | None = None) -> dict:
        """Build request headers: defaults, bearer token, then per-call extras."""
        result = dict(self._default_headers)
        if self._bearer_token:
            result["Authorization"] = f"Bearer {self._bearer_token}"
        if headers:
            result.update(headers)
        return result

    async def post(
        self,
        url: str,
        data: dict,
        headers: dict | None = None,
    ) -> dict | list | bytes:
        """
        POST JSON request.

        Args:
            url: Request URL
            data: JSON data to send
            headers: Extra headers for this request only

        Returns:
            Parsed JSON (dict or list) or raw bytes
        """
        await self.ensure_session()
        assert self._session is not None

        request_headers = self._get_headers(headers)
        request_headers["Content-Type"] = "application/json"

        try:
            async with self._session.post(
                url, json=data, headers=request_headers
            ) as response:
                return await self._handle_response(response, url)
        except aiohttp.ClientError as e:
            raise NetworkError(0, str(e), url)
        except asyncio.TimeoutError:
            raise NetworkError(
                0, "Connection timed out, the server took too long to respond", url
            )

    async def post_bytes(
        self,
        url: str,
        data: bytes,
        content_type: str,
        headers: dict | None = None,
    ) -> dict | list | bytes:
        """
        POST a raw binary body (object upload).

        Args:
            url: Request URL
            data: Binary data to upload
            content_type: MIME type of the payload
            headers: Extra headers for this request only
        """
        await self.ensure_session()
        assert self._session is not None

        request_headers = self._get_headers(headers)
        request_headers["Content-Type"] = content_type

        try:
            async with self._session.post(
                url, data=data, headers=request_headers
            ) as response:
                return await self._handle_response(response, url)
        except aiohttp.ClientError as e:
            raise NetworkError(0, str(e), url)
        except asyncio.TimeoutError:
            raise NetworkError(
                0, "Connection timed out, the server took too long to respond", url
            )

    async def _handle_response(
        self, response: aiohttp.ClientResponse, url: str
    ) -> dict | list | bytes:
        """Handle response, parsing JSON if appropriate."""
        raw = await response.read()
        content_type = response.headers.get("Content-Type", "")

        if not 200 <= response.status < 300:
            text = raw.decode("utf-8", errors="replace")
            data = None
            error = text
            try:
                data = json.loads(text)
            except ValueError:
                pass
            if isinstance(data, dict):
                error = data.get("message") or data.get("error") or text
            raise NetworkError(
                response.status,
                f"{error} ({response.reason})",
                url,
                status=response.status,
                data=data,
                body=text,
            )

        if "application/json" in content_type:
            try:
                return json.loads(raw)
            except ValueError as e:
                raise DecodeError(f"Malformed JSON response from {url}: {e}") from e
        return raw

    async def close(self):
        """Close the session."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None
