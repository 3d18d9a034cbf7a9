"""Error taxonomy shared by the generation and storage clients."""


class BridgeError(Exception):
    """Base class for all bridge errors."""


class ConfigurationError(BridgeError):
    """A required setting (API key, storage URL) is missing."""


class NetworkError(BridgeError):
    """Network error with status code and details.

    `status` is None when the service could not be reached at all.
    """

    def __init__(
        self,
        code: int,
        message: str,
        url: str,
        status: int | None = None,
        data: dict | list | None = None,
        body: str = "",
    ):
        self.code = code
        self.message = message
        self.url = url
        self.status = status
        self.data = data
        self.body = body
        super().__init__(message)

    def __str__(self):
        return self.message


class GenerationError(BridgeError):
    """The generation API answered with a non-success status."""

    def __init__(self, status: int, body: str):
        self.status = status
        self.body = body
        super().__init__(f"Non-200 response ({status}): {body}")


class GenerationInProgressError(BridgeError):
    """A generate request arrived while another one is still running."""


class DecodeError(BridgeError):
    """A response body or base64 payload could not be decoded."""


class StorageError(BridgeError):
    """The object store rejected a request."""

    def __init__(self, message: str, status: int | None = None):
        self.status = status
        super().__init__(message)


class UploadError(StorageError):
    """Upload of an object failed."""


class SignedUrlError(StorageError):
    """A signed URL could not be created for an object."""
