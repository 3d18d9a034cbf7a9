"""Core module containing framework-agnostic business logic."""
from .errors import (
    BridgeError,
    ConfigurationError,
    DecodeError,
    GenerationError,
    GenerationInProgressError,
    NetworkError,
    SignedUrlError,
    StorageError,
    UploadError,
)
from .gallery import assemble_gallery
from .generation_client import GenerationClient
from .generation_types import (
    Artifact,
    GalleryEntry,
    GenerationRequest,
    GenerationResult,
    StoredObject,
)
from .naming import sanitize_file_name
from .orchestrator import GenerationOrchestrator, SaveResult
from .settings import Settings
from .state import GenerationStatus, SessionState, state
from .storage_gateway import StorageGateway
from .transcoding import to_base64, to_bytes, to_data_uri

__all__ = [
    # Errors
    "BridgeError",
    "ConfigurationError",
    "DecodeError",
    "GenerationError",
    "GenerationInProgressError",
    "NetworkError",
    "SignedUrlError",
    "StorageError",
    "UploadError",
    # Types
    "Artifact",
    "GalleryEntry",
    "GenerationRequest",
    "GenerationResult",
    "StoredObject",
    # State
    "GenerationStatus",
    "SessionState",
    "state",
    # Components
    "GenerationClient",
    "GenerationOrchestrator",
    "SaveResult",
    "Settings",
    "StorageGateway",
    "assemble_gallery",
    "sanitize_file_name",
    "to_base64",
    "to_bytes",
    "to_data_uri",
]
