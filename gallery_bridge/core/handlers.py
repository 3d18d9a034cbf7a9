"""Framework-agnostic request handlers for the gallery bridge API.

These handlers contain the request/response mapping without any FastAPI code,
so the HTTP layer only translates `ApiResponse` objects.
"""
from dataclasses import dataclass
from typing import Optional

from .errors import (
    ConfigurationError,
    DecodeError,
    GenerationError,
    GenerationInProgressError,
    NetworkError,
)
from .orchestrator import GenerationOrchestrator
from .settings import Settings
from .state import state
from .transcoding import to_bytes


@dataclass
class ApiResponse:
    """Standard API response wrapper."""
    data: dict
    status: int = 200


# Singleton instance
_orchestrator: Optional[GenerationOrchestrator] = None


def get_orchestrator() -> GenerationOrchestrator:
    """Get the singleton orchestrator bound to the shared session state."""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = GenerationOrchestrator.from_settings(Settings.from_env(), state=state)
    return _orchestrator


def set_orchestrator(orchestrator: Optional[GenerationOrchestrator]):
    """Replace the singleton (used by tests and embedding applications)."""
    global _orchestrator
    _orchestrator = orchestrator


def _gallery_data(orchestrator: GenerationOrchestrator) -> dict:
    return {
        "entries": [
            {"key": entry.key, "url": entry.url}
            for entry in orchestrator.state.gallery
        ]
    }


async def handle_health() -> ApiResponse:
    """Handle health check request."""
    return ApiResponse(data={"status": "ok"})


async def handle_get_state() -> ApiResponse:
    orchestrator = get_orchestrator()
    session = orchestrator.state
    return ApiResponse(data={
        "prompt": session.prompt,
        "status": session.status.value,
        "error": session.error_message,
        "has_image": session.generated_image is not None,
    })


async def handle_generate(prompt: str) -> ApiResponse:
    """Handle generate request.

    Returns:
        ApiResponse with the image data URI, or an error with status 409/500/502.
    """
    orchestrator = get_orchestrator()
    try:
        image = await orchestrator.generate(prompt)
        return ApiResponse(data={"image": image, "prompt": orchestrator.state.prompt})
    except GenerationInProgressError as e:
        return ApiResponse(data={"error": str(e)}, status=409)
    except ConfigurationError as e:
        return ApiResponse(data={"error": str(e)}, status=500)
    except GenerationError as e:
        return ApiResponse(
            data={"error": str(e), "upstream_status": e.status},
            status=502,
        )
    except (NetworkError, DecodeError) as e:
        return ApiResponse(data={"error": str(e)}, status=502)


async def handle_get_image() -> tuple[bytes, str] | ApiResponse:
    """Handle current image request (binary).

    Returns:
        tuple of (image_bytes, media_type) on success, or ApiResponse with error.
    """
    image = get_orchestrator().state.generated_image
    if not image:
        return ApiResponse(data={"error": "No generated image"}, status=404)
    try:
        return (to_bytes(image), "image/png")
    except DecodeError as e:
        return ApiResponse(data={"error": str(e)}, status=500)


async def handle_save(prompt: Optional[str] = None) -> ApiResponse:
    """Handle save request. Failures are reported, never raised.

    Args:
        prompt: Current prompt text, if it changed since generation.
    """
    orchestrator = get_orchestrator()
    if prompt is not None:
        orchestrator.set_prompt(prompt)
    result = await orchestrator.save()
    return ApiResponse(data={
        "saved": result.ok,
        "key": result.key,
        "error": result.error,
    })


async def handle_get_gallery() -> ApiResponse:
    return ApiResponse(data=_gallery_data(get_orchestrator()))


async def handle_refresh_gallery() -> ApiResponse:
    orchestrator = get_orchestrator()
    await orchestrator.refresh_gallery()
    return ApiResponse(data=_gallery_data(orchestrator))
