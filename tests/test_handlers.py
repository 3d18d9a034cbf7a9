"""Tests for request handlers and their HTTP mapping."""
import base64

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from unittest.mock import AsyncMock, MagicMock
from gallery_bridge.core import handlers
from gallery_bridge.core.errors import (
    ConfigurationError,
    GenerationError,
    NetworkError,
    SignedUrlError,
)
from gallery_bridge.core.generation_types import Artifact, GenerationResult, StoredObject
from gallery_bridge.core.handlers import ApiResponse
from gallery_bridge.core.orchestrator import GenerationOrchestrator
from gallery_bridge.core.state import state
from gallery_bridge.fastapi_app import app

PNG_BYTES = b"\x89PNG\r\n\x1a\nfox"
PNG_B64 = base64.b64encode(PNG_BYTES).decode()


@pytest.fixture
def orchestrator():
    client = MagicMock()
    client.generate = AsyncMock(return_value=GenerationResult([Artifact(base64=PNG_B64, seed=1)]))
    storage = MagicMock()
    storage.upload = AsyncMock()
    storage.list_objects = AsyncMock(return_value=[
        StoredObject(name=".emptyFolderPlaceholder"),
        StoredObject(name="a_red_fox"),
        StoredObject(name="broken"),
    ])

    async def sign(name, ttl):
        if name == "broken":
            raise SignedUrlError("denied")
        return f"https://signed/{name}"

    storage.create_signed_url = AsyncMock(side_effect=sign)
    orchestrator = GenerationOrchestrator(client, storage, state=state)
    handlers.set_orchestrator(orchestrator)
    return orchestrator


@pytest_asyncio.fixture
async def http_client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.mark.asyncio
async def test_handle_generate_returns_data_uri(orchestrator):
    resp = await handlers.handle_generate("a red fox")

    assert resp.status == 200
    assert resp.data["image"] == f"data:image/png;base64,{PNG_B64}"
    assert resp.data["prompt"] == "a red fox"


@pytest.mark.asyncio
async def test_handle_generate_maps_errors(orchestrator):
    orchestrator.client.generate.side_effect = GenerationError(400, "invalid prompt")
    resp = await handlers.handle_generate("x")
    assert resp.status == 502
    assert resp.data["upstream_status"] == 400
    assert "invalid prompt" in resp.data["error"]

    orchestrator.client.generate.side_effect = NetworkError(0, "refused", "url")
    resp = await handlers.handle_generate("x")
    assert resp.status == 502

    orchestrator.client.generate.side_effect = ConfigurationError("STABILITY_API_KEY is not set")
    resp = await handlers.handle_generate("x")
    assert resp.status == 500


@pytest.mark.asyncio
async def test_handle_generate_while_busy(orchestrator):
    state.begin_generation()

    resp = await handlers.handle_generate("x")

    assert resp.status == 409
    orchestrator.client.generate.assert_not_called()


@pytest.mark.asyncio
async def test_handle_get_image(orchestrator):
    resp = await handlers.handle_get_image()
    assert isinstance(resp, ApiResponse)
    assert resp.status == 404

    await handlers.handle_generate("a red fox")
    content, media_type = await handlers.handle_get_image()
    assert content == PNG_BYTES
    assert media_type == "image/png"


@pytest.mark.asyncio
async def test_handle_save_reports_failure(orchestrator):
    resp = await handlers.handle_save()
    assert resp.status == 200
    assert resp.data["saved"] is False

    await handlers.handle_generate("a red fox")
    resp = await handlers.handle_save()
    assert resp.data == {"saved": True, "key": "a_red_fox", "error": None}


@pytest.mark.asyncio
async def test_http_generate_save_and_gallery(orchestrator, http_client):
    response = await http_client.post("/api/generate", json={"prompt": "a red fox"})
    assert response.status_code == 200
    assert response.json()["image"].startswith("data:image/png;base64,")

    response = await http_client.get("/api/image")
    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert response.content == PNG_BYTES

    response = await http_client.post("/api/save")
    assert response.json()["key"] == "a_red_fox"
    orchestrator.storage.upload.assert_awaited_once_with("a_red_fox", PNG_BYTES, "image/png")

    response = await http_client.get("/api/gallery")
    assert response.json() == {"entries": []}

    response = await http_client.post("/api/gallery/refresh")
    assert response.json() == {"entries": [
        {"key": "a_red_fox", "url": "https://signed/a_red_fox"},
        {"key": "broken", "url": ""},
    ]}


@pytest.mark.asyncio
async def test_http_generate_error_is_visible(orchestrator, http_client):
    orchestrator.client.generate.side_effect = GenerationError(401, "bad key")

    response = await http_client.post("/api/generate", json={"prompt": "x"})

    assert response.status_code == 502
    assert "bad key" in response.json()["detail"]

    response = await http_client.get("/api/state")
    data = response.json()
    assert data["status"] == "idle"
    assert "bad key" in data["error"]
    assert data["has_image"] is False


@pytest.mark.asyncio
async def test_http_save_uses_prompt_edited_after_generation(orchestrator, http_client):
    await http_client.post("/api/generate", json={"prompt": "a red fox"})

    response = await http_client.post("/api/save", json={"prompt": "Blue Whale!"})

    assert response.status_code == 200
    assert response.json()["key"] == "blue_whale"
    orchestrator.storage.upload.assert_awaited_once_with("blue_whale", PNG_BYTES, "image/png")
    assert state.prompt == "Blue Whale!"
