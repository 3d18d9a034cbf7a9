"""FastAPI application for the AI Image Gallery Bridge.

This module exposes the generate, save and gallery flows as REST endpoints for a UI client.
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import BaseModel

from gallery_bridge.core.handlers import (
    ApiResponse,
    get_orchestrator,
    handle_generate,
    handle_get_gallery,
    handle_get_image,
    handle_get_state,
    handle_health,
    handle_refresh_gallery,
    handle_save,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    orchestrator = get_orchestrator()
    # The gallery is only populated once per session
    await orchestrator.start()
    yield
    # Cleanup on shutdown
    await orchestrator.close()


app = FastAPI(title="AI Image Gallery Bridge", version="0.1.0", lifespan=lifespan)

# Enable CORS for browser UI access
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request Models (Pydantic for FastAPI validation)

class GenerateRequest(BaseModel):
    prompt: str = ""


class SaveRequest(BaseModel):
    prompt: Optional[str] = None  # current prompt, if edited after generating


class GenerateResponse(BaseModel):
    image: str  # data URI
    prompt: str


class GalleryEntryResponse(BaseModel):
    key: str
    url: str


class GalleryResponse(BaseModel):
    entries: list[GalleryEntryResponse]


def _raise_for_error(resp: ApiResponse):
    if resp.status != 200:
        raise HTTPException(status_code=resp.status, detail=resp.data.get("error"))


@app.get("/api/health")
async def health():
    resp = await handle_health()
    return resp.data


@app.get("/api/state")
async def get_state():
    resp = await handle_get_state()
    return resp.data


# Generation Endpoints

@app.post("/api/generate", response_model=GenerateResponse)
async def generate(request: GenerateRequest):
    """Generate an image and hold it as the current image."""
    resp = await handle_generate(request.prompt)
    _raise_for_error(resp)
    return resp.data


@app.get("/api/image")
async def get_image():
    """Get the current generated image as binary PNG."""
    result = await handle_get_image()
    if isinstance(result, ApiResponse):
        raise HTTPException(status_code=result.status, detail=result.data.get("error"))
    content, media_type = result
    return Response(content=content, media_type=media_type)


@app.post("/api/save")
async def save(request: Optional[SaveRequest] = None):
    """Upload the current image under a key derived from the prompt."""
    resp = await handle_save(request.prompt if request else None)
    return resp.data


# Gallery Endpoints

@app.get("/api/gallery", response_model=GalleryResponse)
async def get_gallery():
    resp = await handle_get_gallery()
    return resp.data


@app.post("/api/gallery/refresh", response_model=GalleryResponse)
async def refresh_gallery():
    resp = await handle_refresh_gallery()
    return resp.data
