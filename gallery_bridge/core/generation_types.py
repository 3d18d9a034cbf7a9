"""
Plain data types passed between the clients, the gallery assembler and the orchestrator.
"""

from dataclasses import dataclass, field
from typing import Any

# Listing artifact some object stores emit for an empty folder
PLACEHOLDER_NAME = ".emptyFolderPlaceholder"


@dataclass(frozen=True)
class GenerationRequest:
    """Text-to-image request with the fixed sampling parameters."""

    prompt: str
    cfg_scale: float = 7
    height: int = 1024
    width: int = 1024
    steps: int = 30
    samples: int = 1

    def to_payload(self) -> dict:
        return {
            "text_prompts": [{"text": self.prompt}],
            "cfg_scale": self.cfg_scale,
            "height": self.height,
            "width": self.width,
            "steps": self.steps,
            "samples": self.samples,
        }


@dataclass(frozen=True)
class Artifact:
    """One generated image returned by the generation service."""

    base64: str
    seed: int = 0
    finish_reason: str = ""


@dataclass(frozen=True)
class GenerationResult:
    artifacts: list[Artifact] = field(default_factory=list)

    @property
    def first(self) -> Artifact:
        """Only the first artifact is used; extra samples are ignored."""
        return self.artifacts[0]


@dataclass(frozen=True)
class StoredObject:
    """Object as reported by a bucket listing."""

    name: str
    id: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    metadata: dict[str, Any] | None = None

    @property
    def is_placeholder(self) -> bool:
        return self.name == PLACEHOLDER_NAME

    @staticmethod
    def from_dict(data: dict) -> "StoredObject":
        return StoredObject(
            name=data["name"],
            id=data.get("id"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
            metadata=data.get("metadata"),
        )


@dataclass(frozen=True)
class GalleryEntry:
    """Gallery item. `url` is empty when signing failed for this object."""

    key: str
    url: str = ""

    @property
    def is_renderable(self) -> bool:
        return bool(self.url)
