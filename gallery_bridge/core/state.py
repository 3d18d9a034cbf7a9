from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .generation_types import GalleryEntry


class GenerationStatus(str, Enum):
    idle = "idle"
    generating = "generating"


@dataclass
class SessionState:
    """Prompt, current image and gallery of one session.

    Only the orchestrator writes to it, and each flow applies its outcome with
    a single `apply_*` call once the awaited work is done.
    """

    prompt: str = ""
    status: GenerationStatus = GenerationStatus.idle
    generated_image: Optional[str] = None  # data URI
    error_message: Optional[str] = None
    gallery: list[GalleryEntry] = field(default_factory=list)

    @property
    def is_generating(self) -> bool:
        return self.status == GenerationStatus.generating

    def begin_generation(self):
        self.status = GenerationStatus.generating

    def end_generation(self):
        self.status = GenerationStatus.idle

    def apply_generated_image(self, image: str):
        self.generated_image = image
        self.error_message = None
        self.status = GenerationStatus.idle

    def apply_generation_error(self, message: str):
        self.error_message = message
        self.status = GenerationStatus.idle

    def apply_gallery(self, entries: list[GalleryEntry]):
        self.gallery = list(entries)

    def reset(self):
        self.prompt = ""
        self.status = GenerationStatus.idle
        self.generated_image = None
        self.error_message = None
        self.gallery = []


# Session state served by the HTTP app
state = SessionState()
