"""AI Image Gallery Bridge - text-to-image generation with a signed-URL gallery."""

__version__ = "0.1.0"
