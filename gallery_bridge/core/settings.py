"""Environment-driven settings for the generation and storage services."""
import os
from dataclasses import dataclass

from .errors import ConfigurationError


DEFAULT_API_HOST = "https://api.stability.ai"
DEFAULT_ENGINE_ID = "stable-diffusion-v1-6"
DEFAULT_BUCKET = "generate-image"
DEFAULT_SIGNED_URL_TTL = 60


def _int_setting(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")


@dataclass(frozen=True)
class Settings:
    api_key: str | None = None
    api_host: str = DEFAULT_API_HOST
    engine_id: str = DEFAULT_ENGINE_ID
    storage_url: str | None = None
    storage_key: str | None = None
    bucket: str = DEFAULT_BUCKET
    signed_url_ttl: int = DEFAULT_SIGNED_URL_TTL

    @staticmethod
    def from_env() -> "Settings":
        """Read settings from environment variables, falling back to defaults."""
        return Settings(
            api_key=os.getenv("STABILITY_API_KEY"),
            api_host=os.getenv("STABILITY_API_HOST", DEFAULT_API_HOST),
            engine_id=os.getenv("STABILITY_ENGINE_ID", DEFAULT_ENGINE_ID),
            storage_url=os.getenv("SUPABASE_URL"),
            storage_key=os.getenv("SUPABASE_KEY"),
            bucket=os.getenv("STORAGE_BUCKET", DEFAULT_BUCKET),
            signed_url_ttl=_int_setting("SIGNED_URL_TTL", DEFAULT_SIGNED_URL_TTL),
        )

    def require_api_key(self) -> str:
        if not self.api_key:
            raise ConfigurationError("STABILITY_API_KEY is not set")
        return self.api_key

    def require_storage(self) -> tuple[str, str]:
        """Return (storage_url, storage_key) or raise if either is missing."""
        if not self.storage_url or not self.storage_key:
            raise ConfigurationError("SUPABASE_URL and SUPABASE_KEY must both be set")
        return self.storage_url.rstrip("/"), self.storage_key
