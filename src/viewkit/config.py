"""
CONTEXT: Settings for the rendering engine.
ROLE: Single source of truth for directories and execution options, read from the
      environment (prefix ``VIEWKIT_``) or passed explicitly.
DEPENDENCIES:
  - pydantic-settings: environment parsing with validation
KEY EXPORTS: RenderingSettings
USAGE PATTERNS:
  1. RenderingSettings(views_directory="templates", cache_directory=".cache/views")
  2. VIEWKIT_VIEWS_DIRECTORY=templates VIEWKIT_CACHE_DIRECTORY=/tmp/c -> RenderingSettings()
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RenderingSettings(BaseSettings):
    """Rendering engine settings.

    Directories are only shape-checked here; existence and readability are
    validated once at startup by ``RenderingKernel.from_settings``.
    """

    model_config = SettingsConfigDict(
        env_prefix="VIEWKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    views_directory: Path
    cache_directory: Path
    assets_directory: Path | None = None
    assets_base_url: str = "/resources"

    template_extension: str = ".html"
    use_sandbox: bool = True
    strict_undefined: bool = True
    page_separator: str = "\n"

    copyright_owner: str = ""
    copyright_message: str = "All rights reserved."

    template_memory_cache_size: int = Field(default=128, ge=0)

    @field_validator("template_extension")
    @classmethod
    def _normalise_extension(cls, value: str) -> str:
        value = value.strip()
        if value and not value.startswith("."):
            value = f".{value}"
        return value

    @field_validator("assets_base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")
