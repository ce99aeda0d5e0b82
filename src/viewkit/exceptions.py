"""Error taxonomy for template processing and component rendering.

Every failure surfaces to the immediate caller of ``render``/``resolve``; the
engine never retries because compilation is deterministic.
"""

from __future__ import annotations


class ViewkitError(Exception):
    """Base class for all rendering engine errors."""


class SecurityError(ViewkitError):
    """A template identifier tried to leave the configured views root."""


class NotFoundError(ViewkitError):
    """A template source or compiled artifact is missing or unreadable."""


class ConfigurationError(ViewkitError):
    """Invalid engine configuration or an incomplete renderable."""


class UnsupportedRenderableError(ViewkitError):
    """No renderer is registered for a renderable's kind or capabilities."""

    def __init__(self, kind: str, capabilities: tuple[str, ...] = ()):
        self.kind = kind
        self.capabilities = capabilities
        detail = f" (capabilities: {', '.join(capabilities)})" if capabilities else ""
        super().__init__(f"No component renderer registered for renderable kind {kind!r}{detail}")


class CacheWriteError(ViewkitError, OSError):
    """A compiled artifact could not be written to the cache directory."""


class CompileError(ViewkitError):
    """A template directive is structurally invalid."""

    def __init__(self, message: str, position: int | None = None):
        self.position = position
        if position is not None:
            message = f"{message} (at offset {position})"
        super().__init__(message)


class AssetError(ViewkitError):
    """An asset identifier is invalid or its file does not exist."""


class TemplateExecutionError(ViewkitError):
    """A compiled template raised a Jinja2 error while executing."""

    def __init__(self, template_id: str, original: Exception):
        self.template_id = template_id
        self.original = original
        super().__init__(f"Error while executing template {template_id!r}: {original}")


__all__ = [
    "ViewkitError",
    "SecurityError",
    "NotFoundError",
    "ConfigurationError",
    "UnsupportedRenderableError",
    "CacheWriteError",
    "CompileError",
    "AssetError",
    "TemplateExecutionError",
]
