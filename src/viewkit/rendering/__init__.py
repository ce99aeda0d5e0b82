from .api import ViewApi
from .context import (
    ContextBuilder,
    PageContextBuilder,
    PartialContextBuilder,
    RenderContext,
    ViewContextBuilder,
)
from .dispatcher import ComponentRenderingService, RendererRegistry
from .kernel import RenderingKernel, WarmResult, build_default_registry
from .renderers import (
    ComponentRenderer,
    PageRenderer,
    PartialRenderer,
    ViewRenderer,
    bind_view_api,
)

__all__ = [
    # Context
    "RenderContext",
    "ContextBuilder",
    "ViewContextBuilder",
    "PartialContextBuilder",
    "PageContextBuilder",
    # Renderers and dispatch
    "ComponentRenderer",
    "ViewRenderer",
    "PartialRenderer",
    "PageRenderer",
    "bind_view_api",
    "RendererRegistry",
    "ComponentRenderingService",
    "ViewApi",
    # Facade
    "RenderingKernel",
    "WarmResult",
    "build_default_registry",
]
