"""viewkit - template compilation and component rendering.

Templates written with ``@extends``/``@section``/``@partial``/``@include`` and
echo, conditional and loop directives are compiled to Jinja2 source, cached on
disk and executed to render pages assembled from views and nested partials.
"""

import logging

from .components import (
    AssetPathResolver,
    Footer,
    FooterBuilder,
    Fragment,
    Header,
    HeaderBuilder,
    Navigation,
    NavigationBuilder,
    NavigationLink,
    Page,
    PageBuilder,
    PartialBuilder,
    PartialView,
    Renderable,
    RenderableKind,
    View,
    ViewBuilder,
)
from .config import RenderingSettings
from .exceptions import (
    AssetError,
    CacheWriteError,
    CompileError,
    ConfigurationError,
    NotFoundError,
    SecurityError,
    TemplateExecutionError,
    UnsupportedRenderableError,
    ViewkitError,
)
from .rendering import (
    ComponentRenderingService,
    RendererRegistry,
    RenderingKernel,
    ViewApi,
    WarmResult,
)
from .templating import TemplateCompiler

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Facade and configuration
    "RenderingKernel",
    "RenderingSettings",
    "WarmResult",
    "ComponentRenderingService",
    "RendererRegistry",
    "ViewApi",
    "TemplateCompiler",
    # Renderables
    "Renderable",
    "RenderableKind",
    "Page",
    "View",
    "PartialView",
    "Fragment",
    "Header",
    "Footer",
    "Navigation",
    "NavigationLink",
    # Builders
    "ViewBuilder",
    "PartialBuilder",
    "HeaderBuilder",
    "FooterBuilder",
    "NavigationBuilder",
    "PageBuilder",
    "AssetPathResolver",
    # Errors
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
