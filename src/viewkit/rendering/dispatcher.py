"""
CONTEXT: Entry point for rendering any renderable.
ROLE: Select the renderer for a renderable through an explicit registry and render
      raw template files in isolation.
DEPENDENCIES:
  - viewkit.rendering.renderers: the component renderers being dispatched to
  - viewkit.templating: artifact resolution and execution for raw template files
ARCHITECTURE:
  - RendererRegistry: kind/capability tag -> renderer, built by the caller
  - ComponentRenderingService: render(renderable) and render_template_file(id, data)
KEY EXPORTS: RendererRegistry, ComponentRenderingService
USAGE PATTERNS:
  1. registry = RendererRegistry({"page": page_renderer, "view": view_renderer,
                                  "partial": partial_renderer})
  2. ComponentRenderingService(registry, processor, engine).render(page)

Lookup checks a renderable's exact ``kind`` first, then its ``capabilities`` in
declaration order. Registering a renderer for "header" therefore takes
precedence over the generic "partial" renderer for headers only.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Any

from viewkit.components.renderable import Renderable
from viewkit.exceptions import ConfigurationError, UnsupportedRenderableError
from viewkit.rendering.api import ViewApi
from viewkit.rendering.renderers import ComponentRenderer, bind_view_api
from viewkit.templating.environment import TemplateEngine
from viewkit.templating.processing import TemplateProcessingService

if TYPE_CHECKING:
    from viewkit.components.assets import AssetPathResolver

logger = logging.getLogger(__name__)


class RendererRegistry:
    def __init__(self, renderers: Mapping[str, ComponentRenderer] | None = None):
        self._renderers: dict[str, ComponentRenderer] = {}
        for kind, renderer in (renderers or {}).items():
            self.register(kind, renderer)

    def register(self, kind: str, renderer: ComponentRenderer) -> None:
        if not kind or not str(kind).strip():
            raise ValueError("Renderer kind must be a non-empty string")
        self._renderers[str(kind)] = renderer

    def lookup(self, renderable: Renderable) -> ComponentRenderer:
        kind = type(renderable).kind
        capabilities = tuple(type(renderable).capabilities)
        for tag in (kind, *capabilities):
            renderer = self._renderers.get(str(tag))
            if renderer is not None:
                return renderer
        raise UnsupportedRenderableError(str(kind), tuple(str(c) for c in capabilities))

    def __contains__(self, kind: object) -> bool:
        return str(kind) in self._renderers

    def __iter__(self) -> Iterator[str]:
        return iter(self._renderers)

    def __len__(self) -> int:
        return len(self._renderers)


class ComponentRenderingService:
    def __init__(
        self,
        registry: RendererRegistry,
        processor: TemplateProcessingService,
        engine: TemplateEngine,
        asset_resolver: AssetPathResolver | None = None,
    ):
        self.registry = registry
        self.processor = processor
        self.engine = engine
        self.asset_resolver = asset_resolver

    def render(self, renderable: Renderable) -> str:
        if not isinstance(renderable, Renderable):
            raise UnsupportedRenderableError(type(renderable).__name__)
        renderer = self.registry.lookup(renderable)
        return renderer.render(renderable, self)

    def render_template_file(
        self, template_id: str, data: Mapping[str, Any] | None = None
    ) -> str:
        """Render a template with only ``data`` in scope and no partials."""
        template_id = template_id.strip() if template_id else ""
        if not template_id:
            raise ConfigurationError("A template id is required to render a template file.")

        api = ViewApi(self, {}, self.asset_resolver)
        variables = bind_view_api(data or {}, api, template_id)
        compiled_path = self.processor.resolve(template_id)
        return self.engine.execute(compiled_path, variables, template_id=template_id)
