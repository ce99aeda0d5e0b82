"""
CONTEXT: Application-facing facade of the rendering engine.
ROLE: Validate settings once, wire every component and expose rendering, compilation,
      cache warm-up and pre-configured builders.
DEPENDENCIES:
  - viewkit.config: RenderingSettings
  - viewkit.templating: paths, compiler, cache, processing, Jinja2 execution
  - viewkit.rendering: renderers, registry, dispatcher
  - viewkit.components: builders and asset resolution
KEY EXPORTS: RenderingKernel, WarmResult
USAGE PATTERNS:
  1. kernel = RenderingKernel.from_settings(RenderingSettings(views_directory=..., cache_directory=...))
  2. html = kernel.render(kernel.page_builder().view_from("home").build())
  3. kernel.warm()  # precompile every template under the views root
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from viewkit.components.assets import AssetPathResolver
from viewkit.components.builders import (
    FooterBuilder,
    HeaderBuilder,
    NavigationBuilder,
    PageBuilder,
    PartialBuilder,
    ViewBuilder,
)
from viewkit.components.renderable import Renderable, RenderableKind
from viewkit.config import RenderingSettings
from viewkit.exceptions import ViewkitError
from viewkit.rendering.dispatcher import ComponentRenderingService, RendererRegistry
from viewkit.rendering.renderers import PageRenderer, PartialRenderer, ViewRenderer
from viewkit.templating.cache import TemplateCache
from viewkit.templating.compiler import TemplateCompiler
from viewkit.templating.environment import TemplateEngine, create_template_environment
from viewkit.templating.paths import Directory, TemplatePathResolver
from viewkit.templating.processing import TemplateProcessingService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WarmResult:
    template_id: str
    compiled_path: Path | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def build_default_registry(
    engine: TemplateEngine,
    processor: TemplateProcessingService,
    asset_resolver: AssetPathResolver | None = None,
    page_separator: str = "\n",
) -> RendererRegistry:
    """Registry with the page, view and partial renderers.

    Fragments, headers, footers and navigation reach the partial renderer
    through their ``partial`` capability.
    """
    return RendererRegistry(
        {
            RenderableKind.PAGE: PageRenderer(
                engine, processor, asset_resolver, separator=page_separator
            ),
            RenderableKind.VIEW: ViewRenderer(engine, processor, asset_resolver),
            RenderableKind.PARTIAL: PartialRenderer(engine, processor, asset_resolver),
        }
    )


class RenderingKernel:
    def __init__(
        self,
        settings: RenderingSettings,
        processor: TemplateProcessingService,
        renderer: ComponentRenderingService,
        asset_resolver: AssetPathResolver | None = None,
    ):
        self.settings = settings
        self.processor = processor
        self.renderer = renderer
        self.asset_resolver = asset_resolver

    @classmethod
    def from_settings(
        cls,
        settings: RenderingSettings,
        registry: RendererRegistry | None = None,
        additional_globals: dict[str, Any] | None = None,
        additional_filters: dict[str, Any] | None = None,
    ) -> RenderingKernel:
        """Validate directories and wire the engine.

        Raises:
            ConfigurationError: If a configured directory is invalid.
        """
        views = Directory(settings.views_directory)
        cache_directory = Directory(settings.cache_directory, create=True)

        path_resolver = TemplatePathResolver(views, extension=settings.template_extension)
        processor = TemplateProcessingService(
            path_resolver,
            TemplateCache(cache_directory),
            TemplateCompiler(path_resolver),
        )

        asset_resolver: AssetPathResolver | None = None
        if settings.assets_directory is not None:
            asset_resolver = AssetPathResolver(
                Directory(settings.assets_directory), settings.assets_base_url
            )

        environment = create_template_environment(
            use_sandbox=settings.use_sandbox,
            strict_undefined=settings.strict_undefined,
            additional_globals=additional_globals,
            additional_filters=additional_filters,
        )
        engine = TemplateEngine(environment, settings.template_memory_cache_size)

        if registry is None:
            registry = build_default_registry(
                engine, processor, asset_resolver, settings.page_separator
            )

        logger.debug(f"Rendering kernel ready (views={views}, cache={cache_directory})")
        return cls(
            settings,
            processor,
            ComponentRenderingService(registry, processor, engine, asset_resolver),
            asset_resolver,
        )

    def render(self, renderable: Renderable) -> str:
        try:
            return self.renderer.render(renderable)
        except ViewkitError as e:
            logger.error(f"Rendering {type(renderable).__name__} failed: {e}")
            raise

    def render_template(self, template_id: str, data: Mapping[str, Any] | None = None) -> str:
        try:
            return self.renderer.render_template_file(template_id, data)
        except ViewkitError as e:
            logger.error(f"Rendering template {template_id!r} failed: {e}")
            raise

    def compile(self, template_id: str) -> str:
        return self.processor.compile_source(template_id)

    def warm(self) -> list[WarmResult]:
        """Compile every stale template under the views root.

        Failures are collected per template instead of aborting the run.
        """
        results: list[WarmResult] = []
        for template_id in self.processor.path_resolver.iter_templates():
            try:
                compiled_path = self.processor.resolve(template_id)
            except ViewkitError as e:
                logger.warning(f"Could not compile template {template_id!r}: {e}")
                results.append(WarmResult(template_id, error=str(e)))
                continue
            results.append(WarmResult(template_id, compiled_path=compiled_path))

        failed = sum(1 for result in results if not result.ok)
        logger.info(f"Warmed {len(results) - failed} template(s), {failed} failure(s)")
        return results

    # Builders

    def view_builder(self, template_id: str = "") -> ViewBuilder:
        return ViewBuilder(template_id)

    def partial_builder(self, template_id: str = "") -> PartialBuilder:
        return PartialBuilder(template_id)

    def header_builder(self) -> HeaderBuilder:
        return HeaderBuilder()

    def footer_builder(self) -> FooterBuilder:
        return FooterBuilder(
            copyright_owner=self.settings.copyright_owner,
            copyright_message=self.settings.copyright_message,
        )

    def navigation_builder(self) -> NavigationBuilder:
        return NavigationBuilder()

    def page_builder(self) -> PageBuilder:
        return PageBuilder(asset_resolver=self.asset_resolver)
