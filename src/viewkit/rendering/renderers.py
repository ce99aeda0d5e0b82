"""Component renderers: turn one renderable into output through its compiled template."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from viewkit.components.renderable import Page, Renderable
from viewkit.exceptions import ConfigurationError
from viewkit.rendering.api import ViewApi
from viewkit.rendering.context import (
    ContextBuilder,
    PageContextBuilder,
    PartialContextBuilder,
    ViewContextBuilder,
)
from viewkit.templating.compiler import BRIDGE_NAME
from viewkit.templating.environment import TemplateEngine
from viewkit.templating.processing import TemplateProcessingService

if TYPE_CHECKING:
    from viewkit.components.assets import AssetPathResolver
    from viewkit.rendering.dispatcher import ComponentRenderingService

logger = logging.getLogger(__name__)


def bind_view_api(data: Mapping[str, Any], api: ViewApi, template_id: str) -> dict[str, Any]:
    """Return template variables with ``view`` bound to the bridge.

    A caller-supplied ``view`` key is overridden.
    """
    variables = dict(data)
    if BRIDGE_NAME in variables:
        logger.warning(
            f"Template {template_id!r}: data key {BRIDGE_NAME!r} is reserved for the "
            f"view API and has been overridden"
        )
    variables[BRIDGE_NAME] = api
    return variables


class ComponentRenderer:
    """Renders a renderable through the template of its template target.

    Subclasses choose the context builder and may redirect the template target
    (a page renders its view's template). The context is always built from the
    original renderable.
    """

    def __init__(
        self,
        context_builder: ContextBuilder,
        engine: TemplateEngine,
        processor: TemplateProcessingService,
        asset_resolver: AssetPathResolver | None = None,
    ):
        self.context_builder = context_builder
        self.engine = engine
        self.processor = processor
        self.asset_resolver = asset_resolver

    def render(self, renderable: Renderable, renderer: ComponentRenderingService) -> str:
        template_id = self.template_id_for(self.template_target(renderable))
        context = self.context_builder.build(renderable)
        api = ViewApi(renderer, context.partials, self.asset_resolver)
        variables = bind_view_api(context.data, api, template_id)

        compiled_path = self.processor.resolve(template_id)
        return self.engine.execute(compiled_path, variables, template_id=template_id)

    def template_target(self, renderable: Renderable) -> Renderable:
        return renderable

    @staticmethod
    def template_id_for(renderable: Renderable) -> str:
        template_id = renderable.template_id.strip()
        if not template_id:
            raise ConfigurationError(
                f"Renderable of type {type(renderable).__name__!r} must provide a template id."
            )
        return template_id


class ViewRenderer(ComponentRenderer):
    def __init__(
        self,
        engine: TemplateEngine,
        processor: TemplateProcessingService,
        asset_resolver: AssetPathResolver | None = None,
    ):
        super().__init__(ViewContextBuilder(), engine, processor, asset_resolver)


class PartialRenderer(ComponentRenderer):
    def __init__(
        self,
        engine: TemplateEngine,
        processor: TemplateProcessingService,
        asset_resolver: AssetPathResolver | None = None,
    ):
        super().__init__(PartialContextBuilder(), engine, processor, asset_resolver)


class PageRenderer(ComponentRenderer):
    """Renders header, page body and footer, in that order.

    The body is the page's view template executed with the page context, so
    ``@partial`` directives in the view resolve against the page's partials.
    Header and footer are dispatched as ordinary partials.
    """

    def __init__(
        self,
        engine: TemplateEngine,
        processor: TemplateProcessingService,
        asset_resolver: AssetPathResolver | None = None,
        separator: str = "\n",
    ):
        super().__init__(PageContextBuilder(), engine, processor, asset_resolver)
        self.separator = separator

    @staticmethod
    def require_page(renderable: Renderable) -> Page:
        if not isinstance(renderable, Page):
            raise ConfigurationError(
                f"PageRenderer cannot render {type(renderable).__name__!r}; expected a Page."
            )
        return renderable

    def template_target(self, renderable: Renderable) -> Renderable:
        return self.require_page(renderable).view

    def render(self, renderable: Renderable, renderer: ComponentRenderingService) -> str:
        page = self.require_page(renderable)

        parts: list[str] = []
        if page.header is not None:
            parts.append(renderer.render(page.header))
        parts.append(super().render(page, renderer))
        if page.footer is not None:
            parts.append(renderer.render(page.footer))
        return self.separator.join(parts)
