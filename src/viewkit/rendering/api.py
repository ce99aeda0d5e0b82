"""
CONTEXT: The ``view`` object available inside every compiled template.
ROLE: Bridge from template execution back into the rendering engine, scoped to
      the partials of the renderable currently being rendered.
DEPENDENCIES:
  - viewkit.rendering.dispatcher: recursive rendering (typed only)
  - viewkit.components.assets: optional asset path resolution
KEY EXPORTS: ViewApi
USAGE PATTERNS:
  1. {{ view.render_partial('sidebar') }}   (emitted for @partial('sidebar'))
  2. {{ view.include('partial/card', {'title': t}) }}   (emitted for @include)
  3. {% if view.has_partial('sidebar') %}...{% endif %}
  4. <link href="{{ view.asset('site.css') }}">

A new instance is created for every render invocation, so a partial only ever
sees its own partials; nothing is inherited from the parent.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from viewkit.exceptions import ConfigurationError

if TYPE_CHECKING:
    from viewkit.components.assets import AssetPathResolver
    from viewkit.components.renderable import Renderable
    from viewkit.rendering.dispatcher import ComponentRenderingService

logger = logging.getLogger(__name__)


class ViewApi:
    def __init__(
        self,
        renderer: ComponentRenderingService,
        partials: Mapping[str, Renderable] | None = None,
        asset_resolver: AssetPathResolver | None = None,
    ):
        self._renderer = renderer
        self._partials: Mapping[str, Renderable] = partials or {}
        self._asset_resolver = asset_resolver

    def include(self, template_id: str, data: Mapping[str, Any] | None = None) -> str:
        """Render another template in isolation with only ``data`` in scope."""
        return self._renderer.render_template_file(template_id, dict(data or {}))

    def render_partial(self, identifier: str) -> str:
        partial = self._partials.get(identifier)
        if partial is None:
            logger.debug(f"Partial {identifier!r} is not defined in this context; rendering nothing")
            return ""
        return self._renderer.render(partial)

    def has_partial(self, identifier: str) -> bool:
        return identifier in self._partials

    def asset(self, name: str) -> str:
        if self._asset_resolver is None:
            raise ConfigurationError(
                f"Cannot resolve asset {name!r}: no assets directory is configured."
            )
        return self._asset_resolver.resolve(name)

    @property
    def partial_names(self) -> list[str]:
        return list(self._partials)

    def __repr__(self) -> str:
        return f"ViewApi(partials={self.partial_names!r})"
