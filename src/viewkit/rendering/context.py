"""Per-renderable template variables and the partials visible to ``@partial``."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from viewkit.components.builders import NAVIGATION_PARTIAL
from viewkit.components.renderable import Page, Renderable


@dataclass(frozen=True)
class RenderContext:
    """Template variables plus the partial mapping the ViewApi is bound to."""

    data: dict[str, Any] = field(default_factory=dict)
    partials: Mapping[str, Renderable] = field(default_factory=dict)


class ContextBuilder(Protocol):
    def build(self, renderable: Renderable) -> RenderContext: ...


class ViewContextBuilder:
    """Context of a standalone view: its own data and its own partials."""

    def build(self, renderable: Renderable) -> RenderContext:
        return RenderContext(
            data=renderable.template_context(),
            partials=dict(renderable.partials),
        )


class PartialContextBuilder:
    """Context of a partial; the renderable itself is exposed as ``partial``.

    Typed fields of specialised partials (navigation ``links``, header ``title``
    and ``css_links``, footer ``copyright_notice`` and ``js_links``) arrive
    through ``template_context()``.
    """

    def build(self, renderable: Renderable) -> RenderContext:
        data = renderable.template_context()
        data["partial"] = renderable
        return RenderContext(data=data, partials=dict(renderable.partials))


class PageContextBuilder:
    """Context of the page body.

    Variables are the page data overlaid by the view data, plus ``page``,
    ``title``, ``css_links`` and ``js_links``. Partials are the page's, with the
    navigation available as ``navigation`` unless the page overrides that name.
    The view's own partials are not visible.
    """

    def build(self, renderable: Renderable) -> RenderContext:
        if not isinstance(renderable, Page):
            raise TypeError(
                f"PageContextBuilder only supports pages, got {type(renderable).__name__}"
            )

        partials: dict[str, Renderable] = {}
        if renderable.navigation is not None:
            partials[NAVIGATION_PARTIAL] = renderable.navigation
        partials.update(renderable.partials)

        return RenderContext(data=renderable.template_context(), partials=partials)
