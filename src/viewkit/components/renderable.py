"""
CONTEXT: Value objects carried into rendering.
ROLE: Describe what to render: a template identifier, the data bound into the
      template scope and the named partials visible to ``@partial`` directives.
DEPENDENCIES:
  - pydantic: frozen models with validation
ARCHITECTURE:
  - Renderable: base model; ``kind`` and ``capabilities`` are the class-level tags
    the renderer registry dispatches on
  - View, PartialView, Fragment: the generic variants
  - Header, Footer, Navigation: specialised partials with typed fields
  - Page: composite of header, view, footer, navigation and page-level partials
KEY EXPORTS: Renderable, View, PartialView, Fragment, Header, Footer, Navigation,
             NavigationLink, Page, RenderableKind
USAGE PATTERNS:
  1. View(template_id="home", data={"body": "..."})
  2. Page(view=view, header=header, partials={"sidebar": PartialView(...)})

Renderables are frozen after construction. Cycles (a partial that owns its own
owner) are not detected; callers must not build them.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class RenderableKind(StrEnum):
    PAGE = "page"
    VIEW = "view"
    PARTIAL = "partial"
    FRAGMENT = "fragment"
    HEADER = "header"
    FOOTER = "footer"
    NAVIGATION = "navigation"


class Renderable(BaseModel):
    """Base for everything the dispatcher can render.

    ``kind`` is the exact dispatch tag of a class; ``capabilities`` lists broader
    tags the registry falls back to, in order, when no renderer is registered for
    the exact kind.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: ClassVar[str] = "renderable"
    capabilities: ClassVar[tuple[str, ...]] = ()

    template_id: str = ""
    data: dict[str, Any] = Field(default_factory=dict)
    partials: dict[str, Renderable] = Field(default_factory=dict)

    @field_validator("partials")
    @classmethod
    def _validate_partial_names(cls, value: dict[str, Renderable]) -> dict[str, Renderable]:
        for identifier in value:
            if not identifier.strip():
                raise ValueError("Partial identifier must be a non-empty string.")
        return value

    def template_context(self) -> dict[str, Any]:
        """Variables this renderable contributes to its own template scope."""
        return dict(self.data)

    def has_partial(self, identifier: str) -> bool:
        return identifier in self.partials

    def get_partial(self, identifier: str) -> Renderable | None:
        return self.partials.get(identifier)


class View(Renderable):
    """Primary content of a page, or a standalone document."""

    kind = RenderableKind.VIEW

    title: str = ""

    def template_context(self) -> dict[str, Any]:
        context: dict[str, Any] = {"title": self.title} if self.title else {}
        context.update(self.data)
        return context


class PartialView(Renderable):
    """A reusable fragment addressed by name from a parent's ``@partial`` directive."""

    kind = RenderableKind.PARTIAL


class Fragment(Renderable):
    """Generic renderable; rendered like a partial unless a renderer is registered for it."""

    kind = RenderableKind.FRAGMENT
    capabilities = (RenderableKind.PARTIAL,)


def _validate_links(links: tuple[str, ...], label: str) -> tuple[str, ...]:
    for index, link in enumerate(links):
        if not link.strip():
            raise ValueError(f"{label} asset at index {index} must be a non-empty string.")
    return links


class Header(PartialView):
    kind = RenderableKind.HEADER
    capabilities = (RenderableKind.PARTIAL,)

    template_id: str = "partial/header"
    title: str = ""
    css_links: tuple[str, ...] = ()

    @field_validator("css_links")
    @classmethod
    def _validate_css(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return _validate_links(value, "CSS")

    def template_context(self) -> dict[str, Any]:
        context: dict[str, Any] = {"title": self.title, "css_links": list(self.css_links)}
        context.update(self.data)
        return context


class Footer(PartialView):
    kind = RenderableKind.FOOTER
    capabilities = (RenderableKind.PARTIAL,)

    template_id: str = "partial/footer"
    copyright_notice: str = ""
    js_links: tuple[str, ...] = ()

    @field_validator("js_links")
    @classmethod
    def _validate_js(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return _validate_links(value, "JavaScript")

    def template_context(self) -> dict[str, Any]:
        context: dict[str, Any] = {
            "copyright_notice": self.copyright_notice,
            "js_links": list(self.js_links),
        }
        context.update(self.data)
        return context


class NavigationLink(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    url: str
    active: bool = False


class Navigation(PartialView):
    """Navigation menu; its links are exposed to the template as ``links``."""

    kind = RenderableKind.NAVIGATION
    capabilities = (RenderableKind.PARTIAL,)

    template_id: str = "partial/navigation"
    links: tuple[NavigationLink, ...] = ()

    def template_context(self) -> dict[str, Any]:
        context: dict[str, Any] = {"links": list(self.links)}
        context.update(self.data)
        return context


class Page(Renderable):
    """A complete document: header, primary view, footer and page-level partials.

    The page has no template of its own: its template identity is its view's, and
    ``template_id`` mirrors ``view.template_id``. The page's ``partials`` are the
    context ``@partial`` directives in the view template resolve against.
    """

    kind = RenderableKind.PAGE

    view: View
    header: Header | None = None
    footer: Footer | None = None
    navigation: Navigation | None = None
    title: str = ""
    css_links: tuple[str, ...] = ()
    js_links: tuple[str, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _mirror_view(cls, values: Any) -> Any:
        if isinstance(values, dict):
            view = values.get("view")
            if isinstance(view, View):
                values = dict(values)
                values.setdefault("template_id", view.template_id)
                if not values.get("title"):
                    values["title"] = view.title
        return values

    def template_context(self) -> dict[str, Any]:
        context: dict[str, Any] = {
            "title": self.title,
            "css_links": list(self.css_links),
            "js_links": list(self.js_links),
        }
        context.update(self.data)
        context.update(self.view.template_context())
        context["page"] = self
        return context


__all__ = [
    "RenderableKind",
    "Renderable",
    "View",
    "PartialView",
    "Fragment",
    "Header",
    "Footer",
    "NavigationLink",
    "Navigation",
    "Page",
]
