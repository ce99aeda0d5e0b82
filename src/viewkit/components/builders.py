"""
CONTEXT: Fluent assembly of renderables.
ROLE: Collect template ids, data, partials and page parts step by step and produce
      a validated, frozen renderable.
DEPENDENCIES:
  - viewkit.components.renderable: the models being built
  - viewkit.components.assets: optional asset resolution for pages
ARCHITECTURE:
  - RenderableBuilder: shared template/data/partial handling and single-use build()
  - ViewBuilder, PartialBuilder, HeaderBuilder, FooterBuilder, NavigationBuilder
  - PageBuilder: aggregates a view with header, footer, navigation and assets
KEY EXPORTS: ViewBuilder, PartialBuilder, HeaderBuilder, FooterBuilder,
             NavigationBuilder, PageBuilder
USAGE PATTERNS:
  1. ViewBuilder("home").data(body="...").build()
  2. PageBuilder().view(view).header(header).partial_from("sidebar", "partial/sidebar").build()

Builders are consumed by build(): calling build() again, or any setter after
build(), raises ConfigurationError.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Iterable, Mapping
from typing import Any, Generic, Self, TypeVar

from pydantic import ValidationError

from viewkit.components.assets import AssetPathResolver
from viewkit.components.renderable import (
    Footer,
    Header,
    Navigation,
    NavigationLink,
    Page,
    PartialView,
    Renderable,
    View,
)
from viewkit.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_HEADER_TEMPLATE = "partial/header"
DEFAULT_FOOTER_TEMPLATE = "partial/footer"
DEFAULT_NAVIGATION_TEMPLATE = "partial/navigation"
DEFAULT_COPYRIGHT_MESSAGE = "All rights reserved."

NAVIGATION_PARTIAL = "navigation"

T = TypeVar("T", bound=Renderable)


class RenderableBuilder(Generic[T]):
    """Base builder: template id, data and named partials."""

    def __init__(self, template_id: str = ""):
        self._template_id = template_id
        self._data: dict[str, Any] = {}
        self._partials: dict[str, Renderable] = {}
        self._built = False

    def template(self, template_id: str) -> Self:
        self._ensure_open()
        self._template_id = template_id
        return self

    def data(self, values: Mapping[str, Any] | None = None, **kwargs: Any) -> Self:
        """Merge values into the template data; later calls override earlier keys."""
        self._ensure_open()
        if values:
            self._data.update(values)
        self._data.update(kwargs)
        return self

    def partial(self, name: str, renderable: Renderable) -> Self:
        self._ensure_open()
        if not name or not name.strip():
            raise ConfigurationError("Partial identifier must be a non-empty string.")
        if not isinstance(renderable, Renderable):
            raise ConfigurationError(
                f"Partial {name!r} must be a renderable, got {type(renderable).__name__}."
            )
        self._partials[name] = renderable
        return self

    def partial_from(
        self,
        name: str,
        template_id: str,
        data: Mapping[str, Any] | None = None,
        partials: Mapping[str, Renderable] | None = None,
    ) -> Self:
        """Register a plain partial built from a template id."""
        builder = PartialBuilder(template_id).data(data)
        for child_name, child in (partials or {}).items():
            builder.partial(child_name, child)
        return self.partial(name, builder.build())

    @property
    def is_built(self) -> bool:
        return self._built

    def build(self) -> T:
        self._ensure_open()
        result = self._create()
        self._built = True
        return result

    def _create(self) -> T:
        raise NotImplementedError

    def _ensure_open(self) -> None:
        if self._built:
            raise ConfigurationError(
                f"{type(self).__name__} has already been built; create a new builder."
            )

    def _require_template_id(self) -> str:
        template_id = self._template_id.strip()
        if not template_id:
            raise ConfigurationError(
                f"{type(self).__name__} requires a template id before build()."
            )
        return template_id

    def _construct(self, model: type[T], **fields: Any) -> T:
        try:
            return model(**fields)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid {model.__name__}: {e}") from e


class ViewBuilder(RenderableBuilder[View]):
    def __init__(self, template_id: str = ""):
        super().__init__(template_id)
        self._title = ""

    def title(self, title: str) -> Self:
        self._ensure_open()
        self._title = title
        return self

    def _create(self) -> View:
        return self._construct(
            View,
            template_id=self._require_template_id(),
            title=self._title,
            data=self._data,
            partials=self._partials,
        )


class PartialBuilder(RenderableBuilder[PartialView]):
    def _create(self) -> PartialView:
        return self._construct(
            PartialView,
            template_id=self._require_template_id(),
            data=self._data,
            partials=self._partials,
        )


class HeaderBuilder(RenderableBuilder[Header]):
    def __init__(self, template_id: str = DEFAULT_HEADER_TEMPLATE):
        super().__init__(template_id)
        self._title = ""
        self._css_links: list[str] = []

    def title(self, title: str) -> Self:
        self._ensure_open()
        self._title = title
        return self

    def css(self, *links: str) -> Self:
        self._ensure_open()
        self._css_links.extend(links)
        return self

    def _create(self) -> Header:
        return self._construct(
            Header,
            template_id=self._require_template_id(),
            title=self._title,
            css_links=tuple(self._css_links),
            data=self._data,
            partials=self._partials,
        )


class FooterBuilder(RenderableBuilder[Footer]):
    """Builds a footer carrying a ``© <year> <owner>. <message>`` notice."""

    def __init__(
        self,
        template_id: str = DEFAULT_FOOTER_TEMPLATE,
        copyright_owner: str = "",
        copyright_message: str = DEFAULT_COPYRIGHT_MESSAGE,
    ):
        super().__init__(template_id)
        self._copyright_owner = copyright_owner
        self._copyright_message = copyright_message
        self._year: int | None = None
        self._js_links: list[str] = []

    def copyright(
        self,
        owner: str,
        message: str = DEFAULT_COPYRIGHT_MESSAGE,
        year: int | None = None,
    ) -> Self:
        self._ensure_open()
        self._copyright_owner = owner
        self._copyright_message = message
        self._year = year
        return self

    def js(self, *links: str) -> Self:
        self._ensure_open()
        self._js_links.extend(links)
        return self

    def copyright_notice(self) -> str:
        year = self._year or datetime.date.today().year
        return f"© {year} {self._copyright_owner}. {self._copyright_message}"

    def _create(self) -> Footer:
        return self._construct(
            Footer,
            template_id=self._require_template_id(),
            copyright_notice=self.copyright_notice(),
            js_links=tuple(self._js_links),
            data=self._data,
            partials=self._partials,
        )


class NavigationBuilder(RenderableBuilder[Navigation]):
    def __init__(self, template_id: str = DEFAULT_NAVIGATION_TEMPLATE):
        super().__init__(template_id)
        self._links: list[NavigationLink] = []

    def link(self, label: str, url: str, active: bool = False) -> Self:
        self._ensure_open()
        if not label.strip() or not url.strip():
            raise ConfigurationError("Navigation links require a label and a url.")
        self._links.append(NavigationLink(label=label, url=url, active=active))
        return self

    def links(self, links: Iterable[Mapping[str, Any] | NavigationLink]) -> Self:
        """Replace all links; mappings need ``label`` and ``url`` keys."""
        self._ensure_open()
        self._links = []
        for entry in links:
            if isinstance(entry, NavigationLink):
                self._links.append(entry)
                continue
            try:
                self.link(entry["label"], entry["url"], bool(entry.get("active", False)))
            except KeyError as e:
                raise ConfigurationError(f"Navigation link is missing {e.args[0]!r}.") from e
        return self

    def _create(self) -> Navigation:
        if not self._links:
            raise ConfigurationError("NavigationBuilder requires at least one link.")
        return self._construct(
            Navigation,
            template_id=self._require_template_id(),
            links=tuple(self._links),
            data=self._data,
            partials=self._partials,
        )


class PageBuilder(RenderableBuilder[Page]):
    """Assembles a Page around a primary view.

    The page's template identity is its view's, so ``template()`` is not used.
    Assets are resolved when the page is built; local names need an
    ``AssetPathResolver``, remote ``http(s)://`` URLs pass through unchanged.
    """

    def __init__(self, asset_resolver: AssetPathResolver | None = None):
        super().__init__()
        self._asset_resolver = asset_resolver
        self._view: View | None = None
        self._header: Header | None = None
        self._footer: Footer | None = None
        self._navigation: Navigation | None = None
        self._title = ""
        self._assets: list[str] = []

    def view(self, view: View | ViewBuilder) -> Self:
        self._ensure_open()
        if isinstance(view, ViewBuilder):
            view = view.build()
        self._view = view
        return self

    def view_from(
        self,
        template_id: str,
        data: Mapping[str, Any] | None = None,
        partials: Mapping[str, Renderable] | None = None,
    ) -> Self:
        builder = ViewBuilder(template_id).data(data)
        for name, child in (partials or {}).items():
            builder.partial(name, child)
        return self.view(builder)

    def header(self, header: Header | HeaderBuilder) -> Self:
        self._ensure_open()
        self._header = header.build() if isinstance(header, HeaderBuilder) else header
        return self

    def footer(self, footer: Footer | FooterBuilder) -> Self:
        self._ensure_open()
        self._footer = footer.build() if isinstance(footer, FooterBuilder) else footer
        return self

    def navigation(self, navigation: Navigation | NavigationBuilder) -> Self:
        self._ensure_open()
        if isinstance(navigation, NavigationBuilder):
            navigation = navigation.build()
        self._navigation = navigation
        return self

    def title(self, title: str) -> Self:
        self._ensure_open()
        self._title = title
        return self

    def assets(self, names: Iterable[str]) -> Self:
        self._ensure_open()
        self._assets.extend(names)
        return self

    def _resolve_assets(self) -> tuple[tuple[str, ...], tuple[str, ...]]:
        css: list[str] = []
        js: list[str] = []
        for name in self._assets:
            if self._asset_resolver is not None:
                path = self._asset_resolver.resolve(name)
            elif name.strip().lower().startswith(("http://", "https://")):
                path = name.strip()
            else:
                raise ConfigurationError(
                    f"Cannot resolve local asset {name!r}: no assets directory is configured."
                )

            if AssetPathResolver.is_stylesheet(path):
                css.append(path)
            elif AssetPathResolver.is_script(path):
                js.append(path)
            else:
                logger.warning(f"Ignoring asset {name!r}: neither a stylesheet nor a script")
        return tuple(css), tuple(js)

    def _create(self) -> Page:
        if self._view is None:
            raise ConfigurationError("View must be set before building the page.")

        css_links, js_links = self._resolve_assets()
        partials = dict(self._partials)
        header = self._header
        footer = self._footer

        if header is not None and css_links:
            header = header.model_copy(update={"css_links": (*header.css_links, *css_links)})
        if footer is not None and js_links:
            footer = footer.model_copy(update={"js_links": (*footer.js_links, *js_links)})

        # an explicitly registered ``navigation`` partial takes precedence
        if self._navigation is not None:
            partials.setdefault(NAVIGATION_PARTIAL, self._navigation)
            if header is not None and not header.has_partial(NAVIGATION_PARTIAL):
                header = header.model_copy(
                    update={"partials": {**header.partials, NAVIGATION_PARTIAL: self._navigation}}
                )

        return self._construct(
            Page,
            view=self._view,
            header=header,
            footer=footer,
            navigation=self._navigation,
            title=self._title or self._view.title,
            css_links=css_links,
            js_links=js_links,
            data=self._data,
            partials=partials,
        )


__all__ = [
    "RenderableBuilder",
    "ViewBuilder",
    "PartialBuilder",
    "HeaderBuilder",
    "FooterBuilder",
    "NavigationBuilder",
    "PageBuilder",
    "DEFAULT_HEADER_TEMPLATE",
    "DEFAULT_FOOTER_TEMPLATE",
    "DEFAULT_NAVIGATION_TEMPLATE",
    "NAVIGATION_PARTIAL",
]
