from .assets import AssetPathResolver
from .builders import (
    FooterBuilder,
    HeaderBuilder,
    NavigationBuilder,
    PageBuilder,
    PartialBuilder,
    RenderableBuilder,
    ViewBuilder,
)
from .renderable import (
    Footer,
    Fragment,
    Header,
    Navigation,
    NavigationLink,
    Page,
    PartialView,
    Renderable,
    RenderableKind,
    View,
)

__all__ = [
    # Models
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
    "RenderableBuilder",
    "ViewBuilder",
    "PartialBuilder",
    "HeaderBuilder",
    "FooterBuilder",
    "NavigationBuilder",
    "PageBuilder",
    # Assets
    "AssetPathResolver",
]
