import os
from pathlib import Path

import pytest

from viewkit.config import RenderingSettings
from viewkit.rendering.kernel import RenderingKernel
from viewkit.templating import (
    Directory,
    TemplateCache,
    TemplateCompiler,
    TemplatePathResolver,
    TemplateProcessingService,
)

# ---------------------------------------------------------------------------
# Template tree
# ---------------------------------------------------------------------------

STANDARD_TEMPLATES: dict[str, str] = {
    "layout/main.html": "<main>@yield('content')</main>",
    "pages/home.html": (
        "@extends('layout/main')\n"
        "@section('content')<h1>{{ heading }}</h1>@partial('sidebar')@endsection\n"
    ),
    "partial/header.html": "<header>{{ title }}@partial('navigation')</header>",
    "partial/footer.html": "<footer>{{ copyright_notice }}</footer>",
    "partial/navigation.html": (
        "<nav>@foreach(links as link){{ link.label }}@endforeach</nav>"
    ),
    "partial/sidebar.html": "<aside>{{ label }}</aside>",
}


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch, tmp_path):
    """Keep VIEWKIT_* variables and stray .env files out of every test."""
    for key in list(os.environ):
        if key.startswith("VIEWKIT_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def views_dir(tmp_path) -> Path:
    path = tmp_path / "views"
    path.mkdir()
    return path


@pytest.fixture
def cache_dir(tmp_path) -> Path:
    return tmp_path / "cache"


@pytest.fixture
def write_template(views_dir):
    """Write a template source below the views root and return its path."""

    def _write(name: str, content: str) -> Path:
        path = views_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def template_tree(write_template, views_dir) -> Path:
    for name, content in STANDARD_TEMPLATES.items():
        write_template(name, content)
    return views_dir


# ---------------------------------------------------------------------------
# Wired components
# ---------------------------------------------------------------------------


@pytest.fixture
def path_resolver(views_dir) -> TemplatePathResolver:
    return TemplatePathResolver(Directory(views_dir))


@pytest.fixture
def compiler(path_resolver) -> TemplateCompiler:
    return TemplateCompiler(path_resolver)


@pytest.fixture
def template_cache(cache_dir) -> TemplateCache:
    return TemplateCache(Directory(cache_dir, create=True))


@pytest.fixture
def processor(path_resolver, template_cache, compiler) -> TemplateProcessingService:
    return TemplateProcessingService(path_resolver, template_cache, compiler)


@pytest.fixture
def make_kernel(views_dir, cache_dir):
    """Factory building a kernel over the test directories; kwargs override settings."""

    def _make(**overrides) -> RenderingKernel:
        values = {"views_directory": views_dir, "cache_directory": cache_dir}
        values.update(overrides)
        return RenderingKernel.from_settings(RenderingSettings(**values))

    return _make


@pytest.fixture
def kernel(template_tree, make_kernel) -> RenderingKernel:
    return make_kernel()
