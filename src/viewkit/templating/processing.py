"""Compile-or-reuse orchestration for template artifacts."""

from __future__ import annotations

import logging
from pathlib import Path

from viewkit.exceptions import NotFoundError
from viewkit.templating.cache import TemplateCache
from viewkit.templating.compiler import TemplateCompiler
from viewkit.templating.paths import TemplatePathResolver

logger = logging.getLogger(__name__)


class TemplateProcessingService:
    """Facade over path resolution, caching and compilation.

    ``resolve`` is the only way renderers obtain an executable artifact: it owns
    the decision to recompile a stale template or reuse the cached one.
    """

    def __init__(
        self,
        path_resolver: TemplatePathResolver,
        cache: TemplateCache,
        compiler: TemplateCompiler,
    ):
        self.path_resolver = path_resolver
        self.cache = cache
        self.compiler = compiler

    def resolve(self, template_id: str) -> Path:
        source_path = self.path_resolver.resolve(template_id)
        compiled_path = self.cache.get_compiled_path(source_path)
        self._recompile_if_stale(template_id, source_path, compiled_path)
        return compiled_path

    def compile_source(self, template_id: str) -> str:
        """Compile a template without touching the cache."""
        source_path = self.path_resolver.resolve(template_id)
        return self.compiler.compile(self._read_source(source_path))

    def _recompile_if_stale(
        self, template_id: str, source_path: Path, compiled_path: Path
    ) -> None:
        if not self.cache.is_stale(source_path, compiled_path):
            logger.debug(f"Cache hit for template {template_id!r}")
            return

        logger.debug(f"Compiling template {template_id!r} -> {compiled_path}")
        source_mtime_ns = source_path.stat().st_mtime_ns
        compiled = self.compiler.compile(self._read_source(source_path))
        self.cache.write(compiled_path, compiled, source_mtime_ns=source_mtime_ns)

    @staticmethod
    def _read_source(source_path: Path) -> str:
        try:
            return source_path.read_text(encoding="utf-8")
        except OSError as e:
            raise NotFoundError(f"Template source file could not be read: {source_path}") from e
