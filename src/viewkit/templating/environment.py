from __future__ import annotations

import logging
import os
from collections import OrderedDict
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from jinja2 import BaseLoader, Environment, StrictUndefined, TemplateError, Undefined
from jinja2.sandbox import SandboxedEnvironment

from viewkit.exceptions import NotFoundError, TemplateExecutionError, ViewkitError

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS: tuple[str, ...] = ("jinja2.ext.loopcontrols",)


def create_template_environment(
    use_sandbox: bool = True,
    strict_undefined: bool = True,
    additional_globals: dict[str, Any] | None = None,
    additional_filters: dict[str, Callable] | None = None,
    additional_tests: dict[str, Callable] | None = None,
    extensions: list[str | type] | None = None,
    **kwargs: Any,
) -> Environment:
    """Create the Jinja2 environment compiled artifacts are executed in.

    Autoescaping is disabled: the compiler emits explicit ``|e`` filters for
    escaped echoes, and bridge calls (``view.render_partial`` / ``view.include``)
    must emit already-rendered markup verbatim.
    """
    config: dict[str, Any] = dict(
        autoescape=False,
        keep_trailing_newline=True,
        undefined=StrictUndefined if strict_undefined else Undefined,
        loader=BaseLoader(),
        extensions=[*DEFAULT_EXTENSIONS, *(extensions or [])],
    )
    config.update(kwargs)

    env_class = SandboxedEnvironment if use_sandbox else Environment
    env = env_class(**config)

    if additional_globals:
        env.globals.update(additional_globals)
    if additional_filters:
        env.filters.update(additional_filters)
    if additional_tests:
        env.tests.update(additional_tests)
    return env


class TemplateEngine:
    """Executes compiled artifacts and returns their output.

    Parsed templates are memoised by ``(compiled path, artifact mtime_ns)``, so an
    artifact rewritten by the processing service is always parsed again. The
    rendered output is returned directly; no output stream is captured.
    """

    def __init__(self, environment: Environment, memory_cache_size: int = 128):
        self.environment = environment
        self._memory_cache_size = memory_cache_size
        self._parsed: OrderedDict[tuple[str, int], Any] = OrderedDict()

    def execute(
        self,
        compiled_path: str | os.PathLike[str],
        context: Mapping[str, Any],
        template_id: str | None = None,
    ) -> str:
        label = template_id or str(compiled_path)
        template = self._load(Path(compiled_path), label)
        try:
            return template.render(dict(context))
        except ViewkitError:
            # nested renders already raised with the innermost template id
            raise
        except Exception as e:
            raise TemplateExecutionError(label, e) from e

    def clear(self) -> None:
        self._parsed.clear()

    def _load(self, compiled_path: Path, label: str):
        try:
            mtime_ns = compiled_path.stat().st_mtime_ns
        except FileNotFoundError as e:
            raise NotFoundError(f"Compiled template not found: {compiled_path}") from e

        key = (str(compiled_path), mtime_ns)
        template = self._parsed.get(key)
        if template is not None:
            self._parsed.move_to_end(key)
            return template

        try:
            source = compiled_path.read_text(encoding="utf-8")
        except OSError as e:
            raise NotFoundError(f"Compiled template could not be read: {compiled_path}") from e

        try:
            template = self.environment.from_string(source)
        except TemplateError as e:
            raise TemplateExecutionError(label, e) from e

        if self._memory_cache_size > 0:
            self._parsed[key] = template
            while len(self._parsed) > self._memory_cache_size:
                self._parsed.popitem(last=False)
        return template
