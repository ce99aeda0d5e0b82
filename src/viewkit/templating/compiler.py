"""Compiles template sources into executable Jinja2 text."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from viewkit.templating.directives import (
    DEFAULT_PASSES,
    DIRECTIVE_PREFIX,
    DirectivePass,
    compile_directive_passes,
    find_closing_paren,
)
from viewkit.templating.paths import TemplatePathResolver

logger = logging.getLogger(__name__)

_QUOTED = r"\s*\(\s*'([^']+)'\s*\)"

EXTENDS_PATTERN = re.compile(rf"{DIRECTIVE_PREFIX}extends{_QUOTED}")
SECTION_PATTERN = re.compile(
    rf"{DIRECTIVE_PREFIX}section{_QUOTED}(.*?){DIRECTIVE_PREFIX}endsection\b", re.DOTALL
)
YIELD_PATTERN = re.compile(rf"{DIRECTIVE_PREFIX}yield{_QUOTED}")
PARTIAL_PATTERN = re.compile(rf"{DIRECTIVE_PREFIX}partial{_QUOTED}")
INCLUDE_PATTERN = re.compile(rf"{DIRECTIVE_PREFIX}include\s*\(")
INCLUDE_ARGUMENTS = re.compile(r"^\s*'([^']*)'\s*(?:,\s*(.*))?$", re.DOTALL)
ESCAPED_AT = re.compile(r"@@(?=\w)")

BRIDGE_NAME = "view"


class TemplateCompiler:
    """Transforms raw template text into Jinja2 source the engine can execute.

    PURPOSE: Resolve layout inheritance and translate every directive of the
    template language into Jinja2 statements and bridge calls.

    COMPILATION PIPELINE:
    1. General passes (comments, echo, conditionals, loops) on the child source
    2. ``@extends('layout')``: the first occurrence is recorded and removed
    3. ``@section('name') ... @endsection``: captured into the section buffer
    4. Layout substitution: the layout source, after the general passes, becomes
       the working text; child markup outside sections is dropped
    5. Final phase, in order: ``@yield`` substitution, ``@partial`` and
       ``@include`` bridge calls, ``@@`` unescaping

    FAILURE POLICY:
    - An ``@section`` without ``@endsection`` is not captured; yields naming it
      produce empty output and, outside a layout, the text is left as written
    - A ``@yield`` naming an unknown section compiles to an empty string
    - An unterminated directive argument list raises ``CompileError``

    The compiler keeps transient state (pending layout, section buffer) only for
    the duration of one ``compile()`` call; it is reset on entry.
    """

    def __init__(
        self,
        path_resolver: TemplatePathResolver,
        passes: Sequence[DirectivePass] = DEFAULT_PASSES,
    ):
        self._path_resolver = path_resolver
        self._passes = tuple(passes)
        self._layout: str | None = None
        self._sections: dict[str, str] = {}

    @property
    def passes(self) -> tuple[DirectivePass, ...]:
        return self._passes

    def compile(self, source: str) -> str:
        self._reset_state()

        content = compile_directive_passes(source, self._passes)
        content = self._parse_extends(content)
        content = self._parse_sections(content)

        if self._layout is not None:
            layout_path = self._path_resolver.resolve(self._layout)
            logger.debug(f"Substituting layout {self._layout!r} ({layout_path})")
            layout_source = layout_path.read_text(encoding="utf-8")
            content = compile_directive_passes(layout_source, self._passes)

        return self._compile_final_content(content)

    def _reset_state(self) -> None:
        self._layout = None
        self._sections = {}

    def _parse_extends(self, content: str) -> str:
        match = EXTENDS_PATTERN.search(content)
        if match is None:
            return content
        self._layout = match.group(1)
        return content[: match.start()] + content[match.end() :]

    def _parse_sections(self, content: str) -> str:
        def capture(match: re.Match[str]) -> str:
            self._sections[match.group(1)] = match.group(2)
            return ""

        return SECTION_PATTERN.sub(capture, content)

    def _compile_final_content(self, content: str) -> str:
        content = self._compile_yields(content)
        content = self._compile_partials(content)
        content = self._compile_includes(content)
        return ESCAPED_AT.sub("@", content)

    def _compile_yields(self, content: str) -> str:
        return YIELD_PATTERN.sub(lambda m: self._sections.get(m.group(1), ""), content)

    def _compile_partials(self, content: str) -> str:
        return PARTIAL_PATTERN.sub(
            lambda m: f"{{{{ {BRIDGE_NAME}.render_partial({m.group(1)!r}) }}}}", content
        )

    def _compile_includes(self, content: str) -> str:
        parts: list[str] = []
        position = 0
        while match := INCLUDE_PATTERN.search(content, position):
            close = find_closing_paren(content, match.end() - 1)
            arguments = INCLUDE_ARGUMENTS.match(content[match.end() : close])
            parts.append(content[position : match.start()])
            if arguments is None:
                # not a literal path; leave the text as written
                parts.append(content[match.start() : close + 1])
            else:
                template_id, data = arguments.group(1), (arguments.group(2) or "").strip()
                parts.append(
                    f"{{{{ {BRIDGE_NAME}.include({template_id!r}, {data or '{}'}) }}}}"
                )
            position = close + 1
        parts.append(content[position:])
        return "".join(parts)
