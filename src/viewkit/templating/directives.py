"""
CONTEXT: Stateless directive passes used by the template compiler.
ROLE: Translate general-purpose template directives (comments, echo, conditionals,
      loops) into Jinja2 syntax, one pass per directive family.
ARCHITECTURE:
  - find_closing_paren: quote-aware balanced parenthesis scanner for directive arguments
  - DirectivePass: base class; subclasses declare ``parameterized`` and
    ``parameterless`` directive tables and may override the replacement builder
  - CommentPass, EchoPass, ConditionalPass, LoopPass: the built-in passes
  - DEFAULT_PASSES: the passes in the order the compiler applies them
USAGE PATTERNS:
  1. LoopPass().apply("@foreach(items as item){{ item }}@endforeach")
  2. compile_directive_passes(text) to run every default pass in order

None of these passes can match the reserved layout and inclusion directives
(``@extends``, ``@section``, ``@endsection``, ``@yield``, ``@partial``,
``@include``); those are handled by ``TemplateCompiler`` itself.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from typing import ClassVar

from viewkit.exceptions import CompileError

# Only ``@@`` escapes a directive; ``text@endif`` still closes its block.
# Openers need an argument list, so addresses like ``me@if.example`` never match.
DIRECTIVE_PREFIX = r"(?<!@)@"


def find_closing_paren(text: str, open_index: int) -> int:
    """Return the index of the parenthesis closing the one at ``open_index``.

    Quoted strings (single or double, with backslash escapes) are skipped so that
    parentheses inside string literals do not affect nesting.

    Raises:
        CompileError: if the argument list is never closed.
    """
    if text[open_index] != "(":
        raise CompileError("Expected '(' to open directive arguments", open_index)

    depth = 0
    quote: str | None = None
    index = open_index
    length = len(text)
    while index < length:
        char = text[index]
        if quote is not None:
            if char == "\\":
                index += 2
                continue
            if char == quote:
                quote = None
        elif char in ("'", '"'):
            quote = char
        elif char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return index
        index += 1

    raise CompileError("Unterminated directive argument list", open_index)


def replace_parameterized(
    text: str, name: str, build: Callable[[str], str]
) -> str:
    """Replace every ``@name(...)`` occurrence using ``build(arguments)``."""
    pattern = re.compile(rf"{DIRECTIVE_PREFIX}{name}\s*\(")
    parts: list[str] = []
    position = 0
    while match := pattern.search(text, position):
        close = find_closing_paren(text, match.end() - 1)
        parts.append(text[position : match.start()])
        parts.append(build(text[match.end() : close].strip()))
        position = close + 1
    parts.append(text[position:])
    return "".join(parts)


class DirectivePass:
    """A compiler pass translating one family of directives.

    ``parameterized`` maps directive names to Jinja2 statement templates with an
    ``{expression}`` placeholder; ``parameterless`` maps directive names to their
    literal replacement.
    """

    name: ClassVar[str] = "directive"
    parameterized: ClassVar[dict[str, str]] = {}
    parameterless: ClassVar[dict[str, str]] = {}

    def apply(self, text: str) -> str:
        for directive in self.parameterized:
            text = replace_parameterized(
                text,
                directive,
                lambda expression, directive=directive: self.build_parameterized(
                    directive, expression
                ),
            )
        for directive, replacement in self.parameterless.items():
            text = re.sub(
                rf"{DIRECTIVE_PREFIX}{directive}\b",
                lambda _match, replacement=replacement: replacement,
                text,
            )
        return text

    def build_parameterized(self, directive: str, expression: str) -> str:
        if not expression:
            raise CompileError(f"@{directive} requires an expression")
        return self.parameterized[directive].format(expression=expression)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class CommentPass(DirectivePass):
    """Strips ``{{-- ... --}}`` comments entirely."""

    name = "comments"
    _pattern = re.compile(r"\{\{--.*?--\}\}", re.DOTALL)

    def apply(self, text: str) -> str:
        return self._pattern.sub("", text)


class EchoPass(DirectivePass):
    """Compiles ``{{ expr }}`` to escaped output and ``{!! expr !!}`` to raw output.

    Escaped echoes are compiled before raw ones so that the raw pass output, which
    uses plain Jinja2 delimiters, is never re-matched.
    """

    name = "echo"
    _escaped = re.compile(r"(?<!@)\{\{\s*(.+?)\s*\}\}", re.DOTALL)
    _raw = re.compile(r"\{!!\s*(.+?)\s*!!\}", re.DOTALL)

    def apply(self, text: str) -> str:
        text = self._escaped.sub(lambda m: "{{ (" + m.group(1) + ")|e }}", text)
        text = self._raw.sub(lambda m: "{{ " + m.group(1) + " }}", text)
        # @{{ ... }} is emitted verbatim for client-side templating
        return re.sub(r"@(\{\{.*?\}\})", r"{% raw %}\1{% endraw %}", text, flags=re.DOTALL)


class ConditionalPass(DirectivePass):
    name = "conditionals"
    parameterized = {
        "if": "{{% if {expression} %}}",
        "elseif": "{{% elif {expression} %}}",
        "unless": "{{% if not ({expression}) %}}",
        "isset": "{{% if {expression} is defined and {expression} is not none %}}",
    }
    parameterless = {
        "else": "{% else %}",
        "endif": "{% endif %}",
        "endunless": "{% endif %}",
        "endisset": "{% endif %}",
    }


class LoopPass(DirectivePass):
    """Compiles loop directives to Jinja2 ``for`` blocks.

    ``@foreach`` accepts either Jinja2 order (``item in items``) or the
    ``items as item`` / ``mapping as key => value`` forms. ``@forelse`` maps to a
    ``for ... else`` block whose ``@empty`` branch runs when nothing was iterated.
    """

    name = "loops"
    parameterized = {
        "foreach": "{{% for {expression} %}}",
        "forelse": "{{% for {expression} %}}",
        "for": "{{% for {expression} %}}",
    }
    parameterless = {
        "endforeach": "{% endfor %}",
        "empty": "{% else %}",
        "endforelse": "{% endfor %}",
        "endfor": "{% endfor %}",
        "break": "{% break %}",
        "continue": "{% continue %}",
    }

    _as_clause = re.compile(r"^(?P<iterable>.+?)\s+as\s+(?P<target>.+)$", re.DOTALL)
    _in_clause = re.compile(r"^.+?\s+in\s+.+$", re.DOTALL)

    def build_parameterized(self, directive: str, expression: str) -> str:
        if not expression:
            raise CompileError(f"@{directive} requires an expression")
        return self.parameterized[directive].format(
            expression=self._normalize_loop(directive, expression)
        )

    def _normalize_loop(self, directive: str, expression: str) -> str:
        match = self._as_clause.match(expression)
        if match:
            iterable = match.group("iterable").strip()
            target = match.group("target").strip()
            if "=>" in target:
                key, value = (part.strip() for part in target.split("=>", 1))
                return f"{key}, {value} in ({iterable}).items()"
            return f"{target} in {iterable}"
        if self._in_clause.match(expression):
            return expression
        raise CompileError(
            f"@{directive}({expression}) must use 'item in items' or 'items as item'"
        )


DEFAULT_PASSES: tuple[DirectivePass, ...] = (
    CommentPass(),
    EchoPass(),
    ConditionalPass(),
    LoopPass(),
)


def compile_directive_passes(
    text: str, passes: Iterable[DirectivePass] = DEFAULT_PASSES
) -> str:
    for directive_pass in passes:
        text = directive_pass.apply(text)
    return text
