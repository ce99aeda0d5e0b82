from .cache import COMPILED_SUFFIX, TemplateCache
from .compiler import TemplateCompiler
from .directives import (
    DEFAULT_PASSES,
    CommentPass,
    ConditionalPass,
    DirectivePass,
    EchoPass,
    LoopPass,
    compile_directive_passes,
    find_closing_paren,
)
from .environment import TemplateEngine, create_template_environment
from .paths import Directory, TemplatePathResolver
from .processing import TemplateProcessingService

__all__ = [
    # Paths
    "Directory",
    "TemplatePathResolver",
    # Compilation
    "TemplateCompiler",
    "DirectivePass",
    "CommentPass",
    "EchoPass",
    "ConditionalPass",
    "LoopPass",
    "DEFAULT_PASSES",
    "compile_directive_passes",
    "find_closing_paren",
    # Cache and orchestration
    "TemplateCache",
    "COMPILED_SUFFIX",
    "TemplateProcessingService",
    # Execution
    "TemplateEngine",
    "create_template_environment",
]
