from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("dotjsx")
except PackageNotFoundError:
    __version__ = "unknown"

from dotjsx.compiler import compile_template, generate, parse
from dotjsx.compiler.ast_nodes import Document
from dotjsx.compiler.codegen.generator import GeneratedModule
from dotjsx.compiler.exceptions import (
    DotJsxError,
    DotSyntaxError,
    GenerationError,
    LexError,
    NestingTooDeepError,
    StructuralError,
    StyleSynthesisError,
    UnsupportedConstructError,
)
from dotjsx.config import CompilerConfig

__all__ = [
    "parse",
    "generate",
    "compile_template",
    "Document",
    "GeneratedModule",
    "CompilerConfig",
    "DotJsxError",
    "DotSyntaxError",
    "LexError",
    "StructuralError",
    "GenerationError",
    "UnsupportedConstructError",
    "StyleSynthesisError",
    "NestingTooDeepError",
]
