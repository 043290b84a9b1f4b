"""Template compiler: parse doT templates and generate component source."""

from typing import Optional

from dotjsx.compiler.ast_nodes import Document
from dotjsx.compiler.codegen.generator import CodeGenerator, GeneratedModule
from dotjsx.compiler.parser import DotParser
from dotjsx.config import CompilerConfig


def parse(content: str, file_path: str = "") -> Document:
    """Parse template text into a Document."""
    return DotParser().parse(content, file_path)


def compile_template(
    content: str, config: Optional[CompilerConfig] = None, file_path: str = ""
) -> GeneratedModule:
    """Parse and generate, returning the structured result."""
    document = parse(content, file_path)
    return CodeGenerator(config).generate(document, file_path)


def generate(
    content: str, config: Optional[CompilerConfig] = None, file_path: str = ""
) -> str:
    """Compile template text into component module source."""
    return compile_template(content, config, file_path).to_source()


__all__ = ["parse", "compile_template", "generate", "Document", "GeneratedModule"]
