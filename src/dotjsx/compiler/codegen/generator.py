"""Main code generator orchestrator."""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from dotjsx.compiler.ast_nodes import Document
from dotjsx.compiler.codegen.template import TemplateCodegen
from dotjsx.compiler.exceptions import GenerationError, NestingTooDeepError
from dotjsx.config import CompilerConfig

log = logging.getLogger(__name__)


@dataclass
class GeneratedModule:
    """Result of code generation, before it is rendered as source text."""

    expression: str
    imports: List[str] = field(default_factory=list)
    hoisted: List[str] = field(default_factory=list)
    config: CompilerConfig = field(default_factory=CompilerConfig)

    def to_source(self) -> str:
        config = self.config
        source = ""
        if self.imports:
            source += "\n".join(self.imports) + "\n\n"

        source += f"export default function {config.function_name}({config.parameters}) {{\n"
        for statement in self.hoisted:
            source += f"{config.indent}{statement}\n"
        if self.hoisted:
            source += "\n"
        source += f"{config.indent}return {self.expression};\n}}"
        return source


class CodeGenerator:
    """Generates a component module from a parsed Document."""

    def __init__(self, config: Optional[CompilerConfig] = None) -> None:
        self.config = config or CompilerConfig()
        self.template_codegen = TemplateCodegen(self.config)

    def generate(self, document: Document, file_path: str = "") -> GeneratedModule:
        try:
            expression, hoisted = self.template_codegen.render_document(document)
        except GenerationError as e:
            if file_path and not e.file_path:
                e.locate(file_path)
            raise
        except RecursionError:
            raise NestingTooDeepError(
                "Template nesting is too deep to generate", file_path=file_path
            ) from None

        imports = list(self.template_codegen.imports)
        log.debug(
            "Generated %s: %d import(s), %d hoisted statement(s)",
            file_path or "<template>",
            len(imports),
            len(hoisted),
        )
        return GeneratedModule(
            expression=expression, imports=imports, hoisted=hoisted, config=self.config
        )
