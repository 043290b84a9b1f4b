"""Compiler configuration."""

import re
from dataclasses import dataclass

IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][\w$]*$")


@dataclass
class CompilerConfig:
    """Names and formatting used in the generated component module."""

    function_name: str = "tpl"
    context_param: str = "it"
    context_type: str = "any"
    markup_parser_name: str = "parseHtml"
    markup_parser_module: str = "html-react-parser"
    indent: str = "    "

    def __post_init__(self) -> None:
        for name in ("function_name", "context_param", "markup_parser_name"):
            value = getattr(self, name)
            if not IDENTIFIER_RE.match(value):
                raise ValueError(f"{name} must be a valid identifier, got {value!r}")
        if not self.markup_parser_module.strip():
            raise ValueError("markup_parser_module cannot be empty")
        if self.indent.strip():
            raise ValueError("indent must only contain whitespace")

    @property
    def markup_parser_import(self) -> str:
        return f'import {self.markup_parser_name} from "{self.markup_parser_module}";'

    @property
    def parameters(self) -> str:
        """Parameter list of the exported function."""
        if self.context_type:
            return f"{self.context_param}: {self.context_type}"
        return self.context_param
