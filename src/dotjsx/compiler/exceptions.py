"""Compiler exceptions.

Every failure raised while turning a template into component source derives
from ``DotJsxError``. Parse-time problems are ``DotSyntaxError`` subclasses,
code generation problems are ``GenerationError`` subclasses.
"""

from typing import Optional


class DotJsxError(Exception):
    """Base error with optional source context."""

    kind = "Template Error"

    def __init__(
        self,
        message: str,
        file_path: str = "",
        position: Optional[int] = None,
        source: Optional[str] = None,
        construct: Optional[str] = None,
    ) -> None:
        self.message = message
        self.file_path = file_path
        self.position = position
        self.source = source
        self.construct = construct
        super().__init__(self._format())

    def locate(self, file_path: str) -> None:
        """Attach the template path once it is known."""
        self.file_path = file_path
        self.args = (self._format(),)

    @property
    def line(self) -> Optional[int]:
        """Line number of the error position (1-based)."""
        if self.position is None or self.source is None:
            return None
        return self.source.count("\n", 0, self.position) + 1

    @property
    def column(self) -> Optional[int]:
        """Column of the error position (0-based)."""
        if self.position is None or self.source is None:
            return None
        return self.position - (self.source.rfind("\n", 0, self.position) + 1)

    def _format(self) -> str:
        location = self.file_path or "<template>"
        line = self.line
        column = self.column
        if line is not None:
            location += f":{line}:{column}"

        msg = f"{self.kind}: {self.message}\n  --> {location}"

        if self.source is not None and line is not None and column is not None:
            lines = self.source.splitlines()
            error_line = lines[line - 1] if line <= len(lines) else ""
            # Long single-line templates are clipped around the pointer
            start = max(0, column - 40)
            excerpt = error_line[start : column + 40]
            prefix = "..." if start else ""
            pointer = " " * (len(prefix) + column - start) + "^"
            gutter = " " * 4
            msg += f"\n{gutter}|\n{line:>3} | {prefix}{excerpt}\n{gutter}| {pointer}"

        if self.construct:
            msg += f"\n  in: {self.construct}"

        return msg


class DotSyntaxError(DotJsxError):
    """Template could not be parsed."""

    kind = "Syntax Error"


class LexError(DotSyntaxError):
    """Malformed directive or tag boundary."""

    kind = "Lex Error"


class StructuralError(DotSyntaxError):
    """Unbalanced open/close structure."""

    kind = "Structural Error"


class GenerationError(DotJsxError):
    """Parsed template could not be rendered as component source."""

    kind = "Generation Error"


class UnsupportedConstructError(GenerationError):
    """Construct has no representation in the output syntax."""

    kind = "Unsupported Construct"


class StyleSynthesisError(GenerationError):
    """Style attribute could not be turned into a style object."""

    kind = "Style Error"


class NestingTooDeepError(GenerationError):
    """Tree is nested deeper than the recursive renderers can walk."""

    kind = "Nesting Error"
