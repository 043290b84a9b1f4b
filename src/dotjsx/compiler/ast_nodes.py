"""AST node definitions for parsed doT templates.

Nodes are immutable. The tree builder collects children in mutable frames
and freezes each node once its closing event arrives, so a finished tree
can be shared, hashed and compared structurally.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class TextLiteral:
    """Literal text run, either markup content or part of an attribute value."""

    value: str


@dataclass(frozen=True)
class CommentLiteral:
    """Markup comment. Kept in the tree, never rendered."""

    value: str


@dataclass(frozen=True)
class EncodedExpression:
    """``{{! expr }}``: expression whose value is inserted as plain text."""

    value: str


@dataclass(frozen=True)
class InterpolatedExpression:
    """``{{= expr }}``: expression whose value is markup text."""

    value: str


@dataclass(frozen=True)
class EvaluatedBlock:
    """``{{ code }}``: raw statement source."""

    value: str


@dataclass(frozen=True)
class Attribute:
    """Element attribute. No parts means a boolean attribute."""

    name: str
    parts: Tuple["Node", ...] = ()

    @property
    def is_boolean(self) -> bool:
        return not self.parts


@dataclass(frozen=True)
class Element:
    tag: str
    attributes: Tuple["Node", ...] = ()
    children: Tuple["Node", ...] = ()


@dataclass(frozen=True)
class IteratorBlock:
    """``{{~ iterable :item[:index] }} ... {{~}}``."""

    iterable: str
    item: str
    index: Optional[str] = None
    children: Tuple["Node", ...] = ()


@dataclass(frozen=True)
class ConditionalBlock:
    """``{{? test }} ... {{?? test2 }} ... {{??}} ... {{?}}``.

    ``alternate`` is None when there is no else branch. An else-if is stored
    as an alternate holding exactly one ConditionalBlock.
    """

    test: str
    children: Tuple["Node", ...] = ()
    alternate: Optional[Tuple["Node", ...]] = None

    @property
    def else_if(self) -> Optional["ConditionalBlock"]:
        """The chained conditional when the alternate is an else-if."""
        if (
            self.alternate is not None
            and len(self.alternate) == 1
            and isinstance(self.alternate[0], ConditionalBlock)
        ):
            return self.alternate[0]
        return None


@dataclass(frozen=True)
class Document:
    children: Tuple["Node", ...] = field(default_factory=tuple)


Node = Union[
    Element,
    Attribute,
    TextLiteral,
    CommentLiteral,
    EncodedExpression,
    InterpolatedExpression,
    EvaluatedBlock,
    IteratorBlock,
    ConditionalBlock,
]
