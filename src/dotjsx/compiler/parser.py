"""Tree builder turning tokenizer events into a Document."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional

from dotjsx.compiler.ast_nodes import (
    Attribute,
    CommentLiteral,
    ConditionalBlock,
    Document,
    Element,
    EncodedExpression,
    EvaluatedBlock,
    InterpolatedExpression,
    IteratorBlock,
    Node,
    TextLiteral,
)
from dotjsx.compiler.exceptions import StructuralError
from dotjsx.compiler.preprocessor import normalize_line_breaks
from dotjsx.compiler.tokenizer import Event, EventType, tokenize

log = logging.getLogger(__name__)

DOCUMENT = "document"
ELEMENT = "element"
ATTRIBUTE = "attribute"
ITERATOR = "iterator"
CONDITIONAL = "conditional"


@dataclass
class Frame:
    """Open construct whose children are still being collected.

    ``slot`` is the list the finished node is appended to. It is chosen when
    the frame opens. An else-if frame shares the slot of the conditional it
    continues; the chain is assembled and placed by its first conditional.
    """

    kind: str
    position: int
    name: str = ""
    item: Optional[str] = None
    index: Optional[str] = None
    children: List[Node] = field(default_factory=list)
    attributes: List[Node] = field(default_factory=list)
    alternate: Optional[List[Node]] = None
    reading_attributes: bool = False
    slot: List[Node] = field(default_factory=list)
    chained_from: Optional["Frame"] = None

    @property
    def collecting_alternate(self) -> bool:
        return self.alternate is not None

    def describe(self) -> str:
        if self.kind == ELEMENT:
            return f"<{self.name}>"
        if self.kind == ATTRIBUTE:
            return f"attribute {self.name!r}"
        if self.kind == ITERATOR:
            return f"iteration over {self.name!r}"
        if self.kind == CONDITIONAL:
            return f"conditional {self.name!r}"
        return "document"


class ParseContext:
    """Per-parse state: the frame stack plus error context."""

    def __init__(self, source: str, file_path: str) -> None:
        self.source = source
        self.file_path = file_path
        self.root = Frame(DOCUMENT, 0)
        self.stack: List[Frame] = [self.root]

    @property
    def current(self) -> Frame:
        return self.stack[-1]

    def error(self, message: str, position: int) -> StructuralError:
        return StructuralError(
            message, file_path=self.file_path, position=position, source=self.source
        )

    def target(self, attribute_like: bool) -> List[Node]:
        """List receiving a node created by the current event."""
        frame = self.current
        if frame.alternate is not None:
            return frame.alternate
        if frame.reading_attributes and attribute_like:
            return frame.attributes
        return frame.children

    def open(self, frame: Frame, attribute_like: bool) -> None:
        frame.slot = self.target(attribute_like)
        self.stack.append(frame)

    def close(self, kind: str, event: Event, label: str) -> Frame:
        frame = self.current
        if frame.kind != kind:
            if frame.kind == DOCUMENT:
                raise self.error(f"Unexpected {label}, nothing is open", event.position)
            raise self.error(
                f"Unexpected {label} while {frame.describe()} is still open",
                event.position,
            )
        self.stack.pop()
        return frame


class DotParser:
    """Builds a Document from template text."""

    def __init__(self) -> None:
        self.handlers: Dict[EventType, Callable[[ParseContext, Event], None]] = {
            EventType.OPEN_TAG: self._open_tag,
            EventType.STOP_ATTRIBUTES: self._stop_attributes,
            EventType.CLOSE_TAG: self._close_tag,
            EventType.OPEN_ATTRIBUTE: self._open_attribute,
            EventType.CLOSE_ATTRIBUTE: self._close_attribute,
            EventType.TEXT: self._text,
            EventType.COMMENT: self._comment,
            EventType.ENCODE: self._expression,
            EventType.INTERPOLATE: self._expression,
            EventType.EVALUATE: self._expression,
            EventType.CONDITIONAL_OPEN: self._open_conditional,
            EventType.CONDITIONAL_ELSE_IF: self._else_if,
            EventType.CONDITIONAL_ELSE: self._else,
            EventType.CONDITIONAL_CLOSE: self._close_conditional,
            EventType.ITERATOR_OPEN: self._open_iterator,
            EventType.ITERATOR_CLOSE: self._close_iterator,
        }

    def parse_file(self, file_path: Path) -> Document:
        """Parse a template file."""
        with open(file_path, "r", encoding="utf-8") as f:
            content = f.read()

        return self.parse(content, str(file_path))

    def parse(self, content: str, file_path: str = "") -> Document:
        """Parse template text into a Document."""
        source = normalize_line_breaks(content)
        ctx = ParseContext(source, file_path)

        for event in tokenize(source, file_path):
            log.debug("%s %r at %d", event.type.value, event.value, event.position)
            self.handlers[event.type](ctx, event)

        if len(ctx.stack) > 1:
            frame = ctx.current
            raise ctx.error(f"Unclosed {frame.describe()} at end of template", frame.position)

        return Document(tuple(ctx.root.children))

    # Elements and attributes

    def _open_tag(self, ctx: ParseContext, event: Event) -> None:
        frame = Frame(ELEMENT, event.position, name=event.value, reading_attributes=True)
        ctx.open(frame, attribute_like=False)

    def _stop_attributes(self, ctx: ParseContext, event: Event) -> None:
        frame = ctx.current
        if frame.kind != ELEMENT or not frame.reading_attributes:
            raise ctx.error(
                f"Tag closed while {frame.describe()} is still open", event.position
            )
        frame.reading_attributes = False

    def _close_tag(self, ctx: ParseContext, event: Event) -> None:
        frame = ctx.current
        if frame.kind == ELEMENT and frame.name != event.value:
            raise ctx.error(
                f"Unexpected closing tag </{event.value}>, expected </{frame.name}>",
                event.position,
            )
        frame = ctx.close(ELEMENT, event, f"closing tag </{event.value}>")
        self._place(
            frame,
            Element(frame.name, tuple(frame.attributes), tuple(frame.children)),
        )

    def _open_attribute(self, ctx: ParseContext, event: Event) -> None:
        ctx.open(Frame(ATTRIBUTE, event.position, name=event.value), attribute_like=True)

    def _close_attribute(self, ctx: ParseContext, event: Event) -> None:
        frame = ctx.close(ATTRIBUTE, event, "end of attribute value")
        self._place(frame, Attribute(frame.name, tuple(frame.children)))

    # Leaves

    def _text(self, ctx: ParseContext, event: Event) -> None:
        ctx.target(attribute_like=False).append(TextLiteral(event.value))

    def _comment(self, ctx: ParseContext, event: Event) -> None:
        ctx.target(attribute_like=False).append(CommentLiteral(event.value))

    def _expression(self, ctx: ParseContext, event: Event) -> None:
        node: Node
        if event.type == EventType.ENCODE:
            node = EncodedExpression(event.value)
        elif event.type == EventType.INTERPOLATE:
            node = InterpolatedExpression(event.value)
        else:
            node = EvaluatedBlock(event.value)
        ctx.target(attribute_like=True).append(node)

    # Conditionals

    def _open_conditional(self, ctx: ParseContext, event: Event) -> None:
        ctx.open(Frame(CONDITIONAL, event.position, name=event.value), attribute_like=True)

    def _else_if(self, ctx: ParseContext, event: Event) -> None:
        frame = self._current_conditional(ctx, event, "else-if")
        if frame.collecting_alternate:
            raise ctx.error("Else-if cannot follow an else branch", event.position)
        chained = Frame(
            CONDITIONAL, event.position, name=event.value, slot=frame.slot, chained_from=frame
        )
        ctx.stack[-1] = chained

    def _else(self, ctx: ParseContext, event: Event) -> None:
        frame = self._current_conditional(ctx, event, "else")
        if frame.collecting_alternate:
            raise ctx.error("Conditional already has an else branch", event.position)
        frame.alternate = []

    def _close_conditional(self, ctx: ParseContext, event: Event) -> None:
        frame = ctx.close(CONDITIONAL, event, "end of conditional")
        node = ConditionalBlock(
            frame.name,
            tuple(frame.children),
            tuple(frame.alternate) if frame.alternate is not None else None,
        )
        while frame.chained_from is not None:
            frame = frame.chained_from
            node = ConditionalBlock(frame.name, tuple(frame.children), (node,))
        self._place(frame, node)

    def _current_conditional(self, ctx: ParseContext, event: Event, label: str) -> Frame:
        frame = ctx.current
        if frame.kind != CONDITIONAL:
            raise ctx.error(f"Unexpected {label} outside of a conditional", event.position)
        return frame

    # Iteration

    def _open_iterator(self, ctx: ParseContext, event: Event) -> None:
        frame = Frame(
            ITERATOR, event.position, name=event.value, item=event.item, index=event.index
        )
        ctx.open(frame, attribute_like=True)

    def _close_iterator(self, ctx: ParseContext, event: Event) -> None:
        frame = ctx.close(ITERATOR, event, "end of iteration")
        self._place(
            frame,
            IteratorBlock(frame.name, frame.item or "", frame.index, tuple(frame.children)),
        )

    def _place(self, frame: Frame, node: Node) -> None:
        frame.slot.append(node)
