"""Template rendering code generation."""

import json
from typing import Callable, Dict, List, Sequence, Tuple, Type

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
from dotjsx.compiler.codegen.attributes import AttributeCodegen
from dotjsx.compiler.codegen.style import StyleCodegen
from dotjsx.compiler.exceptions import UnsupportedConstructError
from dotjsx.compiler.serializer import serialize
from dotjsx.compiler.tokenizer import VOID_ELEMENTS
from dotjsx.config import CompilerConfig

# Characters that cannot appear as-is in markup text
JSX_TEXT_ESCAPES = {"{": '{"{"}', "}": '{"}"}', ">": '{">"}'}


def jsx_text(text: str) -> str:
    return "".join(JSX_TEXT_ESCAPES.get(char, char) for char in text)


def is_blank(node: Node) -> bool:
    """Whitespace-only text and comments do not count as siblings."""
    if isinstance(node, CommentLiteral):
        return True
    return isinstance(node, TextLiteral) and not node.value.strip()


def meaningful(nodes: Sequence[Node]) -> List[Node]:
    return [node for node in nodes if not is_blank(node)]


class TemplateCodegen:
    """Renders a Document as a markup expression.

    ``bare`` tells a dynamic node whether it is rendered as a plain
    expression (sole child of the document, a conditional branch or an
    iteration body) or wrapped in braces inside markup.
    """

    def __init__(self, config: CompilerConfig) -> None:
        self.config = config
        self.style_codegen = StyleCodegen()
        self.attribute_codegen = AttributeCodegen(self.style_codegen.render)
        self.imports: List[str] = []
        self.handlers: Dict[Type, Callable[..., str]] = {
            Element: self._render_element,
            TextLiteral: self._render_text,
            CommentLiteral: self._render_comment,
            EncodedExpression: self._render_encoded,
            InterpolatedExpression: self._render_interpolated,
            EvaluatedBlock: self._render_evaluated,
            ConditionalBlock: self._render_conditional,
            IteratorBlock: self._render_iterator,
            Attribute: self._render_stray_attribute,
        }

    def _reset_state(self) -> None:
        self.imports = []

    def render_document(self, document: Document) -> Tuple[str, List[str]]:
        """
        Render the document body.
        Returns: (expression, hoisted_statements)
        """
        self._reset_state()
        nodes = list(document.children)

        # Leading evaluated blocks run before the return statement
        hoisted = []
        start = 0
        while start < len(nodes) and (
            isinstance(nodes[start], EvaluatedBlock) or is_blank(nodes[start])
        ):
            node = nodes[start]
            if isinstance(node, EvaluatedBlock):
                hoisted.append(node.value)
            start += 1

        body = nodes[start:]
        children = meaningful(body)
        if len(children) == 1 and isinstance(children[0], IteratorBlock):
            return f"<>{self.render_node(children[0])}</>", hoisted
        return self.render_branch(body), hoisted

    def render_node(self, node: Node, bare: bool = False) -> str:
        handler = self.handlers.get(type(node))
        if handler is None:
            raise UnsupportedConstructError(
                f"Unrecognized node shape {type(node).__name__}"
            )
        return handler(node, bare)

    def render_branch(self, nodes: Sequence[Node]) -> str:
        """Render the children of the document, a branch or an iteration body."""
        children = meaningful(nodes)
        if not children:
            return "null"
        if all(isinstance(child, TextLiteral) for child in children):
            text = "".join(node.value for node in nodes if isinstance(node, TextLiteral))
            return json.dumps(text, ensure_ascii=False)
        if len(children) == 1:
            return self.render_node(children[0], bare=True)
        return "<>" + "".join(self.render_node(child) for child in children) + "</>"

    def _wrap(self, expression: str, bare: bool) -> str:
        return expression if bare else f"{{{expression}}}"

    def _render_element(self, node: Element, bare: bool) -> str:
        attributes = self.attribute_codegen.render_attribute_area(node.attributes)
        opening = node.tag + "".join(f" {attribute}" for attribute in attributes)
        if node.tag in VOID_ELEMENTS and not node.children:
            return f"<{opening} />"
        children = "".join(
            self.render_node(child)
            for child in node.children
            if not isinstance(child, CommentLiteral)
        )
        return f"<{opening}>{children}</{node.tag}>"

    def _render_text(self, node: TextLiteral, bare: bool) -> str:
        if bare:
            return json.dumps(node.value, ensure_ascii=False)
        return jsx_text(node.value)

    def _render_comment(self, node: CommentLiteral, bare: bool) -> str:
        return ""

    def _render_encoded(self, node: EncodedExpression, bare: bool) -> str:
        return self._wrap(node.value, bare)

    def _render_interpolated(self, node: InterpolatedExpression, bare: bool) -> str:
        import_line = self.config.markup_parser_import
        if import_line not in self.imports:
            self.imports.append(import_line)
        return self._wrap(f"{self.config.markup_parser_name}({node.value})", bare)

    def _render_evaluated(self, node: EvaluatedBlock, bare: bool) -> str:
        raise UnsupportedConstructError(
            "Evaluated blocks are only supported at the start of the template",
            construct=serialize(node),
        )

    def _render_conditional(self, node: ConditionalBlock, bare: bool) -> str:
        primary = self.render_branch(node.children)
        if node.alternate is None:
            alternate = "null"
        else:
            alternate = self.render_branch(node.alternate)
        return self._wrap(f"{node.test} ? {primary} : {alternate}", bare)

    def _render_iterator(self, node: IteratorBlock, bare: bool) -> str:
        params = node.item if not node.index else f"{node.item}, {node.index}"
        body = self.render_branch(node.children)
        return self._wrap(f"{node.iterable}?.map(({params}) => ({body}))", bare)

    def _render_stray_attribute(self, node: Attribute, bare: bool) -> str:
        raise UnsupportedConstructError(
            "Attribute outside of a tag", construct=serialize(node)
        )
