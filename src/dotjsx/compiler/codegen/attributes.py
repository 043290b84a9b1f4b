"""Attribute rendering: name mapping, composed strings and spread objects."""

import json
from typing import Callable, List, Optional, Sequence

from dotjsx.compiler.ast_nodes import (
    Attribute,
    CommentLiteral,
    ConditionalBlock,
    EncodedExpression,
    InterpolatedExpression,
    IteratorBlock,
    Node,
    TextLiteral,
)
from dotjsx.compiler.exceptions import UnsupportedConstructError
from dotjsx.compiler.serializer import serialize

# HTML attribute names that differ in JSX
ATTRIBUTE_NAMES = {
    "class": "className",
    "for": "htmlFor",
    "accept-charset": "acceptCharset",
    "accesskey": "accessKey",
    "allowfullscreen": "allowFullScreen",
    "autocomplete": "autoComplete",
    "autofocus": "autoFocus",
    "autoplay": "autoPlay",
    "charset": "charSet",
    "colspan": "colSpan",
    "contenteditable": "contentEditable",
    "crossorigin": "crossOrigin",
    "datetime": "dateTime",
    "enctype": "encType",
    "formaction": "formAction",
    "frameborder": "frameBorder",
    "http-equiv": "httpEquiv",
    "inputmode": "inputMode",
    "maxlength": "maxLength",
    "minlength": "minLength",
    "novalidate": "noValidate",
    "playsinline": "playsInline",
    "readonly": "readOnly",
    "referrerpolicy": "referrerPolicy",
    "rowspan": "rowSpan",
    "spellcheck": "spellCheck",
    "srcdoc": "srcDoc",
    "srclang": "srcLang",
    "srcset": "srcSet",
    "tabindex": "tabIndex",
    "usemap": "useMap",
}


def jsx_attribute_name(name: str) -> str:
    return ATTRIBUTE_NAMES.get(name.lower(), name)


def escape_template_text(text: str) -> str:
    """Escape literal text for use inside a template literal."""
    return text.replace("\\", "\\\\").replace("`", "\\`").replace("${", "\\${")


def template_literal(parts: Sequence[Node]) -> str:
    return f"`{template_literal_body(parts)}`"


def template_literal_body(parts: Sequence[Node]) -> str:
    """
    Compose value parts into the body of a template literal.

    Literal text is kept verbatim, expressions become ``${expr}``,
    conditionals become nested ``${test ? `a` : `b`}`` literals and
    iterations are mapped and joined into a single string.
    """
    out = ""
    for part in parts:
        if isinstance(part, TextLiteral):
            out += escape_template_text(part.value)
        elif isinstance(part, (EncodedExpression, InterpolatedExpression)):
            out += f"${{{part.value}}}"
        elif isinstance(part, ConditionalBlock):
            alternate = "``" if part.alternate is None else template_literal(part.alternate)
            out += f"${{{part.test} ? {template_literal(part.children)} : {alternate}}}"
        elif isinstance(part, IteratorBlock):
            params = _iterator_params(part)
            out += (
                f"${{{part.iterable}?.map(({params}) => "
                f"{template_literal(part.children)}).join(\"\")}}"
            )
        elif isinstance(part, CommentLiteral):
            continue
        else:
            raise UnsupportedConstructError(
                f"{type(part).__name__} cannot be used inside an attribute value",
                construct=serialize(part),
            )
    return out


def _iterator_params(node: IteratorBlock) -> str:
    if node.index:
        return f"{node.item}, {node.index}"
    return node.item


class AttributeCodegen:
    """Renders the attribute area of an element.

    ``style`` is the callable producing a style object expression from the
    value parts of a ``style`` attribute.
    """

    def __init__(self, style: Callable[[Sequence[Node]], str]) -> None:
        self.style = style

    def render_attribute_area(self, nodes: Sequence[Node]) -> List[str]:
        rendered = []
        for node in nodes:
            if isinstance(node, Attribute):
                rendered.append(self.render_attribute(node))
            elif isinstance(node, ConditionalBlock):
                rendered.append(f"{{...({self.render_spread(node)})}}")
            elif isinstance(node, (TextLiteral, CommentLiteral)):
                continue
            else:
                raise self._unsupported_in_attribute_area(node)
        return rendered

    def render_attribute(self, attribute: Attribute) -> str:
        name = jsx_attribute_name(attribute.name)
        parts = attribute.parts
        if attribute.name.lower() == "style":
            return f"style={{{self.style(parts)}}}"
        if attribute.is_boolean:
            return name
        if all(isinstance(part, TextLiteral) for part in parts):
            return f'{name}="{_text_of(parts)}"'
        if len(parts) == 1 and isinstance(parts[0], (EncodedExpression, InterpolatedExpression)):
            return f"{name}={{{parts[0].value}}}"
        return f"{name}={{{template_literal(parts)}}}"

    def render_spread(self, node: ConditionalBlock) -> str:
        """Render a conditional wrapping attributes as ``test ? {..} : {..}``."""
        alternate = node.alternate or ()
        return (
            f"{node.test} ? {self.spread_object(node.children)} : "
            f"{self.spread_object(alternate)}"
        )

    def spread_object(self, nodes: Sequence[Node]) -> str:
        entries = []
        for node in nodes:
            if isinstance(node, Attribute):
                key = json.dumps(jsx_attribute_name(node.name))
                entries.append(f"{key}: {self.entry_value(node)}")
            elif isinstance(node, ConditionalBlock):
                entries.append(f"...({self.render_spread(node)})")
            elif isinstance(node, (TextLiteral, CommentLiteral)):
                continue
            else:
                raise self._unsupported_in_attribute_area(node)
        return "{" + ", ".join(entries) + "}"

    def entry_value(self, attribute: Attribute) -> str:
        if attribute.name.lower() == "style":
            return self.style(attribute.parts)
        if attribute.is_boolean:
            return "true"
        return self.value_expression(attribute.parts)

    def value_expression(self, parts: Sequence[Node]) -> str:
        """Expression for an attribute value used as an object entry."""
        if all(isinstance(part, TextLiteral) for part in parts):
            return json.dumps(_text_of(parts), ensure_ascii=False)
        if len(parts) == 1:
            part = parts[0]
            if isinstance(part, (EncodedExpression, InterpolatedExpression)):
                return part.value
            if isinstance(part, ConditionalBlock):
                return (
                    f"{part.test} ? {self._branch_value(part.children)} : "
                    f"{self._branch_value(part.alternate)}"
                )
        return template_literal(parts)

    def _branch_value(self, parts: Optional[Sequence[Node]]) -> str:
        if not parts:
            return "null"
        return self.value_expression(parts)

    def _unsupported_in_attribute_area(self, node: Node) -> UnsupportedConstructError:
        if isinstance(node, IteratorBlock):
            message = "Iteration cannot wrap attributes"
        else:
            message = "Expressions cannot stand in for attributes"
        return UnsupportedConstructError(message, construct=serialize(node))


def _text_of(parts: Sequence[Node]) -> str:
    return "".join(part.value for part in parts if isinstance(part, TextLiteral))
