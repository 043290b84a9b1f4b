"""Render parsed templates back into template text or plain dicts."""

from typing import Any, Dict, Iterable, Union

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
from dotjsx.compiler.tokenizer import VOID_ELEMENTS


def serialize(node: Union[Document, Node]) -> str:
    """Render a node as template text.

    Parsing the result yields a tree equal to the one serialized.
    """
    if isinstance(node, Document):
        return _join(node.children)
    if isinstance(node, TextLiteral):
        return node.value
    if isinstance(node, CommentLiteral):
        return f"<!--{node.value}-->"
    if isinstance(node, EncodedExpression):
        return f"{{{{! {node.value} }}}}"
    if isinstance(node, InterpolatedExpression):
        return f"{{{{= {node.value} }}}}"
    if isinstance(node, EvaluatedBlock):
        return f"{{{{ {node.value} }}}}"
    if isinstance(node, Attribute):
        if node.is_boolean:
            return node.name
        return f'{node.name}="{_join(node.parts)}"'
    if isinstance(node, Element):
        return _serialize_element(node)
    if isinstance(node, IteratorBlock):
        header = f"{node.iterable} :{node.item}"
        if node.index:
            header += f":{node.index}"
        return f"{{{{~ {header} }}}}{_join(node.children)}{{{{~}}}}"
    if isinstance(node, ConditionalBlock):
        return _serialize_conditional(node) + "{{?}}"
    raise TypeError(f"Cannot serialize {type(node).__name__}")


def _join(nodes: Iterable[Node], separator: str = "") -> str:
    return separator.join(serialize(node) for node in nodes)


def _serialize_attribute_area(nodes: Iterable[Node]) -> str:
    # Attributes are separated by a space; directives hug their content
    out = ""
    for node in nodes:
        if isinstance(node, ConditionalBlock):
            out += " " + _serialize_conditional(node, attribute_area=True) + "{{?}}"
        elif isinstance(node, IteratorBlock):
            header = f"{node.iterable} :{node.item}"
            if node.index:
                header += f":{node.index}"
            body = _serialize_attribute_area(node.children).strip()
            out += f" {{{{~ {header} }}}}{body}{{{{~}}}}"
        else:
            out += " " + serialize(node)
    return out


def _serialize_element(node: Element) -> str:
    attributes = _serialize_attribute_area(node.attributes)
    if node.tag in VOID_ELEMENTS and not node.children:
        return f"<{node.tag}{attributes} />"
    return f"<{node.tag}{attributes}>{_join(node.children)}</{node.tag}>"


def _serialize_conditional(node: ConditionalBlock, attribute_area: bool = False) -> str:
    """Serialize a conditional chain without its closing directive."""
    if attribute_area:
        body = _serialize_attribute_area(node.children).strip()
    else:
        body = _join(node.children)
    out = f"{{{{? {node.test} }}}}{body}"

    chained = node.else_if
    if chained is not None:
        # "{{? b }}" of the chained block becomes "{{?? b }}"
        return out + "{{?" + _serialize_conditional(chained, attribute_area)[2:]
    if node.alternate is not None:
        if attribute_area:
            alternate = _serialize_attribute_area(node.alternate).strip()
        else:
            alternate = _join(node.alternate)
        out += "{{??}}" + alternate
    return out


NODE_TYPES = {
    Document: "root",
    Element: "element",
    Attribute: "attribute",
    TextLiteral: "text",
    CommentLiteral: "comment",
    EncodedExpression: "dotEncoded",
    InterpolatedExpression: "dotInterpolated",
    EvaluatedBlock: "dotEvaluated",
    IteratorBlock: "dotIterator",
    ConditionalBlock: "dotConditional",
}


def to_dict(node: Union[Document, Node]) -> Dict[str, Any]:
    """JSON-compatible view of a node, used by the ``ast`` command."""
    data: Dict[str, Any] = {"type": NODE_TYPES[type(node)]}

    if isinstance(node, (Document, Element, IteratorBlock, ConditionalBlock)):
        if isinstance(node, Element):
            data["name"] = node.tag
            data["attributes"] = [to_dict(child) for child in node.attributes]
        elif isinstance(node, IteratorBlock):
            data["iterable"] = node.iterable
            data["item"] = node.item
            if node.index is not None:
                data["index"] = node.index
        elif isinstance(node, ConditionalBlock):
            data["test"] = node.test
        data["children"] = [to_dict(child) for child in node.children]
        if isinstance(node, ConditionalBlock) and node.alternate is not None:
            data["alternate"] = [to_dict(child) for child in node.alternate]
    elif isinstance(node, Attribute):
        data["name"] = node.name
        data["value"] = [to_dict(part) for part in node.parts]
    else:
        data["value"] = node.value

    return data
