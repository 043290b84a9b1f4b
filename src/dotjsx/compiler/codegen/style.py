"""Style attribute to style object synthesis."""

import json
import re
from typing import Dict, List, Optional, Sequence, Tuple

from dotjsx.compiler.ast_nodes import (
    CommentLiteral,
    ConditionalBlock,
    EncodedExpression,
    InterpolatedExpression,
    IteratorBlock,
    Node,
    TextLiteral,
)
from dotjsx.compiler.codegen.attributes import escape_template_text, template_literal_body
from dotjsx.compiler.exceptions import StyleSynthesisError, UnsupportedConstructError
from dotjsx.compiler.serializer import serialize

DASH_LETTER_RE = re.compile(r"-(.)")
DELIMITER_RE = re.compile(r"([:;])")


def css_property_name(name: str) -> str:
    """Convert a CSS property name to its style object key.

    ``background-color`` -> ``backgroundColor``, ``-ms-transform`` ->
    ``msTransform``, ``-webkit-transition`` -> ``WebkitTransition``. Custom
    properties (``--accent``) are kept as-is.
    """
    if name.startswith("--"):
        return name
    if name.startswith("-ms-"):
        name = name[1:]
    return DASH_LETTER_RE.sub(lambda match: match.group(1).upper(), name)


def parse_declarations(text: str) -> Dict[str, str]:
    """Parse literal ``prop: value; ...`` text into an ordered mapping."""
    declarations: Dict[str, str] = {}
    for declaration in text.split(";"):
        if not declaration.strip():
            continue
        name, colon, value = declaration.partition(":")
        if not colon or not name.strip():
            raise StyleSynthesisError(f"Malformed style declaration {declaration.strip()!r}")
        value = value.strip()
        if value:
            declarations[css_property_name(name.strip())] = value
    return declarations


class StyleCodegen:
    """Builds the object expression for a ``style`` attribute value.

    Values made only of literal text are parsed in one go and emitted as
    compact JSON. Values with dynamic parts go through a small state machine
    that alternates between reading a property name and reading its value:

    - an expression in a value becomes part of a template literal,
    - a conditional in a value becomes ``${test ? `a` : `b`}``,
    - a conditional at the start of a declaration wraps whole declarations
      and becomes a ``...(test ? {..} : {..})`` spread entry.
    """

    def render(self, parts: Sequence[Node]) -> str:
        self._reject_iteration(parts)

        if all(isinstance(part, (TextLiteral, CommentLiteral)) for part in parts):
            text = "".join(part.value for part in parts if isinstance(part, TextLiteral))
            declarations = parse_declarations(text)
            if not declarations:
                raise StyleSynthesisError("Style attribute has no declarations", construct=text)
            return json.dumps(declarations, separators=(",", ":"), ensure_ascii=False)

        entries = self._entries(parts)
        if not entries:
            raise StyleSynthesisError(
                "Style attribute has no declarations", construct=_serialize_parts(parts)
            )
        return "{" + ", ".join(entries) + "}"

    def _entries(self, parts: Sequence[Node]) -> List[str]:
        entries: List[str] = []
        name = ""
        value: List[Tuple[bool, str]] = []  # (is_expression, text)
        in_value = False

        def flush() -> None:
            nonlocal name, value, in_value
            entry = self._entry(name, value)
            if entry is not None:
                entries.append(entry)
            name, value, in_value = "", [], False

        for part in parts:
            if isinstance(part, TextLiteral):
                for chunk in DELIMITER_RE.split(part.value):
                    if chunk == ";":
                        if not in_value and name.strip():
                            raise StyleSynthesisError(
                                f"Malformed style declaration {name.strip()!r}",
                                construct=_serialize_parts(parts),
                            )
                        flush()
                    elif chunk == ":" and not in_value:
                        in_value = True
                    elif in_value:
                        value.append((False, chunk))
                    else:
                        name += chunk
            elif isinstance(part, (EncodedExpression, InterpolatedExpression)):
                if not in_value:
                    raise self._dynamic_name(part)
                value.append((True, part.value))
            elif isinstance(part, ConditionalBlock):
                if in_value:
                    expression, ends_declaration = self._conditional_value(part)
                    value.append((True, expression))
                    if ends_declaration:
                        flush()
                elif name.strip():
                    raise self._dynamic_name(part)
                else:
                    entries.append(f"...({self._conditional_spread(part)})")
            elif isinstance(part, CommentLiteral):
                continue
            else:
                raise UnsupportedConstructError(
                    f"{type(part).__name__} cannot be used inside a style attribute",
                    construct=serialize(part),
                )

        if in_value:
            flush()
        elif name.strip():
            raise StyleSynthesisError(
                f"Malformed style declaration {name.strip()!r}",
                construct=_serialize_parts(parts),
            )
        return entries

    def _entry(self, name: str, value: List[Tuple[bool, str]]) -> Optional[str]:
        name = name.strip()
        fragments = list(value)
        # Trim surrounding whitespace of the value
        if fragments and not fragments[0][0]:
            fragments[0] = (False, fragments[0][1].lstrip())
        if fragments and not fragments[-1][0]:
            fragments[-1] = (False, fragments[-1][1].rstrip())
        fragments = [fragment for fragment in fragments if fragment[0] or fragment[1]]

        if not fragments:
            return None
        if not name:
            raise StyleSynthesisError("Style declaration without a property name")

        key = json.dumps(css_property_name(name))
        if not any(is_expression for is_expression, _ in fragments):
            text = "".join(text for _, text in fragments)
            return f"{key}: {json.dumps(text, ensure_ascii=False)}"

        body = "".join(
            f"${{{text}}}" if is_expression else escape_template_text(text)
            for is_expression, text in fragments
        )
        return f"{key}: `{body}`"

    def _conditional_value(self, node: ConditionalBlock) -> Tuple[str, bool]:
        """Render a conditional inside a value.

        A trailing ``;`` in any branch of the chain, else-if branches
        included, ends the declaration.
        """
        stripped, ends_declaration = self._strip_conditional(node)
        self._reject_delimiters(stripped.children, node)
        self._reject_delimiters(stripped.alternate or (), node)

        children = template_literal_body(stripped.children)
        if stripped.alternate is None:
            return f"{node.test} ? `{children}` : ``", ends_declaration
        alternate = template_literal_body(stripped.alternate)
        return f"{node.test} ? `{children}` : `{alternate}`", ends_declaration

    def _strip_conditional(self, node: ConditionalBlock) -> Tuple[ConditionalBlock, bool]:
        children, ends_declaration = self._strip_terminator(node.children)
        alternate = node.alternate
        if alternate is not None:
            alternate, ends_alternate = self._strip_terminator(alternate)
            ends_declaration = ends_declaration or ends_alternate
        return ConditionalBlock(node.test, children, alternate), ends_declaration

    def _strip_terminator(self, parts: Sequence[Node]) -> Tuple[Tuple[Node, ...], bool]:
        parts = tuple(parts)
        if parts and isinstance(parts[-1], TextLiteral):
            last = parts[-1].value.rstrip()
            if last.endswith(";"):
                return parts[:-1] + (TextLiteral(last[:-1]),), True
        elif parts and isinstance(parts[-1], ConditionalBlock):
            nested, ends_declaration = self._strip_conditional(parts[-1])
            return parts[:-1] + (nested,), ends_declaration
        return parts, False

    def _reject_delimiters(self, parts: Sequence[Node], node: ConditionalBlock) -> None:
        for part in parts:
            if isinstance(part, TextLiteral) and ";" in part.value:
                raise StyleSynthesisError(
                    "Conditional style value cannot span several declarations",
                    construct=serialize(node),
                )
            if isinstance(part, ConditionalBlock):
                self._reject_delimiters(part.children, node)
                self._reject_delimiters(part.alternate or (), node)

    def _conditional_spread(self, node: ConditionalBlock) -> str:
        return (
            f"{node.test} ? {self._object(node.children)} : "
            f"{self._object(node.alternate or ())}"
        )

    def _object(self, parts: Sequence[Node]) -> str:
        return "{" + ", ".join(self._entries(parts)) + "}"

    def _dynamic_name(self, node: Node) -> StyleSynthesisError:
        return StyleSynthesisError(
            "Dynamic style property names are not supported", construct=serialize(node)
        )

    def _reject_iteration(self, parts: Sequence[Node]) -> None:
        for part in parts:
            if isinstance(part, IteratorBlock):
                raise UnsupportedConstructError(
                    "Iteration is not supported inside a style attribute",
                    construct=serialize(part),
                )
            if isinstance(part, ConditionalBlock):
                self._reject_iteration(part.children)
                self._reject_iteration(part.alternate or ())


def _serialize_parts(parts: Sequence[Node]) -> str:
    return "".join(serialize(part) for part in parts)
