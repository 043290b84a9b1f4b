"""Single-pass scanner turning template text into lexical events."""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, cast

from dotjsx.compiler.exceptions import LexError

# HTML void elements close themselves at ">" and ignore explicit closing tags
VOID_ELEMENTS = {
    "area",
    "base",
    "br",
    "col",
    "embed",
    "hr",
    "img",
    "input",
    "link",
    "meta",
    "param",
    "source",
    "track",
    "wbr",
}

TAG_NAME_RE = re.compile(r"[^\s/>{<\"'=]+")
ATTRIBUTE_NAME_RE = re.compile(r"[\w:-]+")
WHITESPACE_RE = re.compile(r"\s+")
EQUALS_RE = re.compile(r"\s*=\s*")

# doT directive grammar, applied to the directive body without its braces
CONDITIONAL_RE = re.compile(r"\?(\?)?\s*([\s\S]*?)\s*")
ITERATE_RE = re.compile(r"~\s*(?:|([\s\S]+?)\s*:\s*([\w$]+)\s*(?::\s*([\w$]+))?\s*)")


class EventType(Enum):
    OPEN_TAG = "open_tag"
    STOP_ATTRIBUTES = "stop_attributes"
    CLOSE_TAG = "close_tag"
    OPEN_ATTRIBUTE = "open_attribute"
    CLOSE_ATTRIBUTE = "close_attribute"
    TEXT = "text"
    COMMENT = "comment"
    ENCODE = "encode"
    INTERPOLATE = "interpolate"
    EVALUATE = "evaluate"
    CONDITIONAL_OPEN = "conditional_open"
    CONDITIONAL_ELSE_IF = "conditional_else_if"
    CONDITIONAL_ELSE = "conditional_else"
    CONDITIONAL_CLOSE = "conditional_close"
    ITERATOR_OPEN = "iterator_open"
    ITERATOR_CLOSE = "iterator_close"


@dataclass(frozen=True)
class Event:
    """A lexical event.

    ``value`` holds the tag or attribute name, the text, the expression or
    the condition depending on the event type. Iterator openings also carry
    ``item`` and ``index``.
    """

    type: EventType
    position: int
    value: str = ""
    item: Optional[str] = None
    index: Optional[str] = None


class Tokenizer:
    """Scans normalized template text.

    The scanner tracks three things: whether it is inside a tag's attribute
    region, whether it is inside a quoted attribute value, and the name of
    the tag whose attributes are being read.
    """

    def __init__(self, text: str, file_path: str = "") -> None:
        self.text = text
        self.file_path = file_path
        self.pos = 0
        self.tag: Optional[str] = None
        self.tag_position = 0
        self.in_value = False
        self.value_position = 0

    @property
    def in_attributes(self) -> bool:
        return self.tag is not None

    def error(self, message: str, position: Optional[int] = None) -> LexError:
        return LexError(
            message,
            file_path=self.file_path,
            position=self.pos if position is None else position,
            source=self.text,
        )

    def events(self) -> Iterator[Event]:
        text = self.text
        while self.pos < len(text):
            if text.startswith("{{", self.pos):
                yield self._directive()
            elif self.in_value:
                if text[self.pos] == '"':
                    yield Event(EventType.CLOSE_ATTRIBUTE, self.pos)
                    self.in_value = False
                    self.pos += 1
                else:
                    yield self._text(("{{", '"'))
            elif self.in_attributes:
                yield from self._attribute_region()
            elif text.startswith("</", self.pos):
                event = self._closing_tag()
                if event is not None:
                    yield event
            elif text.startswith("<!--", self.pos):
                yield self._comment()
            elif text[self.pos] == "<":
                yield self._opening_tag()
            else:
                yield self._text(("{{", "<"))

        if self.in_value:
            raise self.error("Unterminated attribute value", self.value_position)
        if self.in_attributes:
            raise self.error(f"Unterminated tag <{self.tag}>", self.tag_position)

    def _text(self, terminators: tuple) -> Event:
        start = self.pos
        end = len(self.text)
        for terminator in terminators:
            found = self.text.find(terminator, start)
            if found != -1 and found < end:
                end = found
        self.pos = end
        return Event(EventType.TEXT, start, self.text[start:end])

    def _comment(self) -> Event:
        start = self.pos
        end = self.text.find("-->", start + 4)
        if end == -1:
            raise self.error("Unterminated comment")
        self.pos = end + 3
        return Event(EventType.COMMENT, start, self.text[start + 4 : end])

    def _closing_tag(self) -> Optional[Event]:
        start = self.pos
        end = self.text.find(">", start)
        if end == -1:
            raise self.error("Unterminated closing tag")
        name = self.text[start + 2 : end].strip()
        if not name:
            raise self.error("Closing tag without a name")
        if "{{" in name:
            raise self.error("Dynamic tag names are not supported")
        self.pos = end + 1
        if name in VOID_ELEMENTS:
            return None
        return Event(EventType.CLOSE_TAG, start, name)

    def _opening_tag(self) -> Event:
        start = self.pos
        if self.text.startswith("{{", start + 1):
            raise self.error("Dynamic tag names are not supported")
        match = TAG_NAME_RE.match(self.text, start + 1)
        if not match:
            raise self.error("Expected a tag name after '<'")
        name = match.group(0)
        if self.text.startswith("{{", match.end()):
            raise self.error("Dynamic tag names are not supported")
        self.pos = match.end()
        self.tag = name
        self.tag_position = start
        return Event(EventType.OPEN_TAG, start, name)

    def _attribute_region(self) -> Iterator[Event]:
        text = self.text
        whitespace = WHITESPACE_RE.match(text, self.pos)
        if whitespace:
            self.pos = whitespace.end()
            return

        start = self.pos
        tag = cast(str, self.tag)

        if text[start] == ">":
            self.pos += 1
            self.tag = None
            yield Event(EventType.STOP_ATTRIBUTES, start)
            if tag in VOID_ELEMENTS:
                yield Event(EventType.CLOSE_TAG, start, tag)
            return

        if text.startswith("/>", start):
            self.pos += 2
            self.tag = None
            yield Event(EventType.STOP_ATTRIBUTES, start)
            yield Event(EventType.CLOSE_TAG, start, tag)
            return

        match = ATTRIBUTE_NAME_RE.match(text, start)
        if not match:
            raise self.error(f"Unexpected character {text[start]!r} in tag <{tag}>")

        self.pos = match.end()
        yield Event(EventType.OPEN_ATTRIBUTE, start, match.group(0))

        equals = EQUALS_RE.match(text, self.pos)
        if not equals:
            yield Event(EventType.CLOSE_ATTRIBUTE, self.pos)
            return

        self.pos = equals.end()
        if not text.startswith('"', self.pos):
            raise self.error(f"Attribute {match.group(0)!r} value must be double-quoted")
        self.pos += 1
        self.in_value = True
        self.value_position = start
        if text.startswith('"', self.pos):
            # Empty value, distinct from a boolean attribute
            yield Event(EventType.TEXT, self.pos, "")

    def _directive(self) -> Event:
        start = self.pos
        end = self.text.find("}}", start + 2)
        if end == -1:
            raise self.error("Unterminated directive, missing '}}'")
        body = self.text[start + 2 : end]
        self.pos = end + 2

        sigil = body[:1]
        if sigil in ("=", "!"):
            expression = body[1:].strip()
            if not expression:
                raise self.error("Empty expression directive", start)
            kind = EventType.INTERPOLATE if sigil == "=" else EventType.ENCODE
            return Event(kind, start, expression)

        if sigil == "?":
            match = CONDITIONAL_RE.fullmatch(body)
            if not match:
                raise self.error("Malformed conditional directive", start)
            is_else, condition = match.group(1), match.group(2)
            if is_else:
                if condition:
                    return Event(EventType.CONDITIONAL_ELSE_IF, start, condition)
                return Event(EventType.CONDITIONAL_ELSE, start)
            if condition:
                return Event(EventType.CONDITIONAL_OPEN, start, condition)
            return Event(EventType.CONDITIONAL_CLOSE, start)

        if sigil == "~":
            match = ITERATE_RE.fullmatch(body)
            if not match:
                raise self.error(
                    "Malformed iteration, expected {{~ expression :item[:index] }}", start
                )
            if match.group(1) is None:
                return Event(EventType.ITERATOR_CLOSE, start)
            return Event(
                EventType.ITERATOR_OPEN,
                start,
                match.group(1),
                item=match.group(2),
                index=match.group(3),
            )

        code = body.strip()
        if not code:
            raise self.error("Empty directive", start)
        return Event(EventType.EVALUATE, start, code)


def tokenize(text: str, file_path: str = "") -> Iterator[Event]:
    """Yield the lexical events of already normalized template text."""
    return Tokenizer(text, file_path).events()
