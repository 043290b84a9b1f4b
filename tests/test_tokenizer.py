from typing import List, Tuple

import pytest
from dotjsx.compiler.exceptions import LexError
from dotjsx.compiler.tokenizer import Event, EventType, tokenize


def kinds(text: str) -> List[Tuple[EventType, str]]:
    return [(event.type, event.value) for event in tokenize(text)]


def test_tags_and_text() -> None:
    assert kinds("<div>Hi</div>") == [
        (EventType.OPEN_TAG, "div"),
        (EventType.STOP_ATTRIBUTES, ""),
        (EventType.TEXT, "Hi"),
        (EventType.CLOSE_TAG, "div"),
    ]


def test_attributes_with_and_without_values() -> None:
    assert kinds('<video loop data-id="foo">')[:6] == [
        (EventType.OPEN_TAG, "video"),
        (EventType.OPEN_ATTRIBUTE, "loop"),
        (EventType.CLOSE_ATTRIBUTE, ""),
        (EventType.OPEN_ATTRIBUTE, "data-id"),
        (EventType.TEXT, "foo"),
        (EventType.CLOSE_ATTRIBUTE, ""),
    ]


def test_empty_attribute_value_emits_empty_text() -> None:
    assert kinds('<img alt="">') == [
        (EventType.OPEN_TAG, "img"),
        (EventType.OPEN_ATTRIBUTE, "alt"),
        (EventType.TEXT, ""),
        (EventType.CLOSE_ATTRIBUTE, ""),
        (EventType.STOP_ATTRIBUTES, ""),
        (EventType.CLOSE_TAG, "img"),
    ]


def test_void_element_closes_itself_and_ignores_closing_tag() -> None:
    events = kinds("<br></br>text")
    assert events == [
        (EventType.OPEN_TAG, "br"),
        (EventType.STOP_ATTRIBUTES, ""),
        (EventType.CLOSE_TAG, "br"),
        (EventType.TEXT, "text"),
    ]


def test_self_closing_tag() -> None:
    assert kinds("<my-widget />") == [
        (EventType.OPEN_TAG, "my-widget"),
        (EventType.STOP_ATTRIBUTES, ""),
        (EventType.CLOSE_TAG, "my-widget"),
    ]


def test_greater_than_in_content_and_values_is_text() -> None:
    events = kinds('<p title="a > b">1 > 0</p>')
    assert (EventType.TEXT, "a > b") in events
    assert (EventType.TEXT, "1 > 0") in events


def test_less_than_inside_attribute_value_is_text() -> None:
    assert (EventType.TEXT, "a < b") in kinds('<p title="a < b"></p>')


def test_comment() -> None:
    assert kinds("<!-- note --><p></p>")[0] == (EventType.COMMENT, " note ")


def test_expression_directives() -> None:
    assert kinds("{{! it.a }}{{= it.b }}{{ let c = 1; }}") == [
        (EventType.ENCODE, "it.a"),
        (EventType.INTERPOLATE, "it.b"),
        (EventType.EVALUATE, "let c = 1;"),
    ]


def test_conditional_family() -> None:
    assert kinds("{{? it.a }}{{?? it.b }}{{??}}{{?}}") == [
        (EventType.CONDITIONAL_OPEN, "it.a"),
        (EventType.CONDITIONAL_ELSE_IF, "it.b"),
        (EventType.CONDITIONAL_ELSE, ""),
        (EventType.CONDITIONAL_CLOSE, ""),
    ]


def test_conditional_with_nullish_operator() -> None:
    assert kinds("{{? it.a ?? it.b }}{{?}}")[0] == (EventType.CONDITIONAL_OPEN, "it.a ?? it.b")


def test_iterator_open_and_close() -> None:
    events = list(tokenize("{{~ it.items :item:index }}{{~}}"))
    assert events[0] == Event(EventType.ITERATOR_OPEN, 0, "it.items", item="item", index="index")
    assert events[1].type == EventType.ITERATOR_CLOSE


def test_iterator_without_index() -> None:
    event = next(tokenize("{{~ it.items : item }}"))
    assert event.item == "item"
    assert event.index is None


def test_directives_inside_attribute_values() -> None:
    assert kinds('<div class="a {{! it.b }}">')[2:5] == [
        (EventType.TEXT, "a "),
        (EventType.ENCODE, "it.b"),
        (EventType.CLOSE_ATTRIBUTE, ""),
    ]


def test_positions_are_offsets() -> None:
    events = list(tokenize("ab{{! x }}"))
    assert [event.position for event in events] == [0, 2]


@pytest.mark.parametrize(
    "source, message",
    [
        ("{{! it.a }", "Unterminated directive"),
        ("<div", "Unterminated tag"),
        ('<div class="a>', "Unterminated attribute value"),
        ("<!-- open", "Unterminated comment"),
        ("</div", "Unterminated closing tag"),
        ("<{{! it.tag }}>", "Dynamic tag names"),
        ("<div{{! it.suffix }}>", "Dynamic tag names"),
        ("< div>", "Expected a tag name"),
        ("<div class=foo>", "must be double-quoted"),
        ("<div 'a'>", "Unexpected character"),
        ("{{~ it.items }}", "Malformed iteration"),
        ("{{!   }}", "Empty expression"),
        ("{{   }}", "Empty directive"),
    ],
)
def test_lex_errors(source: str, message: str) -> None:
    with pytest.raises(LexError, match=message):
        list(tokenize(source))


def test_lex_error_reports_location() -> None:
    with pytest.raises(LexError) as excinfo:
        list(tokenize("<p>ok</p>{{! it.a"))
    assert excinfo.value.position == 9
    assert excinfo.value.line == 1
    assert excinfo.value.column == 9
    assert "^" in str(excinfo.value)
