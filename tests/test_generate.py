"""End-to-end template to component source conversion."""

import pytest
from dotjsx import CompilerConfig, compile_template, generate
from dotjsx.compiler.exceptions import (
    GenerationError,
    NestingTooDeepError,
    StyleSynthesisError,
    UnsupportedConstructError,
)

IMPORT = 'import parseHtml from "html-react-parser";\n\n'


def module(expression: str, parse_html: bool = False) -> str:
    prefix = IMPORT if parse_html else ""
    return f"{prefix}export default function tpl(it: any) {{\n    return {expression};\n}}"


def test_empty_template_returns_null() -> None:
    assert generate("") == module("null")


def test_empty_tag() -> None:
    assert generate("<div></div>") == module("<div></div>")


def test_tag_with_children() -> None:
    template = """
        <div>
            <span>Content1</span>
            <span>Content2</span>
        </div>
    """
    assert generate(template) == module("<div><span>Content1</span><span>Content2</span></div>")


def test_multiple_root_tags_get_a_fragment() -> None:
    assert generate("<div></div><span></span>") == module("<><div></div><span></span></>")


def test_root_text_is_a_string() -> None:
    assert generate("Hello world") == module('"Hello world"')


def test_encoding() -> None:
    assert generate("<span>{{! it.foo.bar.content }}</span>") == module(
        "<span>{it.foo.bar.content}</span>"
    )


def test_interpolation_adds_import_once() -> None:
    assert generate("<span>{{= it.content1 }}{{= it.content2 }}</span>") == module(
        "<span>{parseHtml(it.content1)}{parseHtml(it.content2)}</span>", parse_html=True
    )


def test_if_at_root() -> None:
    template = """
        {{? it.showContent }}
        <span>{{= it.content }}</span>
        {{?}}
    """
    assert generate(template) == module(
        "it.showContent ? <span>{parseHtml(it.content)}</span> : null", parse_html=True
    )


def test_if_as_child() -> None:
    template = """
        <div>
            {{? it.showContent && it.showContent2 }}
            <span>{{! it.content }}</span>
            {{?}}
        </div>
    """
    assert generate(template) == module(
        "<div>{it.showContent && it.showContent2 ? <span>{it.content}</span> : null}</div>"
    )


def test_if_else_with_nested_if() -> None:
    template = """
        {{? it.showContent }}
        <span>{{? it.areYourSure}}<span>hello</span>{{?}}</span>
        {{??}}
        <span>{{! it.noContent }}</span>
        {{?}}
    """
    assert generate(template) == module(
        "it.showContent ? <span>{it.areYourSure ? <span>hello</span> : null}</span> "
        ": <span>{it.noContent}</span>"
    )


def test_else_if_chain_is_a_nested_ternary() -> None:
    template = """
        <div>
        {{? it.showContent1 }}
        <span>{{! it.content1 }}</span>
        {{?? it.showContent2 }}
        <span>{{! it.content2 }}</span>
        {{??}}
        <span>{{! it.noContent }}</span>
        {{?}}
        </div>
    """
    assert generate(template) == module(
        "<div>{it.showContent1 ? <span>{it.content1}</span> : it.showContent2 "
        "? <span>{it.content2}</span> : <span>{it.noContent}</span>}</div>"
    )


def test_branches_with_several_or_bare_children() -> None:
    template = """
        <div>
        {{? it.showContent1 }}
        <span>{{! it.content1Bis }}</span>
            {{? it.showContent1Bis }}
            <span>{{! it.showContent1Bis }}</span>
            {{?}}
        <span>{{! it.content1Bis }}</span>
        {{?? it.showContent2 }}
        <span>{{! it.content2 }}</span>
        {{?? it.showContent3 }}
        {{! it.content3 }}
        {{?? it.showContent4 }}
        {{= it.content4 }}
        {{?? it.showContent5 }}
        <span>Content 5</span>
        <span>Content 5 bis</span>
        {{??}}
        <span>{{! it.noContent }}</span>
        {{?}}
        </div>
    """
    assert generate(template) == module(
        "<div>{it.showContent1 ? <><span>{it.content1Bis}</span>"
        "{it.showContent1Bis ? <span>{it.showContent1Bis}</span> : null}"
        "<span>{it.content1Bis}</span></> "
        ": it.showContent2 ? <span>{it.content2}</span> "
        ": it.showContent3 ? it.content3 "
        ": it.showContent4 ? parseHtml(it.content4) "
        ": it.showContent5 ? <><span>Content 5</span><span>Content 5 bis</span></> "
        ": <span>{it.noContent}</span>}</div>",
        parse_html=True,
    )


def test_text_branches_are_strings() -> None:
    assert generate("<p>{{? it.ok }}yes{{??}}no{{?}}</p>") == module(
        '<p>{it.ok ? "yes" : "no"}</p>'
    )


def test_loop_at_root_is_wrapped_in_fragment() -> None:
    template = """
        {{~ items :item }}
        <div>{{= item }}</div>
        {{~}}
    """
    assert generate(template) == module(
        "<>{items?.map((item) => (<div>{parseHtml(item)}</div>))}</>", parse_html=True
    )


def test_loop_with_index() -> None:
    template = """
        <ul>
            {{~ it.items :item:index }}
            <li>{{! item }}{{! index }}</li>
            {{~}}
        </ul>
    """
    assert generate(template) == module(
        "<ul>{it.items?.map((item, index) => (<li>{item}{index}</li>))}</ul>"
    )


def test_loop_with_bare_interpolation() -> None:
    template = """
        <ul>
            {{~ it.items :item:index }}
            {{= it.tpl.render('foo', item) }}
            {{~}}
        </ul>
    """
    assert generate(template) == module(
        "<ul>{it.items?.map((item, index) => (parseHtml(it.tpl.render('foo', item))))}</ul>",
        parse_html=True,
    )


def test_conditional_inside_loop() -> None:
    template = """
        <div>
        {{~ it.items :item }}
            {{? item.showContent }}
            <span>{{? item.areYourSure}}<span>hello</span>{{?}}</span>
            {{??}}
            <span>{{! item.noContent }}</span>
            {{?}}
        {{~}}
        </div>
    """
    assert generate(template) == module(
        "<div>{it.items?.map((item) => (item.showContent ? "
        "<span>{item.areYourSure ? <span>hello</span> : null}</span> "
        ": <span>{item.noContent}</span>))}</div>"
    )


def test_attributes_without_values() -> None:
    assert generate('<video loop data-test-id="foo" controls></video>') == module(
        '<video loop data-test-id="foo" controls></video>'
    )


def test_conditional_attribute() -> None:
    assert generate('<div {{? it.enabled }}data-test-id="foo"{{?}}></div>') == module(
        '<div {...(it.enabled ? {"data-test-id": "foo"} : {})}></div>'
    )


def test_conditional_attribute_with_conditional_value() -> None:
    template = (
        '<div {{? it.enabled }}data-test-id="{{? it.first }}first{{??}}second{{?}}"{{?}}></div>'
    )
    assert generate(template) == module(
        '<div {...(it.enabled ? {"data-test-id": it.first ? "first" : "second"} : {})}></div>'
    )


def test_multiple_conditional_encoded_attributes() -> None:
    template = (
        '<div {{? it.enabled }}data-test-id-first="{{! it.dataTestIdFirst }}" '
        'data-test-id-second="{{! it.dataTestIdSecond }}"{{?}}></div>'
    )
    assert generate(template) == module(
        '<div {...(it.enabled ? {"data-test-id-first": it.dataTestIdFirst, '
        '"data-test-id-second": it.dataTestIdSecond} : {})}></div>'
    )


def test_iterated_attributes_are_rejected() -> None:
    with pytest.raises(UnsupportedConstructError, match="Iteration cannot wrap attributes"):
        generate('<div {{~ it.items : item :index}}data-item-id="{{! item }}"{{~}}></div>')


def test_encoded_attribute_values() -> None:
    assert generate('<div data-abc="{{! it.foo }}"></div>') == module(
        "<div data-abc={it.foo}></div>"
    )
    assert generate('<div data-abc="{{! it.foo1 }}{{! it.foo2 }}"></div>') == module(
        "<div data-abc={`${it.foo1}${it.foo2}`}></div>"
    )


def test_class_attribute() -> None:
    assert generate('<div class="foo"></div>') == module('<div className="foo"></div>')
    assert generate(
        '<div class="custom1 custom-{{! it.type }} custom2 {{= it.class}}"></div>'
    ) == module("<div className={`custom1 custom-${it.type} custom2 ${it.class}`}></div>")


def test_class_with_conditionals() -> None:
    assert generate('<div class="custom1 {{? it.maybe}} hehehe {{?}}"></div>') == module(
        "<div className={`custom1 ${it.maybe ? ` hehehe ` : ``}`}></div>"
    )
    assert generate(
        '<div class="custom1 {{? it.maybe}} hehehe {{?? it.forsure }} hallo {{??}}byebye{{?}}"></div>'
    ) == module(
        "<div className={`custom1 ${it.maybe ? ` hehehe ` "
        ": `${it.forsure ? ` hallo ` : `byebye`}`}`}></div>"
    )


def test_class_with_iteration() -> None:
    assert generate('<div class="custom1 {{~ it.items:item}} test-{{!item}}{{~}}"></div>') == module(
        '<div className={`custom1 ${it.items?.map((item) => ` test-${item}`).join("")}`}></div>'
    )


def test_literal_style() -> None:
    assert generate(
        '<div style="color: red; background-color: green; font-size: var(--foo);display:none;"></div>'
    ) == module(
        '<div style={{"color":"red","backgroundColor":"green","fontSize":"var(--foo)","display":"none"}}></div>'
    )


def test_style_with_variable() -> None:
    assert generate('<div style="background-color: red;color: {{! it.color }};"></div>') == module(
        '<div style={{"backgroundColor": "red", "color": `${it.color}`}}></div>'
    )


def test_style_with_conditional_value() -> None:
    assert generate('<div style="color: {{? it.enabled}}green{{??}}red{{?}};"></div>') == module(
        '<div style={{"color": `${it.enabled ? `green` : `red`}`}}></div>'
    )


def test_style_surrounded_by_conditional() -> None:
    assert generate('<div {{? it.enabled}}style="color: red;"{{?}}></div>') == module(
        '<div {...(it.enabled ? {"style": {"color":"red"}} : {})}></div>'
    )


def test_style_with_conditional_declarations() -> None:
    template = (
        '<div style="{{? it.padding }}padding: {{! it.padding}}px; margin: 0;'
        '{{??}}padding: 0px; margin: 0;{{?}}"></div>'
    )
    assert generate(template) == module(
        '<div style={{...(it.padding ? {"padding": `${it.padding}px`, "margin": "0"} '
        ': {"padding": "0px", "margin": "0"})}}></div>'
    )


def test_evaluated_statements_are_hoisted() -> None:
    assert generate('{{ const foo = "foo"; }} {{ const bar = "bar"; }}<div>{{! foo }}{{! bar }}</div>') == (
        "export default function tpl(it: any) {\n"
        '    const foo = "foo";\n'
        '    const bar = "bar";\n'
        "\n"
        "    return <div>{foo}{bar}</div>;\n"
        "}"
    )


def test_evaluated_block_after_markup_is_rejected() -> None:
    with pytest.raises(UnsupportedConstructError, match="only supported at the start"):
        generate("<div></div>{{ const late = 1; }}")


def test_generation_error_names_the_template() -> None:
    with pytest.raises(GenerationError) as excinfo:
        generate('<div {{~ it.items :item }}a="1"{{~}}></div>', file_path="list.dot")
    assert excinfo.value.file_path == "list.dot"
    assert "list.dot" in str(excinfo.value)
    assert '{{~ it.items :item }}a="1"{{~}}' in str(excinfo.value)


def test_custom_config() -> None:
    config = CompilerConfig(
        function_name="Card",
        context_param="props",
        context_type="CardProps",
        markup_parser_name="toNodes",
        markup_parser_module="./markup",
    )
    assert generate("<p>{{= props.body }}</p>", config) == (
        'import toNodes from "./markup";\n\n'
        "export default function Card(props: CardProps) {\n"
        "    return <p>{toNodes(props.body)}</p>;\n"
        "}"
    )


def test_compile_template_exposes_parts() -> None:
    result = compile_template("{{ let x = 1; }}<p>{{= it.a }}</p>")
    assert result.expression == "<p>{parseHtml(it.a)}</p>"
    assert result.hoisted == ["let x = 1;"]
    assert result.imports == ['import parseHtml from "html-react-parser";']


def test_style_value_with_else_if_chain() -> None:
    output = generate(
        '<div style="color: {{? it.a}}red;{{?? it.b}}blue;{{?}} padding: 1px"></div>'
    )
    assert "blue;" not in output
    assert output == module(
        '<div style={{"color": `${it.a ? `red` : `${it.b ? `blue` : ``}`}`, '
        '"padding": "1px"}}></div>'
    )


def test_style_else_if_spanning_declarations_is_rejected() -> None:
    with pytest.raises(StyleSynthesisError, match="cannot span several declarations"):
        generate('<div style="color: {{? it.a}}red{{?? it.b}}blue; padding: 2px{{?}}"></div>')


def test_deep_nesting_fails_with_compiler_error() -> None:
    depth = 2000
    template = "<div>" * depth + "</div>" * depth
    with pytest.raises(NestingTooDeepError, match="too deep") as excinfo:
        generate(template, file_path="deep.dot")
    assert excinfo.value.file_path == "deep.dot"


def test_text_wrapped_around_expression_keeps_word_spacing() -> None:
    template = """
        <p>
            Hello
            {{! it.name }}, welcome
        </p>
    """
    assert generate(template) == module("<p>Hello {it.name}, welcome</p>")
