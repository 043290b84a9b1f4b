import re

# Any whitespace run that contains at least one line break
LINE_BREAK_RUN = re.compile(r"\s*\n\s*")

# Sigils of directives that stand inline with text
EXPRESSION_SIGILS = ("!", "=")


def normalize_line_breaks(template: str) -> str:
    """
    Collapse line-break formatting in template text before tokenizing.

    Whitespace runs containing a line break are treated as source formatting
    and removed when they touch a tag, or a directive on the other side of
    which there is no plain text:

        <ul>\\n  <li>          ->  <ul><li>
        {{? it.x }}\\n  text   ->  {{? it.x }}text

    A run between plain text and an expression directive separates words,
    like any other run, and is collapsed to a single space:

        Hello\\n  {{! it.name }}  ->  Hello {{! it.name }}

    Whitespace without line breaks is left untouched. The template as a
    whole is stripped first.
    """
    template = template.strip()

    def replacer(match: "re.Match[str]") -> str:
        start, end = match.start(), match.end()
        if template.endswith(">", 0, start) or template.startswith("<", end):
            return ""

        after_directive = template.endswith("}}", 0, start)
        before_directive = template.startswith("{{", end)
        if after_directive and before_directive:
            return ""
        if after_directive:
            opening = template.rfind("{{", 0, start)
            return " " if template.startswith(EXPRESSION_SIGILS, opening + 2) else ""
        if before_directive:
            return " " if template.startswith(EXPRESSION_SIGILS, end + 2) else ""
        return " "

    return LINE_BREAK_RUN.sub(replacer, template)
