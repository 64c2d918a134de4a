"""Markdown to HTML conversion for template descriptions.

Tables are emitted with the Bootstrap ``table`` class so they pick up the
documentation page styling.
"""

from markdown_it import MarkdownIt
from markupsafe import Markup

TABLE_CLASS = "table"


def _render_table_open(self, tokens, idx, options, env):
    tokens[idx].attrSet("class", TABLE_CLASS)
    return self.renderToken(tokens, idx, options, env)


def _render_table_close(self, tokens, idx, options, env):
    # Header-only tables still get an (empty) body section
    html = self.renderToken(tokens, idx, options, env)
    for token in reversed(tokens[:idx]):
        if token.type == "tbody_open":
            return html
        if token.type == "table_open" and token.level == tokens[idx].level:
            return "<tbody></tbody>\n" + html
    return html


def create_markdown() -> MarkdownIt:
    """Build a CommonMark parser with tables and the styled table renderer."""
    md = MarkdownIt("commonmark").enable("table")
    md.add_render_rule("table_open", _render_table_open)
    md.add_render_rule("table_close", _render_table_close)
    return md


def render_markdown(text) -> Markup:
    """Jinja filter: render a markdown fragment to (already safe) HTML."""
    if not text:
        return Markup("")
    return Markup(create_markdown().render(str(text)))
