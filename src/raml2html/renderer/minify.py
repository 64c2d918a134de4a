"""HTML minification for rendered documentation."""

import htmlmin

from raml2html.errors import PostProcessError


def minify_html(html: str) -> str:
    """Minify ``html``, keeping every attribute quote.

    Templates embed JSON and script blocks that rely on literal quoting, so
    optional attribute quotes are never dropped.
    """
    try:
        return htmlmin.minify(
            html,
            remove_comments=True,
            remove_optional_attribute_quotes=False,
        )
    except Exception as e:
        raise PostProcessError("HTML minification failed", str(e)) from e
