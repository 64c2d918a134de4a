"""Jinja filters and output hooks for the documentation templates."""

import logging
import re
from pathlib import Path

from jinja2 import pass_eval_context
from markupsafe import Markup, escape

logger = logging.getLogger(__name__)

INCLUDE_DIRECTIVE = re.compile(r"#includeCode:(\S+)")


@pass_eval_context
def finalize_output(eval_ctx, value):
    """Escape ``{{ ... }}`` output with ``&quot;`` for double quotes.

    markupsafe writes ``&#34;``; the rendered page is post-processed on the
    ``&quot;`` entity, so autoescaped output has to use that spelling.
    """
    if not eval_ctx.autoescape or hasattr(value, "__html__"):
        return value
    return Markup(str(escape(value)).replace("&#34;", "&quot;"))


def include_code(base_dir: Path | None, value) -> str:
    """Replace each ``#includeCode:FILE`` directive with FILE wrapped in a code fence.

    FILE is read relative to ``base_dir``, the directory of the RAML source.
    If any file cannot be read the text is returned untouched.
    """
    text = str(value or "")

    def _fence(match: re.Match) -> str:
        if base_dir is None:
            raise ValueError("includeCode needs a RAML source read from a file")
        content = (Path(base_dir) / match.group(1)).read_text(encoding="utf-8")
        return f"```\n{content}\n```"

    try:
        return INCLUDE_DIRECTIVE.sub(_fence, text)
    except (OSError, ValueError) as e:
        logger.error("Error processing markdown for %s: %s", text, e)
        return text
