"""Built-in rendering: Jinja2 templates, markdown descriptions, minified output."""

import functools
import logging
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from raml2html.models import ApiDocument, Configuration, SourceDescriptor
from .filters import finalize_output, include_code
from .markdown import render_markdown
from .minify import minify_html

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
DEFAULT_TEMPLATE = "template.html"
AUTOESCAPE_EXTENSIONS = ["html", "htm", "xml", "jinja", "j2", "nunjucks"]


class DefaultPipeline:
    """Renders an ApiDocument through a Jinja2 template and minifies the result."""

    def __init__(self, main_template: str | None = None, templates_path: str | Path | None = None):
        if not main_template:
            main_template = DEFAULT_TEMPLATE
            # The bundled template must never resolve against the caller's cwd
            templates_path = TEMPLATES_DIR

        self.main_template = main_template
        self.templates_path = Path(templates_path) if templates_path else None

    def create_environment(self, source: SourceDescriptor) -> Environment:
        """Set up the Jinja2 environment with the markdown and includeCode filters."""
        env = Environment(
            loader=FileSystemLoader(str(self.templates_path or ".")),
            autoescape=select_autoescape(AUTOESCAPE_EXTENSIONS),
            auto_reload=False,
            finalize=finalize_output,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        env.filters["markdown"] = render_markdown
        env.filters["include_code"] = functools.partial(include_code, source.base_dir)
        return env

    def load_and_transform(self, document: ApiDocument, source: SourceDescriptor) -> str:
        """Render the main template against ``document``."""
        env = self.create_environment(source)
        logger.debug("Rendering %s from %s", self.main_template, self.templates_path or Path.cwd())
        html = env.get_template(self.main_template).render(document.to_context())

        # Templates may encode quotes that have to stay literal, e.g. in inlined JSON
        return html.replace("&quot;", '"')

    def post_process(self, html: str) -> str:
        return minify_html(html)


def get_default_config(main_template: str | None = None, templates_path: str | Path | None = None) -> Configuration:
    """Build a Configuration that renders with the built-in pipeline.

    Args:
        main_template: Template file name; leave empty to use the bundled template.
        templates_path: Template search directory, defaults to the working directory
            when a custom ``main_template`` is given.
    """
    return Configuration.from_pipeline(DefaultPipeline(main_template, templates_path))
