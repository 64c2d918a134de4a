"""The render pipeline: load, expand schemas, render, post-process."""

import logging

from raml2html.__about__ import __version__
from raml2html.models import ApiDocument, Configuration, SourceDescriptor
from raml2html.parser.expander import expand_json_schemas
from raml2html.parser.raml import parse

logger = logging.getLogger(__name__)


def render(source, config: Configuration | None = None) -> str | ApiDocument:
    """Render a RAML source using the configuration's hooks.

    Args:
        source: A RAML file path, URL, RAML text, or an already-parsed document.
        config: Render hooks; without ``process_raml_obj`` the parsed document
            itself is returned instead of HTML.

    Returns:
        The rendered (and possibly post-processed) HTML, or the ApiDocument.
    """
    config = (config or Configuration()).model_copy(update={"raml2html_version": __version__})
    descriptor = SourceDescriptor.from_value(source)

    logger.debug("Loading %s source", descriptor.kind)
    document = parse(descriptor).with_config(config)

    if config.process_raml_obj is None:
        return document

    document = expand_json_schemas(document)
    html = config.process_raml_obj(document, descriptor)

    if config.post_process_html is not None:
        logger.debug("Post-processing %d characters of HTML", len(html))
        html = config.post_process_html(html)

    return html


if __name__ == "__main__":
    from raml2html.__main__ import main

    main()
