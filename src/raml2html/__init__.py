"""Render RAML API descriptions into HTML documentation."""

from raml2html.__about__ import __version__
from raml2html.models import ApiDocument, Configuration, RenderPipeline, SourceDescriptor
from raml2html.pipeline import render
from raml2html.renderer.default import DefaultPipeline, get_default_config

__all__ = [
    "ApiDocument",
    "Configuration",
    "DefaultPipeline",
    "RenderPipeline",
    "SourceDescriptor",
    "__version__",
    "get_default_config",
    "render",
]
