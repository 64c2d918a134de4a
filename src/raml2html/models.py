"""Data models shared by the loader, the renderer and the pipeline.

A render call moves a ``SourceDescriptor`` through the loader to get an
``ApiDocument``, then hands that document to the hooks held by a
``Configuration``.
"""

from pathlib import Path
from typing import Any, Callable, Literal, Protocol

from pydantic import BaseModel, ConfigDict

from raml2html.parser.detect import detect_source_kind


class SourceDescriptor(BaseModel):
    """Where a RAML document comes from: a file, a URL, raw text or a parsed object."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["path", "url", "text", "object"]
    value: Any

    @classmethod
    def from_value(cls, value: Any) -> "SourceDescriptor":
        if isinstance(value, cls):
            return value
        return cls(kind=detect_source_kind(value), value=value)

    @property
    def base_dir(self) -> Path | None:
        """Directory containing the source file, or None for non-file sources."""
        if self.kind != "path":
            return None
        return Path(self.value).parent


class RenderPipeline(Protocol):
    """The two capabilities a render configuration can be built from."""

    def load_and_transform(self, document: "ApiDocument", source: SourceDescriptor) -> str: ...

    def post_process(self, html: str) -> str: ...


class Configuration(BaseModel):
    """Render hooks plus the version of raml2html that ran them."""

    model_config = ConfigDict(frozen=True)

    process_raml_obj: Callable[..., str] | None = None
    post_process_html: Callable[[str], str] | None = None
    raml2html_version: str = ""

    @classmethod
    def from_pipeline(cls, pipeline: RenderPipeline) -> "Configuration":
        return cls(
            process_raml_obj=pipeline.load_and_transform,
            post_process_html=pipeline.post_process,
        )


class ApiDocument(BaseModel):
    """A normalized RAML document, optionally carrying the active configuration."""

    model_config = ConfigDict(frozen=True)

    data: dict[str, Any]
    config: Configuration | None = None

    @property
    def title(self) -> str:
        return self.data.get("title", "")

    @property
    def resources(self) -> list[dict]:
        return self.data.get("resources", [])

    @property
    def security_schemes(self) -> list[dict]:
        return self.data.get("securitySchemes", [])

    @property
    def schemas(self) -> list[dict]:
        return self.data.get("schemas", [])

    def with_config(self, config: Configuration) -> "ApiDocument":
        return self.model_copy(update={"config": config})

    def security_scheme_with_name(self, name: str) -> dict | None:
        """Return the first security scheme declared under ``name``, if any."""
        for scheme in self.security_schemes:
            if name in scheme:
                return scheme[name]
        return None

    def to_context(self) -> dict[str, Any]:
        """Build the template context: every RAML key plus render helpers."""
        context = dict(self.data)
        context["config"] = self.config
        context["securitySchemeWithName"] = self.security_scheme_with_name
        return context
