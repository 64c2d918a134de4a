"""Auto-detect the kind of a RAML source."""

from pathlib import Path

RAML_MARKER = "#%RAML"
URL_PREFIXES = ("http://", "https://")


def detect_source_kind(value) -> str:
    """Detect what kind of RAML source a caller passed in.

    Returns: 'path', 'url', 'text' or 'object'.
    """
    if isinstance(value, Path):
        return "path"

    if isinstance(value, str):
        if value.lstrip().startswith(RAML_MARKER):
            return "text"
        if value.startswith(URL_PREFIXES):
            return "url"
        return "path"

    # Anything else is treated as an already-parsed document
    return "object"
