"""Exceptions raised by raml2html."""

from typing import Optional


class Raml2HtmlError(Exception):
    """Base exception for raml2html errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class RamlLoadError(Raml2HtmlError):
    """Raised when a RAML source cannot be read or parsed."""

    pass


class PostProcessError(Raml2HtmlError):
    """Raised when the rendered HTML cannot be post-processed."""

    pass
