"""Exception hierarchy for fontgate.

Each class carries the HTTP status the request handler answers with.
"""


class FontGateError(Exception):
    """Base error for fontgate."""

    http_status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigError(FontGateError):
    """Environment file or settings could not be loaded."""


class CatalogError(FontGateError):
    """The font catalog could not be fetched or parsed."""


class FamilyNotFound(FontGateError):
    """Requested family is not in the catalog."""

    http_status = 404


class FontFetchError(FontGateError):
    """Downloading a family's font file failed."""


class FontParseError(FontGateError):
    """Downloaded bytes are not a usable font binary."""


class RenderError(FontGateError):
    """Rasterizing or PNG-encoding the sample failed."""
