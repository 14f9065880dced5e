"""Error types raised by the conversion pipeline."""

from typing import Optional


class ConversionError(Exception):
    """Base class for errors that abort or degrade a conversion."""


class FetchError(ConversionError):
    """Network or relay failure, or a non-2xx response."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ExtractionError(ConversionError):
    """No usable article content could be produced."""


class CredentialError(ConversionError):
    """The extraction endpoint has no credential or rejected it."""


class FallbackUnavailableError(ExtractionError, CredentialError):
    """Local parsing was insufficient and there is no credential for the remote fallback."""


class RemoteFormatError(ConversionError):
    """The extraction endpoint answered with something that is not the expected JSON."""


class ImageError(ConversionError):
    """Feature image could not be fetched, decoded or transcoded."""


class LayoutError(ConversionError):
    """A single content node could not be rendered."""


class ConversionBusyError(ConversionError):
    """Another conversion is already running."""
