"""
Conversion failures.

These never leave UTMConverter.convert_telemetry_file, which reports them
as a False return value.
"""


class ConversionError(Exception):
    """Base class for conversion failures."""


class ResourceExhausted(ConversionError):
    """No decoder channel is free in the pool."""


class SourceOpenFailed(ConversionError):
    """The telemetry log could not be opened for reading."""


class DestinationCreateFailed(ConversionError):
    """The output document could not be created."""
