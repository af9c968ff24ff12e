"""
API schemas (Pydantic models) for request/response validation.
"""

from typing import Optional

from pydantic import BaseModel, Field


# ============================================================================
# Conversion Schemas
# ============================================================================

class ConvertRequest(BaseModel):
    """Request to convert a telemetry log."""
    source_path: str
    dest_path: Optional[str] = None  # defaults to source with .json suffix


class ConvertResponse(BaseModel):
    """Outcome of a conversion."""
    success: bool
    source: str
    destination: Optional[str] = None  # None when the track was empty
    sample_count: int
    frame_count: int
    duration_s: float
    distance_m: float
    bounding_box: tuple[float, float, float, float]  # (min_lon, min_lat, max_lon, max_lat)


class ChannelPoolResponse(BaseModel):
    """Decoder channel usage."""
    size: int
    in_use: int
    available: int


# ============================================================================
# GUTMA Flight Logging Document
# ============================================================================

class FlightLogging(BaseModel):
    flight_logging_items: list[list[float]]
    flight_logging_keys: list[str]
    altitude_system: str
    logging_start_dtg: str


class FlightLoggingFile(BaseModel):
    logging_type: str
    filename: str
    creation_dtg: str


class FlightLoggingMessage(BaseModel):
    flight_logging: FlightLogging
    file: FlightLoggingFile
    message_type: str


class FlightLoggingExchange(BaseModel):
    exchange_type: str
    message: FlightLoggingMessage


class FlightLoggingDocument(BaseModel):
    """Flight logging submission as written by the converter."""
    exchange: FlightLoggingExchange

    @property
    def items(self) -> list[list[float]]:
        return self.exchange.message.flight_logging.flight_logging_items


# ============================================================================
# Error Schemas
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    detail: str
    code: Optional[str] = Field(default=None)
