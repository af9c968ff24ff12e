"""
API routes for telemetry log conversion.
"""

from pathlib import Path

from fastapi import APIRouter, HTTPException, Request
from pydantic import ValidationError

from flightlog.api.schemas import (
    ChannelPoolResponse,
    ConvertRequest,
    ConvertResponse,
    ErrorResponse,
    FlightLoggingDocument,
)
from flightlog.errors import ResourceExhausted
from flightlog.services.channels import ChannelPool
from flightlog.services.converter import UTMConverter


router = APIRouter(prefix="/convert", tags=["convert"])


def _resolve(request: Request, path: str) -> Path:
    """
    Resolve a request path against the configured data folder.

    Relative paths are taken from the data folder; absolute paths are
    accepted only when they point inside it.
    """
    data_folder = Path(request.app.state.data_folder).resolve()
    resolved = (data_folder / path).resolve()
    if not resolved.is_relative_to(data_folder):
        raise HTTPException(status_code=400, detail=f"Path is outside the data folder: {path}")
    return resolved


def _pool(request: Request) -> ChannelPool:
    return request.app.state.channel_pool


@router.post(
    "",
    response_model=ConvertResponse,
    responses={400: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
def convert_log(body: ConvertRequest, request: Request):
    """
    Convert a .tlog file into a GUTMA flight logging document.

    When the log holds no usable position the document is not written
    and `destination` is null.
    """
    source = _resolve(request, body.source_path)
    if not source.is_file():
        raise HTTPException(status_code=400, detail=f"Log file does not exist: {body.source_path}")

    dest = _resolve(request, body.dest_path) if body.dest_path else source.with_suffix(".json")
    if dest == source:
        raise HTTPException(status_code=400, detail=f"Destination would overwrite the log file: {body.source_path}")

    converter = UTMConverter(_pool(request))
    if not converter.convert_telemetry_file(source, dest):
        if isinstance(converter.last_error, ResourceExhausted):
            raise HTTPException(status_code=503, detail="No decoder channels available")
        raise HTTPException(status_code=500, detail=f"Failed to convert {body.source_path}")

    track = converter.track
    start, end = track.get_time_range()
    return ConvertResponse(
        success=True,
        source=str(source),
        destination=str(dest) if dest.exists() else None,
        sample_count=len(track),
        frame_count=converter.scanner.frame_count if converter.scanner else 0,
        duration_s=end - start,
        distance_m=track.distance_m(),
        bounding_box=track.get_bounding_box(),
    )


# ============================================================================
# Channel and Document Routes
# ============================================================================

channels_router = APIRouter(prefix="/channels", tags=["channels"])


@channels_router.get("", response_model=ChannelPoolResponse)
def get_channels(request: Request):
    """Current decoder channel usage."""
    pool = _pool(request)
    return ChannelPoolResponse(size=pool.size, in_use=pool.in_use, available=pool.available)


documents_router = APIRouter(prefix="/documents", tags=["documents"])


@documents_router.get("/{name}", response_model=FlightLoggingDocument)
def get_document(name: str, request: Request):
    """
    Read back a converted document from the data folder.

    The `.json` suffix may be omitted.
    """
    path = request.app.state.data_folder / Path(name).name
    if path.suffix != ".json":
        path = path.with_name(path.name + ".json")
    if not path.is_file():
        raise HTTPException(status_code=404, detail=f"Document not found: {name}")

    try:
        return FlightLoggingDocument.model_validate_json(path.read_text(encoding="utf-8"))
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=f"Malformed document {path.name}: {e}")
