from fastapi import APIRouter, Request

from localtv.parser.probe import parse, probe_file
from localtv.schemas import ClassifiedTracks, ProbeRequest

tracks_router = APIRouter()


@tracks_router.post("/parse", summary="Parse tracks from a file prefix", response_model=ClassifiedTracks)
async def parse_tracks(request: Request):
    """
    Parse the audio and subtitle tracks from the raw request body.

    The body should hold the leading bytes of a Matroska file (2-5 MiB is
    usually enough). Non-Matroska or too-short input yields empty lists.
    """
    body = await request.body()
    return parse(body)


@tracks_router.post("/probe", summary="Probe tracks of a local file", response_model=ClassifiedTracks)
async def probe_tracks(probe_request: ProbeRequest):
    """Read the start of a local file and parse its tracks."""
    return await probe_file(probe_request.path, probe_request.header_size)
