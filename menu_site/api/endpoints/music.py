import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from menu_site.api.dependencies import SiteServices, get_services
from menu_site.error_handler import SourceUnavailable

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/music/latest", tags=["Music"])
async def latest_release(services: SiteServices = Depends(get_services)):
    artist_id = services.config.spotify.artist_id
    try:
        latest = await services.spotify.get_latest_release(artist_id)
    except SourceUnavailable as e:
        logger.error("Spotify latest release error: %s", e)
        return JSONResponse(status_code=502, content={"error": "Unable to fetch latest release"})
    if not latest:
        return JSONResponse(status_code=404, content={"error": "No releases found"})
    return latest
