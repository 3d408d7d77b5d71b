"""
Serves the industry performance charts referenced by rotation feed items.
"""

import logging
from pathlib import Path as FilePath

from fastapi import APIRouter, HTTPException, Path
from fastapi.responses import FileResponse

from . import get_config
from ..sources.lister import PERFORMANCE_CHART

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/rotation-images/{filename}",
    summary="Industry performance chart",
    responses={
        404: {"description": "Chart not found or image serving disabled"},
    },
)
async def get_rotation_image(
    filename: str = Path(..., description="Chart file name, YYYYMMDD_industry_performance_trend.png"),
):
    """Serve a chart PNG from the configured image directory."""
    image_directory = get_config().feeds.image_directory
    if not image_directory:
        raise HTTPException(status_code=404, detail="Image serving is not configured")

    # Only exact chart names; this also rules out path separators
    if not PERFORMANCE_CHART.match(filename):
        raise HTTPException(status_code=404, detail="Chart not found")

    image_path = FilePath(image_directory) / filename
    if not image_path.is_file():
        logger.debug(f"Chart {image_path} not found")
        raise HTTPException(status_code=404, detail="Chart not found")

    return FileResponse(str(image_path), media_type="image/png")
