"""
Feed routes: stock picker and sector rotation monitor.

The scanned directory is taken verbatim from the URL path, e.g.
``/stockpicker//data/screener/picks``. The output format follows the
request's Accept header.
"""

import logging

from fastapi import APIRouter, Path, Request, Response

from . import get_config
from ..exceptions import DirectoryReadError
from ..feeds.generator import FeedGenerator
from ..feeds.rotation import build_rotation_feed
from ..feeds.stockpicker import build_stockpicker_feed
from ..models.feed import Feed, FeedFormat

logger = logging.getLogger(__name__)

router = APIRouter()

_feed_generator = FeedGenerator()


@router.get(
    "/stockpicker/{directory:path}",
    summary="Stock picker feed",
    description="One item per YYYYMMDD_<type>_selected_stocks.csv file in the directory.",
    responses={
        500: {"description": "Directory or file could not be read"},
    },
)
async def get_stockpicker_feed(
    request: Request,
    directory: str = Path(..., description="Absolute path of the directory holding the CSV files"),
):
    """Serve the stock picker feed."""
    logger.info(f"Stock picker feed requested for {directory}")
    feed = await build_stockpicker_feed(directory)
    return _render_feed(request, feed)


@router.get(
    "/rotation-monitor/{directory:path}",
    summary="Sector rotation monitor feed",
    description="One item per date with both top and bottom industry CSV files.",
    responses={
        400: {"description": "Directory could not be read; a degraded feed is returned"},
    },
)
async def get_rotation_feed(
    request: Request,
    directory: str = Path(..., description="Absolute path of the directory holding the rotation files"),
):
    """Serve the sector rotation monitor feed."""
    logger.info(f"Rotation monitor feed requested for {directory}")
    settings = get_config().feeds

    try:
        feed = await build_rotation_feed(directory, image_base_url=settings.image_base_url)
    except DirectoryReadError as e:
        return _render_feed(request, e.feed, status_code=400)

    return _render_feed(request, feed)


def _render_feed(request: Request, feed: Feed, status_code: int = 200) -> Response:
    """Serialize a feed in the negotiated format with caching headers."""
    feed_format = FeedFormat.from_accept(request.headers.get("Accept"))
    content = _feed_generator.generate(feed, feed_format, self_url=str(request.url))

    if status_code != 200:
        return Response(content=content, status_code=status_code, media_type=feed_format.content_type)

    etag = FeedGenerator.generate_etag(content, feed_format)
    last_modified = FeedGenerator.get_last_modified(feed)

    if_none_match = request.headers.get("If-None-Match", "").strip('"')
    if if_none_match == etag:
        return Response(status_code=304)

    headers = {
        "ETag": f'"{etag}"',
        "Last-Modified": last_modified.strftime("%a, %d %b %Y %H:%M:%S GMT"),
        "Cache-Control": "public, max-age=300",
        "Vary": "Accept, Accept-Encoding",
    }

    return Response(
        content=content,
        media_type=feed_format.content_type,
        headers=headers,
    )
