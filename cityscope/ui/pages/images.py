"""Image optimization route for allow-listed remote images."""
from __future__ import annotations

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response

from ...config import Settings, get_settings
from ...dependencies import get_image_client
from ...services.image_service import OPTIMIZE_ROUTE, ImageOptimizationError, fetch_optimized_image

router = APIRouter()


@router.get(OPTIMIZE_ROUTE)
async def optimized_image(
    request: Request,
    url: str = Query(..., min_length=1),
    w: int = Query(..., gt=0),
    q: int | None = Query(None),
    client: httpx.AsyncClient = Depends(get_image_client),
    settings: Settings = Depends(get_settings),
) -> Response:
    """Resize and re-encode ``url`` for width ``w``."""

    quality = q if q is not None else settings.image_default_quality
    try:
        image = await fetch_optimized_image(
            client,
            url,
            width=w,
            quality=quality,
            accept=request.headers.get("accept", ""),
            settings=settings,
        )
    except ImageOptimizationError as exc:
        raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc

    return Response(
        content=image.content,
        media_type=image.content_type,
        headers={
            "Cache-Control": f"public, max-age={settings.image_minimum_cache_ttl}",
            "Vary": "Accept",
            "Content-Disposition": "attachment" if image.content_type == "image/svg+xml" else "inline",
        },
    )
