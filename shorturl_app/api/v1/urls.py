from fastapi import APIRouter, Depends, HTTPException, Request, status
from shorturl_app.schemas.url import URLCreate, URLCreateResponse, URLStats
from shorturl_app.services.exceptions import ShortURLError
from shorturl_app.services.url_service import URLService
from shorturl_app.dependencies import get_url_service
from shorturl_app.config import settings

router = APIRouter(prefix="/shorturls", tags=["shorturls"])


@router.post("", response_model=URLCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_short_url(
    url_data: URLCreate,
    request: Request,
    url_service: URLService = Depends(get_url_service)
):
    """Create a new short URL"""
    host = request.headers.get("host") or f"{settings.host}:{settings.port}"
    try:
        return await url_service.create_short_url(
            url=url_data.url,
            host=host,
            validity=url_data.validity,
            shortcode=url_data.shortcode,
        )
    except ShortURLError:
        raise
    except Exception as e:
        url_service.log_event("error", f"Error creating short URL: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error"
        )


@router.get("/{short_code}", response_model=URLStats)
async def get_url_stats(
    short_code: str,
    url_service: URLService = Depends(get_url_service)
):
    """Get statistics for a short URL"""
    try:
        return await url_service.get_url_stats(short_code)
    except ShortURLError:
        raise
    except Exception as e:
        url_service.log_event("error", f"Error fetching URL stats: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error"
        )
