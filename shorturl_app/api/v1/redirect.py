from fastapi import APIRouter, Depends, HTTPException, status, Request
from fastapi.responses import RedirectResponse
from shorturl_app.services.exceptions import ShortURLError
from shorturl_app.services.url_service import URLService
from shorturl_app.dependencies import get_url_service

router = APIRouter(tags=["redirect"])


@router.get("/{short_code}")
async def redirect_to_long_url(
    short_code: str,
    request: Request,
    url_service: URLService = Depends(get_url_service)
):
    """
    Redirect to the original URL.

    The click (timestamp, referrer, user agent, client address) is
    recorded before the redirect is returned, so stats fetched after
    the redirect already include it.
    """
    try:
        long_url = await url_service.get_long_url_for_redirect(
            short_code,
            referrer=request.headers.get("referer") or request.headers.get("referrer"),
            user_agent=request.headers.get("user-agent"),
            location=request.client.host if request.client else None,
        )
    except ShortURLError:
        raise
    except Exception as e:
        url_service.log_event("error", f"Error in redirect: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error"
        )

    return RedirectResponse(url=long_url, status_code=status.HTTP_302_FOUND)
