from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import RedirectResponse
from uri_shortener.services.shortener import URIShortener
from uri_shortener.dependencies import get_shortener

router = APIRouter(tags=["redirect"])


@router.get("/{token}")
def redirect_to_long_uri(
    token: str,
    shortener: URIShortener = Depends(get_shortener)
):
    """
    Redirect to the original URI.

    Assumes this app is served at the configured prefix, so the path
    segment is the cipher token. Fixed routes (docs, health, API) all
    live under /api/, which is several segments deep, so no single-segment
    token is shadowed.
    """
    long_uri = shortener.lengthen(f"{shortener.prefix}/{token}")

    if not long_uri:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Short URL not found"
        )

    return RedirectResponse(url=long_uri, status_code=status.HTTP_302_FOUND)
