from fastapi import APIRouter, Depends, HTTPException, status
from uri_shortener.schemas.uri import URICreate, ShortURLResponse, PruneRequest, PruneResponse
from uri_shortener.services.shortener import URIShortener
from uri_shortener.dependencies import get_shortener
from uri_shortener.exceptions import DuplicateCipher, TooManyAttempts

router = APIRouter(prefix="/uris", tags=["uris"])


@router.post("/", response_model=ShortURLResponse, status_code=status.HTTP_201_CREATED)
def create_short_url(
    uri_data: URICreate,
    shortener: URIShortener = Depends(get_shortener)
):
    """Shorten a URI (idempotent: the same URI always gets the same alias)"""
    try:
        short_url = shortener.shorten(uri_data.uri)
    except DuplicateCipher as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )
    except TooManyAttempts as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e)
        )
    return ShortURLResponse(uri=uri_data.uri, short_url=short_url)


@router.get("/resolve", response_model=ShortURLResponse)
def resolve_short_url(
    short_url: str,
    shortener: URIShortener = Depends(get_shortener)
):
    """Look up the original URI behind a short URL"""
    uri = shortener.lengthen(short_url)
    if uri is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Short URL not found"
        )
    return ShortURLResponse(uri=uri, short_url=short_url)


@router.post("/prune", response_model=PruneResponse)
def prune_uris(
    prune_data: PruneRequest,
    shortener: URIShortener = Depends(get_shortener)
):
    """Remove URIs created before the given unix timestamp"""
    return PruneResponse(pruned=shortener.prune_before(prune_data.before))
