"""Sources routes - inspect the venue registry."""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from nightlife_scraper.config.sources import SourceConfig, SourceRegistry

router = APIRouter()


class SourceInfo(BaseModel):
    """Venue information."""
    slug: str
    name: str
    urls: list[str]
    hints: str
    is_active: bool


class SourcesResponse(BaseModel):
    """Response for sources list."""
    total: int
    sources: list[SourceInfo]


def _to_info(source: SourceConfig) -> SourceInfo:
    return SourceInfo(
        slug=source.slug,
        name=source.name,
        urls=list(source.urls),
        hints=source.hints,
        is_active=source.is_active,
    )


@router.get("", response_model=SourcesResponse)
async def list_sources():
    """List all registered venues in scrape order."""
    sources = [_to_info(s) for s in SourceRegistry.all()]
    return SourcesResponse(total=len(sources), sources=sources)


@router.get("/{slug}", response_model=SourceInfo)
async def get_source(slug: str):
    """Get one venue by slug or name."""
    source = SourceRegistry.get(slug)
    if source is None:
        raise HTTPException(status_code=404, detail=f"Source '{slug}' not found")
    return _to_info(source)
