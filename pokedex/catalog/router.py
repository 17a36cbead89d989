"""
Route definitions for the catalogue API.

Endpoints under /api (all require a session):
- GET  /pokemons               : search, sort and paginate the index
- GET  /pokemons/{id_or_name}  : one Pokemon's full record
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..auth.dependencies import get_source, require_session
from ..auth.schemas import Session
from .pokeapi_service import CatalogSource
from .query import page_links, paginate
from .schemas import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    PokemonDetailResponse,
    PokemonListData,
    PokemonListResponse,
    QuerySpec,
    SortField,
    SortOrder,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["catalog"])


@router.get("/pokemons", response_model=PokemonListResponse)
def list_pokemons(
    search: Optional[str] = Query(default=None, description="Text matched against name and number"),
    sort_by: Optional[SortField] = Query(default=None, alias="sortBy", description="Sort field"),
    sort_order: SortOrder = Query(default=SortOrder.ASC, alias="sortOrder", description="Sort direction"),
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Page size"),
    offset: int = Query(default=0, ge=0, description="Index of the first entry"),
    source: CatalogSource = Depends(get_source),
    session: Session = Depends(require_session),
) -> PokemonListResponse:
    """
    Returns one window of the catalogue.

    The whole index is fetched from the source, then filtered, sorted
    and sliced locally. ``count`` is the number of matches before
    slicing.
    """
    spec = QuerySpec(
        text=search,
        sort_field=sort_by,
        sort_order=sort_order,
        limit=limit,
        offset=offset,
    )
    summaries = source.fetch_all_summaries()
    page = paginate(summaries, spec)
    next_link, previous_link = page_links(spec, page)
    logger.debug(
        "%s listed %d/%d pokemons (search=%r offset=%d)",
        session.subject, len(page.items), page.total_count, search, offset,
    )
    return PokemonListResponse(
        data=PokemonListData(
            count=page.total_count,
            next=next_link,
            previous=previous_link,
            has_next=page.has_next,
            has_previous=page.has_previous,
            results=page.items,
        )
    )


@router.get("/pokemons/{id_or_name}", response_model=PokemonDetailResponse)
def get_pokemon(
    id_or_name: str,
    source: CatalogSource = Depends(get_source),
    session: Session = Depends(require_session),
) -> PokemonDetailResponse:
    return PokemonDetailResponse(data=source.fetch_detail(id_or_name))
