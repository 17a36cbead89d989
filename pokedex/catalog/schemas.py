"""
Pydantic schema definitions for the catalogue module.

``PokemonSummary`` captures the minimal fields required to render a
catalogue card. ``PokemonDetail`` is the full record shown on a detail
page. ``QuerySpec`` describes one list request (search text, sort and
window) and ``Page`` bundles a window of results with the pagination
metadata clients need to render next/previous controls.
"""

from __future__ import annotations

from enum import Enum
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

T = TypeVar("T")

MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 20


class SortField(str, Enum):
    NAME = "name"
    NUMBER = "number"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class PokemonSummary(BaseModel):
    """A single catalogue entry as shown in the list view.

    ``url`` is the upstream resource the entry was built from; it is
    kept so clients can follow it, but nothing in the service relies
    on it.
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(gt=0)
    name: str = Field(min_length=1)
    image_url: str
    url: Optional[str] = None


class AbilityEntry(BaseModel):
    name: str
    is_hidden: bool = False
    slot: int


class TypeEntry(BaseModel):
    slot: int
    name: str


class StatEntry(BaseModel):
    # Base values are nominally 0..255 but the upstream is not clamped.
    name: str
    base_stat: int
    effort: int = 0


class PokemonDetail(BaseModel):
    """The full record of one Pokemon.

    Height and weight are in the upstream's units (decimetres and
    hectograms). ``types`` is ordered by slot and never empty;
    ``stats`` holds at most one entry per stat name.
    """

    id: int = Field(gt=0)
    name: str = Field(min_length=1)
    height: int
    weight: int
    base_experience: Optional[int] = None
    image_url: Optional[str] = None
    abilities: List[AbilityEntry] = Field(default_factory=list)
    moves: List[str] = Field(default_factory=list)
    types: List[TypeEntry]
    stats: List[StatEntry] = Field(default_factory=list)

    @field_validator("types")
    @classmethod
    def _types_not_empty(cls, value: List[TypeEntry]) -> List[TypeEntry]:
        if not value:
            raise ValueError("a Pokemon has at least one type")
        return sorted(value, key=lambda t: t.slot)

    @field_validator("stats")
    @classmethod
    def _stats_unique(cls, value: List[StatEntry]) -> List[StatEntry]:
        names = [s.name for s in value]
        if len(names) != len(set(names)):
            raise ValueError("duplicate stat names")
        return value


class QuerySpec(BaseModel):
    """One list request: optional search text, optional sort and a window."""

    model_config = ConfigDict(frozen=True)

    text: Optional[str] = None
    sort_field: Optional[SortField] = None
    sort_order: SortOrder = SortOrder.ASC
    limit: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    offset: int = Field(default=0, ge=0)


class Page(BaseModel, Generic[T]):
    """A window of results plus the metadata needed to move around."""

    items: List[T]
    total_count: int = Field(ge=0)
    has_next: bool
    has_previous: bool


class PokemonListData(BaseModel):
    """Payload of ``GET /api/pokemons``.

    ``next`` and ``previous`` are plain query strings
    (``offset=<n>&limit=<n>``) a client can append to the list URL.
    """

    count: int
    next: Optional[str] = None
    previous: Optional[str] = None
    has_next: bool
    has_previous: bool
    results: List[PokemonSummary]


class PokemonListResponse(BaseModel):
    success: bool = True
    data: PokemonListData


class PokemonDetailResponse(BaseModel):
    success: bool = True
    data: PokemonDetail
