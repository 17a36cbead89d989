"""
Local search, sorting and pagination for the catalogue.

The upstream index offers none of these operations, so the list
endpoint fetches every summary and runs them through ``paginate()``:
filter on the search text, optionally sort, then cut the requested
window. The functions here are pure; the input sequence is never
modified and the same input always produces the same page.
"""

from __future__ import annotations

import unicodedata
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .schemas import Page, PokemonSummary, QuerySpec, SortField, SortOrder


def _norm(s: Optional[str]) -> str:
    """Normalize a string for case-insensitive comparison."""
    return (s or "").strip().lower()


def _name_key(summary: PokemonSummary) -> Tuple[str, str]:
    """Collation key for names.

    Accents are stripped and case folded so that e.g. ``Flabébé`` sorts
    next to ``flabebe``. Ties are broken on the case-swapped raw name, which
    puts lowercase before uppercase and unaccented before accented.
    """
    decomposed = unicodedata.normalize("NFKD", summary.name)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), summary.name.swapcase()


def _number_key(summary: PokemonSummary) -> int:
    return summary.id


SORT_KEYS: Dict[SortField, Callable[[PokemonSummary], object]] = {
    SortField.NAME: _name_key,
    SortField.NUMBER: _number_key,
}


def filter_summaries(items: Sequence[PokemonSummary], text: Optional[str]) -> List[PokemonSummary]:
    """Keep the entries whose name or number contains ``text``.

    Matching is a case-insensitive substring test. A missing or blank
    ``text`` keeps everything.
    """
    needle = _norm(text)
    if not needle:
        return list(items)
    return [s for s in items if needle in s.name.lower() or needle in str(s.id)]


def sort_summaries(
    items: Sequence[PokemonSummary],
    field: Optional[SortField],
    order: SortOrder = SortOrder.ASC,
) -> List[PokemonSummary]:
    """Return ``items`` ordered by ``field``.

    Without a field the original order is kept. ``sorted`` is stable in
    both directions, so entries with equal keys keep their relative
    order for ``desc`` as well.
    """
    if field is None:
        return list(items)
    return sorted(items, key=SORT_KEYS[field], reverse=order == SortOrder.DESC)


def paginate(items: Sequence[PokemonSummary], spec: QuerySpec) -> Page[PokemonSummary]:
    """Filter, sort and window ``items`` according to ``spec``.

    Parameters
    ----------
    items : Sequence[PokemonSummary]
        The full catalogue in upstream order.
    spec : QuerySpec
        An already validated query (``limit >= 1``, ``offset >= 0``).

    Returns
    -------
    Page[PokemonSummary]
        At most ``spec.limit`` entries. ``total_count`` is the number of
        entries left after filtering, before the window is applied.
    """
    matched = filter_summaries(items, spec.text)
    ordered = sort_summaries(matched, spec.sort_field, spec.sort_order)

    total = len(ordered)
    start = spec.offset
    end = start + spec.limit
    # Slicing past the end yields an empty window.
    window = ordered[start:end]

    return Page[PokemonSummary](
        items=window,
        total_count=total,
        has_next=end < total,
        has_previous=start > 0,
    )


def page_links(spec: QuerySpec, page: Page) -> Tuple[Optional[str], Optional[str]]:
    """Query strings for the neighbouring windows, or ``None`` at the edges."""
    next_link = None
    previous_link = None
    if page.has_next:
        next_link = f"offset={spec.offset + spec.limit}&limit={spec.limit}"
    if page.has_previous:
        previous_link = f"offset={max(0, spec.offset - spec.limit)}&limit={spec.limit}"
    return next_link, previous_link
