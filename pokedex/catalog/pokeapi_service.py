"""
PokeAPI integration for the catalogue.

``PokeApiSource`` exposes the two calls the service needs:

* ``fetch_all_summaries()`` — fetch the whole Pokemon index in a single
  request and map every ``{name, url}`` pair into a ``PokemonSummary``.
  PokeAPI cannot filter or sort, so the complete index is requested and
  the query pipeline does the rest locally.

* ``fetch_detail()`` — retrieve the full record of one Pokemon by
  number or name.

Only the Python standard library is used for HTTP requests. Every
request is bounded by a timeout and never retried: a failure is
reported as ``UpstreamUnavailable`` (or ``NotFound`` for a missing
detail record) and left to the caller.
"""

from __future__ import annotations

import json
import logging
import re
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Dict, List, Optional, Protocol, Union

from pydantic import ValidationError

from ..errors import InvalidInput, NotFound, UpstreamUnavailable
from .cache import TTLCache
from .schemas import AbilityEntry, PokemonDetail, PokemonSummary, StatEntry, TypeEntry

logger = logging.getLogger(__name__)

POKEAPI_BASE_URL = "https://pokeapi.co/api/v2"
IMAGE_URL_TEMPLATE = (
    "https://raw.githubusercontent.com/PokeAPI/sprites/master/sprites/pokemon/"
    "other/official-artwork/{id}.png"
)
INDEX_BATCH_SIZE = 1500

_TRAILING_ID = re.compile(r"/(\d+)/?$")
_NUMERIC_KEY = re.compile(r"-?\d+", re.ASCII)
_NAME_KEY = re.compile(r"[a-z0-9]+(?:-[a-z0-9]+)*", re.ASCII)


class CatalogSource(Protocol):
    """What the routes need from a catalogue backend."""

    def fetch_all_summaries(self) -> List[PokemonSummary]: ...

    def fetch_detail(self, id_or_name: Union[int, str]) -> PokemonDetail: ...


def _http_get_json(url: str, timeout: float, user_agent: str) -> Any:
    """Perform an HTTP GET and return the parsed JSON body.

    Raises ``NotFound`` on a 404 and ``UpstreamUnavailable`` on any other
    non-success status, a network error, a timeout or an undecodable body.
    """
    request = urllib.request.Request(
        url,
        headers={
            "User-Agent": user_agent,
            "Accept": "application/json",
        },
    )
    try:
        with urllib.request.urlopen(request, timeout=timeout) as response:
            if response.status != 200:
                logger.warning("PokeAPI request to %s returned status %s", url, response.status)
                raise UpstreamUnavailable(f"PokeAPI error: status {response.status}")
            body = response.read().decode("utf-8", errors="ignore")
    except urllib.error.HTTPError as exc:
        if exc.code == 404:
            raise NotFound() from exc
        logger.warning("PokeAPI request to %s returned status %s", url, exc.code)
        raise UpstreamUnavailable(f"PokeAPI error: status {exc.code}") from exc
    except (urllib.error.URLError, OSError) as exc:
        # URLError wraps DNS/connection failures; timeouts surface as OSError.
        logger.error("Error fetching %s: %s", url, exc)
        raise UpstreamUnavailable(f"PokeAPI unreachable: {exc}") from exc

    try:
        return json.loads(body)
    except json.JSONDecodeError as exc:
        logger.error("Invalid JSON from %s: %s", url, exc)
        raise UpstreamUnavailable("PokeAPI returned invalid JSON") from exc


def extract_id(url: str) -> Optional[int]:
    """Return the trailing numeric id of a resource url, if any."""
    match = _TRAILING_ID.search(url or "")
    if not match:
        return None
    value = int(match.group(1))
    return value if value > 0 else None


def build_image_url(pokemon_id: int) -> str:
    return IMAGE_URL_TEMPLATE.format(id=pokemon_id)


def summary_from_index_entry(entry: Dict[str, Any]) -> Optional[PokemonSummary]:
    """Map one ``{name, url}`` index entry, or ``None`` if it is unusable."""
    name = entry.get("name")
    url = entry.get("url")
    if not isinstance(name, str) or not name or not isinstance(url, str):
        return None
    pokemon_id = extract_id(url)
    if pokemon_id is None:
        return None
    return PokemonSummary(id=pokemon_id, name=name, image_url=build_image_url(pokemon_id), url=url)


def _pick_image(sprites: Any) -> Optional[str]:
    if not isinstance(sprites, dict):
        return None
    other = sprites.get("other") or {}
    artwork = other.get("official-artwork") or {}
    return artwork.get("front_default") or sprites.get("front_default")


def detail_from_payload(data: Dict[str, Any]) -> PokemonDetail:
    """Map a raw ``/pokemon/{id}`` payload into a ``PokemonDetail``."""
    abilities = [
        AbilityEntry(
            name=a["ability"]["name"],
            is_hidden=bool(a.get("is_hidden", False)),
            slot=a.get("slot", 0),
        )
        for a in data.get("abilities") or []
    ]
    moves = [m["move"]["name"] for m in data.get("moves") or []]
    types = [TypeEntry(slot=t.get("slot", 0), name=t["type"]["name"]) for t in data.get("types") or []]
    stats = [
        StatEntry(name=s["stat"]["name"], base_stat=s["base_stat"], effort=s.get("effort", 0))
        for s in data.get("stats") or []
    ]
    return PokemonDetail(
        id=data["id"],
        name=data["name"],
        height=data["height"],
        weight=data["weight"],
        base_experience=data.get("base_experience"),
        image_url=_pick_image(data.get("sprites")),
        abilities=abilities,
        moves=moves,
        types=types,
        stats=stats,
    )


def parse_detail_key(id_or_name: Union[int, str]) -> Union[int, str]:
    """Validate a detail lookup key.

    Returns a positive id for numeric keys and the lowercased name
    otherwise. Names are PokeAPI slugs: ASCII letters and digits joined
    by single hyphens. Anything else raises ``InvalidInput``.
    """
    if isinstance(id_or_name, int):
        if id_or_name <= 0:
            raise InvalidInput("Invalid Pokemon ID")
        return id_or_name
    key = (id_or_name or "").strip().lower()
    if not key:
        raise InvalidInput("Pokemon ID or name is required")
    if _NUMERIC_KEY.fullmatch(key):
        return parse_detail_key(int(key))
    if not _NAME_KEY.fullmatch(key):
        raise InvalidInput("Invalid Pokemon ID or name")
    return key


class PokeApiSource:
    """Catalogue source backed by the public PokeAPI."""

    def __init__(
        self,
        base_url: str = POKEAPI_BASE_URL,
        timeout: float = 10.0,
        batch_size: int = INDEX_BATCH_SIZE,
        user_agent: str = "pokedex/1.0",
        cache: Optional[TTLCache] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.batch_size = batch_size
        self.user_agent = user_agent
        self.cache = cache

    def _get(self, path: str) -> Any:
        return _http_get_json(f"{self.base_url}{path}", self.timeout, self.user_agent)

    def _load_index(self) -> List[PokemonSummary]:
        params = urllib.parse.urlencode({"limit": self.batch_size, "offset": 0})
        try:
            data = self._get(f"/pokemon?{params}")
        except NotFound as exc:
            # A missing index is an upstream failure, not a missing Pokemon.
            raise UpstreamUnavailable("PokeAPI index not found") from exc
        if not isinstance(data, dict) or not isinstance(data.get("results"), list):
            raise UpstreamUnavailable("PokeAPI index has no results")

        summaries: List[PokemonSummary] = []
        for entry in data["results"]:
            summary = summary_from_index_entry(entry) if isinstance(entry, dict) else None
            if summary is None:
                logger.warning("Skipping unusable index entry %r", entry)
                continue
            summaries.append(summary)
        logger.info("Fetched %d summaries from PokeAPI", len(summaries))
        return summaries

    def fetch_all_summaries(self) -> List[PokemonSummary]:
        if self.cache is None:
            return self._load_index()
        key = ("index", self.base_url, self.batch_size)
        return list(self.cache.get_or_load(key, self._load_index))

    def fetch_detail(self, id_or_name: Union[int, str]) -> PokemonDetail:
        key = parse_detail_key(id_or_name)
        data = self._get(f"/pokemon/{key}")
        try:
            return detail_from_payload(data)
        except (AttributeError, KeyError, TypeError, ValidationError) as exc:
            logger.error("Unusable PokeAPI record for %s: %s", key, exc)
            raise UpstreamUnavailable("PokeAPI returned an unusable record") from exc
