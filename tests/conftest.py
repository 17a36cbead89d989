"""Shared fixtures: fake catalogue source, fixed-clock gate, API client."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Union

import pytest
from fastapi.testclient import TestClient

from pokedex.auth.credentials import InMemoryCredentialStore
from pokedex.auth.session import SessionGate
from pokedex.catalog.pokeapi_service import build_image_url, parse_detail_key
from pokedex.catalog.schemas import PokemonDetail, PokemonSummary, StatEntry, TypeEntry
from pokedex.config import Settings
from pokedex.errors import NotFound, UpstreamUnavailable
from pokedex.main import create_app

TEST_SECRET = "test-secret-key-for-session-testing"
NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

NAMES = [
    "bulbasaur", "ivysaur", "venusaur", "charmander", "charmeleon",
    "charizard", "squirtle", "wartortle", "blastoise", "caterpie",
    "metapod", "butterfree", "weedle", "kakuna", "beedrill",
    "pidgey", "pidgeotto", "pidgeot", "rattata", "raticate",
    "spearow", "fearow", "ekans", "arbok", "pikachu",
]


def make_summary(pokemon_id: int, name: str) -> PokemonSummary:
    return PokemonSummary(
        id=pokemon_id,
        name=name,
        image_url=build_image_url(pokemon_id),
        url=f"https://pokeapi.co/api/v2/pokemon/{pokemon_id}/",
    )


def make_detail(pokemon_id: int, name: str) -> PokemonDetail:
    return PokemonDetail(
        id=pokemon_id,
        name=name,
        height=4,
        weight=60,
        types=[TypeEntry(slot=1, name="electric")],
        stats=[StatEntry(name="hp", base_stat=35), StatEntry(name="speed", base_stat=90)],
        moves=["thunder-shock"],
    )


class FakeSource:
    """In-memory catalogue source that records how often it is called."""

    def __init__(self, summaries: List[PokemonSummary]) -> None:
        self.summaries = summaries
        self.details: Dict[int, PokemonDetail] = {s.id: make_detail(s.id, s.name) for s in summaries}
        self.index_calls = 0
        self.fail = False

    def fetch_all_summaries(self) -> List[PokemonSummary]:
        self.index_calls += 1
        if self.fail:
            raise UpstreamUnavailable("PokeAPI unreachable")
        return list(self.summaries)

    def fetch_detail(self, id_or_name: Union[int, str]) -> PokemonDetail:
        key = parse_detail_key(id_or_name)
        if self.fail:
            raise UpstreamUnavailable("PokeAPI unreachable")
        if isinstance(key, int):
            if key in self.details:
                return self.details[key]
            raise NotFound()
        for detail in self.details.values():
            if detail.name == key:
                return detail
        raise NotFound()


class Clock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


@pytest.fixture
def summaries() -> List[PokemonSummary]:
    return [make_summary(i, name) for i, name in enumerate(NAMES, start=1)]


@pytest.fixture
def source(summaries) -> FakeSource:
    return FakeSource(summaries)


@pytest.fixture
def clock() -> Clock:
    return Clock(NOW)


@pytest.fixture
def gate(clock) -> SessionGate:
    return SessionGate(InMemoryCredentialStore("admin", "admin"), secret=TEST_SECRET, clock=clock)


@pytest.fixture
def settings() -> Settings:
    return Settings(jwt_secret=TEST_SECRET, log_level="WARNING")


@pytest.fixture
def client(settings, source, gate) -> TestClient:
    app = create_app(settings, source=source, gate=gate)
    return TestClient(app)


@pytest.fixture
def auth_headers(gate) -> Dict[str, str]:
    return {"Authorization": f"Bearer {gate.issue_token('admin')}"}
