"""Tests for the HTTP API (no Postgres or Redis needed)."""

import random

import pytest
from httpx import ASGITransport, AsyncClient

from songrank.dependencies import get_catalog, get_vote_counter, get_vote_processor
from songrank.main import app
from songrank.services.catalog import SongCatalog, VoteCounter
from songrank.services.voting import VoteProcessor

from tests.fakes import FakeRecordStore, make_rows


@pytest.fixture
async def client(catalog: SongCatalog, counter: VoteCounter):
    """Create test client wired to an in-memory catalog."""
    processor = VoteProcessor(catalog, counter, rng=random.Random(11))
    app.dependency_overrides[get_catalog] = lambda: catalog
    app.dependency_overrides[get_vote_counter] = lambda: counter
    app.dependency_overrides[get_vote_processor] = lambda: processor
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    """Test health endpoint returns ok."""
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"ok": True}


@pytest.mark.asyncio
async def test_pair_returns_two_distinct_songs(client: AsyncClient):
    response = await client.get("/v1/pair")
    assert response.status_code == 200
    data = response.json()

    assert set(data) == {"song1", "song2"}
    assert data["song1"]["song"] != data["song2"]["song"]
    for key in ("song", "artist", "writer", "album", "year", "rating"):
        assert key in data["song1"]


@pytest.mark.asyncio
async def test_vote_updates_ratings_and_returns_next_pair(
    client: AsyncClient,
    catalog: SongCatalog,
    counter: VoteCounter,
    store: FakeRecordStore,
):
    response = await client.post("/v1/vote", json={"winner": "Song 00", "loser": "Song 01"})
    assert response.status_code == 200
    data = response.json()

    assert data["song1"]["song"] != data["song2"]["song"]
    assert catalog.get("Song 00").rating == 1016
    assert catalog.get("Song 01").rating == 984
    assert counter.value == 1
    assert store.counters["votes"] == 1


@pytest.mark.asyncio
async def test_vote_unknown_song_is_404(client: AsyncClient, counter: VoteCounter):
    response = await client.post("/v1/vote", json={"winner": "Ghost", "loser": "Song 01"})
    assert response.status_code == 404
    error = response.json()["error"]

    assert error["code"] == "UNKNOWN_SONG"
    assert error["detail"] == {"song": "Ghost"}
    assert counter.value == 0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"winner": "Song 00"},
        {"winner": "Song 00", "loser": ""},
        {"winner": 5, "loser": "Song 01"},
        {"winner": "Song 01", "loser": "Song 01"},
    ],
)
async def test_vote_malformed_body_is_422(client: AsyncClient, counter: VoteCounter, body: dict):
    response = await client.post("/v1/vote", json=body)
    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"
    assert counter.value == 0


@pytest.mark.asyncio
async def test_vote_non_json_body_is_422(client: AsyncClient):
    response = await client.post(
        "/v1/vote",
        content=b"winner=Song 00",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_leaderboard_after_votes(client: AsyncClient, catalog: SongCatalog):
    for _ in range(3):
        await client.post("/v1/vote", json={"winner": "Song 03", "loser": "Song 00"})

    response = await client.get("/v1/leaderboard")
    assert response.status_code == 200
    data = response.json()

    assert data["voteCount"] == 3
    entries = data["entries"]
    assert [e["rank"] for e in entries] == list(range(1, len(catalog) + 1))
    assert entries[0]["song"] == "Song 03"
    assert entries[-1]["song"] == "Song 00"
    assert entries[0]["rating"] > entries[-1]["rating"]


@pytest.fixture
def patched_startup(monkeypatch: pytest.MonkeyPatch):
    """Replace Postgres/Redis startup with in-memory fakes; returns the store holder."""
    from songrank import main as main_module

    holder = {"store": FakeRecordStore(votes=9)}

    async def noop() -> None:
        return None

    async def redis_down() -> None:
        raise ConnectionError("redis unavailable")

    monkeypatch.setattr(main_module, "init_db", noop)
    monkeypatch.setattr(main_module, "ping_db", noop)
    monkeypatch.setattr(main_module, "close_db", noop)
    monkeypatch.setattr(main_module, "init_redis", redis_down)
    monkeypatch.setattr(main_module, "close_redis", noop)
    monkeypatch.setattr(main_module, "SongRepository", lambda: holder["store"])
    return holder


@pytest.mark.asyncio
async def test_lifespan_loads_state_without_redis(patched_startup):
    from fastapi import FastAPI

    from songrank.main import lifespan

    test_app = FastAPI()
    async with lifespan(test_app):
        assert len(test_app.state.catalog) == 4
        assert test_app.state.vote_counter.value == 9
        assert test_app.state.vote_processor.catalog is test_app.state.catalog


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "store",
    [FakeRecordStore(unreachable=True), FakeRecordStore(rows=[])],
    ids=["unreachable", "empty-catalog"],
)
async def test_lifespan_aborts_on_configuration_error(patched_startup, store: FakeRecordStore):
    from fastapi import FastAPI

    from songrank.main import lifespan
    from songrank.services.catalog import ConfigurationError

    patched_startup["store"] = store
    with pytest.raises(ConfigurationError):
        async with lifespan(FastAPI()):
            pass


@pytest.mark.asyncio
async def test_vote_accepts_any_title_the_catalog_serves():
    long_title = "Long Song " + "x" * 600
    rows = make_rows(2)
    rows[0]["song"] = long_title
    catalog = await SongCatalog.load(FakeRecordStore(rows))
    counter = await VoteCounter.load(FakeRecordStore(rows))
    app.dependency_overrides[get_vote_processor] = lambda: VoteProcessor(catalog, counter)
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            response = await ac.post("/v1/vote", json={"winner": long_title, "loser": "Song 01"})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    assert catalog.get(long_title).rating == 1016
    assert counter.value == 1
