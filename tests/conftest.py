"""Shared fixtures."""

import pytest

from songrank.services.catalog import SongCatalog, VoteCounter

from tests.fakes import FakeRecordStore


@pytest.fixture
def store() -> FakeRecordStore:
    return FakeRecordStore()


@pytest.fixture
async def catalog(store: FakeRecordStore) -> SongCatalog:
    return await SongCatalog.load(store)


@pytest.fixture
async def counter(store: FakeRecordStore) -> VoteCounter:
    return await VoteCounter.load(store)
