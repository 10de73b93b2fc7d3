"""Tests for the favorites store."""

import json
from datetime import datetime, timezone

import pytest

from podnav.library.favorites import FavoritesStore
from podnav.utils.errors import LibraryError

SHOW_A = "4rOoJ6Egrf8K2IrywzwOMk"
SHOW_B = "2MAi0BvDc6GTFvKFPXnkCL"


@pytest.fixture
def store(tmp_path):
    return FavoritesStore(tmp_path / "favorites.json")


class TestFavoritesStore:
    """Test FavoritesStore."""

    @pytest.mark.asyncio
    async def test_empty_without_file(self, store):
        assert await store.list() == []
        assert not await store.contains(SHOW_A)

    @pytest.mark.asyncio
    async def test_add_and_list(self, store):
        favorite = await store.add(SHOW_A, "History Hour")

        assert favorite.id == SHOW_A
        assert await store.contains(SHOW_A)
        assert [f.name for f in await store.list()] == ["History Hour"]
        assert store.path.exists()

    @pytest.mark.asyncio
    async def test_add_existing_renames(self, store):
        """Test adding a saved show updates its name instead of duplicating it."""
        first = await store.add(SHOW_A, "Old Name")
        second = await store.add(SHOW_A, "New Name")

        favorites = await store.list()
        assert len(favorites) == 1
        assert favorites[0].name == "New Name"
        assert second.added_at == first.added_at

    @pytest.mark.asyncio
    async def test_list_newest_first(self, store):
        store.path.write_text(
            json.dumps(
                [
                    {"id": SHOW_A, "name": "Older", "added_at": "2024-01-01T00:00:00Z"},
                    {"id": SHOW_B, "name": "Newer", "added_at": "2024-03-01T00:00:00Z"},
                ]
            )
        )

        favorites = await store.list()

        assert [f.name for f in favorites] == ["Newer", "Older"]
        assert favorites[0].added_at == datetime(2024, 3, 1, tzinfo=timezone.utc)

    @pytest.mark.asyncio
    async def test_remove(self, store):
        await store.add(SHOW_A, "A")
        await store.add(SHOW_B, "B")

        assert await store.remove(SHOW_A)
        assert not await store.remove(SHOW_A)
        assert [f.id for f in await store.list()] == [SHOW_B]

    @pytest.mark.asyncio
    async def test_clear(self, store):
        await store.add(SHOW_A, "A")
        await store.add(SHOW_B, "B")

        assert await store.clear() == 2
        assert await store.list() == []
        assert await store.clear() == 0

    @pytest.mark.asyncio
    async def test_persists_across_instances(self, store):
        await store.add(SHOW_A, "A")

        reopened = FavoritesStore(store.path)

        assert await reopened.contains(SHOW_A)

    @pytest.mark.asyncio
    async def test_creates_parent_directory(self, tmp_path):
        store = FavoritesStore(tmp_path / "nested" / "dir" / "favorites.json")

        await store.add(SHOW_A, "A")

        assert store.path.exists()
        assert not store.path.with_suffix(".tmp").exists()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", ["{not json", '{"id": "x"}', '[{"name": "no id"}]'])
    async def test_corrupt_file_reads_as_empty(self, store, content):
        store.path.write_text(content)

        assert await store.list() == []

    @pytest.mark.asyncio
    async def test_write_failure(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        store = FavoritesStore(blocker / "favorites.json")

        with pytest.raises(LibraryError, match="Failed to write"):
            await store.add(SHOW_A, "A")
