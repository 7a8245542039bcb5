"""
Moofy - DataStore Tests
=======================

Caching and locking behaviour of the per-guild record store.
"""

import asyncio
import json

import pytest

from moofy.client_data import DataStore
from moofy.client_data.emoji_data import EmojiData
from moofy.client_data.guild_data import GuildData


class TestGetOrLoad:
    """Tests for lazy loading."""

    def test_creates_category_directory(self, data_dir):
        DataStore(GuildData, data_dir)
        assert (data_dir / "guilds").is_dir()

    def test_same_instance_on_hit(self, data_dir):
        store = DataStore(GuildData, data_dir)

        first = store.get_or_load(1)
        first.count = 10
        assert store.get_or_load(1) is first
        assert store.get_or_load(1).count == 10

    def test_no_reload_on_hit(self, data_dir):
        store = DataStore(GuildData, data_dir)
        store.get_or_load(1)
        (data_dir / "guilds" / "1.json").write_text(json.dumps({"count": 99}), encoding="utf-8")

        assert store.get_or_load(1).count == 0

    def test_loads_existing_file_on_miss(self, data_dir):
        (data_dir / "guilds").mkdir(parents=True)
        (data_dir / "guilds" / "7.json").write_text(json.dumps({"count": 4}), encoding="utf-8")
        store = DataStore(GuildData, data_dir)

        assert store.get_or_load(7).count == 4

    def test_cached_ids(self, data_dir):
        store = DataStore(GuildData, data_dir)
        store.get_or_load(3)
        store.get_or_load(1)

        assert store.cached_ids() == [1, 3]
        assert 3 in store
        assert 2 not in store
        assert len(store) == 2

    def test_stores_share_a_lock(self, data_dir):
        guilds = DataStore(GuildData, data_dir)
        emoji = DataStore(EmojiData, data_dir, guilds.lock)

        assert emoji.lock is guilds.lock


class TestAccess:
    """Tests for the locked access context manager."""

    @pytest.mark.asyncio
    async def test_holds_lock_inside_block(self, data_dir):
        store = DataStore(GuildData, data_dir)

        async with store.access(1) as data:
            assert store.lock.locked()
            assert data is store.get_or_load(1)
        assert not store.lock.locked()

    @pytest.mark.asyncio
    async def test_releases_lock_on_error(self, data_dir):
        store = DataStore(GuildData, data_dir)

        with pytest.raises(RuntimeError):
            async with store.access(1) as data:
                data.increment_count()
                raise RuntimeError("boom")

        assert not store.lock.locked()
        # The mutation is not rolled back
        assert store.get_or_load(1).count == 1

    @pytest.mark.asyncio
    async def test_concurrent_increments_are_serialised(self, data_dir):
        store = DataStore(GuildData, data_dir)

        async def bump():
            for _ in range(25):
                async with store.access(1) as data:
                    before = data.count
                    await asyncio.sleep(0)
                    data.count = before + 1
                    data.save()

        await asyncio.gather(bump(), bump(), bump())

        assert store.get_or_load(1).count == 75
        assert GuildData.load(1, data_dir).count == 75
