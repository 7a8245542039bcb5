"""
Moofy - Test Fixtures
=====================

Shared fixtures for all tests.
"""

import os
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

# Set up test environment before importing modules
os.environ.setdefault("DISCORD_TOKEN", "test-token")
os.environ["COMMAND_PREFIX"] = ":"
os.environ.pop("API_TOKEN", None)

from moofy.client_data import DataStore  # noqa: E402
from moofy.client_data.emoji_data import EmojiData  # noqa: E402
from moofy.client_data.guild_data import GuildData  # noqa: E402
from moofy.client_data.ping_data import PingData  # noqa: E402
from moofy.config import get_settings  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_settings():
    """Re-read settings for every test so monkeypatched env vars take effect."""

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "data"


@pytest.fixture
def mock_bot(data_dir):
    """Object with the attributes cogs and routes use from ``MoofyBot``."""

    bot = SimpleNamespace()
    bot.guild_store = DataStore(GuildData, data_dir)
    bot.emoji_store = DataStore(EmojiData, data_dir, bot.guild_store.lock)
    bot.ping_store = DataStore(PingData, data_dir, bot.guild_store.lock)
    bot.user = SimpleNamespace(id=393248490739859458)
    return bot


@pytest.fixture
def mock_ctx():
    """Command context in guild 1 with awaitable send/reply/reaction helpers."""

    ctx = MagicMock()
    ctx.guild.id = 1
    ctx.author.id = 42
    ctx.clean_prefix = ":"
    ctx.send = AsyncMock()
    ctx.reply = AsyncMock()
    ctx.message.add_reaction = AsyncMock()
    ctx.typing = MagicMock(return_value=AsyncMock())
    return ctx
