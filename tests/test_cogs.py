"""
Moofy - Cog Tests
=================

Command callbacks and listeners driven with mocked Discord objects.
"""

import json
import logging
from collections import Counter as UsageCounter
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from discord.ext import commands

from moofy.client_data.ping_data import EVERYONE_KEY, PingEntry, role_key, user_key
from moofy.cogs.counter import Counter, parse_amount
from moofy.cogs.emoji import Emoji
from moofy.cogs.events import SAVE_FAILED, describe_error
from moofy.cogs.general import usage_report
from moofy.cogs.math import format_number
from moofy.cogs.pings import FIELD_LIMIT, Pings, format_ping, ping_keys
from moofy.cogs.webtoon import Webtoon
from moofy.cogs.whois import Whois, matching_members
from moofy.errors import ErrorWithReason, StorageError
from moofy.integrations.webtoons import WebtoonEpisode, WebtoonPage

WEBTOON_URL = "https://www.webtoons.com/en/action/weakhero/list?title_no=1726"


def guild_message(content="", *, everyone=False, roles=(), users=(), author_bot=False):
    message = MagicMock()
    message.content = content
    message.guild.id = 1
    message.author.id = 5
    message.author.bot = author_bot
    message.channel.id = 6
    message.id = 7
    message.mention_everyone = everyone
    message.role_mentions = [SimpleNamespace(id=role) for role in roles]
    message.mentions = [SimpleNamespace(id=user) for user in users]
    return message


class TestCounter:
    """Tests for the `count` command."""

    @pytest.mark.asyncio
    async def test_three_increments(self, mock_bot, mock_ctx, data_dir):
        cog = Counter(mock_bot)
        for _ in range(3):
            await cog.count.callback(cog, mock_ctx)

        mock_ctx.send.assert_called_with("The server's count is now **3**.")
        raw = json.loads((data_dir / "guilds" / "1.json").read_text(encoding="utf-8"))
        assert raw["count"] == 3

    @pytest.mark.asyncio
    async def test_adds_given_number(self, mock_bot, mock_ctx):
        cog = Counter(mock_bot)
        await cog.count.callback(cog, mock_ctx, "5")

        assert mock_bot.guild_store.get_or_load(1).count == 5

    @pytest.mark.parametrize("raw", ["abc", "-2", "1.5"])
    def test_rejects_bad_numbers(self, raw):
        with pytest.raises(ErrorWithReason):
            parse_amount(raw)


class TestWebtoonCommands:
    """Tests for the `webtoon` group."""

    @pytest.mark.asyncio
    async def test_add_then_remove(self, mock_bot, mock_ctx):
        cog = Webtoon(mock_bot)

        await cog.add.callback(cog, mock_ctx, "weakhero", url=WEBTOON_URL)
        mock_ctx.message.add_reaction.assert_awaited_once_with("👌")
        assert mock_bot.guild_store.get_or_load(1).webtoons == {"weakhero": WEBTOON_URL}

        await cog.remove.callback(cog, mock_ctx, "weakhero")
        mock_ctx.send.assert_called_with("The Webtoon has been deleted. 😢")
        assert "weakhero" not in mock_bot.guild_store.get_or_load(1).webtoons

    @pytest.mark.asyncio
    async def test_remove_missing(self, mock_bot, mock_ctx):
        cog = Webtoon(mock_bot)
        await cog.remove.callback(cog, mock_ctx, "foo")

        mock_ctx.send.assert_called_with("I didn't delete anything since there was nothing to delete.")

    @pytest.mark.asyncio
    async def test_add_duplicate_rejected(self, mock_bot, mock_ctx):
        cog = Webtoon(mock_bot)
        await cog.add.callback(cog, mock_ctx, "weakhero", url=WEBTOON_URL)

        with pytest.raises(ErrorWithReason) as excinfo:
            await cog.add.callback(cog, mock_ctx, "weakhero", url=WEBTOON_URL)
        assert "already exists" in excinfo.value.reason
        assert not mock_bot.guild_store.lock.locked()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "webtoon_id, url",
        [("weak hero!", WEBTOON_URL), ("weakhero", "https://example.com/weakhero")],
    )
    async def test_add_validation(self, mock_bot, mock_ctx, webtoon_id, url):
        cog = Webtoon(mock_bot)

        with pytest.raises(ErrorWithReason):
            await cog.add.callback(cog, mock_ctx, webtoon_id, url=url)
        assert mock_bot.guild_store.get_or_load(1).webtoons == {}

    @pytest.mark.asyncio
    async def test_list_empty(self, mock_bot, mock_ctx):
        cog = Webtoon(mock_bot)
        await cog.list_.callback(cog, mock_ctx)

        embed = mock_ctx.send.call_args.kwargs["embed"]
        assert embed.description.startswith("No Webtoons have been added.")

    @pytest.mark.asyncio
    async def test_check_unknown(self, mock_bot, mock_ctx):
        cog = Webtoon(mock_bot)
        await cog.check.callback(cog, mock_ctx, "nope")

        assert "doesn't exist" in mock_ctx.send.call_args.args[0]

    @pytest.mark.asyncio
    async def test_check_known(self, mock_bot, mock_ctx, monkeypatch):
        page = WebtoonPage(
            url=WEBTOON_URL,
            title="Weak Hero",
            image="https://webtoon-phinf.pstatic.net/thumb.jpg",
            episodes=[WebtoonEpisode("Ep. 2", "Mar 2, 2021", "https://www.webtoons.com/ep2", up=True)],
        )
        fetch = AsyncMock(return_value=page)
        monkeypatch.setattr("moofy.cogs.webtoon.fetch_webtoon", fetch)
        mock_bot.guild_store.get_or_load(1).add_webtoon("weakhero", WEBTOON_URL)

        cog = Webtoon(mock_bot)
        await cog.check.callback(cog, mock_ctx, "weakhero")

        fetch.assert_awaited_once_with(WEBTOON_URL)
        embed = mock_ctx.send.call_args.kwargs["embed"]
        assert embed.title == "Weak Hero"
        assert embed.fields[0].value == "[Mar 2, 2021](https://www.webtoons.com/ep2) **UP**"


class TestEmojiTracking:
    """Tests for custom emoji usage listeners."""

    @pytest.mark.asyncio
    async def test_message_counts_every_occurrence(self, mock_bot):
        cog = Emoji(mock_bot)
        message = guild_message("<:moo:123456789012345678> hi <a:moo:123456789012345678>")

        await cog.on_message(message)

        assert mock_bot.emoji_store.get_or_load(1).emoji == {"123456789012345678": 2}

    @pytest.mark.asyncio
    async def test_reaction_counts(self, mock_bot):
        cog = Emoji(mock_bot)
        payload = SimpleNamespace(guild_id=1, user_id=7, emoji=SimpleNamespace(id=555))

        for _ in range(3):
            await cog.on_raw_reaction_add(payload)

        assert mock_bot.emoji_store.get_or_load(1).emoji == {"555": 3}

    @pytest.mark.asyncio
    async def test_unicode_and_own_reactions_ignored(self, mock_bot):
        cog = Emoji(mock_bot)
        await cog.on_raw_reaction_add(SimpleNamespace(guild_id=1, user_id=7, emoji=SimpleNamespace(id=None)))
        await cog.on_raw_reaction_add(
            SimpleNamespace(guild_id=1, user_id=mock_bot.user.id, emoji=SimpleNamespace(id=555))
        )

        assert mock_bot.emoji_store.get_or_load(1).emoji == {}

    @pytest.mark.asyncio
    async def test_stats_lists_unknown_ids_verbatim(self, mock_bot, mock_ctx):
        mock_bot.emoji_store.get_or_load(1).emoji = {"555": 3, "moo": 1}
        mock_ctx.guild.get_emoji = MagicMock(return_value=None)
        cog = Emoji(mock_bot)

        await cog.stats.callback(cog, mock_ctx)

        embed = mock_ctx.send.call_args.kwargs["embed"]
        assert embed.description == "1. `555` × 3\n2. `moo` × 1"
        mock_ctx.guild.get_emoji.assert_called_once_with(555)


class TestPings:
    """Tests for ping tracking and `whopinged`."""

    def test_ping_keys(self):
        message = guild_message(everyone=True, roles=[10], users=[42])

        assert ping_keys(message) == [EVERYONE_KEY, role_key(10), user_key(42)]

    @pytest.mark.asyncio
    async def test_listener_records_pings(self, mock_bot):
        cog = Pings(mock_bot)
        await cog.on_message(guild_message("hey @everyone and <@42>", everyone=True, users=[42]))

        pings = mock_bot.ping_store.get_or_load(1)
        assert pings.get(EVERYONE_KEY) == PingEntry("hey @everyone and <@42>", 5, 6, 7)
        assert pings.get(user_key(42)) is not None

    @pytest.mark.asyncio
    async def test_listener_ignores_bots(self, mock_bot):
        cog = Pings(mock_bot)
        await cog.on_message(guild_message("hi", everyone=True, author_bot=True))

        assert mock_bot.ping_store.get_or_load(1).pings == {}

    @pytest.mark.asyncio
    async def test_whopinged(self, mock_bot, mock_ctx):
        mock_bot.ping_store.get_or_load(1).record(user_key(42), PingEntry("look [here](http://x)", 5, 6, 7))

        cog = Pings(mock_bot)
        await cog.whopinged.callback(cog, mock_ctx)

        embed = mock_ctx.send.call_args.kwargs["embed"]
        assert [field.name for field in embed.fields] == ["Last direct @mention"]
        assert "]\u200b(" in embed.fields[0].value

    def test_format_ping_fits_in_a_field(self):
        entry = PingEntry("x" * 5000, 5, 6, 7)

        value = format_ping(entry, 1)
        assert len(value) <= FIELD_LIMIT
        assert value.startswith("[<@5> pinged you](https://discord.com/channels/1/6/7)")


class TestWhoisCommands:
    """Tests for the `whois` group."""

    @pytest.mark.asyncio
    async def test_lookup_without_directory(self, mock_bot, mock_ctx):
        cog = Whois(mock_bot)

        with pytest.raises(ErrorWithReason):
            await cog.whois.callback(cog, mock_ctx, search="222")

    @pytest.mark.asyncio
    async def test_fetch_then_lookup(self, mock_bot, mock_ctx, monkeypatch):
        fetch = AsyncMock(return_value="Name,User ID,Pronouns\nAlice,111,she/her\nBob,222,\n")
        monkeypatch.setattr("moofy.cogs.whois.fetch_text", fetch)
        cog = Whois(mock_bot)

        await cog.fetch.callback(cog, mock_ctx, "https://example.com/users.csv")
        assert "2 row(s)" in mock_ctx.send.call_args.args[0]
        assert mock_bot.guild_store.get_or_load(1).whois_url == "https://example.com/users.csv"

        await cog.whois.callback(cog, mock_ctx, search="<@222>")
        assert mock_ctx.send.call_args.args[0] == "Fresh from the FBI's kitchen!"
        embed = mock_ctx.send.call_args.kwargs["embed"]
        assert [(field.name, field.value) for field in embed.fields] == [("Name", "Bob"), ("User ID", "222")]

    @pytest.mark.asyncio
    async def test_fetch_reuses_last_url(self, mock_bot, mock_ctx, monkeypatch):
        fetch = AsyncMock(return_value="ID\n1\n")
        monkeypatch.setattr("moofy.cogs.whois.fetch_text", fetch)
        mock_bot.guild_store.get_or_load(1).whois_url = "https://example.com/old.csv"
        cog = Whois(mock_bot)

        await cog.fetch.callback(cog, mock_ctx)

        fetch.assert_awaited_once_with("https://example.com/old.csv")

    @pytest.mark.asyncio
    async def test_fetch_without_any_url(self, mock_bot, mock_ctx):
        cog = Whois(mock_bot)

        with pytest.raises(ErrorWithReason):
            await cog.fetch.callback(cog, mock_ctx)

    @pytest.mark.asyncio
    async def test_fetch_malformed_url_gives_reason(self, mock_bot, mock_ctx):
        cog = Whois(mock_bot)

        with pytest.raises(ErrorWithReason) as excinfo:
            await cog.fetch.callback(cog, mock_ctx, "http://[::1/x.csv")
        assert "invalid URL" in excinfo.value.reason
        assert mock_bot.guild_store.get_or_load(1).whois_url is None

    def test_matching_members(self):
        members = [
            SimpleNamespace(id=1, name="sheeptester", global_name="Sean", nick=None),
            SimpleNamespace(id=2, name="moofy", global_name=None, nick="Moo"),
        ]

        assert [member.id for member in matching_members(members, "MOO")] == [2]
        assert [member.id for member in matching_members(members, "sea")] == [1]


class TestErrorHandling:
    """Tests for the central command error handler."""

    @pytest.fixture
    def ctx(self):
        ctx = MagicMock()
        ctx.command = None
        return ctx

    def test_reason_is_shown(self, ctx):
        assert describe_error(ctx, ErrorWithReason("Nope.")) == "Nope."

    def test_cooldown(self, ctx):
        error = commands.CommandOnCooldown(commands.Cooldown(1, 5), 4.2, commands.BucketType.user)

        assert describe_error(ctx, error) == "Try this again in 5 seconds."

    def test_bad_argument(self, ctx):
        assert describe_error(ctx, commands.BadArgument("Converting failed.")) == "Converting failed."

    def test_check_failure(self, ctx):
        assert "private messages" in describe_error(ctx, commands.NoPrivateMessage())

    def test_unknown_command_is_silent(self, ctx):
        assert describe_error(ctx, commands.CommandNotFound("nope")) is None

    def test_storage_error(self, ctx, tmp_path):
        error = commands.CommandInvokeError(StorageError(tmp_path / "1.json", OSError("disk full")))

        assert describe_error(ctx, error) == SAVE_FAILED

    def test_unexpected_error_is_logged_and_silent(self, ctx, caplog):
        error = commands.CommandInvokeError(RuntimeError("boom"))

        with caplog.at_level(logging.ERROR):
            assert describe_error(ctx, error) is None
        assert "raised an exception" in caplog.text


class TestSmallCommands:
    """Tests for formatting used by small commands."""

    def test_usage_report(self):
        report = usage_report(UsageCounter({"count": 3, "about": 1}))

        assert report == "Commands used since last restart:\n- count: 3\n- about: 1"

    def test_format_number(self):
        assert format_number(3.0 * 4.0) == "12"
        assert format_number(1.5 * 3) == "4.5"
