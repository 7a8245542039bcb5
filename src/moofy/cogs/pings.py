from __future__ import annotations

import logging

import discord
from discord.ext import commands

from moofy.client_data.ping_data import EVERYONE_KEY, PingEntry, role_key, user_key
from moofy.errors import StorageError
from moofy.utils.formatting import THEME, defuse_links, truncate

_log = logging.getLogger(__name__)

# Discord embed field values are capped at 1024 characters
FIELD_LIMIT = 1024


def format_ping(entry: PingEntry, guild_id: int) -> str:
    header = f"[<@{entry.author_id}> pinged you]({entry.jump_url(guild_id)})\n\n"
    content = defuse_links(entry.content)
    return header + truncate(content, FIELD_LIMIT - len(header), suffix="…")


def ping_keys(message: discord.Message) -> list[str]:
    """Every ``PingData`` key *message* should be filed under."""

    keys: list[str] = []
    if message.mention_everyone:
        keys.append(EVERYONE_KEY)
    keys.extend(role_key(role.id) for role in message.role_mentions)
    keys.extend(user_key(user.id) for user in message.mentions)
    return keys


class Pings(commands.Cog):
    """Remembers the latest ping of every kind so people can find out who pinged them."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message):
        if message.guild is None or message.author.bot:
            return

        keys = ping_keys(message)
        if not keys:
            return

        entry = PingEntry(
            content=message.content,
            author_id=message.author.id,
            channel_id=message.channel.id,
            message_id=message.id,
        )
        try:
            async with self.bot.ping_store.access(message.guild.id) as pings:
                for key in keys:
                    pings.record(key, entry)
                pings.save()
        except StorageError as exc:
            _log.error("Checking mentions had an error: %s", exc)

    @commands.command(
        name="whopinged",
        aliases=["whoping", "quienmehahechoping"],
        help="Lists your last pings (assuming Moofy has been paying attention).",
    )
    @commands.guild_only()
    async def whopinged(self, ctx: commands.Context):
        guild_id = ctx.guild.id
        async with self.bot.ping_store.access(guild_id) as pings:
            # TODO: Role pings? Needs the author's roles at the time of the ping.
            found = [
                ("Last @everyone", pings.get(EVERYONE_KEY)),
                ("Last direct @mention", pings.get(user_key(ctx.author.id))),
            ]

        embed = discord.Embed(title="Who DARED to ping thee?", colour=THEME)
        for title, entry in found:
            if entry is not None:
                embed.add_field(name=title, value=format_ping(entry, guild_id), inline=False)
        if not embed.fields:
            embed.description = "Nobody has pinged you since I started paying attention."

        await ctx.send(
            "Tip: Discord has an inbox (ctrl/command + i) with a list of your past mentions.",
            embed=embed,
            allowed_mentions=discord.AllowedMentions.none(),
        )


async def setup(bot: commands.Bot):
    await bot.add_cog(Pings(bot))
