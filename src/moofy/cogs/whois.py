from __future__ import annotations

import logging
from typing import Optional

import discord
from discord.ext import commands

from moofy.errors import ErrorWithReason, FetchError
from moofy.integrations.http import fetch_text
from moofy.integrations.whois_csv import find_user_id, parse_whois_csv, whois_fields
from moofy.utils.formatting import join_lines_within

_log = logging.getLogger(__name__)

# Upper bound for a downloaded directory, in characters
MAX_CSV_SIZE = 2_000_000


def matching_members(members, search: str) -> list[discord.Member]:
    """Members whose username, global name or nickname contains *search* (case-insensitive)."""

    needle = search.lower()
    matches = []
    for member in members:
        names = (member.name, member.global_name, member.nick)
        if any(name and needle in name.lower() for name in names):
            matches.append(member)
    return matches


class Whois(commands.Cog):
    """Give information about a user from a CSV file."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _lookup(self, guild_id: int, user_id: str) -> Optional[list[tuple[str, str]]]:
        async with self.bot.guild_store.access(guild_id) as data:
            row = data.get_whois_entry_by_id(user_id)
            if row is None:
                return None
            return whois_fields(data.whois_headers, row)

    async def _display(self, ctx: commands.Context, user_id: str) -> bool:
        fields = await self._lookup(ctx.guild.id, user_id)
        if fields is None:
            return False

        embed = discord.Embed(description=f"What we know about <@{user_id}>")
        for name, value in fields:
            embed.add_field(name=name, value=value, inline=True)
        await ctx.send(
            "Fresh from the FBI's kitchen!",
            embed=embed,
            allowed_mentions=discord.AllowedMentions.none(),
        )
        return True

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @commands.group(
        name="whois",
        invoke_without_command=True,
        usage="<user id or name>",
        help="List information about the given user from the server's CSV file.",
    )
    @commands.guild_only()
    async def whois(self, ctx: commands.Context, *, search: str):
        guild = ctx.guild

        async with self.bot.guild_store.access(guild.id) as data:
            has_directory = bool(data.whois_headers)
        if not has_directory:
            raise ErrorWithReason(
                f"This server has no whois directory yet. A moderator can load one with "
                f"`{ctx.clean_prefix}whois fetch <url>`."
            )

        user_id = find_user_id(search)
        if user_id is not None and await self._display(ctx, user_id):
            return

        if not guild.chunked:
            await guild.chunk()

        member = guild.get_member_named(search)
        if member is not None and await self._display(ctx, str(member.id)):
            return

        possibilities = matching_members(guild.members, search)
        if not possibilities:
            await ctx.send("I don't know whom you're referring to, sorry.")
            return

        lines = [f"<@{member.id}> ({member.id})" for member in possibilities]
        await ctx.send(
            "Your given name doesn't match a name exactly, but perhaps you meant these?",
            embed=discord.Embed(description=join_lines_within(lines)),
            allowed_mentions=discord.AllowedMentions.none(),
        )

    @whois.command(
        name="fetch",
        usage='"[url]"',
        help=(
            "Fetch whois information from the given URL to a CSV file. The first column whose name "
            "contains \"ID\" identifies which Discord user each row belongs to. Without a URL the "
            "last one is used again. Requires the Manage Server permission."
        ),
    )
    @commands.guild_only()
    @commands.has_permissions(manage_guild=True)
    async def fetch(self, ctx: commands.Context, url: Optional[str] = None):
        guild_id = ctx.guild.id

        if url is None:
            async with self.bot.guild_store.access(guild_id) as data:
                url = data.whois_url
            if not url:
                raise ErrorWithReason("I don't remember the last URL you used, so you'll have to specify it.")
        url = url.strip("<>")

        async with ctx.typing():
            try:
                text = await fetch_text(url)
            except FetchError as exc:
                raise ErrorWithReason(f"I couldn't download that file ({exc.message}).") from exc

        if len(text) > MAX_CSV_SIZE:
            raise ErrorWithReason("That file is too big for me to remember.")
        try:
            headers, rows = parse_whois_csv(text)
        except ValueError as exc:
            raise ErrorWithReason(str(exc)) from exc

        async with self.bot.guild_store.access(guild_id) as data:
            data.set_whois(url, headers, rows)
            data.save()
            has_id_column = data.id_column() is not None

        _log.info("Loaded whois directory for guild %s: %d row(s)", guild_id, len(rows))
        message = f"Got it! I now know {len(rows)} row(s) with {len(headers)} column(s)."
        if not has_id_column:
            message += "\nHeads up: no column has \"ID\" in its name, so I can't match rows to users."
        await ctx.send(message)


async def setup(bot: commands.Bot):
    await bot.add_cog(Whois(bot))
