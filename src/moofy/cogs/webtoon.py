from __future__ import annotations

import logging
import random

import discord
from discord.ext import commands

from moofy.errors import ErrorWithReason, FetchError
from moofy.integrations.webtoons import VALID_ID, VALID_URL, WebtoonPage, fetch_webtoon
from moofy.utils.formatting import THEME, truncate

_log = logging.getLogger(__name__)

RANDOM_MESSAGE = [
    "I already read this...",
    "The last episode was pretty epic; you should read it!",
    "I approve.",
]


def webtoon_embed(page: WebtoonPage) -> discord.Embed:
    embed = discord.Embed(title=truncate(page.title, 256, suffix="…"), url=page.url, colour=THEME)
    for episode in page.episodes:
        up = " **UP**" if episode.up else ""
        embed.add_field(
            name=truncate(episode.name, 256, suffix="…"),
            value=f"[{episode.date}]({episode.link}){up}",
            inline=False,
        )
    if page.image:
        embed.set_image(url=page.image)
    return embed


class Webtoon(commands.Cog):
    """Quickly fetch the latest Webtoons."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    async def cog_check(self, ctx: commands.Context) -> bool:
        if ctx.guild is None:
            raise commands.NoPrivateMessage()
        return True

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def check_webtoon(self, ctx: commands.Context, webtoon_id: str) -> bool:
        """Post the latest episodes of *webtoon_id*; ``False`` if no such Webtoon was added."""

        async with self.bot.guild_store.access(ctx.guild.id) as data:
            url = data.webtoons.get(webtoon_id)
        if url is None:
            return False

        async with ctx.typing():
            try:
                page = await fetch_webtoon(url)
            except FetchError as exc:
                raise ErrorWithReason(f"I couldn't reach Webtoons right now ({exc.message}).") from exc

        await ctx.send(random.choice(RANDOM_MESSAGE), embed=webtoon_embed(page))
        return True

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @commands.group(name="webtoon", aliases=["webtoons"], invoke_without_command=True)
    async def webtoon(self, ctx: commands.Context):
        """Quickly fetch the latest Webtoons."""

        await ctx.send_help(ctx.command)

    @webtoon.command(
        name="add",
        usage="<id> <webtoon URL>",
        help="Introduce Moofy to a Webtoon. You can then check on it using `webtoon check <id>`.",
    )
    @commands.has_permissions(manage_guild=True)
    async def add(self, ctx: commands.Context, webtoon_id: str, *, url: str):
        url = url.strip().strip("<>")
        if not VALID_ID.match(webtoon_id):
            raise ErrorWithReason(
                "The given ID has too many special characters. Please just stick to letters, numbers, and hyphens."
            )
        if not VALID_URL.match(url):
            raise ErrorWithReason('The given "URL" doesn\'t seem to be a Webtoons URL.')

        async with self.bot.guild_store.access(ctx.guild.id) as data:
            if webtoon_id in data.webtoons:
                raise ErrorWithReason(
                    f"A Webtoon with the given ID already exists! Try it: `{ctx.clean_prefix}webtoon check {webtoon_id}`"
                )
            data.add_webtoon(webtoon_id, url)
            data.save()

        await ctx.message.add_reaction("👌")

    @webtoon.command(name="remove", usage="<id>", help="Remove a Webtoon by its ID.")
    @commands.has_permissions(manage_guild=True)
    async def remove(self, ctx: commands.Context, webtoon_id: str):
        async with self.bot.guild_store.access(ctx.guild.id) as data:
            removed = data.remove_webtoon(webtoon_id)
            if removed:
                data.save()

        if removed:
            await ctx.send("The Webtoon has been deleted. 😢")
        else:
            await ctx.send("I didn't delete anything since there was nothing to delete.")

    @webtoon.command(name="check", usage="<id>", help="Check to see if a new episode for a Webtoon has been uploaded.")
    async def check(self, ctx: commands.Context, webtoon_id: str):
        if await self.check_webtoon(ctx, webtoon_id):
            return

        embed = discord.Embed(
            description=f"Hint: Request the mods to do `{ctx.clean_prefix}webtoon add {webtoon_id} <url>` first."
        )
        await ctx.send(
            "I don't know which Webtoon you're referring to; a Webtoon doesn't exist with that ID.",
            embed=embed,
        )

    @webtoon.command(name="list", help="Lists the Webtoon IDs added in the server.")
    async def list_(self, ctx: commands.Context):
        async with self.bot.guild_store.access(ctx.guild.id) as data:
            webtoons = sorted(data.webtoons.items())

        prefix = ctx.clean_prefix
        if webtoons:
            ids = "\n".join(f"[`{webtoon_id}`]({url})" for webtoon_id, url in webtoons)
            description = truncate(ids, 2000)
        else:
            description = (
                f"No Webtoons have been added. The server's mods should do "
                f"`{prefix}webtoon add <id> <url>` to add some Webtoons."
            )

        await ctx.send(
            f"Use `{prefix}webtoon check <id>` to check on an individual Webtoon by ID.\n\n"
            f"Tip: For most Webtoon IDs, you can simply just do `{prefix}<id>`.",
            embed=discord.Embed(description=description),
        )

    # ------------------------------------------------------------------
    # `:<id>` shortcut
    # ------------------------------------------------------------------

    @commands.Cog.listener()
    async def on_command_error(self, ctx: commands.Context, error: commands.CommandError):
        if not isinstance(error, commands.CommandNotFound):
            return
        if ctx.guild is None or not ctx.invoked_with:
            return
        try:
            await self.check_webtoon(ctx, ctx.invoked_with)
        except ErrorWithReason as exc:
            await ctx.send(exc.reason)
        except discord.HTTPException as exc:
            _log.warning("Webtoon shortcut %s failed: %s", ctx.invoked_with, exc)


async def setup(bot: commands.Bot):
    await bot.add_cog(Webtoon(bot))
