from __future__ import annotations

import logging

import discord
from discord.ext import commands

from moofy.errors import StorageError
from moofy.utils.formatting import THEME, custom_emoji_ids

_log = logging.getLogger(__name__)

STATS_LIMIT = 10


class Emoji(commands.Cog):
    """A group with commands providing an emoji as response, plus custom emoji usage stats."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    # ------------------------------------------------------------------
    # Usage tracking
    # ------------------------------------------------------------------

    async def _track(self, guild_id: int, emoji_ids: list[str]) -> None:
        try:
            async with self.bot.emoji_store.access(guild_id) as data:
                for emoji_id in emoji_ids:
                    data.increment(emoji_id)
                data.save()
        except StorageError as exc:
            _log.error("Failed to save emoji usage for guild %s: %s", guild_id, exc)

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message):
        if message.guild is None or message.author.bot:
            return
        emoji_ids = custom_emoji_ids(message.content)
        if emoji_ids:
            await self._track(message.guild.id, emoji_ids)

    @commands.Cog.listener()
    async def on_raw_reaction_add(self, payload: discord.RawReactionActionEvent):
        if payload.guild_id is None or payload.emoji.id is None:
            return
        # Ignore own reactions
        if self.bot.user is not None and payload.user_id == self.bot.user.id:
            return
        await self._track(payload.guild_id, [str(payload.emoji.id)])

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @commands.group(name="emoji", aliases=["em"], invoke_without_command=True)
    async def emoji(self, ctx: commands.Context, *, animal: str = ""):
        """Find an animal emoji. Same as `emoji bird`."""

        await self._bird(ctx, animal)

    @emoji.command(name="bird")
    async def bird(self, ctx: commands.Context, *, animal: str = ""):
        await self._bird(ctx, animal)

    @staticmethod
    async def _bird(ctx: commands.Context, animal: str) -> None:
        if animal:
            content = f":bird: could not find animal named: `{animal}`."
        else:
            content = ":bird: can find animals for you."
        await ctx.send(content, allowed_mentions=discord.AllowedMentions.none())

    @emoji.command(name="cat", aliases=["kitty", "neko"])
    @commands.cooldown(1, 5, commands.BucketType.user)
    @commands.has_permissions(administrator=True)
    async def cat(self, ctx: commands.Context):
        await ctx.send(":cat:")

    @emoji.command(name="sheep", description="Sends an emoji with a sheep.")
    @commands.cooldown(1, 5, commands.BucketType.user)
    async def sheep(self, ctx: commands.Context):
        await ctx.send(":sheep:")

    @emoji.command(name="stats", aliases=["top"])
    @commands.guild_only()
    async def stats(self, ctx: commands.Context):
        """Shows the server's most used custom emoji."""

        async with self.bot.emoji_store.access(ctx.guild.id) as data:
            top = data.top(STATS_LIMIT)

        if not top:
            await ctx.send("I haven't seen anyone use a custom emoji here yet.")
            return

        lines = []
        for rank, (emoji_id, uses) in enumerate(top, start=1):
            emoji = ctx.guild.get_emoji(int(emoji_id)) if emoji_id.isdigit() else None
            label = str(emoji) if emoji is not None else f"`{emoji_id}`"
            lines.append(f"{rank}. {label} × {uses}")
        embed = discord.Embed(title="Most used emoji", description="\n".join(lines), colour=THEME)
        await ctx.send(embed=embed)


async def setup(bot: commands.Bot):
    await bot.add_cog(Emoji(bot))
