from __future__ import annotations

import logging
from typing import Optional

import discord
from discord.ext import commands

from moofy.errors import ErrorWithReason

_log = logging.getLogger(__name__)

# Discord's maximum slow-mode delay (6 hours)
MAX_SLOW_MODE = 21600


class Owner(commands.Cog):
    """Only the creator of this bot can use these commands!"""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    async def cog_check(self, ctx: commands.Context) -> bool:
        if ctx.guild is None:
            raise commands.NoPrivateMessage()
        if not await self.bot.is_owner(ctx.author):
            raise commands.NotOwner("You do not own this bot.")
        return True

    @commands.command(name="slow_mode", usage="[seconds]")
    async def slow_mode(self, ctx: commands.Context, seconds: Optional[int] = None):
        """Sets the slow mode to the number of seconds if given, or reports the channel's current slow mode."""

        channel = ctx.channel
        if not isinstance(channel, (discord.TextChannel, discord.VoiceChannel, discord.Thread)):
            await ctx.send("Failed to find channel in cache.")
            return

        if seconds is None:
            await ctx.send(f"Current slow mode rate is `{channel.slowmode_delay}` seconds.")
            return

        if not 0 <= seconds <= MAX_SLOW_MODE:
            raise ErrorWithReason(f"Slow mode has to be between 0 and {MAX_SLOW_MODE} seconds.")

        try:
            await channel.edit(slowmode_delay=seconds)
        except discord.HTTPException as exc:
            _log.warning("Error setting channel's slow mode rate: %s", exc)
            await ctx.send(f"Failed to set slow mode to `{seconds}` seconds.")
            return

        await ctx.send(f"Successfully set slow mode rate to `{seconds}` seconds.")


async def setup(bot: commands.Bot):
    await bot.add_cog(Owner(bot))
