from __future__ import annotations

import logging
import math
import re

import discord
from discord.ext import commands

from moofy.config import get_settings
from moofy.errors import ErrorWithReason, StorageError

_log = logging.getLogger(__name__)

MENTIONED_MOOFY = re.compile(r"\bmoofy\b", re.IGNORECASE)
PING_EMOJI = "<:ping:719277539113041930>"
SAVE_FAILED = "I couldn't save that, sorry. Please try again later."


class Events(commands.Cog):
    """Presence, command bookkeeping, mention reactions and the central error handler."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @commands.Cog.listener()
    async def on_ready(self):
        _log.info("%s is connected to %d guild(s).", self.bot.user, len(self.bot.guilds))
        name = f"{get_settings().command_prefix}help"
        await self.bot.change_presence(
            activity=discord.Activity(type=discord.ActivityType.listening, name=name)
        )

    @commands.Cog.listener()
    async def on_command(self, ctx: commands.Context):
        if ctx.command is not None:
            self.bot.command_counter[ctx.command.qualified_name] += 1

    # ------------------------------------------------------------------
    # Plain messages
    # ------------------------------------------------------------------

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message):
        if message.author.bot:
            return

        ctx = await self.bot.get_context(message)
        if ctx.valid:
            return

        try:
            if MENTIONED_MOOFY.search(message.content):
                await message.add_reaction("👀")
            if self.bot.user is not None and self.bot.user in message.mentions:
                await message.channel.send(PING_EMOJI)
        except discord.HTTPException as exc:
            _log.warning("Failed to respond to a mention in channel %s: %s", message.channel.id, exc)

    # ------------------------------------------------------------------
    # Errors
    # ------------------------------------------------------------------

    @commands.Cog.listener()
    async def on_command_error(self, ctx: commands.Context, error: commands.CommandError):
        reply = describe_error(ctx, error)
        if reply is None:
            return
        try:
            await ctx.send(reply, allowed_mentions=discord.AllowedMentions.none())
        except discord.HTTPException as exc:
            _log.warning("Failed to report an error for command %s: %s", ctx.command, exc)


def describe_error(ctx: commands.Context, error: commands.CommandError) -> str | None:
    """Return the message to show for *error*, or ``None`` to stay silent.

    Unexpected errors are logged here and produce no reply.
    """

    if isinstance(error, (commands.CommandNotFound, commands.DisabledCommand)):
        # Unknown command names are handled by the Webtoon shortcut listener
        return None

    if isinstance(error, ErrorWithReason):
        return error.reason

    if isinstance(error, commands.CommandOnCooldown):
        return f"Try this again in {math.ceil(error.retry_after)} seconds."

    if isinstance(error, commands.UserInputError):
        message = str(error) or "I couldn't understand those arguments."
        if ctx.command is not None:
            usage = f"{ctx.clean_prefix}{ctx.command.qualified_name} {ctx.command.signature}".rstrip()
            message = f"{message}\nUsage: `{usage}`"
        return message

    if isinstance(error, commands.CheckFailure):
        return str(error) or "You can't use that command here."

    original = getattr(error, "original", error)
    if isinstance(original, StorageError):
        _log.error("Command %s could not save: %s", ctx.command, original)
        return SAVE_FAILED

    _log.error("Command %s raised an exception", ctx.command, exc_info=original)
    return None


async def setup(bot: commands.Bot):
    await bot.add_cog(Events(bot))
