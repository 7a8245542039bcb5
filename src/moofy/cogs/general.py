from __future__ import annotations

import math

import discord
from discord.ext import commands

from moofy.utils.formatting import THEME

ABOUT_LINKS = (
    "Like any good bot, I am proudly open-sourced on [Github](https://github.com/SheepTester/ornery-bot)."
    "\n\nIf you really want me on your server, here's [my invite link]"
    "(https://discord.com/api/oauth2/authorize?client_id=393248490739859458&scope=bot)."
    "\n\nCheck out my bot buddy, [RBot](https://github.com/ky28059/RBot/)!"
)


def usage_report(counter) -> str:
    lines = ["Commands used since last restart:"]
    for name, amount in counter.most_common():
        lines.append(f"- {name}: {amount}")
    return "\n".join(lines)


class General(commands.Cog):
    """All the top-level commands you can use without a group name."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @commands.command(name="about")
    async def about(self, ctx: commands.Context):
        """Allow me to introduce myself."""

        embed = discord.Embed(title="Links", description=ABOUT_LINKS, colour=THEME)
        await ctx.send(
            f"Hi! I'm Moofy (he, him, etc.), running ornery-bot, made with discord.py {discord.__version__} in Python.",
            embed=embed,
        )

    @commands.command(name="am_i_admin")
    async def am_i_admin(self, ctx: commands.Context):
        """Says if you have administrator permissions or not."""

        if isinstance(ctx.author, discord.Member) and ctx.author.guild_permissions.administrator:
            await ctx.send("Yes, you are.")
        else:
            await ctx.send("No, you are not.")

    @commands.command(name="say", usage="<message>")
    async def say(self, ctx: commands.Context, *, message: commands.clean_content(fix_channel_mentions=False)):
        """I repeat your message. Good luck making me ping!"""

        await ctx.send(message, allowed_mentions=discord.AllowedMentions.none())

    @commands.command(name="commands")
    @commands.cooldown(2, 30, commands.BucketType.user)
    async def commands_(self, ctx: commands.Context):
        """Lists the number of times each command has been used since the bot last woke up."""

        await ctx.send(usage_report(self.bot.command_counter))

    @commands.command(name="ping")
    @commands.guild_only()
    @commands.is_owner()
    async def ping(self, ctx: commands.Context):
        """Responds with pong."""

        await ctx.send("PONG.")

    @commands.command(name="latency")
    async def latency(self, ctx: commands.Context):
        """Gets super technical information about these newfangled "shards." """

        latency = self.bot.latency
        if ctx.guild is not None:
            shard = self.bot.get_shard(ctx.guild.shard_id)
            if shard is not None:
                latency = shard.latency

        if math.isnan(latency) or math.isinf(latency):
            await ctx.reply("No shard found")
            return
        await ctx.reply(f"The shard latency is {latency * 1000:.2f} ms")

    @commands.command(name="some_long_command", usage="<...arguments>")
    async def some_long_command(self, ctx: commands.Context, *, arguments: str = ""):
        """Prints the command arguments"""

        await ctx.send(f'Arguments: "{arguments}"', allowed_mentions=discord.AllowedMentions.none())

    @commands.command(name="about_role", usage="<role name>")
    @commands.guild_only()
    async def about_role(self, ctx: commands.Context, *, role_name: str):
        """Tells you the ID of the role with the given name."""

        role = discord.utils.get(ctx.guild.roles, name=role_name)
        if role is not None:
            await ctx.send(f"Role-ID: {role.id}")
            return
        await ctx.send(f'Could not find role named: "{role_name}"', allowed_mentions=discord.AllowedMentions.none())


async def setup(bot: commands.Bot):
    await bot.add_cog(General(bot))
