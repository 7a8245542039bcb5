from discord.ext import commands

from moofy.errors import ErrorWithReason


def parse_amount(raw: str) -> int:
    try:
        amount = int(raw)
    except ValueError:
        amount = -1
    if amount < 0:
        raise ErrorWithReason("The given number doesn't seem to be a nonnegative integer.")
    return amount


class Counter(commands.Cog):
    """Random testing commands for Moofy."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @commands.command(name="count", usage="[number]", help="Adds the given number (or 1) to the server's count.")
    @commands.guild_only()
    async def count(self, ctx: commands.Context, number: str = "1"):
        amount = parse_amount(number)

        async with self.bot.guild_store.access(ctx.guild.id) as data:
            total = data.increment_count(amount)
            data.save()

        await ctx.send(f"The server's count is now **{total}**.")


async def setup(bot: commands.Bot):
    await bot.add_cog(Counter(bot))
