from discord.ext import commands


def format_number(value: float) -> str:
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


class Math(commands.Cog):
    """A very limited set of calculator commands. See `help math multiply` for more info."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @commands.group(name="math", invoke_without_command=True)
    async def math(self, ctx: commands.Context):
        """A very limited set of calculator commands."""

        await ctx.send_help(ctx.command)

    # Lets us also call `math *` instead of just `math multiply`
    @math.command(name="multiply", aliases=["*"], usage="<a> <b>")
    async def multiply(self, ctx: commands.Context, first: float, second: float):
        """Multiplies two floats."""

        await ctx.send(format_number(first * second))


async def setup(bot: commands.Bot):
    await bot.add_cog(Math(bot))
