from __future__ import annotations

import discord
from discord.ext import commands

from moofy.utils.formatting import THEME


class MoofyHelp(commands.MinimalHelpCommand):
    """Minimal help command that replies with embeds in the bot's theme colour."""

    def __init__(self):
        super().__init__(
            no_category="Not in a group of commands",
            commands_heading="Commands",
            aliases_heading="Alternative names:",
            command_attrs={"help": "Shows this message, or help for a command or group."},
        )

    def get_opening_note(self) -> str:
        prefix = self.context.clean_prefix
        return (
            f"Do `{prefix}{self.invoked_with} <command name>` to learn more about a command, "
            f"or `{prefix}{self.invoked_with} <group name>` to list a group's commands."
        )

    def command_not_found(self, string: str) -> str:
        return f"I don't know what command you're referring to (`{string}`)."

    def subcommand_not_found(self, command: commands.Command, string: str) -> str:
        return f"`{command.qualified_name}` has no command called `{string}`."

    async def send_pages(self) -> None:
        destination = self.get_destination()
        for page in self.paginator.pages:
            await destination.send(embed=discord.Embed(description=page, colour=THEME))
