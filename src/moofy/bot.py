import asyncio
import importlib
import logging
import pkgutil
from collections import Counter
from pathlib import Path
from typing import Optional

import uvicorn
from discord import Intents
from discord.ext import commands

from .client_data import DataStore
from .client_data.emoji_data import EmojiData
from .client_data.guild_data import GuildData
from .client_data.ping_data import PingData
from .config import get_settings
from .help import MoofyHelp
from .web.server import get_app

_log = logging.getLogger(__name__)
_log.setLevel(logging.DEBUG)


class MoofyBot(commands.Bot):
    """A subclass of `commands.Bot` that auto-discovers cogs and owns the per-guild stores."""

    def __init__(self, *args, **kwargs):
        settings = get_settings()
        intents = Intents.all()
        super().__init__(
            command_prefix=commands.when_mentioned_or(settings.command_prefix),
            intents=intents,
            help_command=MoofyHelp(),
            *args,
            **kwargs,
        )

        # One lock for every store: a handler mutates at most one record at a time
        self.data_lock = asyncio.Lock()
        self.guild_store: DataStore[GuildData] = DataStore(GuildData, settings.data_dir, self.data_lock)
        self.emoji_store: DataStore[EmojiData] = DataStore(EmojiData, settings.data_dir, self.data_lock)
        self.ping_store: DataStore[PingData] = DataStore(PingData, settings.data_dir, self.data_lock)

        # Command name -> uses since the bot last woke up
        self.command_counter: Counter[str] = Counter()

        # Placeholder for the uvicorn server instance.
        self._uvicorn: Optional[uvicorn.Server] = None

    async def setup_hook(self) -> None:  # noqa: D401
        """Called by discord.py to set up the bot before it connects."""

        await self._load_cogs()

    async def _load_cogs(self) -> None:
        """Auto-discover and load all cogs in the `moofy.cogs` package."""

        _log.info("Loading cogs ...")
        for module_info in pkgutil.walk_packages(path=[str(Path(__file__).parent / "cogs")], prefix="moofy.cogs."):
            if module_info.ispkg:
                continue
            try:
                module = importlib.import_module(module_info.name)
            except Exception as exc:  # pragma: no cover
                _log.exception("Failed to import cog %s: %s", module_info.name, exc)
                continue

            # The cog module should expose a `setup` coroutine following discord.py conventions
            if hasattr(module, "setup"):
                try:
                    await module.setup(self)
                    _log.debug("Loaded cog: %s", module_info.name)
                except Exception as exc:  # pragma: no cover
                    _log.exception("Failed to setup cog %s: %s", module_info.name, exc)

    async def start_web_server(self) -> None:
        """Start the FastAPI web server in a background task."""

        settings = get_settings()
        _log.info("Web API available at http://%s:%s", settings.host, settings.port)
        config = uvicorn.Config(get_app(self), host=settings.host, port=settings.port, log_level="info")
        self._uvicorn = uvicorn.Server(config=config)

        loop = asyncio.get_event_loop()
        loop.create_task(self._uvicorn.serve())

    async def close(self) -> None:  # noqa: D401
        """Shut down the bot and the web server cleanly."""

        if self._uvicorn and self._uvicorn.started:
            await self._uvicorn.shutdown()
        await super().close()
