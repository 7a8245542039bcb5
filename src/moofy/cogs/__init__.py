"""Moofy's command groups and listeners.

``MoofyBot`` imports every module here on startup and awaits its ``setup(bot)``
coroutine, so adding a cog only takes a new file. Cogs reach the per-guild
records through ``bot.guild_store``, ``bot.emoji_store`` and ``bot.ping_store``.
"""
