from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import FastAPI

if TYPE_CHECKING:  # pragma: no cover
    from moofy.bot import MoofyBot


def get_app(bot: MoofyBot) -> FastAPI:  # noqa: D401
    """Return a FastAPI app instance bound to the provided bot."""

    app = FastAPI(title="Moofy API", version="0.1.0")

    # ------------------------------------------------------------------
    # Routes are defined in dedicated modules under ``moofy.web.routes``.
    # Expose *bot* via the application state so the routers can reach the
    # stores without creating import cycles.
    # ------------------------------------------------------------------

    app.state.bot = bot

    from .routes import register_routes

    register_routes(app)

    return app
