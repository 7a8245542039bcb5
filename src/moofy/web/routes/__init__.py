import importlib
import logging
import pkgutil
from types import ModuleType

from fastapi import APIRouter, FastAPI

_log = logging.getLogger(__name__)


def register_routes(app: FastAPI) -> None:  # noqa: D401
    """Automatically discover and attach all route files in this package.

    Each module that exposes a top-level ``router`` variable (an instance of
    ``fastapi.APIRouter``) will be imported and registered.
    """

    package_name = __name__

    for mod_info in pkgutil.iter_modules(__path__):  # type: ignore[name-defined]
        mod_name = mod_info.name

        # Skip private/utility modules (starting with underscore)
        if mod_name.startswith("_"):
            continue

        try:
            module: ModuleType = importlib.import_module(f"{package_name}.{mod_name}")
        except Exception:
            _log.exception("Failed to load route module %s", mod_name)
            continue

        router = getattr(module, "router", None)
        if isinstance(router, APIRouter):
            app.include_router(router)
            _log.info("Registered router from %s", mod_name)
        else:
            _log.debug("No router found in %s", mod_name)
