"""Feature modules, discovered at startup."""

import logging
from importlib import import_module
from pathlib import Path

from fastapi import APIRouter


logger = logging.getLogger(__name__)


def discover_modules() -> list[APIRouter]:
    """Import every feature package and collect its API router.

    A package takes part by exposing ``router`` in its ``__init__``.
    Routers are returned in package name order.
    """
    modules_dir = Path(__file__).parent
    routers: list[APIRouter] = []

    for path in sorted(modules_dir.iterdir()):
        if not path.is_dir() or path.name.startswith("_"):
            continue
        try:
            module = import_module(f"communiserver.modules.{path.name}")
        except ImportError as e:
            logger.warning("Failed to load module %s: %s", path.name, e)
            continue
        if hasattr(module, "router"):
            routers.append(module.router)
            logger.info("Loaded module: %s", path.name)

    return routers
