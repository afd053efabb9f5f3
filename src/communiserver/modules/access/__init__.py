"""Access module: what each role may see and open in the portal."""

from communiserver.modules.access.routes import pages_router, router


__all__ = ["pages_router", "router"]
