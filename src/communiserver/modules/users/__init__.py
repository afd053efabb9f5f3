"""Users module: accounts and the roles they hold."""

from communiserver.modules.users.routes import router


__all__ = ["router"]
