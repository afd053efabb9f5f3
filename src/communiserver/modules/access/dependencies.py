"""Page guard dependency for dashboard routes."""

from typing import Annotated

from fastapi import Depends

from communiserver.core.auth.dependencies import OptionalUser
from communiserver.core.permissions.dependencies import guard_page
from communiserver.core.permissions.guard import GuardDecision
from communiserver.modules.access.pages import guards_for, normalize_path


async def get_page_decision(page_path: str, user: OptionalUser) -> GuardDecision:
    """Run the guards covering ``/dashboard/{page_path}``.

    Raises:
        GuardRedirect: When there is no session or a guard fails
    """
    path = normalize_path(f"/dashboard/{page_path}")
    return await guard_page(user, guards_for(path))


GuardedPage = Annotated[GuardDecision, Depends(get_page_decision)]
