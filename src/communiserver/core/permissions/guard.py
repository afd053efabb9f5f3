"""Permission guard state machine.

A guard sits in front of a page or component. It waits for the
caller's identity to resolve, then either lets the content through or
sends the caller to a fallback location:

    LOADING --(role resolved, requirement met)-----> AUTHORIZED
    LOADING --(role resolved, requirement not met)-> UNAUTHORIZED  (redirect)

A failed identity resolution counts as "no role", which the evaluator
denies. Starting a new resolution puts the guard back in LOADING until
it completes. When several resolutions overlap, the most recently
started one wins; results from older ones are dropped.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum

import structlog

from communiserver.config import settings
from communiserver.core.permissions.checker import PermissionRequirement, RoleLike


logger = structlog.get_logger()

RoleProvider = Awaitable[RoleLike] | Callable[[], Awaitable[RoleLike]]
RedirectCallback = Callable[[str], None]


class GuardState(StrEnum):
    """Where a guard is in its decision."""

    LOADING = "loading"
    AUTHORIZED = "authorized"
    UNAUTHORIZED = "unauthorized"


@dataclass(frozen=True)
class GuardDecision:
    """Outcome of a guard evaluation.

    Attributes:
        state: The guard state
        redirect_to: Fallback location when unauthorized, else None
    """

    state: GuardState
    redirect_to: str | None = None

    @property
    def allowed(self) -> bool:
        return self.state is GuardState.AUTHORIZED


LOADING = GuardDecision(GuardState.LOADING)


class PermissionGuard:
    """Gate content on a permission requirement.

    Usage:
        guard = PermissionGuard(
            PermissionRequirement(any_permissions=[Permission.CREATE_CELL]),
            fallback_url="/dashboard/locations",
            on_redirect=navigate,
        )
        decision = await guard.resolve(load_current_role)

    Args:
        requirement: What the caller's role must satisfy
        fallback_url: Where unauthorized callers are sent
        on_redirect: Called with the fallback URL on each transition
            into UNAUTHORIZED
    """

    def __init__(
        self,
        requirement: PermissionRequirement | None = None,
        fallback_url: str | None = None,
        on_redirect: RedirectCallback | None = None,
    ) -> None:
        self.requirement = requirement or PermissionRequirement()
        self.fallback_url = fallback_url or settings.guard_fallback_url
        self.on_redirect = on_redirect

        self._decision: GuardDecision = LOADING
        self._role: RoleLike = None
        self._resolved = False
        self._settled: GuardDecision = LOADING
        self._started = 0

    @property
    def state(self) -> GuardState:
        return self._decision.state

    @property
    def decision(self) -> GuardDecision:
        return self._decision

    @property
    def role(self) -> RoleLike:
        return self._role

    def decide(self, role: RoleLike, resolved: bool = True) -> GuardDecision:
        """Pure decision for a role; does not touch the guard's state."""
        if not resolved:
            return LOADING
        if self.requirement.is_satisfied_by(role):
            return GuardDecision(GuardState.AUTHORIZED)
        return GuardDecision(GuardState.UNAUTHORIZED, redirect_to=self.fallback_url)

    def begin(self) -> int:
        """Register a new identity resolution and return its generation.

        The guard goes back to LOADING until this resolution, or a later
        one, is applied.
        """
        generation = self._next_generation()
        self._resolved = False
        self._decision = LOADING
        return generation

    def apply(self, role: RoleLike, generation: int | None = None) -> GuardDecision:
        """Record a resolved role and re-run the decision.

        Results from a generation older than the most recently started
        one are ignored and the current decision is returned unchanged.
        """
        if generation is None:
            generation = self._next_generation()
        if generation < self._started:
            logger.debug(
                "guard_stale_resolution_ignored",
                generation=generation,
                latest=self._started,
            )
            return self._decision

        self._role = role
        self._resolved = True
        return self._transition(self.decide(role))

    async def resolve(self, provider: RoleProvider) -> GuardDecision:
        """Await the identity provider and apply its result.

        Args:
            provider: Awaitable, or zero-argument coroutine function,
                yielding the caller's role (or None when there is none)

        Returns:
            The guard decision after this resolution
        """
        generation = self.begin()
        try:
            pending = provider() if callable(provider) else provider
            role = await pending
        except Exception as exc:
            logger.warning(
                "guard_resolution_failed",
                error_type=type(exc).__name__,
                error=str(exc),
                fallback_url=self.fallback_url,
            )
            role = None
        return self.apply(role, generation)

    def set_requirement(self, requirement: PermissionRequirement) -> GuardDecision:
        """Swap the requirement and re-evaluate against the last resolved role."""
        self.requirement = requirement
        if not self._resolved:
            return self._decision
        return self._transition(self.decide(self._role))

    def _next_generation(self) -> int:
        self._started += 1
        return self._started

    def _transition(self, decision: GuardDecision) -> GuardDecision:
        # LOADING between two resolutions is not a transition for redirects.
        previous = self._settled
        self._decision = decision
        self._settled = decision

        if decision.state is GuardState.UNAUTHORIZED and previous.state is not GuardState.UNAUTHORIZED:
            logger.info(
                "guard_unauthorized",
                role=str(self._role) if self._role else None,
                required=self.requirement.describe(),
                redirect_to=decision.redirect_to,
            )
            if self.on_redirect is not None and decision.redirect_to:
                self.on_redirect(decision.redirect_to)

        return decision
