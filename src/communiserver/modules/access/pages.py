"""Dashboard page guard table.

Every dashboard screen that needs more than a session is listed here
with the requirement its role must meet. Section rules (``section=True``)
cover the whole subtree below their pattern, the way a layout wraps
every page beneath it; other rules match a single page.

A path is checked against every rule that matches it, outermost first,
and the first rule that fails decides where the caller is sent.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from communiserver.core.constants import LOCATIONS_FALLBACK_URL
from communiserver.core.permissions.catalog import Permission
from communiserver.core.permissions.checker import PermissionRequirement, RoleLike
from communiserver.core.permissions.guard import GuardDecision, GuardState, PermissionGuard


_PLACEHOLDER = re.compile(r"\{[a-z_]+\}")


@dataclass(frozen=True)
class PageRule:
    """A guarded dashboard path.

    Attributes:
        pattern: Path pattern; ``{name}`` matches one path segment
        requirement: What the caller's role must satisfy
        fallback_url: Redirect target on failure, None for the default
        section: Whether the rule also covers every path below ``pattern``
    """

    pattern: str
    requirement: PermissionRequirement
    fallback_url: str | None = None
    section: bool = False
    _regex: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        body = "/".join(
            "[^/]+" if _PLACEHOLDER.fullmatch(part) else re.escape(part)
            for part in self.pattern.split("/")
        )
        suffix = r"(?:/.*)?" if self.section else ""
        object.__setattr__(self, "_regex", re.compile(f"^{body}{suffix}$"))

    @property
    def depth(self) -> int:
        return self.pattern.count("/")

    def matches(self, path: str) -> bool:
        return self._regex.match(path) is not None

    def guard(self) -> PermissionGuard:
        return PermissionGuard(self.requirement, fallback_url=self.fallback_url)


def _one(permission: Permission) -> PermissionRequirement:
    return PermissionRequirement(permission=permission)


def _any(*permissions: Permission) -> PermissionRequirement:
    return PermissionRequirement(any_permissions=permissions, require_non_empty=True)


def _location_rules(
    plural: str,
    section: PermissionRequirement,
    create: Permission,
    update: Permission,
    assign: Permission,
    assign_page: str = "assign-leader",
    fallback_url: str | None = None,
) -> list[PageRule]:
    base = f"/dashboard/locations/{plural}"
    return [
        PageRule(base, section, fallback_url=fallback_url, section=True),
        PageRule(f"{base}/create", _one(create)),
        PageRule(f"{base}/{{id}}/edit", _one(update)),
        PageRule(f"{base}/{{id}}/{assign_page}", _one(assign)),
    ]


PAGE_GUARDS: tuple[PageRule, ...] = (
    *_location_rules(
        "cells",
        _any(Permission.VIEW_ALL_CELLS, Permission.CREATE_CELL),
        create=Permission.CREATE_CELL,
        update=Permission.UPDATE_CELL,
        assign=Permission.ASSIGN_CELL_LEADERS,
    ),
    *_location_rules(
        "villages",
        _any(Permission.VIEW_ALL_VILLAGES, Permission.CREATE_VILLAGE),
        create=Permission.CREATE_VILLAGE,
        update=Permission.UPDATE_VILLAGE,
        assign=Permission.ASSIGN_VILLAGE_LEADERS,
    ),
    *_location_rules(
        "isibos",
        _any(Permission.VIEW_ALL_ISIBOS, Permission.CREATE_ISIBO),
        create=Permission.CREATE_ISIBO,
        update=Permission.UPDATE_ISIBO,
        assign=Permission.ASSIGN_ISIBO_LEADERS,
    ),
    *_location_rules(
        "houses",
        _any(Permission.VIEW_ALL_HOUSES, Permission.CREATE_HOUSE, Permission.UPDATE_HOUSE),
        create=Permission.CREATE_HOUSE,
        update=Permission.UPDATE_HOUSE,
        assign=Permission.ASSIGN_HOUSE_REPRESENTATIVES,
        assign_page="assign-representative",
        fallback_url=LOCATIONS_FALLBACK_URL,
    ),
    PageRule("/dashboard/leaders/cell-leaders/create", _one(Permission.CREATE_CELL_LEADER)),
    PageRule("/dashboard/leaders/village-leaders/create", _one(Permission.CREATE_VILLAGE_LEADER)),
    PageRule(
        "/dashboard/activities",
        _any(Permission.CREATE_ACTIVITY, Permission.VIEW_VILLAGE_ACTIVITY, Permission.ADD_TASK_REPORT),
        section=True,
    ),
)


def normalize_path(path: str) -> str:
    """Reduce a page path to the canonical form the rules are written in.

    Query and fragment are dropped, runs of ``/`` collapse to one, ``.``
    and ``..`` segments are resolved (never above the root) and the
    trailing slash goes. The result always starts with ``/``.
    """
    path = path.split("?", 1)[0].split("#", 1)[0].strip()
    segments: list[str] = []
    for segment in path.split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            if segments:
                segments.pop()
            continue
        segments.append(segment)
    return "/" + "/".join(segments)


def rules_for(path: str, rules: Iterable[PageRule] = PAGE_GUARDS) -> list[PageRule]:
    """Rules covering ``path``, outermost first."""
    path = normalize_path(path)
    return sorted((rule for rule in rules if rule.matches(path)), key=lambda rule: rule.depth)


def guards_for(path: str, rules: Iterable[PageRule] = PAGE_GUARDS) -> list[PermissionGuard]:
    return [rule.guard() for rule in rules_for(path, rules)]


def resolve_page(
    path: str,
    role: RoleLike,
    rules: Iterable[PageRule] = PAGE_GUARDS,
) -> GuardDecision:
    """Decide whether ``role`` may open ``path``.

    Unguarded paths are authorized for every role. Otherwise the first
    failing rule, outermost first, decides the redirect.
    """
    for guard in guards_for(path, rules):
        decision = guard.decide(role)
        if not decision.allowed:
            return decision
    return GuardDecision(GuardState.AUTHORIZED)
