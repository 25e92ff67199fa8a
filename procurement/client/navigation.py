"""Role-gated page table for the procurement front end."""

from __future__ import annotations

from dataclasses import dataclass

from procurement.core.access import Role


@dataclass(frozen=True)
class Route:
    path: str
    title: str
    roles: frozenset = frozenset()  # empty: any signed-in user
    in_navigation: bool = True


ROUTES = (
    Route("/", "Dashboard"),
    Route("/procurement", "Procurement", frozenset({Role.PROCUREMENT_OFFICER, Role.ADMIN})),
    Route("/vendors", "Vendors", frozenset({Role.PROCUREMENT_OFFICER, Role.ADMIN})),
    Route("/mse-facilitation", "MSE Facilitation", frozenset({Role.PROCUREMENT_OFFICER, Role.ADMIN})),
    Route(
        "/payments",
        "Payments",
        frozenset({Role.PROCUREMENT_OFFICER, Role.FINANCE_OFFICER, Role.ADMIN, Role.VENDOR}),
    ),
    Route("/reports", "Reports", frozenset({Role.PROCUREMENT_OFFICER, Role.ADMIN})),
    Route("/compliance", "Compliance", frozenset({Role.PROCUREMENT_OFFICER, Role.ADMIN, Role.AUDITOR})),
    Route("/tenders", "Tenders", frozenset({Role.VENDOR})),
    Route("/profile", "Profile", in_navigation=False),
)


def _to_role(role) -> Role | None:
    if role is None:
        return None
    try:
        return Role(role)
    except ValueError:
        return None


def find_route(path: str) -> Route | None:
    """Longest route whose path is `path` or a parent of it."""
    best = None
    for route in ROUTES:
        prefix = route.path.rstrip("/")
        if path == route.path or path.startswith(prefix + "/"):
            if best is None or len(route.path) > len(best.path):
                best = route
    return best


def can_access(role, path: str) -> bool:
    """Signed-out users reach nothing; admin reaches everything."""
    actor_role = _to_role(role)
    if actor_role is None:
        return False
    if actor_role == Role.ADMIN:
        return True
    route = find_route(path)
    if route is None or not route.roles:
        return True
    return actor_role in route.roles


def visible_navigation(role) -> list[Route]:
    return [r for r in ROUTES if r.in_navigation and can_access(role, r.path)]
