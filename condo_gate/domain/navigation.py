"""
Navigation table shared by the authorization guard and menu rendering.

Maps each role to its ordered menu and each protected path to the roles
it requires. Kept as plain data so both consumers read one source.
"""

from dataclasses import dataclass

from condo_gate.domain.models import Role

LOGIN_PATH = "/login"

# Where a signed-in operator lands when a route is not for their role.
ROLE_HOME: dict[Role, str] = {
    Role.GATEKEEPER: "/dashboard",
    Role.ADMINISTRATOR: "/admin/dashboard",
}

ADMIN_ONLY: frozenset[Role] = frozenset({Role.ADMINISTRATOR})
ANY_ROLE: frozenset[Role] = frozenset()


@dataclass(frozen=True)
class MenuEntry:
    """
    One navigation target.

    Attributes:
        path: Navigation path.
        label: Display label.
        required_roles: Roles allowed on the path; empty means any signed-in role.
    """

    path: str
    label: str
    required_roles: frozenset[Role] = ANY_ROLE


DASHBOARD = MenuEntry("/dashboard", "Dashboard")
ADMIN_DASHBOARD = MenuEntry("/admin/dashboard", "Dashboard", ADMIN_ONLY)
PEOPLE = MenuEntry("/admin/people", "People", ADMIN_ONLY)
HOUSES = MenuEntry("/admin/houses", "Houses", ADMIN_ONLY)
REGISTER_ACCESS = MenuEntry("/access/register", "Register Access")
ACCESS_HISTORY = MenuEntry("/access/history", "History")
DELIVERIES = MenuEntry("/deliveries", "Deliveries")
NOTICES = MenuEntry("/notices", "Notices")
OCCURRENCES = MenuEntry("/occurrences", "Occurrences")

NAVIGATION_MENU: dict[Role, tuple[MenuEntry, ...]] = {
    Role.ADMINISTRATOR: (
        ADMIN_DASHBOARD,
        PEOPLE,
        HOUSES,
        REGISTER_ACCESS,
        ACCESS_HISTORY,
        DELIVERIES,
        NOTICES,
        OCCURRENCES,
    ),
    Role.GATEKEEPER: (
        DASHBOARD,
        REGISTER_ACCESS,
        ACCESS_HISTORY,
        DELIVERIES,
        NOTICES,
    ),
}

# Dashboard shortcuts per role, in display order.
QUICK_ACTIONS: dict[Role, tuple[MenuEntry, ...]] = {
    Role.ADMINISTRATOR: (PEOPLE, HOUSES, REGISTER_ACCESS, DELIVERIES),
    Role.GATEKEEPER: (REGISTER_ACCESS, DELIVERIES, NOTICES),
}

# Protected paths. A rule covers its path and every "/"-separated subpath.
ROUTE_RULES: tuple[MenuEntry, ...] = (
    DASHBOARD,
    MenuEntry("/admin", "Administration", ADMIN_ONLY),
    ADMIN_DASHBOARD,
    PEOPLE,
    HOUSES,
    REGISTER_ACCESS,
    ACCESS_HISTORY,
    DELIVERIES,
    NOTICES,
    OCCURRENCES,
)


def _covers(rule_path: str, path: str) -> bool:
    return path == rule_path or path.startswith(rule_path.rstrip("/") + "/")


def find_route(path: str) -> MenuEntry | None:
    """
    Find the most specific rule for a path.

    Args:
        path: Requested navigation path (query string excluded).

    Returns:
        MenuEntry: Matching rule, or None for public/unknown paths.
    """
    matches = [rule for rule in ROUTE_RULES if _covers(rule.path, path)]
    if not matches:
        return None
    return max(matches, key=lambda rule: len(rule.path))


def required_roles_for(path: str) -> frozenset[Role] | None:
    """Roles required by a path; None when the path is not protected."""
    rule = find_route(path)
    return rule.required_roles if rule else None


def menu_for(role: Role) -> tuple[MenuEntry, ...]:
    return NAVIGATION_MENU.get(role, ())


def home_for(role: Role) -> str:
    return ROLE_HOME[role]
