from __future__ import annotations

LOGIN = "/login"
DASHBOARD = "/dashboard"
PUBLIC_ROUTES = frozenset({LOGIN})
PROTECTED_ROUTES = frozenset({"/", DASHBOARD, "/profile", "/result"})


def resolve_route(path: str, auth) -> str:
    """Return the route that should actually be rendered for `path`."""
    path = path or "/"
    if path in PROTECTED_ROUTES:
        return path if auth.is_authenticated() else LOGIN
    if path in PUBLIC_ROUTES:
        return DASHBOARD if auth.is_authenticated() else LOGIN
    return LOGIN
