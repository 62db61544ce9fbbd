"""Page chrome: header, spinner, error box, not-found.

Every function here is a pure renderer returning an HTML fragment. User
intents are expressed as ``data-intent`` / ``data-link`` attributes that the
browser client turns into WebSocket messages.
"""

from html import escape

from ..routing import CREATE_PATH, LIST_PATH

NAV_ITEMS = [
    (LIST_PATH, "Database"),
    (CREATE_PATH, "Add User"),
]


def render_page(active_path: str, body: str) -> str:
    """Header plus the page body, i.e. everything inside ``#app``."""
    return f'{render_header(active_path)}<main class="page">{body}</main>'


def render_header(active_path: str) -> str:
    links = "".join(
        f'<a href="{path}" data-link class="nav-link{" active" if path == active_path else ""}">'
        f"{label}</a>"
        for path, label in NAV_ITEMS
    )
    return (
        '<header class="card header">'
        '<div class="brand"><span class="logo">UM</span>'
        '<h1><span class="wide">User Management System</span>'
        '<span class="narrow">User Manager</span></h1></div>'
        f'<nav class="nav">{links}</nav>'
        "</header>"
    )


def render_spinner() -> str:
    return (
        '<div class="spinner-wrap" role="status" aria-label="Loading">'
        '<div class="spinner"></div></div>'
    )


def render_error(message: str, retry: bool = True) -> str:
    button = (
        '<button type="button" class="button secondary" data-intent="retry">Try again</button>'
        if retry
        else f'<a href="{LIST_PATH}" data-link class="button secondary">Back to Database</a>'
    )
    return (
        '<div class="card error-box" role="alert">'
        '<h3>Something went wrong</h3>'
        f"<p>{escape(message)}</p>"
        f'<div class="actions">{button}</div>'
        "</div>"
    )


def render_not_found(path: str) -> str:
    return (
        '<div class="card empty">'
        "<h3>Page not found</h3>"
        f"<p>Nothing lives at <code>{escape(path)}</code>.</p>"
        f'<a href="{LIST_PATH}" data-link class="button primary">Back to Database</a>'
        "</div>"
    )
