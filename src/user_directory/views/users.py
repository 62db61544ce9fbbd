"""Presentation components for users: table, detail card, form."""

from __future__ import annotations

from html import escape
from typing import AbstractSet, Optional, Sequence

from ..confirm import delete_confirmation_message
from ..models import FIELD_LABELS, REQUIRED_FIELDS, CreateUserData, User
from ..routing import CREATE_PATH, LIST_PATH, detail_path, edit_path
from .layout import render_error, render_spinner

# (field, input type, placeholder)
FORM_FIELDS = [
    ("name", "text", "Enter full name"),
    ("username", "text", "Enter username"),
    ("email", "email", "Enter email address"),
    ("phone", "tel", "Enter phone number"),
    ("website", "url", "Enter website URL (optional)"),
]


def _attr(value: object) -> str:
    return escape(str(value), quote=True)


# ── List ─────────────────────────────────────────────────────────────


def render_list_page(
    loading: bool,
    error: Optional[str],
    users: Sequence[User],
    visible_users: Sequence[User],
    search_term: str,
    deleting_ids: AbstractSet[int],
) -> str:
    if loading:
        return render_spinner()
    if error:
        return render_error(error)

    parts = [render_controls(len(users), len(visible_users), search_term)]
    parts.append(render_user_table(visible_users, deleting_ids))
    if search_term and not visible_users:
        parts.append(render_no_results(search_term))
    return "".join(parts)


def render_controls(total: int, shown: int, search_term: str) -> str:
    if search_term:
        summary = f"Found <strong>{shown}</strong> of <strong>{total}</strong> users"
        clear = (
            '<button type="button" class="clear" data-intent="clear-search" '
            'title="Clear search">&times;</button>'
        )
    else:
        summary = f"Showing <strong>{total}</strong> users"
        clear = ""
    return (
        '<div class="card controls">'
        '<div class="search">'
        '<input id="search" type="text" placeholder="Search users..." autocomplete="off" '
        f'data-intent="search" value="{_attr(search_term)}">{clear}'
        f'<span class="summary">{summary}</span>'
        "</div>"
        '<div class="actions">'
        '<button type="button" class="button secondary" data-intent="refresh">Refresh</button>'
        f'<a href="{CREATE_PATH}" data-link class="button primary">Add New User</a>'
        "</div>"
        "</div>"
    )


def render_user_table(users: Sequence[User], deleting_ids: AbstractSet[int]) -> str:
    rows = "".join(render_user_row(user, user.id in deleting_ids) for user in users)
    empty = ""
    if not users:
        empty = (
            '<div class="empty"><h3>No users found</h3>'
            "<p>Get started by creating a new user.</p>"
            f'<a href="{CREATE_PATH}" data-link class="button primary">Add New User</a></div>'
        )
    return (
        '<div class="card table-card">'
        '<div class="card-head"><h2>Users Database</h2>'
        f'<span class="muted">Total: {len(users)}</span></div>'
        '<div class="table-wrapper"><table class="users">'
        "<thead><tr>"
        "<th>Actions</th><th>ID</th><th>Name</th><th>Username</th><th>Email</th>"
        "<th>Phone</th><th>City</th><th>Company</th><th>Status</th>"
        "</tr></thead>"
        f"<tbody>{rows}</tbody></table></div>{empty}</div>"
    )


def render_user_row(user: User, deleting: bool = False) -> str:
    disabled = " disabled" if deleting else ""
    label = "Deleting..." if deleting else "Delete"
    return (
        f'<tr data-user-id="{user.id}">'
        '<td class="actions">'
        f'<a href="{detail_path(user.id)}" data-link class="action view" title="View Details">View</a>'
        f'<a href="{edit_path(user.id)}" data-link class="action edit" title="Edit User">Edit</a>'
        f'<button type="button" class="action delete" data-intent="delete" '
        f'data-user-id="{user.id}" data-confirm="{_attr(delete_confirmation_message(user))}" '
        f'title="Delete User"{disabled}>{label}</button>'
        "</td>"
        f'<td class="id">{user.display_number}</td>'
        f"<td>{escape(user.name)}</td>"
        f'<td class="muted">@{escape(user.username)}</td>'
        f'<td><a href="mailto:{_attr(user.email)}">{escape(user.email)}</a></td>'
        f"<td>{escape(user.phone)}</td>"
        f"<td>{escape(user.address.city)}</td>"
        f"<td>{escape(user.company.name)}</td>"
        '<td><span class="status-active">Active</span></td>'
        "</tr>"
    )


def render_no_results(search_term: str) -> str:
    return (
        '<div class="card empty">'
        "<h3>No results found</h3>"
        f"<p>No users found matching &quot;<strong>{escape(search_term)}</strong>&quot;. "
        "Try adjusting your search terms.</p>"
        '<button type="button" class="button secondary" data-intent="clear-search">'
        "Clear search</button>"
        "</div>"
    )


# ── Detail ───────────────────────────────────────────────────────────


def render_detail_page(
    loading: bool, error: Optional[str], can_retry: bool, user: Optional[User]
) -> str:
    if error:
        return render_error(error, retry=can_retry)
    if loading:
        return render_spinner()
    if user is None:
        return render_error("User not found.", retry=False)
    return render_user_detail(user)


def _row(label: str, value: str) -> str:
    return f"<div class=\"field\"><dt>{label}</dt><dd>{value}</dd></div>"


def render_user_detail(user: User) -> str:
    website = ""
    if user.website:
        website = (
            f'<a href="http://{_attr(user.website)}" target="_blank" '
            f'rel="noopener noreferrer">{escape(user.website)}</a>'
        )
    personal = "".join(
        [
            _row("Full Name", escape(user.name)),
            _row("Username", f"@{escape(user.username)}"),
            _row("Email", f'<a href="mailto:{_attr(user.email)}">{escape(user.email)}</a>'),
            _row("Phone", escape(user.phone)),
            _row("Website", website),
        ]
    )
    address = user.address
    location = "".join(
        [
            _row("Street", escape(address.street)),
            _row("Suite", escape(address.suite)),
            _row("City", escape(address.city)),
            _row("Zip Code", escape(address.zipcode)),
            _row("Coordinates", f"{escape(address.geo.lat)}, {escape(address.geo.lng)}"),
        ]
    )
    company = user.company
    business = "".join(
        [
            _row("Company Name", f"<strong>{escape(company.name)}</strong>"),
            _row("Catch Phrase", f"<em>&quot;{escape(company.catch_phrase)}&quot;</em>"),
            _row("Business", escape(company.bs)),
        ]
    )
    return (
        '<div class="card detail-head">'
        f"<div><h1>User {user.display_number}</h1>"
        '<p class="muted">Complete user record details</p></div>'
        '<div class="actions">'
        f'<a href="{edit_path(user.id)}" data-link class="button primary">Edit User</a>'
        f'<a href="{LIST_PATH}" data-link class="button secondary">Back to Database</a>'
        "</div></div>"
        '<div class="detail-grid">'
        f'<section class="card"><h2>Personal Information</h2><dl>{personal}</dl></section>'
        f'<section class="card"><h2>Address Information</h2><dl>{location}</dl></section>'
        f'<section class="card wide"><h2>Company Information</h2><dl>{business}</dl></section>'
        "</div>"
    )


# ── Forms ────────────────────────────────────────────────────────────


def render_create_page(form: CreateUserData, submitting: bool) -> str:
    return render_user_form(form, user=None, submitting=submitting)


def render_edit_page(
    loading: bool,
    error: Optional[str],
    can_retry: bool,
    user: Optional[User],
    form: CreateUserData,
    submitting: bool,
) -> str:
    if error:
        return render_error(error, retry=can_retry)
    if loading:
        return render_spinner()
    if user is None:
        return render_error("User not found.", retry=False)
    return render_user_form(form, user=user, submitting=submitting)


def render_user_form(
    form: CreateUserData, user: Optional[User] = None, submitting: bool = False
) -> str:
    if user is not None:
        title = f"Edit User {user.display_number}"
        subtitle = "Update user information in the database"
        submit_label = "Update User"
    else:
        title = "Add New User"
        subtitle = "Enter user details to create a new record"
        submit_label = "Create User"
    if submitting:
        submit_label = '<span class="spinner small"></span>Saving...'

    inputs = []
    for name, input_type, placeholder in FORM_FIELDS:
        required = name in REQUIRED_FIELDS
        marker = ' <span class="required">*</span>' if required else ""
        inputs.append(
            f'<div class="form-field{" wide" if name == "website" else ""}">'
            f'<label for="{name}">{FIELD_LABELS[name]}{marker}</label>'
            f'<input id="{name}" name="{name}" type="{input_type}" '
            f'value="{_attr(getattr(form, name))}" placeholder="{placeholder}"'
            f'{" required" if required else ""}>'
            "</div>"
        )

    disabled = " disabled" if submitting else ""
    return (
        '<div class="card form-card">'
        f'<div class="card-head"><div><h2>{title}</h2><p class="muted">{subtitle}</p></div></div>'
        '<form data-intent="submit" novalidate>'
        f'<div class="form-grid">{"".join(inputs)}</div>'
        '<div class="form-actions">'
        '<button type="button" class="button secondary" data-intent="back">Cancel</button>'
        f'<button type="submit" class="button primary"{disabled}>{submit_label}</button>'
        "</div></form></div>"
    )
