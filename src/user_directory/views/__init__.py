"""Stateless HTML renderers for pages and their components."""

from .layout import render_error, render_header, render_not_found, render_page, render_spinner
from .users import (
    render_create_page,
    render_detail_page,
    render_edit_page,
    render_list_page,
    render_user_detail,
    render_user_form,
    render_user_row,
    render_user_table,
)

__all__ = [
    "render_page",
    "render_header",
    "render_spinner",
    "render_error",
    "render_not_found",
    "render_list_page",
    "render_user_table",
    "render_user_row",
    "render_detail_page",
    "render_user_detail",
    "render_create_page",
    "render_edit_page",
    "render_user_form",
]
