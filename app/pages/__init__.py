"""Server-rendered HTML pages (landing page, approval link outcome)."""

from app.pages.approval import render_approval_page
from app.pages.root import render_root_page

__all__ = ["render_approval_page", "render_root_page"]
