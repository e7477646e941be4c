"""HTML rendering of the clients page.

The templates are presentation only: they read controller state and post
user intents back to the routes in ``clientdesk.routers.clients_page``.
The page route awaits the first load before rendering, so there is no
loading placeholder.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from fastapi.templating import Jinja2Templates

from clientdesk.config import settings
from clientdesk.services.statistics import compute_statistics
from clientdesk.services.tabs import TAB_LABELS, Tab

if TYPE_CHECKING:
    from fastapi import Request
    from fastapi.responses import HTMLResponse

    from clientdesk.services.page_sessions import PageSession

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def build_context(session: PageSession) -> dict[str, Any]:
    controller = session.controller
    view = controller.tabs.visible_view(controller.editing_client is not None)
    return {
        "app_name": settings.app_name,
        "page_path": settings.page_path,
        "tabs": TAB_LABELS,
        "active_tab": controller.active_tab,
        "view": view,
        "Tab": Tab,
        "clients": controller.clients,
        "editing_client": controller.editing_client,
        "current_page": controller.current_page,
        "total_pages": controller.total_pages,
        "page_numbers": list(range(1, controller.total_pages + 1)),
        "statistics": compute_statistics(controller.clients) if view is Tab.STATS else None,
        "toasts": session.toasts.drain(),
    }


def render_page(request: Request, session: PageSession) -> HTMLResponse:
    return templates.TemplateResponse(request, "clients/page.html", build_context(session))
