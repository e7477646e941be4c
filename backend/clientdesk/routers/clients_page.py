"""Routes of the clients management page.

Every POST answers with a 303 redirect back to the page so that reloading
the browser never replays a mutation.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Form, Query, Request, Response
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError

from clientdesk.config import settings
from clientdesk.gateway.base import TableGateway
from clientdesk.gateway.factory import get_table_gateway
from clientdesk.schemas.client import Client, ClientCreate
from clientdesk.services import notifications
from clientdesk.services.page_sessions import PageSession, page_sessions
from clientdesk.services.tabs import Tab
from clientdesk.views.clients_page import render_page

logger = logging.getLogger(__name__)

router = APIRouter(prefix=settings.page_path)

MISSING_NAME_MESSAGE = "Le nom du client est obligatoire."


async def get_page_session(
    request: Request, gateway: TableGateway = Depends(get_table_gateway)
) -> PageSession:
    return page_sessions.get_or_create(
        request.cookies.get(settings.session_cookie_name), gateway
    )


def _with_session_cookie(response: Response, session: PageSession) -> Response:
    response.set_cookie(
        settings.session_cookie_name,
        session.session_id,
        httponly=True,
        samesite="lax",
    )
    return response


def _back_to_page(session: PageSession) -> RedirectResponse:
    response = RedirectResponse(url=settings.page_path, status_code=303)
    _with_session_cookie(response, session)
    return response


def _client_form(
    custom_id: str = Form(""),
    name: str = Form(""),
    phone: str = Form(""),
    address: str = Form(""),
    city: str = Form(""),
) -> dict[str, str]:
    return {
        "custom_id": custom_id,
        "name": name,
        "phone": phone,
        "address": address,
        "city": city,
    }


@router.get("", response_class=HTMLResponse)
async def clients_page(
    request: Request,
    tab: Tab | None = None,
    page: int | None = Query(None, ge=1),
    session: PageSession = Depends(get_page_session),
) -> HTMLResponse:
    controller = session.controller
    if tab is not None:
        controller.change_tab(tab)

    if not controller.is_loaded or (page is not None and page != controller.current_page):
        await controller.change_page(page or controller.current_page)

    return _with_session_cookie(render_page(request, session), session)


@router.post("/refresh")
async def refresh_clients(
    session: PageSession = Depends(get_page_session),
) -> RedirectResponse:
    await session.controller.refresh()
    return _back_to_page(session)


@router.post("/add")
async def add_client(
    form: dict[str, str] = Depends(_client_form),
    session: PageSession = Depends(get_page_session),
) -> RedirectResponse:
    try:
        new_client = ClientCreate(**form)
    except ValidationError:
        session.toasts.notify(notifications.error(MISSING_NAME_MESSAGE))
        session.controller.change_tab(Tab.ADD)
        return _back_to_page(session)

    await session.controller.handle_add_client(new_client)
    return _back_to_page(session)


@router.post("/edit/cancel")
async def cancel_edit(session: PageSession = Depends(get_page_session)) -> RedirectResponse:
    session.controller.cancel_editing()
    return _back_to_page(session)


@router.post("/{client_id}/edit")
async def edit_client(
    client_id: str,
    session: PageSession = Depends(get_page_session),
) -> RedirectResponse:
    client = session.controller.find_client(client_id)
    if client is None:
        logger.warning("Edit requested for client %s which is not on the loaded page", client_id)
        session.toasts.notify(notifications.error("Client introuvable sur cette page."))
    else:
        session.controller.start_editing(client)
    return _back_to_page(session)


@router.post("/{client_id}/update")
async def update_client(
    client_id: str,
    form: dict[str, str] = Depends(_client_form),
    session: PageSession = Depends(get_page_session),
) -> RedirectResponse:
    try:
        ClientCreate(**form)
    except ValidationError:
        session.toasts.notify(notifications.error(MISSING_NAME_MESSAGE))
        return _back_to_page(session)

    await session.controller.handle_update_client(Client(id=client_id, **form))
    return _back_to_page(session)


@router.post("/{client_id}/delete")
async def delete_client(
    client_id: str,
    session: PageSession = Depends(get_page_session),
) -> RedirectResponse:
    await session.controller.handle_delete_client(client_id)
    return _back_to_page(session)
