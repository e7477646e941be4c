"""Owns one ClientsPageController per open page (browser session)."""

from __future__ import annotations

import logging
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field

from clientdesk.config import settings
from clientdesk.gateway.base import TableGateway
from clientdesk.services.clients_page import ClientsPageController
from clientdesk.services.notifications import ToastQueue

logger = logging.getLogger(__name__)


@dataclass
class PageSession:
    session_id: str
    controller: ClientsPageController
    toasts: ToastQueue = field(repr=False)


class PageSessionRegistry:
    """Least-recently-used map of session id to page session."""

    def __init__(self, max_sessions: int | None = None) -> None:
        self.max_sessions = max_sessions or settings.max_page_sessions
        self._sessions: OrderedDict[str, PageSession] = OrderedDict()

    def get_or_create(self, session_id: str | None, gateway: TableGateway) -> PageSession:
        if session_id and session_id in self._sessions:
            self._sessions.move_to_end(session_id)
            return self._sessions[session_id]

        new_id = uuid.uuid4().hex
        toasts = ToastQueue()
        session = PageSession(
            session_id=new_id,
            controller=ClientsPageController(gateway, toasts),
            toasts=toasts,
        )
        self._sessions[new_id] = session
        while len(self._sessions) > self.max_sessions:
            evicted_id, _ = self._sessions.popitem(last=False)
            logger.info("Evicted page session %s", evicted_id)
        return session

    def clear(self) -> None:
        self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)


page_sessions = PageSessionRegistry()
