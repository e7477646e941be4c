"""State and actions behind the clients management page.

One ``ClientsPageController`` belongs to one open page. It keeps the
currently loaded page of clients as a local cache, mirrors every successful
remote mutation into that cache, and reports each outcome as a toast. Remote
failures are logged and reported but never raised: the last known-good state
stays in place.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from clientdesk.config import settings
from clientdesk.gateway.base import TableGateway
from clientdesk.schemas.client import Client, ClientCreate
from clientdesk.services import notifications
from clientdesk.services.notifications import NotificationSink
from clientdesk.services.pagination import clamp_page, page_range, total_pages
from clientdesk.services.tabs import Tab, TabNavigator
from clientdesk.utils.exceptions import RemoteOperationError

logger = logging.getLogger(__name__)

ORDER_COLUMN = "name"

# Anything that means "the remote call did not give us usable data"
REMOTE_FAILURES = (RemoteOperationError, ValidationError)


class ClientsPageController:
    def __init__(
        self,
        gateway: TableGateway,
        sink: NotificationSink,
        *,
        page_size: int | None = None,
    ) -> None:
        self.gateway = gateway
        self.sink = sink
        self.page_size = page_size or settings.page_size

        self.clients: list[Client] = []
        self.tabs = TabNavigator()
        self.editing_client: Client | None = None
        self.current_page = 1
        self.total_pages = 0
        self.is_loaded = False

        self._load_sequence = 0
        # Set once a load has returned a row count
        self._count_known = False

    @property
    def active_tab(self) -> Tab:
        return self.tabs.active

    def change_tab(self, tab: Tab | str) -> None:
        self.tabs.change(tab)

    def find_client(self, client_id: str) -> Client | None:
        return next((c for c in self.clients if c.id == client_id), None)

    # ── Loading ──────────────────────────────────────────────────────────

    async def load_clients(self, page: int = 1) -> None:
        """Fetch one page of clients ordered by name, with the total count."""
        self._load_sequence += 1
        sequence = self._load_sequence
        start, end = page_range(page, self.page_size)
        try:
            rows, count = await self.gateway.select_page(
                start, end, order_by=ORDER_COLUMN, ascending=True
            )
            loaded = [Client.model_validate(row) for row in rows]
        except REMOTE_FAILURES:
            if sequence != self._load_sequence:
                logger.debug("Ignoring failure of superseded load #%d", sequence)
                return
            logger.exception("Error loading clients (page %d)", page)
            self.sink.notify(
                notifications.error("Impossible de charger les clients. Veuillez réessayer.")
            )
            return
        finally:
            self.is_loaded = True

        if sequence != self._load_sequence:
            logger.debug(
                "Discarding stale response for page %d (load #%d, latest #%d)",
                page, sequence, self._load_sequence,
            )
            return

        self.clients = loaded
        self.total_pages = total_pages(count, self.page_size)
        self.current_page = page
        self._count_known = True
        logger.info(
            "Loaded %d clients for page %d/%d (%d rows total)",
            len(loaded), page, self.total_pages, count,
        )

    async def change_page(self, page: int) -> None:
        """Load ``page``, falling back to the last page when it is past the end."""
        if self._count_known:
            page = clamp_page(page, self.total_pages)
        await self.load_clients(page)
        last_page = max(self.total_pages, 1)
        if self.current_page > last_page:
            await self.load_clients(last_page)

    async def refresh(self) -> None:
        await self.load_clients(self.current_page)

    # ── Mutations ────────────────────────────────────────────────────────

    async def handle_add_client(self, new_client: ClientCreate) -> None:
        try:
            rows = await self.gateway.insert([new_client.model_dump()])
            if not rows:
                raise RemoteOperationError("insert", "no row returned")
            created = Client.model_validate(rows[0])
        except REMOTE_FAILURES:
            logger.exception("Error adding client %r", new_client.name)
            self.sink.notify(
                notifications.error("Impossible d'ajouter le client. Veuillez réessayer.")
            )
            return

        # Appended to the cached page as is; order is restored on the next load
        self.clients = [*self.clients, created]
        logger.info("Client %s added (%s)", created.id, created.name)
        self.sink.notify(
            notifications.success(f"Le client {created.name} a été ajouté avec succès.")
        )
        self.tabs.change(Tab.LIST)

    async def handle_update_client(self, updated_client: Client) -> None:
        try:
            await self.gateway.update(updated_client.id, updated_client.values())
        except RemoteOperationError:
            logger.exception("Error updating client %s", updated_client.id)
            self.sink.notify(
                notifications.error("Impossible de mettre à jour le client. Veuillez réessayer.")
            )
            return

        self.clients = [
            updated_client if c.id == updated_client.id else c for c in self.clients
        ]
        logger.info("Client %s updated", updated_client.id)
        self.sink.notify(
            notifications.success(
                f"Le client {updated_client.name} a été mis à jour avec succès."
            )
        )
        self.editing_client = None
        self.tabs.change(Tab.LIST)

    async def handle_delete_client(self, client_id: str) -> None:
        try:
            deleted = await self.gateway.delete(client_id)
        except RemoteOperationError:
            logger.exception("Error deleting client %s", client_id)
            self.sink.notify(
                notifications.error("Impossible de supprimer le client. Veuillez réessayer.")
            )
            return

        if not deleted:
            # Reported as a success all the same
            logger.warning("Delete of client %s matched no row", client_id)
        self.clients = [c for c in self.clients if c.id != client_id]
        self.sink.notify(notifications.success("Le client a été supprimé avec succès."))

    # ── Editing ──────────────────────────────────────────────────────────

    def start_editing(self, client: Client) -> None:
        self.editing_client = client
        self.tabs.change(Tab.EDIT)

    def cancel_editing(self) -> None:
        self.editing_client = None
        self.tabs.change(Tab.LIST)
