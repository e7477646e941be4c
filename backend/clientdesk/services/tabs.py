from __future__ import annotations

from enum import StrEnum


class Tab(StrEnum):
    LIST = "list"
    ADD = "add"
    EDIT = "edit"
    STATS = "stats"


TAB_LABELS: dict[Tab, str] = {
    Tab.LIST: "Liste des clients",
    Tab.ADD: "Ajouter un client",
    Tab.EDIT: "Modifier un client",
    Tab.STATS: "Statistiques",
}


class TabNavigator:
    """Which of the mutually exclusive views is active."""

    def __init__(self, initial: Tab = Tab.LIST) -> None:
        self.active = initial

    def change(self, tab: Tab | str) -> Tab:
        self.active = Tab(tab)
        return self.active

    def visible_view(self, has_editing_client: bool) -> Tab | None:
        """The view to render, or None when the edit tab has nothing to edit."""
        if self.active is Tab.EDIT and not has_editing_client:
            return None
        return self.active
