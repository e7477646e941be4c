"""Summary figures for the statistics tab.

Figures are derived from the currently loaded page only, not from the whole
table.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from pydantic import BaseModel

from clientdesk.schemas.client import Client

UNKNOWN_CITY = "Non renseignée"


class CityCount(BaseModel):
    city: str
    count: int


class ClientStatistics(BaseModel):
    total_clients: int
    distinct_cities: int
    clients_per_city: list[CityCount]
    top_city: str | None
    clients_without_phone: int


def compute_statistics(clients: Sequence[Client]) -> ClientStatistics:
    counts = Counter(c.city.strip() or UNKNOWN_CITY for c in clients)
    per_city = [
        CityCount(city=city, count=count)
        for city, count in sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    ]
    return ClientStatistics(
        total_clients=len(clients),
        distinct_cities=len(counts),
        clients_per_city=per_city,
        top_city=per_city[0].city if per_city else None,
        clients_without_phone=sum(1 for c in clients if not c.phone.strip()),
    )
