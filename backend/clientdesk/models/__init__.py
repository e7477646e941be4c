from clientdesk.models.client import ClientRow

__all__ = [
    "ClientRow",
]
