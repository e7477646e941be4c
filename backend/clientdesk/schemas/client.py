from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator


class ClientFields(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    custom_id: str = ""
    name: str
    phone: str = ""
    address: str = ""
    city: str = ""


class ClientCreate(ClientFields):
    """A client as typed into a form; the store assigns the id."""

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if not value:
            raise ValueError("name must not be empty")
        return value


class Client(ClientFields):
    id: str

    model_config = ConfigDict(str_strip_whitespace=True, from_attributes=True)

    @field_validator("id", mode="before")
    @classmethod
    def id_as_string(cls, value: object) -> object:
        # Supabase tables may use integer or uuid primary keys; a null id stays invalid
        return value if value is None else str(value)

    @field_validator("custom_id", "phone", "address", "city", mode="before")
    @classmethod
    def null_as_empty(cls, value: object) -> object:
        return "" if value is None else value

    def values(self) -> dict[str, str]:
        """Column values to send on update, without the id."""
        return self.model_dump(exclude={"id"})
