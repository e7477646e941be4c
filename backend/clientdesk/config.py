from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Gestion des Clients"
    log_level: str = "INFO"
    api_prefix: str = "/api/v1"
    page_path: str = "/dashboard/clients"

    # Remote table backend
    table_backend: Literal["supabase", "sql"] = "sql"
    supabase_url: str = ""
    supabase_key: str = ""
    clients_table: str = "clients"

    # Only used by the "sql" backend
    database_url: str = "sqlite:///./clients.db"

    page_size: int = 10

    session_cookie_name: str = "clients_page_session"
    max_page_sessions: int = 500

    model_config = {"env_file": ".env"}


settings = Settings()
