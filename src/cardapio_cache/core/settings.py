"""Configurações Pydantic Settings para o cache de cardápio."""
from typing import List, Literal
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
    """Configurações da aplicação. Carrega de env e .env.

    Nenhum campo é obrigatório: os defaults apontam para o documento público
    do cardápio e para um SQLite local.
    """
    model_config = SettingsConfigDict(env_file=".env", env_prefix="CC_", case_sensitive=False)

    # Flask
    flask_debug: bool = Field(default=False)
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # DB
    database_url: str = Field(default="sqlite:///cardapio.db", description="URL SQLAlchemy, ex: sqlite:///cardapio.db")

    # Documento remoto
    menu_url: str = Field(
        default="https://raw.githubusercontent.com/Meta-Mobile-Developer-PC/Working-With-Data-API/main/capstone.json",
        description="Endpoint do documento JSON com o campo `menu`",
    )
    image_base_url: str = Field(
        default="https://github.com/Meta-Mobile-Developer-PC/Working-With-Data-API/blob/main/images/",
    )
    image_url_suffix: str = Field(default="?raw=true")
    http_timeout_s: float = Field(default=10.0)

    # Consulta
    debounce_ms: int = Field(default=500, ge=0)
    synthetic_categories: List[str] = Field(default_factory=lambda: ["Drinks", "Specials"])

    # Política de atualização do cache
    refresh_policy: Literal["never", "ttl", "manual"] = Field(default="never")
    refresh_ttl_s: int = Field(default=86400, ge=0)
