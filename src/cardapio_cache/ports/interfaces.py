"""Portas hexagonais (interfaces) e DTOs do cache de cardápio."""
from __future__ import annotations
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import FrozenSet, List, Protocol, Sequence
from pydantic import BaseModel, ConfigDict, field_validator

CENT = Decimal("0.01")
# price_cents precisa caber numa coluna Integer de 32 bits
MAX_PRICE = Decimal("10000000")

class MenuItem(BaseModel):
    """Um prato do cardápio. `category` é texto livre (sem enumeração fixa)."""
    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    price: Decimal
    image: str
    category: str

    @field_validator("price", mode="before")
    @classmethod
    def _price_from_number(cls, v):
        # float passa por str() para não herdar o erro binário (12.99 -> 12.99)
        if isinstance(v, bool):
            raise ValueError("preço deve ser numérico")
        if isinstance(v, float):
            return Decimal(str(v))
        return v

    @field_validator("price")
    @classmethod
    def _quantize(cls, v: Decimal) -> Decimal:
        if not v.is_finite() or abs(v) >= MAX_PRICE:
            raise ValueError(f"preço fora do intervalo aceito: {v}")
        try:
            return v.quantize(CENT, rounding=ROUND_HALF_UP)
        except InvalidOperation as exc:
            raise ValueError(f"preço inválido: {v}") from exc

    @property
    def price_cents(self) -> int:
        return int(self.price * 100)

class QueryFilter(BaseModel):
    """Filtro imutável: categorias selecionadas ∩ busca textual.

    Conjunto de categorias vazio significa "sem filtro" (todas), nunca "nenhuma".
    """
    model_config = ConfigDict(frozen=True)

    selected_categories: FrozenSet[str] = frozenset()
    search_text: str = ""

class QueryResultDTO(BaseModel):
    """Resultado padronizado de uma consulta (sucesso ou erro tipado)."""
    ok: bool
    items: List[MenuItem] = []
    error_code: str | None = None
    error_detail: str | None = None

class MenuItemView(BaseModel):
    """Item pronto para exibição em lista."""
    key: str
    name: str
    description: str
    price: str
    category: str
    image_url: str

class ItemStorePort(Protocol):
    def initialize(self) -> None: ...
    def is_empty(self) -> bool: ...
    def insert_many(self, items: Sequence[MenuItem]) -> None: ...
    def replace_all(self, items: Sequence[MenuItem]) -> None: ...
    def query_filtered(self, flt: QueryFilter) -> List[MenuItem]: ...
    def all_categories(self) -> List[str]: ...
    def last_synced_ms(self) -> int | None: ...

class MenuSourcePort(Protocol):
    async def fetch_menu(self) -> List[MenuItem]: ...
