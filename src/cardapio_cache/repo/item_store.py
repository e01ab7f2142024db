"""Repositório: cache local de itens do cardápio (SQLAlchemy).

- Escritas acontecem em lote único (tudo ou nada): nenhum leitor enxerga
  população parcial.
- Leituras preservam a ordem de inserção (id crescente).
"""
from __future__ import annotations
import time
from decimal import Decimal
from typing import Callable, List, Sequence
from kink import di
from sqlalchemy import delete, func, or_, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from ..core.db import create_db_engine, create_session_factory
from ..core.errors import StorageInitError, StorageReadError, StorageWriteError
from ..core.logging import get_logger
from ..ports.interfaces import MenuItem, QueryFilter
from .models import Base, MenuItemRow, SyncMeta

log = get_logger()

def _to_row(item: MenuItem) -> MenuItemRow:
    return MenuItemRow(
        name=item.name,
        description=item.description,
        price_cents=item.price_cents,
        image=item.image,
        category=item.category,
    )

def _to_item(row: MenuItemRow) -> MenuItem:
    return MenuItem(
        name=row.name,
        description=row.description,
        price=Decimal(row.price_cents) / 100,
        image=row.image,
        category=row.category,
    )

class ItemStore:
    """Tabela durável de itens do cardápio."""

    def __init__(self, engine: Engine | None = None, *, clock: Callable[[], float] = time.time):
        self.engine = engine if engine is not None else di["engine"]
        self.Session = create_session_factory(self.engine)
        self._clock = clock
        self._initialized = False

    @classmethod
    def from_url(cls, database_url: str, **kwargs) -> "ItemStore":
        return cls(create_db_engine(database_url), **kwargs)

    def initialize(self) -> None:
        """Cria as tabelas se ausentes. Idempotente; só a primeira chamada toca o banco."""
        if self._initialized:
            return
        try:
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError as exc:
            log.error("store_init_failed", error=str(exc))
            raise StorageInitError(f"não foi possível abrir o armazenamento: {exc}") from exc
        self._initialized = True
        log.info("store_initialized", url=self.engine.url.render_as_string(hide_password=True))

    def close(self) -> None:
        self.engine.dispose()

    def is_empty(self) -> bool:
        try:
            with self.Session() as s:
                return s.execute(select(MenuItemRow.id).limit(1)).first() is None
        except SQLAlchemyError as exc:
            raise StorageReadError(str(exc)) from exc

    def insert_many(self, items: Sequence[MenuItem]) -> None:
        """Insere todos os itens numa única transação (rollback total em falha)."""
        self._write_batch(items, replace=False)

    def replace_all(self, items: Sequence[MenuItem]) -> None:
        """Substitui o conteúdo inteiro numa única transação."""
        self._write_batch(items, replace=True)

    def _write_batch(self, items: Sequence[MenuItem], *, replace: bool) -> None:
        try:
            rows = [_to_row(it) for it in items]
            with self.Session() as s, s.begin():
                if replace:
                    s.execute(delete(MenuItemRow))
                s.add_all(rows)
                s.merge(SyncMeta(id=1, last_synced_ms=int(self._clock() * 1000), item_count=len(items)))
        except (SQLAlchemyError, ValueError, ArithmeticError) as exc:
            log.error("store_write_failed", items=len(items), replace=replace, error=str(exc))
            raise StorageWriteError(f"lote de {len(items)} itens não gravado: {exc}") from exc
        log.info("store_batch_written", items=len(items), replace=replace)

    def query_filtered(self, flt: QueryFilter) -> List[MenuItem]:
        """Categoria ∈ selecionadas (ou todas) E busca em nome/descrição, sem diferenciar caixa.

        A comparação usa LOWER do banco: no SQLite só letras ASCII são dobradas,
        então "CRÈME" não casa com "crème" (já "Crème" casa com "crème").
        """
        q = select(MenuItemRow)
        if flt.selected_categories:
            q = q.where(MenuItemRow.category.in_(sorted(flt.selected_categories)))
        if flt.search_text:
            q = q.where(or_(
                MenuItemRow.name.icontains(flt.search_text, autoescape=True),
                MenuItemRow.description.icontains(flt.search_text, autoescape=True),
            ))
        try:
            with self.Session() as s:
                rows = s.execute(q.order_by(MenuItemRow.id.asc())).scalars().all()
                return [_to_item(r) for r in rows]
        except SQLAlchemyError as exc:
            raise StorageReadError(str(exc)) from exc

    def all_categories(self) -> List[str]:
        """Categorias distintas presentes, na ordem em que apareceram."""
        first_seen = func.min(MenuItemRow.id).label("first_seen")
        q = select(MenuItemRow.category, first_seen).group_by(MenuItemRow.category).order_by(first_seen)
        try:
            with self.Session() as s:
                return [r.category for r in s.execute(q)]
        except SQLAlchemyError as exc:
            raise StorageReadError(str(exc)) from exc

    def last_synced_ms(self) -> int | None:
        try:
            with self.Session() as s:
                meta = s.get(SyncMeta, 1)
                return meta.last_synced_ms if meta else None
        except SQLAlchemyError as exc:
            raise StorageReadError(str(exc)) from exc
