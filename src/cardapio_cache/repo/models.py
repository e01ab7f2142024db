
"""Modelos SQLAlchemy do cache local de cardápio."""
from __future__ import annotations
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import String, Integer, BigInteger, Text

class Base(DeclarativeBase):
    """Base declarativa."""
    pass

class MenuItemRow(Base):
    __tablename__ = "menu_items"
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)  # ordem de inserção
    name: Mapped[str] = mapped_column(String(200))
    description: Mapped[str] = mapped_column(Text)
    price_cents: Mapped[int] = mapped_column(Integer)  # precisão fixa, nunca float
    image: Mapped[str] = mapped_column(String(255))
    category: Mapped[str] = mapped_column(String(120), index=True)

class SyncMeta(Base):
    __tablename__ = "sync_meta"
    id: Mapped[int] = mapped_column(primary_key=True)  # linha única (id=1)
    last_synced_ms: Mapped[int] = mapped_column(BigInteger)  # epoch ms
    item_count: Mapped[int] = mapped_column(Integer, default=0)
