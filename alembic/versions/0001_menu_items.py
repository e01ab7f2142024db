"""Migração inicial: itens do cardápio e metadados de sincronização."""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_menu_items"
down_revision = None
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table(
        "menu_items",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("price_cents", sa.Integer, nullable=False),
        sa.Column("image", sa.String(255), nullable=False),
        sa.Column("category", sa.String(120), nullable=False),
    )
    op.create_index("ix_menu_items_category", "menu_items", ["category"])
    op.create_table(
        "sync_meta",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("last_synced_ms", sa.BigInteger, nullable=False),
        sa.Column("item_count", sa.Integer, nullable=False),
    )

def downgrade() -> None:
    op.drop_table("sync_meta")
    op.drop_index("ix_menu_items_category", table_name="menu_items")
    op.drop_table("menu_items")
