"""Serviço de consulta: política de filtro e redutores puros de QueryFilter."""
from __future__ import annotations
from typing import List, Sequence
from kink import di
from ...core.guardrails import sanitize_text
from ...core.logging import get_logger
from ...core.settings import Settings
from ...ports.interfaces import ItemStorePort, QueryFilter

log = get_logger()

# ---------- Redutores (filtro imutável) ----------
def toggle_category(flt: QueryFilter, category: str) -> QueryFilter:
    """Liga/desliga uma categoria e devolve um novo filtro."""
    selected = set(flt.selected_categories)
    selected.symmetric_difference_update({category})
    return flt.model_copy(update={"selected_categories": frozenset(selected)})

def set_search_text(flt: QueryFilter, text: str) -> QueryFilter:
    return flt.model_copy(update={"search_text": text})

def clear_filter() -> QueryFilter:
    return QueryFilter()

def normalize_filter(flt: QueryFilter) -> QueryFilter:
    """Única definição da política: texto sem caracteres de controle; categorias vazias = todas."""
    text = sanitize_text(flt.search_text)
    if text == flt.search_text:
        return flt
    return set_search_text(flt, text)

def with_synthetic(categories: Sequence[str], synthetic: Sequence[str]) -> List[str]:
    """União ordenada: categorias observadas primeiro, depois as sintéticas ausentes."""
    out: List[str] = []
    for c in [*categories, *synthetic]:
        if c not in out:
            out.append(c)
    return out

class QueryEngine:
    """Seam entre a política de filtro e o mecanismo de consulta do store."""
    def __init__(self, store: ItemStorePort | None = None, settings: Settings | None = None):
        self.store = store if store is not None else di["item_store"]
        self.settings = settings or di[Settings]

    def execute(self, flt: QueryFilter):
        """Executa o filtro normalizado. Mesmo filtro + store inalterado → mesma lista."""
        flt = normalize_filter(flt)
        items = self.store.query_filtered(flt)
        log.debug("query_executed", categories=sorted(flt.selected_categories), search=flt.search_text, hits=len(items))
        return items

    def categories(self) -> List[str]:
        """CategorySet: categorias presentes ∪ sintéticas (sempre presentes)."""
        return with_synthetic(self.store.all_categories(), self.settings.synthetic_categories)
