"""Serviço da tela de cardápio: eventos de UI → debounce → consulta → resultado.

Expõe aos colaboradores externos: categories(), filtered_items(filtro) e o
sinal `ready` (sincronização concluída).
"""
from __future__ import annotations
from typing import Callable, List, Sequence
from kink import di
from ...core.debounce import Debouncer
from ...core.errors import MenuCacheError
from ...core.logging import get_logger
from ...core.settings import Settings
from ...ports.interfaces import MenuItem, MenuItemView, QueryFilter, QueryResultDTO
from .query_service import QueryEngine, set_search_text, toggle_category, with_synthetic
from .sync_service import SyncOrchestrator

log = get_logger()

def error_result(exc: MenuCacheError) -> QueryResultDTO:
    return QueryResultDTO(ok=False, error_code=exc.code, error_detail=str(exc))

def to_views(items: Sequence[MenuItem], settings: Settings | None = None) -> List[MenuItemView]:
    """Converte itens em linhas de lista: chave única `nome-posição`, preço `$0.00` e URL da imagem."""
    s = settings or di[Settings]
    return [
        MenuItemView(
            key=f"{it.name}-{pos}",
            name=it.name,
            description=it.description,
            price=f"${it.price:.2f}",
            category=it.category,
            image_url=f"{s.image_base_url}{it.image}{s.image_url_suffix}",
        )
        for pos, it in enumerate(items)
    ]

class MenuBrowser:
    """Estado da tela: filtro imutável atual + último resultado publicado."""

    def __init__(
        self,
        orchestrator: SyncOrchestrator | None = None,
        engine: QueryEngine | None = None,
        settings: Settings | None = None,
        on_results: Callable[[QueryResultDTO], None] | None = None,
    ):
        self.orchestrator = orchestrator or di[SyncOrchestrator]
        self.engine = engine or di[QueryEngine]
        self.settings = settings or di[Settings]
        self.on_results = on_results
        self._filter = QueryFilter()
        self._results: QueryResultDTO | None = None
        self._debouncer = Debouncer(self._apply, self.settings.debounce_ms, name="menu_filter")

    @property
    def ready(self) -> bool:
        return self.orchestrator.ready

    @property
    def filter(self) -> QueryFilter:
        return self._filter

    @property
    def results(self) -> QueryResultDTO | None:
        return self._results

    async def start(self) -> QueryResultDTO:
        """Sincroniza o cache e publica a primeira consulta com o filtro corrente."""
        try:
            await self.orchestrator.sync()
        except MenuCacheError as exc:
            # "dados indisponíveis": nenhum cardápio parcial é publicado
            result = error_result(exc)
        else:
            result = self.filtered_items(self._filter)
        self._publish(result)
        return result

    def categories(self) -> List[str]:
        if not self.ready:
            return with_synthetic([], self.settings.synthetic_categories)
        return self.engine.categories()

    def filtered_items(self, flt: QueryFilter) -> QueryResultDTO:
        """Consulta imediata (sem debounce). Falhas de leitura viram resultado tipado."""
        if not self.ready:
            return QueryResultDTO(ok=False, error_code="not_ready", error_detail=f"cache ainda não sincronizado (estado: {self.orchestrator.state.value})")
        try:
            return QueryResultDTO(ok=True, items=self.engine.execute(flt))
        except MenuCacheError as exc:
            log.warning("query_failed", error_code=exc.code, error=str(exc))
            return error_result(exc)

    # ---------- eventos de UI ----------
    def set_search_text(self, text: str) -> None:
        self._filter = set_search_text(self._filter, text)
        self._schedule()

    def toggle_category(self, category: str) -> None:
        self._filter = toggle_category(self._filter, category)
        self._schedule()

    def close(self) -> None:
        """Desmontagem: nenhuma consulta pendente pode sobrescrever resultados depois daqui."""
        self._debouncer.cancel()

    def _schedule(self) -> None:
        # antes do ready o filtro só acumula; start() aplica o mais recente
        if self.ready:
            self._debouncer(self._filter)

    def _apply(self, flt: QueryFilter) -> QueryResultDTO:
        result = self.filtered_items(flt)
        self._publish(result)
        return result

    def _publish(self, result: QueryResultDTO) -> None:
        self._results = result
        if self.on_results is not None:
            self.on_results(result)
