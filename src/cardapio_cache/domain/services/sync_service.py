"""Orquestrador de sincronização do cache (cold start → cache-hit | fetch + populate).

Estados: UNINITIALIZED → INITIALIZING → {POPULATED | FAILED}

- Falha ao inicializar o store: FAILED sem tentar a rede (não mascarar
  problema de disco como problema de rede).
- Store com dados: POPULATED direto (caminho normal a cada reinício).
- Store vazio: fetch_menu() → insert_many() → POPULATED; qualquer falha → FAILED.
- Falha ao verificar se o store está vazio: cache-miss, mas com replace_all()
  para nunca duplicar linhas já gravadas.
- Nunca roda duas vezes em paralelo: chamadas concorrentes aguardam a mesma task.
- Política de refresh: never (padrão) | ttl | manual.
"""
from __future__ import annotations
import asyncio
import time
from enum import Enum
from typing import Callable, List
from kink import di
from ...core.errors import (
    MenuCacheError,
    RefreshNotAllowedError,
    StorageInitError,
    StorageReadError,
    UnexpectedSyncError,
)
from ...core.logging import get_logger
from ...core.settings import Settings
from ...ports.interfaces import ItemStorePort, MenuSourcePort
from .query_service import with_synthetic

log = get_logger()

class SyncState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    POPULATED = "populated"
    FAILED = "failed"

class SyncOrchestrator:
    def __init__(
        self,
        store: ItemStorePort | None = None,
        source: MenuSourcePort | None = None,
        settings: Settings | None = None,
        *,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store if store is not None else di["item_store"]
        self.source = source if source is not None else di["menu_source"]
        self.settings = settings or di[Settings]
        self._clock = clock
        self._state = SyncState.UNINITIALIZED
        self._inflight: asyncio.Task | None = None
        self.error: MenuCacheError | None = None
        self.categories: List[str] = []

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def ready(self) -> bool:
        return self._state is SyncState.POPULATED

    async def sync(self) -> SyncState:
        """Executa (ou aguarda) a sincronização. Relança o erro tipado em caso de FAILED."""
        if self._inflight is not None and not self._inflight.done():
            log.info("menu_sync_coalesced")
            return await asyncio.shield(self._inflight)
        if self._state is SyncState.POPULATED:
            if not self._ttl_expired():
                return self._state
            self._inflight = asyncio.ensure_future(self._refresh(keep_on_error=True))
        else:
            self._inflight = asyncio.ensure_future(self._run())
        return await asyncio.shield(self._inflight)

    async def refresh(self) -> SyncState:
        """Refresh manual: busca o documento e substitui o cache atomicamente."""
        if self.settings.refresh_policy == "never":
            raise RefreshNotAllowedError("refresh_policy=never: o cache é somente-escrita-uma-vez")
        if self._state is not SyncState.POPULATED:
            return await self.sync()
        if self._inflight is None or self._inflight.done():
            self._inflight = asyncio.ensure_future(self._refresh(keep_on_error=False))
        return await asyncio.shield(self._inflight)

    # ---------- internals ----------
    def _ttl_expired(self) -> bool:
        if self.settings.refresh_policy != "ttl":
            return False
        try:
            last = self.store.last_synced_ms()
        except StorageReadError as exc:
            log.warning("menu_sync_meta_unreadable", error=str(exc))
            return False
        if last is None:
            return True
        return (self._clock() * 1000 - last) >= self.settings.refresh_ttl_s * 1000

    def _fail(self, exc: MenuCacheError) -> None:
        self._state = SyncState.FAILED
        self.error = exc
        log.error("menu_sync_failed", error_code=exc.code, error=str(exc))

    def _populated(self) -> SyncState:
        self.categories = with_synthetic(self.store.all_categories(), self.settings.synthetic_categories)
        self._state = SyncState.POPULATED
        self.error = None
        return self._state

    async def _run(self) -> SyncState:
        self._state = SyncState.INITIALIZING
        try:
            self.store.initialize()
        except StorageInitError as exc:
            self._fail(exc)
            raise

        check_failed = False
        try:
            empty = self.store.is_empty()
        except StorageReadError as exc:
            # único ponto em que falha de store degrada para cache-miss;
            # o lote seguinte substitui o conteúdo em vez de anexar
            log.warning("menu_sync_empty_check_failed", error=str(exc))
            empty = check_failed = True

        try:
            if not empty:
                if self._ttl_expired():
                    return await self._refresh(keep_on_error=True)
                log.info("menu_sync_cache_hit")
                return self._populated()

            log.info("menu_sync_cache_miss")
            items = await self.source.fetch_menu()
            if check_failed:
                self.store.replace_all(items)
            else:
                self.store.insert_many(items)
            log.info("menu_sync_populated", items=len(items), replaced=check_failed)
            return self._populated()
        except MenuCacheError as exc:
            if self.error is not exc:
                self._fail(exc)
            raise
        except Exception as exc:
            log.error("menu_sync_crashed", error=repr(exc))
            wrapped = UnexpectedSyncError(f"falha inesperada na sincronização: {exc!r}")
            self._fail(wrapped)
            raise wrapped from exc

    async def _refresh(self, *, keep_on_error: bool) -> SyncState:
        try:
            items = await self.source.fetch_menu()
            self.store.replace_all(items)
        except MenuCacheError as exc:
            if not keep_on_error:
                log.warning("menu_refresh_failed", error_code=exc.code, error=str(exc))
                raise
            # cache antigo continua válido; serve dados vencidos
            log.warning("menu_refresh_failed_serving_stale", error_code=exc.code, error=str(exc))
        else:
            log.info("menu_refreshed", items=len(items))
        try:
            return self._populated()
        except MenuCacheError as exc:
            self._fail(exc)
            raise
