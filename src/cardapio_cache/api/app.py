"""API Flask: expõe categorias, itens filtrados, sinal de ready e controle de sync."""
from __future__ import annotations
import asyncio
import threading
from flask import Flask, request, jsonify
from kink import di
from ..core.di import bootstrap_di
from ..core.errors import MenuCacheError, NetworkError, ParseError, RefreshNotAllowedError
from ..core.logging import set_trace_id, get_logger
from ..core.settings import Settings
from ..domain.services.menu_service import MenuBrowser, to_views
from ..domain.services.sync_service import SyncOrchestrator
from ..ports.interfaces import QueryFilter

log = get_logger()

# cada request roda seu próprio event loop; o lock serializa o orquestrador entre threads
_sync_lock = threading.Lock()

def _error_body(exc: MenuCacheError) -> dict:
    return {"ok": False, "error_code": exc.code, "error_detail": str(exc)}

def run_sync(orchestrator: SyncOrchestrator) -> None:
    with _sync_lock:
        asyncio.run(orchestrator.sync())

def create_app(settings: Settings | None = None, *, sync_on_start: bool = True) -> Flask:
    """Cria a app, registra dependências e (opcionalmente) executa o cold start."""
    bootstrap_di(settings)
    app = Flask(__name__)
    orchestrator: SyncOrchestrator = di[SyncOrchestrator]
    browser = MenuBrowser(orchestrator=orchestrator)

    if sync_on_start:
        try:
            run_sync(orchestrator)
        except MenuCacheError as exc:
            # app sobe mesmo assim; /ready reporta o estado e /admin/sync tenta de novo
            log.error("startup_sync_failed", error_code=exc.code)

    @app.before_request
    def _trace():
        set_trace_id(request.headers.get("X-Trace-Id"))

    @app.get("/healthz")
    def healthz():
        """Health check básico."""
        return {"ok": True}

    @app.get("/ready")
    def ready():
        err = orchestrator.error
        return {
            "ready": orchestrator.ready,
            "state": orchestrator.state.value,
            "error_code": err.code if err else None,
        }

    @app.get("/categories")
    def categories():
        try:
            return {"categories": browser.categories()}
        except MenuCacheError as exc:
            return _error_body(exc), 500

    @app.get("/menu")
    def menu():
        """Itens filtrados: ?category=A&category=B&q=texto"""
        flt = QueryFilter(
            selected_categories=frozenset(request.args.getlist("category")),
            search_text=request.args.get("q", ""),
        )
        result = browser.filtered_items(flt)
        if not result.ok:
            status = 503 if result.error_code == "not_ready" else 500
            return result.model_dump(mode="json"), status
        views = to_views(result.items, di[Settings])
        return jsonify({"ok": True, "count": len(views), "items": [v.model_dump() for v in views]})

    @app.post("/admin/sync")
    def admin_sync():
        """Reexecuta a sincronização (retry externo após FAILED)."""
        try:
            run_sync(orchestrator)
        except MenuCacheError as exc:
            return _error_body(exc), 503
        return {"ok": True, "state": orchestrator.state.value}

    @app.post("/admin/refresh")
    def admin_refresh():
        """Refresh manual do cache (refresh_policy manual ou ttl)."""
        try:
            with _sync_lock:
                asyncio.run(orchestrator.refresh())
        except RefreshNotAllowedError as exc:
            return _error_body(exc), 409
        except (NetworkError, ParseError) as exc:
            return _error_body(exc), 502
        except MenuCacheError as exc:
            return _error_body(exc), 500
        log.info("admin_refresh_done", state=orchestrator.state.value)
        return {"ok": True, "state": orchestrator.state.value, "categories": orchestrator.categories}

    return app

def main() -> None:
    settings = Settings()
    app = create_app(settings)
    app.run(host=settings.host, port=settings.port, debug=settings.flask_debug)
