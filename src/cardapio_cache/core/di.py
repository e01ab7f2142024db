"""Bootstrap do container de DI (kink) para o cache de cardápio."""
from kink import di
from .settings import Settings
from .db import create_db_engine
from ..repo.item_store import ItemStore
from ..connectors.remote.menu_document_adapter import RemoteMenuAdapter
from ..domain.services.query_service import QueryEngine
from ..domain.services.sync_service import SyncOrchestrator

def bootstrap_di(settings: Settings | None = None) -> None:
    settings = settings or Settings()
    di[Settings] = settings
    di["engine"] = create_db_engine(settings.database_url)
    di["item_store"] = ItemStore(di["engine"])
    di["menu_source"] = RemoteMenuAdapter(settings)
    di[QueryEngine] = QueryEngine(di["item_store"], settings)
    di[SyncOrchestrator] = SyncOrchestrator(di["item_store"], di["menu_source"], settings)
