"""Adapter do documento remoto de cardápio (JSON com campo `menu`)."""
from __future__ import annotations
import json
from typing import List
import httpx
from kink import di
from pydantic import ValidationError
from ...core.errors import NetworkError, ParseError
from ...core.logging import get_logger
from ...core.settings import Settings
from ...ports.interfaces import MenuItem

log = get_logger()

class RemoteMenuAdapter:
    """Fronteira de I/O sem estado: uma requisição, sem cache nem retry."""
    def __init__(self, settings: Settings | None = None, transport: httpx.AsyncBaseTransport | None = None):
        self.s = settings or di[Settings]
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.s.http_timeout_s, transport=self._transport, follow_redirects=True)

    async def fetch_menu(self) -> List[MenuItem]:
        """Busca o documento e converte cada entrada de `menu` em MenuItem."""
        try:
            async with self._client() as cli:
                r = await cli.get(self.s.menu_url)
                r.raise_for_status()
        except httpx.HTTPStatusError as exc:
            log.warning("menu_fetch_http_error", url=self.s.menu_url, status=exc.response.status_code)
            raise NetworkError(f"HTTP {exc.response.status_code} em {self.s.menu_url}") from exc
        except httpx.HTTPError as exc:
            log.warning("menu_fetch_unreachable", url=self.s.menu_url, error=repr(exc))
            raise NetworkError(f"falha de rede em {self.s.menu_url}: {exc!r}") from exc

        items = parse_menu_document(r.content)
        log.info("menu_fetch_ok", url=self.s.menu_url, items=len(items))
        return items

def parse_menu_document(raw: bytes | str) -> List[MenuItem]:
    """Valida apenas a estrutura: `menu` presente, lista de objetos com os campos exigidos."""
    try:
        doc = json.loads(raw)
    except (ValueError, TypeError) as exc:
        raise ParseError(f"documento não é JSON válido: {exc}") from exc
    if not isinstance(doc, dict) or "menu" not in doc:
        raise ParseError("documento sem o campo `menu`")
    entries = doc["menu"]
    if not isinstance(entries, list):
        raise ParseError("`menu` deve ser uma lista")
    try:
        return [MenuItem.model_validate(e) for e in entries]
    except ValidationError as exc:
        raise ParseError(f"item de cardápio inválido: {exc.error_count()} erro(s)") from exc
