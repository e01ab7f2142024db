"""Taxonomia de erros do cache de cardápio.

Cada erro carrega um `code` estável para quem precisa ramificar sem depender
do tipo (ex: corpo JSON da API).
"""
from __future__ import annotations


class MenuCacheError(Exception):
    """Erro base do pacote."""
    code = "menu_cache_error"


class StorageError(MenuCacheError):
    code = "storage_error"


class StorageInitError(StorageError):
    """Meio de armazenamento inacessível (disco, permissão, URL inválida)."""
    code = "storage_init"


class StorageWriteError(StorageError):
    """Falha em lote de escrita; nada do lote fica visível."""
    code = "storage_write"


class StorageReadError(StorageError):
    code = "storage_read"


class NetworkError(MenuCacheError):
    """Conectividade, timeout ou status HTTP fora de 2xx."""
    code = "network"


class ParseError(MenuCacheError):
    """Documento remoto malformado."""
    code = "parse"


class RefreshNotAllowedError(MenuCacheError):
    code = "refresh_not_allowed"


class UnexpectedSyncError(MenuCacheError):
    """Falha não classificada durante a sincronização (o erro original fica em __cause__)."""
    code = "sync_unexpected"
