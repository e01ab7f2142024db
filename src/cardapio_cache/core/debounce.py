
"""Debounce por janela de inatividade com um único slot cancelável.

- Cada chamada cancela a execução pendente (se ainda não concluída) e agenda
  uma nova após `delay_ms`.
- Só a última chamada dentro da janela executa, com os argumentos mais recentes.
- Se a função for corrotina, ela roda dentro do slot: uma chamada nova cancela
  também a execução em andamento, então um resultado superado nunca é entregue.
"""
from __future__ import annotations
import asyncio
import inspect
from typing import Any, Awaitable, Callable
from .logging import get_logger

log = get_logger()

class Debouncer:
    """Agenda `func` após um período de silêncio; no máximo uma execução pendente."""

    def __init__(self, func: Callable[..., Any | Awaitable[Any]], delay_ms: int = 500, *, name: str = "debounce"):
        self.func = func
        self.delay_ms = delay_ms
        self.name = name
        self._task: asyncio.Task | None = None
        self._args: tuple = ()
        self._kwargs: dict = {}

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        """Registra um novo evento. Precisa de um event loop em execução."""
        self.cancel()
        self._args, self._kwargs = args, kwargs
        self._task = asyncio.get_running_loop().create_task(self._fire_later(self.delay_ms / 1000.0))
        self._task.add_done_callback(self._report_failure)

    def cancel(self) -> bool:
        """Cancela a execução pendente. Retorna True se havia algo pendente."""
        task, self._task = self._task, None
        if task is None or task.done():
            return False
        task.cancel()
        log.debug("debounce_cancelled", name=self.name)
        return True

    async def flush(self) -> Any:
        """Executa imediatamente a chamada pendente (se houver) e retorna seu resultado."""
        if not self.cancel():
            return None
        return await self._invoke()

    def _report_failure(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            log.error("debounce_failed", name=self.name, error=repr(exc))

    async def _fire_later(self, delay_s: float) -> Any:
        await asyncio.sleep(delay_s)
        return await self._invoke()

    async def _invoke(self) -> Any:
        result = self.func(*self._args, **self._kwargs)
        if inspect.isawaitable(result):
            result = await result
        return result
