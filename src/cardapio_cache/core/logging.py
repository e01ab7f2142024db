"""Infra de logging JSON usando structlog, com trace_id contextual."""
from __future__ import annotations
import structlog
from uuid import uuid4
from contextvars import ContextVar

trace_id_ctx: ContextVar[str] = ContextVar("trace_id", default="-")

_configured = False

def set_trace_id(value: str | None = None) -> str:
    """Define trace_id no contexto atual e retorna o valor definido."""
    tid = value or uuid4().hex
    trace_id_ctx.set(tid)
    return tid

def _add_trace_id(_, __, event_dict: dict) -> dict:
    return {**event_dict, "trace_id": trace_id_ctx.get()}

def configure_logging(level: int = 20) -> None:
    """Configura structlog uma única vez (JSON em stdout, resolvido a cada logger)."""
    global _configured
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            _add_trace_id,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )
    _configured = True

def get_logger() -> structlog.stdlib.BoundLogger:
    """Retorna logger JSON com trace_id injetado automaticamente."""
    if not _configured:
        configure_logging()
    return structlog.get_logger()
