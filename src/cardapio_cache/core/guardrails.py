"""Sanitização do texto de busca digitado pelo usuário."""
import re

CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")

def sanitize_text(text: str | None) -> str:
    """Remove caracteres de controle. Espaços ficam como digitados: fazem parte da busca."""
    return CONTROL_CHARS.sub("", text or "")
