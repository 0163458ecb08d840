"""
Horizon Engine — Canonical Exceptions (v1)

Este módulo define exceções tipadas internas do Horizon Engine.

Objetivo:
- Permitir que Builder/Engine levantem exceções semânticas tipadas
- Facilitar o mapeamento determinístico para HorizonErrorPayload
- Evitar ValueError/RuntimeError genéricos nas fronteiras de construção

Regras:
- Exceções carregam apenas dados estruturados (serializáveis).
- Erros estruturais do planner (ciclo, nó desconhecido) vivem em
  `core.engine.planner`, ao lado do algoritmo que os detecta.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class HorizonException(Exception):
    """Base class para exceções internas do Horizon Engine.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Mensagem deve ser curta e humana
    """

    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None
    decision_required: bool = False

    def __str__(self) -> str:  # pragma: no cover
        return self.message


# ---------------------------------------------------------------------------
# Construção do grafo
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class InvalidGraphSchemaError(HorizonException):
    """Descrição declarativa do grafo viola o schema mínimo."""


# ---------------------------------------------------------------------------
# Engine / Configuração
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EngineConfigurationError(HorizonException):
    """Configuração inválida ou inconsistente para execução."""
