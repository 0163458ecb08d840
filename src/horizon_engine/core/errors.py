"""
Horizon Engine — Canonical Error Structures (v1)

Este módulo define o padrão canônico de erros do Horizon Engine.

Erros são tratados como dados: o Engine nunca expõe stack trace cru para
quem consome o resultado de uma execução. Toda falha relevante é
convertida em um payload:
- explícito
- serializável
- rastreável
- acionável

Falhas de nó (resolve) são sempre recuperadas pelo Engine; o payload
gerado aqui é o que fica registrado no log de execução e no Manifest.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class HorizonErrorPayload:
    """
    Payload canônico de erro do Horizon Engine.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados relevantes para diagnóstico
    - hint: ação sugerida ao operador (onde corrigir)
    - decision_required: indica que a execução não pode prosseguir sem
      intervenção explícita (ex.: grafo cíclico)
    """
    type: str
    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None
    decision_required: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro (v1)
# ---------------------------------------------------------------------------

# Estrutura do grafo
GRAPH_CYCLE_DETECTED = "GRAPH_CYCLE_DETECTED"
GRAPH_UNKNOWN_NODE = "GRAPH_UNKNOWN_NODE"
GRAPH_INVALID_SCHEMA = "GRAPH_INVALID_SCHEMA"

# Execução
EXECUTION_ABORTED = "EXECUTION_ABORTED"
NODE_RESOLVE_FAILED = "NODE_RESOLVE_FAILED"

# Engine / Configuração
ENGINE_CONFIGURATION_ERROR = "ENGINE_CONFIGURATION_ERROR"


# ---------------------------------------------------------------------------
# Helpers de fábrica
# ---------------------------------------------------------------------------

def graph_cycle_detected(
    *,
    node_count: int,
    ordered_count: int,
    hint: str = "Remova a aresta que fecha o ciclo antes de reexecutar o grafo.",
) -> HorizonErrorPayload:
    return HorizonErrorPayload(
        type=GRAPH_CYCLE_DETECTED,
        message="Grafo de estágios contém ciclo",
        details={
            "node_count": node_count,
            "ordered_count": ordered_count,
        },
        hint=hint,
        decision_required=True,
    )


def graph_unknown_node(
    *,
    edge: Dict[str, str],
    missing: List[str],
    hint: str = "Declare o nó referenciado ou remova a aresta do grafo.",
) -> HorizonErrorPayload:
    return HorizonErrorPayload(
        type=GRAPH_UNKNOWN_NODE,
        message="Aresta referencia nó inexistente",
        details={
            "edge": dict(edge),
            "missing": list(missing),
        },
        hint=hint,
        decision_required=True,
    )


def execution_aborted(
    *,
    run_id: str,
    node_id: Optional[str] = None,
    hint: str = "Reexecute com um novo token de cancelamento.",
) -> HorizonErrorPayload:
    return HorizonErrorPayload(
        type=EXECUTION_ABORTED,
        message="Execução cancelada antes do início do nó",
        details={
            "run_id": run_id,
            "node_id": node_id,
        },
        hint=hint,
        decision_required=False,
    )


def node_resolve_failed(
    *,
    node_id: str,
    stage: str,
    exc_type: Optional[str] = None,
    exc_message: Optional[str] = None,
    fallback: bool = False,
    hint: str = "Inspecione o estágio indicado; a saída registrada veio do fallback.",
) -> HorizonErrorPayload:
    return HorizonErrorPayload(
        type=NODE_RESOLVE_FAILED,
        message="Falha ao resolver nó; saída substituída",
        details={
            "node_id": node_id,
            "stage": stage,
            "exc_type": exc_type,
            "exc_message": exc_message,
            "fallback": fallback,
        },
        hint=hint,
        decision_required=False,
    )


def engine_configuration_error(
    *,
    message: str = "Configuração inválida para execução do grafo",
    details: Optional[Dict[str, Any]] = None,
    hint: str = "Revise as seções `engine` e `stages` da configuração antes de reexecutar.",
) -> HorizonErrorPayload:
    return HorizonErrorPayload(
        type=ENGINE_CONFIGURATION_ERROR,
        message=message,
        details=details or {},
        hint=hint,
        decision_required=False,
    )
