# src/horizon_engine/core/engine/engine.py
"""
Engine de execução do grafo de estágios do Horizon Engine.

O Engine percorre a ordem topológica produzida pelo planner, um nó por
vez, e para cada nó:
    - verifica o token de cancelamento
    - aplica o filtro opcional do chamador
    - aguarda `runtime.resolve` com a entrada compartilhada
    - em caso de falha, usa `runtime.fallback` ou `{}` como saída
    - registra Snapshot, entrada na Timeline e evento de auditoria

Política de falhas:
    - Fatais (levantam exceção, sem resultado parcial): ciclo, aresta para
      nó inexistente, id duplicado, cancelamento já sinalizado
    - Recuperáveis (nunca levantam): falha de `resolve` em qualquer nó;
      o erro é convertido em HorizonErrorPayload e registrado no
      ExecutionContext/Manifest quando fornecidos

Limites explícitos:
    - Não executa ramos independentes em paralelo
    - Não interrompe um `resolve` em andamento (cancelamento só na fronteira)
    - Não mantém estado entre chamadas
"""

from __future__ import annotations

import asyncio
import inspect
import time
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

from horizon_engine.core.config.loader import validate_engine_config
from horizon_engine.core.errors import (
    HorizonErrorPayload,
    execution_aborted,
    node_resolve_failed,
)
from horizon_engine.core.exceptions import HorizonException
from horizon_engine.core.pipeline.context import ExecutionContext
from horizon_engine.core.pipeline.runtime import SyntheticNode
from horizon_engine.core.pipeline.types import (
    ExecutionResult,
    NodeInput,
    RunSummary,
    Snapshot,
    Stage,
    Timeline,
)
from horizon_engine.core.traceability.manifest import node_failed, node_finished, node_started

from .planner import topological_order

if TYPE_CHECKING:  # pragma: no cover
    from horizon_engine.core.graph import SyntheticGraph


ABORT_MESSAGE = "execution aborted"


class ExecutionAbortedError(RuntimeError):
    """
    Exceção levantada quando o token de cancelamento já está sinalizado
    no início de um nó.

    A execução termina sem resultado parcial; o chamador pode reexecutar
    com um token novo.
    """

    def __init__(self, message: str = ABORT_MESSAGE, error: HorizonErrorPayload | None = None):
        super().__init__(message)
        self.error = error


@dataclass(frozen=True)
class ExecutionOptions:
    """
    Opções de uma chamada a `execute`.

    Campos:
        - filter: nós para os quais retorna False são pulados
        - on_run: callback `(node_id, stage, elapsed_ms)` após cada nó executado
        - signal: token de cancelamento verificado antes de cada nó
        - ctx: contexto observável (log estruturado, warnings, Manifest)
        - dispose_on_exit: chama `runtime.dispose()` de todos os nós ao final
    """

    filter: Optional[Callable[[SyntheticNode], bool]] = None
    on_run: Optional[Callable[[str, Stage, int], None]] = None
    signal: Optional[asyncio.Event] = None
    ctx: Optional[ExecutionContext] = None
    dispose_on_exit: bool = False


def _now_ms() -> int:
    return int(time.time() * 1000)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def exception_to_error(exc: Exception, *, node: SyntheticNode, fallback: bool) -> HorizonErrorPayload:
    """Converte a falha de `resolve` em HorizonErrorPayload (sem stack trace).

    HorizonException já traz mensagem e detalhes estruturados; estes são
    preservados junto ao contexto do nó.
    """
    payload = node_resolve_failed(
        node_id=node.node.id,
        stage=node.node.kind.value,
        exc_type=exc.__class__.__name__,
        exc_message=str(exc) or None,
        fallback=fallback,
    )
    if isinstance(exc, HorizonException):
        details = dict(payload.details)
        details["cause"] = dict(exc.details or {})
        return replace(payload, details=details, hint=exc.hint or payload.hint)
    return payload


async def _call_fallback(node: SyntheticNode, node_input: NodeInput) -> Any:
    fallback = getattr(node.runtime, "fallback", None)
    if fallback is None:
        return {}
    value = fallback(node_input)
    if inspect.isawaitable(value):
        value = await value
    # fallback que devolve None segue a mesma regra da ausência de fallback
    return {} if value is None else value


def _dispose_runtimes(graph: "SyntheticGraph", ctx: Optional[ExecutionContext], *, raise_first: bool) -> None:
    """
    Chama `dispose()` de cada runtime, isoladamente.

    Uma falha não impede o descarte dos demais runtimes; cada falha é
    registrada no contexto. A primeira falha é relançada ao final apenas
    quando `raise_first` é verdadeiro (execução concluída sem erro).
    """
    first_error: Optional[Exception] = None
    for entry in graph.nodes:
        try:
            entry.runtime.dispose()
        except Exception as exc:
            if ctx is not None:
                ctx.log(
                    node_id=entry.node.id,
                    level="WARNING",
                    message="runtime dispose failed",
                    exc_type=exc.__class__.__name__,
                    exc_message=str(exc),
                )
                ctx.add_warning(node_id=entry.node.id, message="runtime dispose failed")
            if first_error is None:
                first_error = exc
    if raise_first and first_error is not None:
        raise first_error


async def execute_graph(
    graph: "SyntheticGraph",
    input: NodeInput,
    options: Optional[ExecutionOptions] = None,
) -> ExecutionResult:
    """
    Executa o grafo em ordem topológica e devolve snapshots e timeline.

    A ordem é calculada uma única vez, antes de qualquer nó executar:
    erros estruturais surgem sem efeitos colaterais.

    Args:
        graph (SyntheticGraph): Grafo imutável a executar.
        input (NodeInput): Entrada compartilhada (mesmo payload para todos os nós).
        options (Optional[ExecutionOptions]): Filtro, callback, cancelamento e contexto.

    Returns:
        ExecutionResult: snapshots, timeline, saídas por nó e nós servidos por fallback.

    Raises:
        CycleDetectedError: Se o grafo contiver ciclo.
        UnknownNodeError: Se uma aresta referenciar nó inexistente.
        ExecutionAbortedError: Se o token de cancelamento estiver sinalizado.
    """
    opts = options or ExecutionOptions()
    ctx = opts.ctx
    manifest = ctx.manifest if ctx is not None else None

    try:
        order = topological_order(graph.nodes, graph.edges)
        by_id: Dict[str, SyntheticNode] = {entry.node.id: entry for entry in graph.nodes}

        snapshots: List[Snapshot] = []
        ordered: List[str] = []
        events: List[str] = []
        fallbacks: List[str] = []
        runtime_state: Dict[str, Any] = {}

        for node_id in order:
            if opts.signal is not None and opts.signal.is_set():
                raise ExecutionAbortedError(
                    ABORT_MESSAGE,
                    execution_aborted(run_id=input.run_id, node_id=node_id),
                )

            entry = by_id[node_id]
            stage = entry.node.kind

            if opts.filter is not None and not opts.filter(entry):
                if ctx is not None:
                    ctx.log(node_id=node_id, level="DEBUG", message="node skipped by filter", stage=stage.value)
                continue

            node_input = NodeInput(tenant=input.tenant, run_id=input.run_id, payload=input.payload)
            started_at = _now_ms()
            if ctx is not None:
                ctx.log(node_id=node_id, level="INFO", message="node started", stage=stage.value)
            if manifest is not None:
                node_started(manifest, node_id=node_id, kind=stage.value, ts=_utcnow())

            served_by_fallback = False
            try:
                value = await entry.runtime.resolve(node_input)
            except Exception as exc:
                served_by_fallback = True
                has_fallback = getattr(entry.runtime, "fallback", None) is not None
                error = exception_to_error(exc, node=entry, fallback=has_fallback)
                if ctx is not None:
                    ctx.log(
                        node_id=node_id,
                        level="WARNING",
                        message="node resolve failed; output replaced",
                        stage=stage.value,
                        error=error.to_dict(),
                    )
                    ctx.add_warning(node_id=node_id, message=error.message)
                if manifest is not None:
                    node_failed(manifest, node_id=node_id, ts=_utcnow(), error=error.to_dict())
                value = await _call_fallback(entry, node_input)

            elapsed_ms = _now_ms() - started_at
            ordered.append(node_id)
            runtime_state[node_id] = value
            if served_by_fallback:
                fallbacks.append(node_id)
            if opts.on_run is not None:
                opts.on_run(node_id, stage, elapsed_ms)
            events.append(f"{node_id}:{stage.value}")
            snapshots.append(
                Snapshot(run_id=input.run_id, started_at=started_at, input=input.payload, output=value)
            )

            status = "fallback" if served_by_fallback else "success"
            if ctx is not None:
                ctx.log(
                    node_id=node_id,
                    level="INFO",
                    message="node finished",
                    stage=stage.value,
                    status=status,
                    elapsed_ms=elapsed_ms,
                )
            if manifest is not None:
                node_finished(manifest, node_id=node_id, ts=_utcnow(), status=status)

        result = ExecutionResult(
            snapshots=snapshots,
            timeline=Timeline(
                stages=[by_id[nid].node.kind if nid in by_id else Stage.INGEST for nid in ordered],
                ordered=ordered,
                events=events,
            ),
            outputs=runtime_state,
            fallbacks=fallbacks,
        )
    except BaseException:
        # o erro original prevalece sobre falhas de descarte
        if opts.dispose_on_exit:
            _dispose_runtimes(graph, ctx, raise_first=False)
        raise

    if opts.dispose_on_exit:
        _dispose_runtimes(graph, ctx, raise_first=True)
    return result


def options_from_config(config: Dict[str, Any], **overrides: Any) -> ExecutionOptions:
    """
    Monta ExecutionOptions a partir da configuração efetiva.

    A configuração é validada antes de montar o filtro: uma seção
    `stages` malformada falha aqui, antes de qualquer nó executar.

    Regras:
        - `stages.<kind>.enabled` (padrão True) vira o filtro de nós
        - `engine.dispose_on_exit` (padrão False) controla o descarte
        - `overrides` substituem qualquer campo (ex.: signal, ctx, on_run)

    Raises:
        EngineConfigurationError: Se `engine`/`stages` forem inválidos.
    """
    config = validate_engine_config(dict(config or {}))
    stages_cfg = config.get("stages") or {}
    engine_cfg = config.get("engine") or {}

    def _stage_enabled(entry: SyntheticNode) -> bool:
        stage_cfg = stages_cfg.get(entry.node.kind.value, {}) or {}
        return bool(stage_cfg.get("enabled", True))

    base = ExecutionOptions(
        filter=_stage_enabled if stages_cfg else None,
        dispose_on_exit=bool(engine_cfg.get("dispose_on_exit", False)),
    )
    return replace(base, **overrides)


def summarize_execution(result: ExecutionResult, *, tenant: str, elapsed_ms: int = 0) -> RunSummary:
    """Resume um ExecutionResult: nós executados, ok e servidos por fallback."""
    run_id = result.snapshots[0].run_id if result.snapshots else ""
    stage_count = len(result.timeline.ordered)
    fallback_count = len(result.fallbacks)
    return RunSummary(
        run_id=run_id,
        tenant=tenant,
        stage_count=stage_count,
        ok_count=stage_count - fallback_count,
        fallback_count=fallback_count,
        elapsed_ms=elapsed_ms,
    )
