# tests/core/engine/test_executor_traceability.py
"""
Testes de rastreabilidade da execução.

Quando um ExecutionContext é fornecido, o Engine registra:
- eventos estruturados por nó (started, finished, skipped, falha)
- warnings para nós servidos por fallback
- eventos no Manifest, quando o contexto possui um

Limites explícitos:
    - Não valida serialização do Manifest (ver testes de traceability)
"""

from datetime import datetime, timezone

import pytest

try:
    from horizon_engine.core.engine.engine import ExecutionOptions
    from horizon_engine.core.errors import NODE_RESOLVE_FAILED
    from horizon_engine.core.graph import SyntheticGraph
    from horizon_engine.core.traceability.manifest import compute_graph_hash, create_manifest
except Exception as e:
    ExecutionOptions = None
    SyntheticGraph = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(f"Missing Engine traceability support. Import error: {_IMPORT_ERR}")


@pytest.mark.asyncio
async def test_context_receives_started_and_finished_events(make_node, edge, node_input, dummy_ctx):
    _require_imports()
    graph = SyntheticGraph([make_node("A", "ingest"), make_node("B", "analyze")], [edge("A", "B")])

    await graph.execute(node_input, ExecutionOptions(ctx=dummy_ctx))

    messages = [(e["node_id"], e["message"]) for e in dummy_ctx.events]
    assert messages == [
        ("A", "node started"),
        ("A", "node finished"),
        ("B", "node started"),
        ("B", "node finished"),
    ]
    finished = dummy_ctx.events_for("B")[-1]
    assert finished["status"] == "success"
    assert finished["stage"] == "analyze"
    assert finished["run_id"] == "run-test-001"
    assert dummy_ctx.warnings == {}


@pytest.mark.asyncio
async def test_failure_is_logged_as_warning(make_node, node_input, dummy_ctx):
    """
    Falha de `resolve` gera evento WARNING com HorizonErrorPayload
    serializado e um warning agrupado pelo id do nó.
    """
    _require_imports()
    graph = SyntheticGraph([make_node("A", "resolve", fails=True)], [])

    await graph.execute(node_input, ExecutionOptions(ctx=dummy_ctx))

    warning_events = [e for e in dummy_ctx.events if e["level"] == "WARNING"]
    assert len(warning_events) == 1
    error = warning_events[0]["error"]
    assert error["type"] == NODE_RESOLVE_FAILED
    assert error["details"]["node_id"] == "A"
    assert error["details"]["exc_type"] == "RuntimeError"
    assert "A" in dummy_ctx.warnings
    assert dummy_ctx.events_for("A")[-1]["status"] == "fallback"


@pytest.mark.asyncio
async def test_skipped_node_is_logged(make_node, node_input, dummy_ctx):
    _require_imports()
    graph = SyntheticGraph([make_node("A", "ingest")], [])

    await graph.execute(node_input, ExecutionOptions(ctx=dummy_ctx, filter=lambda _entry: False))

    assert [e["message"] for e in dummy_ctx.events] == ["node skipped by filter"]
    assert dummy_ctx.events[0]["level"] == "DEBUG"


@pytest.mark.asyncio
async def test_manifest_records_node_lifecycle(make_node, edge, node_input, dummy_ctx):
    _require_imports()
    graph = SyntheticGraph(
        [make_node("A", "ingest"), make_node("B", "analyze", fails=True)],
        [edge("A", "B")],
    )
    dummy_ctx.manifest = create_manifest(
        run_id="run-test-001",
        tenant="tenant-001",
        started_at=datetime(2026, 1, 16, tzinfo=timezone.utc),
        engine_version="0.1.0",
        config_hash="cfg",
        graph_hash=compute_graph_hash(graph),
    )

    await graph.execute(node_input, ExecutionOptions(ctx=dummy_ctx))

    manifest = dummy_ctx.manifest
    assert [(e["event_type"], e["node_id"]) for e in manifest.events] == [
        ("node_started", "A"),
        ("node_finished", "A"),
        ("node_started", "B"),
        ("node_failed", "B"),
        ("node_finished", "B"),
    ]
    assert manifest.nodes["A"]["status"] == "success"
    assert manifest.nodes["B"]["status"] == "fallback"
    assert manifest.nodes["B"]["error"]["type"] == NODE_RESOLVE_FAILED
