# tests/core/pipeline/test_pipeline_types.py
"""
Testes dos tipos de dados do grafo e da execução.
"""

import dataclasses

import pytest

try:
    from horizon_engine.core.pipeline.types import (
        DEFAULT_STAGE_WINDOW,
        GraphEdge,
        GraphNode,
        NodeInput,
        Stage,
    )
except Exception as e:
    Stage = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(f"Missing pipeline types. Import error: {_IMPORT_ERR}")


def test_stage_values_and_default_window():
    _require_imports()
    assert [s.value for s in Stage] == ["ingest", "analyze", "resolve", "optimize", "execute"]
    assert DEFAULT_STAGE_WINDOW == list(Stage)
    assert Stage("resolve") is Stage.RESOLVE


def test_unknown_stage_is_rejected():
    _require_imports()
    with pytest.raises(ValueError):
        Stage("deploy")


def test_edge_between_uses_stage_label():
    _require_imports()
    a = GraphNode(id="a", kind=Stage.INGEST)
    b = GraphNode(id="b", kind=Stage.ANALYZE)

    e = GraphEdge.between(a, b)

    assert (e.from_id, e.to_id, e.label) == ("a", "b", "ingest:to:analyze")


def test_records_are_immutable():
    _require_imports()
    node_input = NodeInput(tenant="t", run_id="r")

    assert node_input.payload is None
    with pytest.raises(dataclasses.FrozenInstanceError):
        node_input.tenant = "other"
