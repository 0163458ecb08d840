# tests/core/traceability/test_manifest_round_trip.py
"""
Testes de persistência do Manifest (save/load).

Invariantes:
    - `load_manifest(save_manifest(m))` reproduz `m.to_dict()`
    - o JSON persistido é determinístico (chaves ordenadas)
"""

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

try:
    from horizon_engine.core.traceability.manifest import (
        HorizonManifest,
        add_event,
        create_manifest,
        load_manifest,
        node_started,
        save_manifest,
    )
except Exception as e:
    create_manifest = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(f"Missing Manifest persistence API. Import error: {_IMPORT_ERR}")


def test_round_trip_save_load(tmp_path: Path):
    _require_imports()
    ts = datetime(2026, 1, 16, 12, 0, 0, tzinfo=timezone.utc)
    m = create_manifest(
        run_id="run-001",
        tenant="tenant-001",
        started_at=ts,
        engine_version="0.1.0",
        config_hash="abc",
        graph_hash="def",
    )
    node_started(m, node_id="A", kind="ingest", ts=ts)
    add_event(m, event_type="note", ts=ts, payload={"text": "ação"})

    path = tmp_path / "nested" / "manifest.json"
    save_manifest(m, path)
    loaded = load_manifest(path)

    assert loaded.to_dict() == m.to_dict()
    raw = path.read_text(encoding="utf-8")
    assert "ação" in raw
    assert list(json.loads(raw)) == ["events", "inputs", "nodes", "run"]


def test_from_dict_tolerates_missing_sections():
    _require_imports()
    m = HorizonManifest.from_dict({"run": {"run_id": "r"}})

    assert m.inputs == {}
    assert m.nodes == {}
    assert m.events == []
