import pytest

from opsboard.app.config import DEFAULT_TOPOLOGY_PATH
from opsboard.app.errors import TopologyError
from opsboard.app.models import Category, Health
from opsboard.app.topology import load_topology


def test_packaged_topology_loads():
    nodes, edges = load_topology(DEFAULT_TOPOLOGY_PATH)
    ids = [n.id for n in nodes]
    assert ids == ["dashboard", "api", "etl", "dwh", "batch", "cache", "storage"]
    assert all(n.health is Health.HEALTHY for n in nodes)
    assert {n.category for n in nodes} == set(Category)
    assert len(edges) == 6
    assert edges[2].source == "etl" and edges[2].target == "dwh"


def _write(tmp_path, text):
    p = tmp_path / "topology.yaml"
    p.write_text(text, encoding="utf-8")
    return p


def test_edge_to_unknown_node_rejected(tmp_path):
    p = _write(tmp_path, """
nodes:
  - {id: a, name: A, category: web}
edges:
  - {from: a, to: ghost}
""")
    with pytest.raises(TopologyError, match="ghost"):
        load_topology(p)


def test_duplicate_node_rejected(tmp_path):
    p = _write(tmp_path, """
nodes:
  - {id: a, category: web}
  - {id: a, category: api}
""")
    with pytest.raises(TopologyError, match="Duplicate"):
        load_topology(p)


def test_unknown_category_rejected(tmp_path):
    p = _write(tmp_path, "nodes:\n  - {id: a, category: mainframe}\n")
    with pytest.raises(TopologyError, match="category"):
        load_topology(p)


def test_missing_file(tmp_path):
    with pytest.raises(TopologyError, match="not found"):
        load_topology(tmp_path / "nope.yaml")


def test_empty_topology_rejected(tmp_path):
    p = _write(tmp_path, "nodes: []\n")
    with pytest.raises(TopologyError):
        load_topology(p)
