from typing import List, Tuple
import yaml
from pathlib import Path

from .errors import TopologyError
from .models import Category, Edge, Node


def load_topology(path: str | Path) -> Tuple[List[Node], List[Edge]]:
    p = Path(path)
    try:
        data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except FileNotFoundError as e:
        raise TopologyError(f"Topology file not found: {p}") from e

    nodes: List[Node] = []
    seen = set()
    for n in data.get("nodes", []):
        try:
            node_id = str(n["id"])
            category = Category(n["category"])
        except KeyError as e:
            raise TopologyError(f"Node entry missing field {e}: {n!r}") from e
        except ValueError as e:
            raise TopologyError(f"Unknown category for node {n.get('id')}: {n.get('category')}") from e
        if node_id in seen:
            raise TopologyError(f"Duplicate node id: {node_id}")
        seen.add(node_id)
        nodes.append(Node(id=node_id, name=n.get("name", node_id), category=category,
                          x=n.get("x", 0), y=n.get("y", 0)))

    edges: List[Edge] = []
    for e in data.get("edges", []):
        src, dst = e.get("from"), e.get("to")
        # 양 끝 노드가 모두 존재해야 함
        if src not in seen or dst not in seen:
            raise TopologyError(f"Edge references unknown node: {src} -> {dst}")
        edges.append(Edge(source=src, target=dst))

    if not nodes:
        raise TopologyError(f"Topology has no nodes: {p}")
    return nodes, edges
