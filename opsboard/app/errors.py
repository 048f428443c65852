class OpsBoardError(Exception):
    """Base class for errors raised by the dashboard core."""


class TopologyError(OpsBoardError):
    """Topology resource is missing fields or references unknown nodes."""


class NodeNotFound(OpsBoardError):
    def __init__(self, node_id: str):
        super().__init__(f"Node not found: {node_id}")
        self.node_id = node_id


class LayerNotFound(OpsBoardError):
    def __init__(self, layer: str):
        super().__init__(f"Layer not found: {layer}")
        self.layer = layer
