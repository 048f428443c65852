import asyncio

import pytest

from opsboard.app.ai_layers import AILayers
from opsboard.app.errors import LayerNotFound


def test_get_returns_copy():
    layers = AILayers()
    gov = layers.get("governance")
    gov["blackboxAccess"]["approved"] = 0
    assert layers.get("governance")["blackboxAccess"]["approved"] == 42


def test_unknown_layer():
    with pytest.raises(LayerNotFound) as exc:
        AILayers().get("quantum")
    assert exc.value.layer == "quantum"


def test_approved_requests_are_dropped():
    async def scenario():
        layers = AILayers(approval_delay_s=0.01)
        ids = [layers.request_blackbox_access("점검", None)["requestId"] for _ in range(20)]
        pending_now = len(layers.pending_requests)
        await asyncio.sleep(0.1)
        return layers, ids, pending_now

    layers, ids, pending_now = asyncio.run(scenario())
    assert len(set(ids)) == 20
    assert pending_now == 20
    assert layers.pending_requests == {}
    access = layers.layers["governance"]["blackboxAccess"]
    assert access["totalRequests"] == 65
    assert access["approved"] == 62
    assert access["pending"] == 2


def test_approve_is_one_shot():
    async def scenario():
        layers = AILayers(approval_delay_s=30)
        request_id = layers.request_blackbox_access(None, None)["requestId"]
        first = layers.approve(request_id)
        second = layers.approve(request_id)
        layers.cancel_pending()
        await asyncio.sleep(0)
        return layers, first, second

    layers, first, second = asyncio.run(scenario())
    assert (first, second) == (True, False)
    assert layers.layers["governance"]["blackboxAccess"]["approved"] == 43
