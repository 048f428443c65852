import time, logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, StreamingResponse
from pydantic import BaseModel

from . import narratives
from .ai_layers import AILayers
from .config import Settings, settings as default_settings
from .errors import LayerNotFound, NodeNotFound
from .notifier import ChangeNotifier
from .state import StateStore
from .topology import load_topology
from .ui import HTML as INDEX_HTML

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


class RemediationIn(BaseModel):
    actionId: Optional[str] = None
    nodeId: Optional[str] = None


class BlackboxRequestIn(BaseModel):
    reason: Optional[str] = None
    requestedData: Any = None


class SummaryIn(BaseModel):
    nodeId: Optional[str] = None
    issueType: Optional[str] = None


def create_app(cfg: Optional[Settings] = None, store: Optional[StateStore] = None) -> FastAPI:
    cfg = cfg or default_settings
    configure_logging(cfg.LOG_LEVEL)

    if store is None:
        nodes, edges = load_topology(cfg.TOPOLOGY_PATH)
        store = StateStore(nodes, edges)
    notifier = ChangeNotifier(store.snapshot, interval_s=cfg.EVENT_INTERVAL_S)
    ai_layers = AILayers(approval_delay_s=cfg.BLACKBOX_APPROVAL_DELAY_S)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"OpsBoard ready: {len(store.nodes)} nodes, {len(store.edges)} edges, "
                    f"event interval {cfg.EVENT_INTERVAL_S}s")
        yield
        notifier.close_all()
        ai_layers.cancel_pending()

    app = FastAPI(title="OpsBoard — system health dashboard", lifespan=lifespan)
    app.state.settings = cfg
    app.state.store = store
    app.state.notifier = notifier
    app.state.ai_layers = ai_layers
    app.state.started_at = time.time()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.ALLOWED_ORIGINS,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    @app.exception_handler(NodeNotFound)
    async def node_not_found(request: Request, exc: NodeNotFound):
        return JSONResponse({"error": "Node not found", "nodeId": exc.node_id}, status_code=404)

    @app.exception_handler(LayerNotFound)
    async def layer_not_found(request: Request, exc: LayerNotFound):
        return JSONResponse({"error": "Layer not found", "layer": exc.layer}, status_code=404)

    @app.get("/", response_class=HTMLResponse)
    def index():
        """Dashboard page fed by /api/topology and /api/events"""
        return HTMLResponse(INDEX_HTML)

    @app.get("/health", response_class=JSONResponse)
    def health():
        return JSONResponse({
            "ok": True,
            "ts": time.time(),
            "uptime_s": int(time.time() - app.state.started_at),
            "subscribers": notifier.active_subscriptions,
        })

    @app.get("/api/topology")
    def api_topology():
        nodes, edges = store.get_topology()
        return {"nodes": [n.to_dict() for n in nodes], "edges": [e.to_dict() for e in edges]}

    @app.get("/api/status")
    def api_status():
        return store.get_status_summary()

    @app.get("/api/node/{node_id}/drilldown")
    def api_node_drilldown(node_id: str):
        return store.get_node_detail(node_id)

    @app.post("/api/scenario/start")
    def api_scenario_start(s: int = 1):
        return store.start_scenario(s)

    @app.post("/api/scenario/stop")
    def api_scenario_stop():
        return store.stop_scenario()

    @app.post("/api/remediation/apply")
    def api_remediation_apply(body: RemediationIn):
        return store.apply_remediation(body.actionId, body.nodeId)

    @app.get("/api/incidents")
    def api_incidents():
        return [i.to_dict() for i in store.list_active_incidents()]

    @app.get("/api/events")
    async def api_events(request: Request):
        """Server-sent snapshot stream; ends when the client disconnects"""
        return StreamingResponse(
            notifier.stream(request.is_disconnected),
            media_type="text/event-stream",
            headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
        )

    @app.get("/api/ai-layers")
    def api_ai_layers():
        return ai_layers.get_all()

    @app.get("/api/ai-layers/{layer}")
    def api_ai_layer(layer: str):
        return ai_layers.get(layer)

    @app.post("/api/blackbox/request-access")
    async def api_blackbox_request(body: BlackboxRequestIn):
        return ai_layers.request_blackbox_access(body.reason, body.requestedData)

    @app.post("/api/llm/generate-summary")
    def api_llm_summary(body: SummaryIn):
        return narratives.llm_summary(body.nodeId, body.issueType)

    return app


app = create_app()
