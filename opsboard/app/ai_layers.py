import asyncio, copy, json, logging, time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .errors import LayerNotFound

logger = logging.getLogger(__name__)


def _initial_layers() -> Dict[str, Any]:
    now = datetime.now(timezone.utc).isoformat()
    logs_per_sec = {"dashboard": 45, "api": 230, "etl": 67, "dwh": 120,
                    "batch": 23, "cache": 89, "storage": 34}
    return {
        "dataCollection": {
            "blackboxModules": {
                nid: {"status": "ACTIVE", "logsPerSec": rate, "lastCollection": now}
                for nid, rate in logs_per_sec.items()
            },
            "totalLogsCollected": 2847293,
            "kpiDefinitions": [
                {"name": "응답시간", "threshold": "2초", "status": "NORMAL"},
                {"name": "처리량", "threshold": "1000 req/s", "status": "NORMAL"},
                {"name": "오류율", "threshold": "1%", "status": "NORMAL"},
                {"name": "가용성", "threshold": "99.9%", "status": "NORMAL"},
            ],
        },
        "aiAnalysis": {
            "anomalyDetection": {
                "model": "Isolation Forest v2.1",
                "accuracy": 94.2,
                "lastTrained": "2024-01-07",
                "anomaliesDetected": 23,
                "falsePositiveRate": 0.05,
            },
            "reinforcementLearning": {
                "model": "Deep Q-Network v1.8",
                "patterns": ["사용자 행동 패턴", "장애 복구 패턴", "성능 최적화 패턴"],
                "learningProgress": 87.3,
                "recommendations": 15,
            },
            "realTimeAnalysis": {
                "processedEvents": 15847,
                "correlationPatterns": 42,
                "predictionAccuracy": 89.7,
            },
        },
        "insightService": {
            "llmEngine": {
                "model": "GPT-4 Turbo",
                "status": "ACTIVE",
                "summariesGenerated": 156,
                "avgResponseTime": "1.2s",
            },
            "autoReports": {"generated": 23, "scheduled": 8, "customDashboards": 12},
            "naturalLanguageInsights": [
                "시스템 성능이 지난 24시간 동안 안정적으로 유지되고 있습니다.",
                "API 서버의 응답 시간이 평소보다 15% 빠릅니다.",
                "캐시 적중률이 증가하여 전체 성능이 향상되었습니다.",
            ],
        },
        "governance": {
            "complianceStatus": "COMPLIANT",
            "blackboxAccess": {"totalRequests": 45, "approved": 42, "pending": 2, "denied": 1},
            "auditTrail": [
                {"timestamp": now, "user": "admin", "action": "VIEW_LOGS", "approved": True},
                {"timestamp": now, "user": "engineer", "action": "MODIFY_CONFIG", "approved": True},
                {"timestamp": now, "user": "analyst", "action": "EXPORT_DATA", "approved": False},
            ],
            "securityLevel": "ENTERPRISE",
        },
    }


class AILayers:
    """Canned 4-layer AI status document plus blackbox access requests.

    Access requests are auto-approved after ``approval_delay_s`` on the
    running event loop.
    """

    def __init__(self, approval_delay_s: float = 2.0):
        self.approval_delay_s = approval_delay_s
        self.layers = _initial_layers()
        # 승인 대기 중인 요청만 보관, 승인되면 제거
        self.pending_requests: Dict[str, Dict[str, Any]] = {}
        self._pending_tasks: set = set()
        self._last_id = 0

    def get_all(self) -> Dict[str, Any]:
        return copy.deepcopy(self.layers)

    def get(self, layer: str) -> Dict[str, Any]:
        if layer not in self.layers:
            raise LayerNotFound(layer)
        return copy.deepcopy(self.layers[layer])

    def _next_id(self) -> str:
        candidate = int(time.time() * 1000)
        if candidate <= self._last_id:
            candidate = self._last_id + 1
        self._last_id = candidate
        return str(candidate)

    def request_blackbox_access(self, reason: Optional[str], requested_data: Any) -> Dict[str, Any]:
        """Record a PENDING request and schedule its approval. Must run on the event loop."""
        req = {
            "id": self._next_id(),
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "user": "demo-user",
            "reason": reason,
            "requestedData": requested_data,
            "status": "PENDING",
            "approvalRequired": True,
        }
        self.pending_requests[req["id"]] = req
        access = self.layers["governance"]["blackboxAccess"]
        access["totalRequests"] += 1
        access["pending"] += 1

        task = asyncio.get_running_loop().create_task(self._approve_later(req["id"]))
        self._pending_tasks.add(task)
        task.add_done_callback(self._pending_tasks.discard)

        logger.info(json.dumps({"event": "blackbox_request", "request": req["id"], "reason": reason}))
        return {
            "success": True,
            "requestId": req["id"],
            "message": "블랙박스 접근 요청이 제출되었습니다. 승인 절차가 진행됩니다.",
        }

    async def _approve_later(self, request_id: str) -> None:
        await asyncio.sleep(self.approval_delay_s)
        self.approve(request_id)

    def approve(self, request_id: str) -> bool:
        req = self.pending_requests.pop(request_id, None)
        if req is None:
            return False
        access = self.layers["governance"]["blackboxAccess"]
        access["approved"] += 1
        access["pending"] = max(0, access["pending"] - 1)
        logger.info(json.dumps({"event": "blackbox_approved", "request": request_id}))
        return True

    def cancel_pending(self) -> None:
        for task in list(self._pending_tasks):
            task.cancel()
