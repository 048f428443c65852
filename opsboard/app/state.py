import json, logging, random, threading, time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from . import narratives
from .errors import NodeNotFound
from .models import (Edge, Health, Incident, IncidentStatus, Metrics, Node, RemediationAction,
                     Scenario, Severity)

logger = logging.getLogger(__name__)

# 필드별 [low, high) 균등분포. 초기화와 시나리오 정지 시 동일하게 사용
METRIC_RANGES: Dict[str, Tuple[float, float]] = {
    "cpu_percent": (10.0, 40.0),
    "memory_percent": (20.0, 60.0),
    "response_time_ms": (50.0, 150.0),
    "queue_depth": (0.0, 10.0),
    "error_rate_percent": (0.0, 2.0),
}


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class StateStore:
    """Authoritative in-memory view of topology, metrics, incidents and the active scenario.

    Every public operation takes the store lock, so handlers running on the
    FastAPI thread pool never observe a half-applied transition.
    """

    def __init__(self, nodes: List[Node], edges: List[Edge], rng: Optional[random.Random] = None):
        self._lock = threading.Lock()
        self._rng = rng or random.Random()
        self.nodes: Dict[str, Node] = {n.id: n for n in nodes}
        self.edges: List[Edge] = list(edges)
        self.metrics: Dict[str, Metrics] = {nid: self._random_metrics() for nid in self.nodes}
        self.incidents: List[Incident] = []
        self.scenario_active: Optional[int] = None
        self._last_incident_id = 0

    @property
    def active_scenario(self) -> Optional[int]:
        return self.scenario_active

    def _random_metrics(self) -> Metrics:
        return Metrics(**{k: self._rng.uniform(lo, hi) for k, (lo, hi) in METRIC_RANGES.items()})

    def _next_incident_id(self) -> str:
        # 타임스탬프 기반, 같은 ms에 생성돼도 단조 증가
        candidate = int(time.time() * 1000)
        if candidate <= self._last_incident_id:
            candidate = self._last_incident_id + 1
        self._last_incident_id = candidate
        return str(candidate)

    def _set_health(self, node_id: str, health: Health) -> None:
        node = self.nodes.get(node_id)
        if node is None:
            logger.warning(f"Transition targets node missing from topology: {node_id}")
            return
        node.health = health

    def _set_metrics(self, node_id: str, **fields: float) -> None:
        m = self.metrics.get(node_id)
        if m is None:
            return
        for k, v in fields.items():
            setattr(m, k, v)

    def _active(self) -> List[Incident]:
        return [i for i in self.incidents if i.status is IncidentStatus.ACTIVE]

    # ---- queries ----

    def get_topology(self) -> Tuple[List[Node], List[Edge]]:
        with self._lock:
            return list(self.nodes.values()), list(self.edges)

    def get_status_summary(self) -> Dict[str, Dict[str, Any]]:
        with self._lock:
            return {
                nid: {
                    "health": node.health.value,
                    "metrics": self.metrics[nid].to_dict(),
                    "summary": narratives.node_summary(nid, self.scenario_active, node.health),
                }
                for nid, node in self.nodes.items()
            }

    def get_node_detail(self, node_id: str) -> Dict[str, Any]:
        with self._lock:
            node = self.nodes.get(node_id)
            if node is None:
                raise NodeNotFound(node_id)
            scenario = self.scenario_active
            return {
                "node": node.to_dict(),
                "metrics": self.metrics[node_id].to_dict(),
                "logs": narratives.recent_logs(node_id, scenario),
                "rootCause": narratives.root_cause(node_id, scenario, node.health),
                "suggestions": [s.to_dict() for s in narratives.suggestions(node_id, scenario)],
            }

    def list_active_incidents(self) -> List[Incident]:
        with self._lock:
            return self._active()

    def snapshot(self) -> Dict[str, Any]:
        """Health, metrics and active incidents at one instant."""
        with self._lock:
            return {
                "status": {nid: n.to_dict() for nid, n in self.nodes.items()},
                "metrics": {nid: m.to_dict() for nid, m in self.metrics.items()},
                "incidents": [i.to_dict() for i in self._active()],
            }

    # ---- transitions ----

    def start_scenario(self, scenario_id: int) -> Dict[str, Any]:
        with self._lock:
            self.scenario_active = scenario_id
            scenario = Scenario.parse(scenario_id)

            if scenario is Scenario.BULK_QUERY:
                self._set_health("dwh", Health.CRITICAL)
                self._set_health("etl", Health.DEGRADED)
                self._set_metrics("dwh", queue_depth=150, response_time_ms=8000, cpu_percent=95)
                severity = Severity.HIGH
            elif scenario is Scenario.MASTER_MISMATCH:
                self._set_health("dwh", Health.CRITICAL)
                self._set_health("batch", Health.CRITICAL)
                self._set_metrics("dwh", response_time_ms=12000)
                self._set_metrics("batch", error_rate_percent=25)
                severity = Severity.CRITICAL
            else:
                severity = None

            if severity is not None:
                incident = Incident(
                    id=self._next_incident_id(),
                    title=narratives.SCENARIO_TITLES[scenario],
                    node_id=narratives.SCENARIO_NODE,
                    severity=severity,
                    created_at=_now_iso(),
                )
                self.incidents.append(incident)
                logger.info(json.dumps({
                    "event": "scenario_start",
                    "scenario": scenario_id,
                    "incident": incident.id,
                    "severity": severity.value,
                }))
            else:
                logger.warning(f"Unknown scenario {scenario_id}: selector set, no state change")

            return {"success": True, "scenario": scenario_id, "message": f"시나리오 {scenario_id} 시작됨"}

    def stop_scenario(self) -> Dict[str, Any]:
        with self._lock:
            for node in self.nodes.values():
                node.health = Health.HEALTHY
            for nid in self.metrics:
                self.metrics[nid] = self._random_metrics()
            cleared = len(self.incidents)
            self.incidents = []
            previous, self.scenario_active = self.scenario_active, None
            logger.info(json.dumps({"event": "scenario_stop", "scenario": previous, "cleared": cleared}))
            return {"success": True, "message": "모든 시나리오 정지됨"}

    def apply_remediation(self, action_id: Optional[str], node_id: Optional[str] = None) -> Dict[str, Any]:
        with self._lock:
            action = RemediationAction.parse(action_id)
            result = {"success": False, "message": ""}

            if action is RemediationAction.ENABLE_QUERY_GOVERNOR:
                # S1 수정 액션
                self._set_health("dwh", Health.HEALTHY)
                self._set_health("etl", Health.HEALTHY)
                self._set_metrics("dwh", queue_depth=5, response_time_ms=200, cpu_percent=25)
                result = {"success": True, "message": "쿼리 거버너 활성화 완료"}
            elif action is RemediationAction.SYNC_MASTER_DATA:
                # S2 수정 액션
                self._set_health("dwh", Health.HEALTHY)
                self._set_health("batch", Health.HEALTHY)
                self._set_metrics("dwh", response_time_ms=180)
                self._set_metrics("batch", error_rate_percent=0.5)
                result = {"success": True, "message": "마스터 데이터 동기화 완료"}
            else:
                logger.warning(f"Unknown remediation action {action_id!r}: resolving incidents only")

            # 대상 노드와 무관하게 모든 ACTIVE 인시던트를 해결 처리
            when = _now_iso()
            resolved = sum(1 for i in self.incidents if i.resolve(when))

            logger.info(json.dumps({
                "event": "remediation_apply",
                "action": action_id,
                "node": node_id,
                "success": result["success"],
                "resolved": resolved,
            }))
            return result
