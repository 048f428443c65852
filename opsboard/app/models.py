"""
Core records shared by the state store, the notifier and the HTTP layer.
"""
from dataclasses import dataclass, asdict
from enum import Enum, IntEnum
from typing import Any, Dict, Optional


class Health(str, Enum):
    HEALTHY = "HEALTHY"
    DEGRADED = "DEGRADED"
    CRITICAL = "CRITICAL"


class Category(str, Enum):
    WEB = "web"
    API = "api"
    ETL = "etl"
    DATABASE = "database"
    BATCH = "batch"
    CACHE = "cache"
    STORAGE = "storage"


class Severity(str, Enum):
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class IncidentStatus(str, Enum):
    ACTIVE = "ACTIVE"
    RESOLVED = "RESOLVED"


class Scenario(IntEnum):
    BULK_QUERY = 1       # S1: 결산 시점 대량 동시 조회
    MASTER_MISMATCH = 2  # S2: 마스터 플랜트 코드 불일치

    @classmethod
    def parse(cls, value: Optional[int]) -> Optional["Scenario"]:
        """Known scenario for ``value``, or None for anything else."""
        try:
            return cls(value)
        except ValueError:
            return None


class RemediationAction(str, Enum):
    ENABLE_QUERY_GOVERNOR = "ENABLE_QUERY_GOVERNOR"
    SYNC_MASTER_DATA = "SYNC_MASTER_DATA"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["RemediationAction"]:
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass
class Node:
    id: str
    name: str
    category: Category
    health: Health = Health.HEALTHY
    x: float = 0
    y: float = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.category.value,
            "status": self.health.value,
            "x": self.x,
            "y": self.y,
        }


@dataclass(frozen=True)
class Edge:
    source: str
    target: str

    def to_dict(self) -> Dict[str, str]:
        return {"from": self.source, "to": self.target}


@dataclass
class Metrics:
    cpu_percent: float
    memory_percent: float
    response_time_ms: float
    queue_depth: float
    error_rate_percent: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "cpu": self.cpu_percent,
            "memory": self.memory_percent,
            "response_time": self.response_time_ms,
            "queue_depth": self.queue_depth,
            "error_rate": self.error_rate_percent,
        }


@dataclass
class Incident:
    id: str
    title: str
    node_id: str
    severity: Severity
    created_at: str  # ISO 8601
    status: IncidentStatus = IncidentStatus.ACTIVE
    resolved_at: Optional[str] = None

    def resolve(self, when: str) -> bool:
        """ACTIVE -> RESOLVED. Returns False if already resolved."""
        if self.status is IncidentStatus.RESOLVED:
            return False
        self.status = IncidentStatus.RESOLVED
        self.resolved_at = when
        return True

    def to_dict(self) -> Dict[str, Any]:
        d = {
            "id": self.id,
            "title": self.title,
            "nodeId": self.node_id,
            "severity": self.severity.value,
            "createdAt": self.created_at,
            "status": self.status.value,
        }
        if self.resolved_at is not None:
            d["resolvedAt"] = self.resolved_at
        return d


@dataclass(frozen=True)
class Suggestion:
    id: str
    label: str
    description: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)
