from datetime import datetime

from opsboard.app import narratives
from opsboard.app.models import Health


def test_non_dwh_nodes_fall_back():
    for scenario in (None, 1, 2, 42):
        assert narratives.node_summary("batch", scenario, Health.CRITICAL) == "상태 확인 필요"
        assert narratives.root_cause("batch", scenario, Health.CRITICAL) == "원인 분석 중"
        assert narratives.suggestions("batch", scenario) == []


def test_healthy_wins_over_scenario():
    assert narratives.node_summary("dwh", 1, Health.HEALTHY) == "정상 운영중"
    assert narratives.root_cause("dwh", 1, Health.HEALTHY) == "정상 상태"


def test_unknown_scenario_falls_back_for_dwh():
    assert narratives.node_summary("dwh", 7, Health.CRITICAL) == "상태 확인 필요"
    assert narratives.suggestions("dwh", 7) == []


def test_default_logs_include_check_time():
    logs = narratives.recent_logs("cache", None, now=datetime(2024, 1, 1, 9, 30, 5))
    assert logs == ["[INFO] 정상 운영중", "[INFO] 마지막 체크: 09:30:05"]


def test_scenario_suggestions():
    ids = [s.id for s in narratives.suggestions("dwh", 2)]
    assert ids == ["SYNC_MASTER_DATA", "FIX_JOIN_QUERY"]


def test_llm_summary_returns_copy():
    a = narratives.llm_summary("dwh", "performance")
    a["riskLevel"] = "LOW"
    a["keyFindings"].clear()
    a["suggestedActions"][0]["priority"] = "LATER"

    b = narratives.llm_summary("dwh", "performance")
    assert b["riskLevel"] == "HIGH"
    assert len(b["keyFindings"]) == 3
    assert b["suggestedActions"][0]["priority"] == "IMMEDIATE"
    assert narratives.llm_summary(None, None)["summary"] == "분석 데이터 부족"
