#  Agent Dashboard - Aggregation Tests
#
#  Tests for the in-memory agent/task/model reductions.
#
#  Depends on: dashboard/services/stats.py
#  Used by:    pytest

import pytest

from dashboard.services.stats import (
    DEFAULT_METRICS,
    cost_breakdown,
    model_usage,
    summarize_agents,
    summarize_tasks,
)


class TestSummarizeAgents:
    def test_empty_is_all_zero(self):
        stats = summarize_agents([])
        assert stats.total_agents == 0
        assert stats.active_agents == 0
        assert stats.total_tasks_completed == 0
        assert stats.average_success_rate == 0

    def test_counts_by_status(self):
        agents = [
            {"status": "busy", "tasks_completed": 3, "success_rate": 90.0},
            {"status": "busy", "tasks_completed": None, "success_rate": 100.0},
            {"status": "idle", "tasks_completed": 2, "success_rate": None},
            {"status": "error", "tasks_completed": 1, "success_rate": 50.0},
            {"status": "paused", "tasks_completed": 0, "success_rate": 100.0},
        ]
        stats = summarize_agents(agents)
        assert stats.total_agents == 5
        assert stats.active_agents == 2
        assert stats.idle_agents == 1
        assert stats.error_agents == 1
        assert stats.total_tasks_completed == 6
        assert stats.average_success_rate == pytest.approx(340.0 / 5)


class TestSummarizeTasks:
    def test_empty_is_all_zero(self):
        stats = summarize_tasks([])
        assert stats.total == 0
        assert stats.total_cost == 0
        assert stats.average_execution_time == 0

    def test_three_mixed_tasks(self):
        tasks = [
            {"status": "completed", "actual_cost": 2.50, "execution_time_ms": 1200},
            {"status": "failed", "actual_cost": None, "execution_time_ms": None},
            {"status": "pending", "actual_cost": 0, "execution_time_ms": 0},
        ]
        stats = summarize_tasks(tasks)
        assert stats.total == 3
        assert (stats.completed, stats.failed, stats.pending) == (1, 1, 1)
        assert stats.running == 0
        assert stats.cancelled == 0
        assert stats.total_cost == pytest.approx(2.50)
        # Only the row with a recorded time counts toward the mean
        assert stats.average_execution_time == 1200

    def test_cost_rounded(self):
        tasks = [{"status": "completed", "actual_cost": 0.00001}] * 3
        assert summarize_tasks(tasks).total_cost == 0.0


class TestModelShapes:
    MODELS = [
        {
            "id": 1, "name": "alpha", "provider": "acme", "total_usage_count": 4,
            "total_tokens_used": 1000, "total_cost": 1.25, "average_latency_ms": 300.0,
            "context_length": 8000, "supports_vision": True, "supports_streaming": False,
        },
        {
            "id": 2, "name": "beta", "provider": "acme", "total_usage_count": None,
            "total_tokens_used": None, "total_cost": None, "average_latency_ms": None,
            "context_length": None, "supports_vision": False, "supports_streaming": True,
        },
    ]

    def test_model_usage(self):
        usage = model_usage(self.MODELS)
        assert [u.name for u in usage] == ["alpha", "beta"]
        assert usage[0].usage_count == 4
        assert usage[0].supports_vision is True
        assert usage[1].total_cost == 0.0
        assert usage[1].usage_count == 0

    def test_cost_breakdown(self):
        items = cost_breakdown(self.MODELS)
        assert [(i.model, i.cost, i.usage) for i in items] == [
            ("alpha", 1.25, 4),
            ("beta", 0.0, 0),
        ]


def test_default_metrics():
    assert DEFAULT_METRICS.success_rate == 100
    assert DEFAULT_METRICS.system_health == 100
    assert DEFAULT_METRICS.total_tasks_completed == 0
    assert DEFAULT_METRICS.total_cost_usd == 0
