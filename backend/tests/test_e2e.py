"""
End-to-End tests for the Restaurant Scenario Optimizer
Tests complete user workflows across endpoints
"""

import pytest
import sys
from pathlib import Path

# Add backend directory to Python path
backend_dir = Path(__file__).parent.parent.resolve()
sys.path.insert(0, str(backend_dir))

from fastapi.testclient import TestClient
from app.main import app


@pytest.fixture(scope="module")
def client():
    with TestClient(app) as test_client:
        yield test_client


class TestScenarioWorkflow:
    """Optimize, pick an alternative, then analyze it"""

    def test_optimize_then_explore_alternative(self, client):
        optimize = client.post("/api/optimize", json={
            "config": {"population_size": 12, "max_iterations": 8, "seed": 11},
            "n_alternatives": 5
        })
        assert optimize.status_code == 200
        data = optimize.json()

        alternatives = data["pareto_alternatives"]
        assert len(alternatives) >= 1
        for alt in alternatives:
            assert alt["dominated_by"] is None

        chosen = alternatives[-1]["variables"]

        # Re-evaluating the chosen assignment reproduces its metrics
        tradeoffs = client.post("/api/tradeoffs", json={"assignment": chosen})
        assert tradeoffs.status_code == 200
        solution = tradeoffs.json()["solution"]
        for metric, value in alternatives[-1]["objectives"].items():
            assert solution["objectives"][metric] == pytest.approx(value)
        assert solution["score"] == pytest.approx(alternatives[-1]["score"])

        recs = client.post("/api/recommendations", json={"assignment": chosen})
        assert recs.status_code == 200
        priorities = [r["priority"] for r in recs.json()["recommendations"]]
        order = {"high": 0, "medium": 1, "low": 2}
        assert priorities == sorted(priorities, key=order.get)

        sensitivity = client.post("/api/sensitivity", json={"assignment": chosen})
        assert sensitivity.status_code == 200
        assert {s["variable_id"] for s in sensitivity.json()["sensitivities"]} == set(chosen)

    def test_custom_baseline_changes_metrics(self, client):
        """A larger restaurant scales every baseline-relative metric"""
        small = client.post("/api/tradeoffs", json={}).json()["solution"]["objectives"]
        large = client.post("/api/tradeoffs", json={
            "baseline": {"revenue": 250000, "costs": 164000, "quality": 85, "customers": 5700}
        }).json()["solution"]["objectives"]

        assert large["revenue"] == pytest.approx(2 * small["revenue"])
        assert large["costs"] == pytest.approx(2 * small["costs"])
        assert large["margin"] == pytest.approx(small["margin"])

    def test_hard_policy_run(self, client):
        response = client.post("/api/optimize", json={
            "config": {"population_size": 12, "max_iterations": 5, "seed": 2, "feasibility_policy": "hard"}
        })
        assert response.status_code == 200
        data = response.json()
        if data["feasible_count"] > 0:
            assert data["feasible"]
