"""Tests for evaluation metric endpoints."""

import pytest

BASE = "/api/v1/evaluation-metrics"


def _metric(rule_id, **overrides) -> dict:
    payload = {
        "governance_rule_id": str(rule_id),
        "metric_type": "code_quality",
        "score": 90,
        "evaluated_by": "senior-reviewer",
    }
    payload.update(overrides)
    return payload


class TestEvaluationMetricsAPI:
    """Tests for /evaluation-metrics."""

    @pytest.mark.asyncio
    async def test_record(self, client, governance_rule):
        response = await client.post(BASE, json=_metric(governance_rule.id, details={"notes": "clean"}))

        assert response.status_code == 201
        data = response.json()
        assert data["score"] == 90
        assert data["metric_type"] == "code_quality"
        assert data["details"] == {"notes": "clean"}
        assert data["code_artifact_id"] is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("score", [0, 100])
    async def test_score_boundaries_accepted(self, client, governance_rule, score):
        response = await client.post(BASE, json=_metric(governance_rule.id, score=score))

        assert response.status_code == 201

    @pytest.mark.asyncio
    @pytest.mark.parametrize("score", [-1, 101])
    async def test_score_out_of_range(self, client, governance_rule, score):
        response = await client.post(BASE, json=_metric(governance_rule.id, score=score))

        assert response.status_code == 422
        assert (await client.get(BASE)).json()["total"] == 0

    @pytest.mark.asyncio
    async def test_unknown_metric_type(self, client, governance_rule):
        response = await client.post(BASE, json=_metric(governance_rule.id, metric_type="vibes"))

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_summary(self, client, governance_rule):
        for metric_type, score in [("code_quality", 90), ("code_quality", 81), ("test_coverage", 100)]:
            await client.post(BASE, json=_metric(governance_rule.id, metric_type=metric_type, score=score))

        summary = (await client.get(f"{BASE}/summary")).json()

        assert summary["total"] == 3
        assert summary["average_score"] == 90
        assert summary["excellent_count"] == 2
        assert summary["by_type"] == [
            {"metric_type": "code_quality", "count": 2, "average_score": 86},
            {"metric_type": "test_coverage", "count": 1, "average_score": 100},
        ]

    @pytest.mark.asyncio
    async def test_empty_summary(self, client):
        summary = (await client.get(f"{BASE}/summary")).json()

        assert summary == {"total": 0, "average_score": 0, "excellent_count": 0, "by_type": []}

    @pytest.mark.asyncio
    async def test_by_rule_and_audit(self, client, governance_rule):
        await client.post(BASE, json=_metric(governance_rule.id))

        by_rule = (await client.get(f"{BASE}/by-rule/{governance_rule.id}")).json()
        trail = (await client.get(f"/api/v1/audit/by-rule/{governance_rule.id}")).json()

        assert by_rule["total"] == 1
        assert trail["data"][0]["action"] == "evaluation_recorded"
        assert trail["data"][0]["details"]["score"] == 90
