"""End-to-end flow: rule to code to tests to pipeline to lineage."""

import pytest


@pytest.mark.asyncio
async def test_rule_to_pipeline_lineage(client, sample_rule_data):
    rule = (await client.post("/api/v1/governance-rules", json={
        **sample_rule_data,
        "rule_id": "R1",
        "priority": "high",
    })).json()

    artifact = (await client.post("/api/v1/code-artifacts/generate", json={
        "governance_rule_id": rule["id"],
    })).json()
    suite = (await client.post("/api/v1/test-suites/generate", json={
        "code_artifact_id": artifact["id"],
        "framework": "xunit",
    })).json()
    run = (await client.post("/api/v1/pipeline-runs/run", json={
        "code_artifact_id": artifact["id"],
        "test_suite_id": suite["id"],
    })).json()
    assert run["compliance_gate_passed"] is True

    lineage = (await client.get(f"/api/v1/audit/lineage/{rule['id']}")).json()

    entries = sorted(lineage["entries"], key=lambda e: e["timestamp"])
    assert [e["action"] for e in entries] == [
        "rule_created",
        "code_generated",
        "tests_generated",
        "pipeline_executed",
    ]
    assert entries[1]["code_artifact_id"] == artifact["id"]
    assert entries[2]["test_suite_id"] == suite["id"]
    assert entries[3]["pipeline_run_id"] == run["id"]


@pytest.mark.asyncio
async def test_deleting_rule_keeps_generated_history(client, governance_rule):
    artifact = (await client.post("/api/v1/code-artifacts/generate", json={
        "governance_rule_id": str(governance_rule.id),
    })).json()
    suite = (await client.post("/api/v1/test-suites/generate", json={
        "code_artifact_id": artifact["id"],
    })).json()

    assert (await client.delete(f"/api/v1/governance-rules/{governance_rule.id}")).status_code == 204

    assert (await client.get(f"/api/v1/code-artifacts/{artifact['id']}")).status_code == 200
    assert (await client.get(f"/api/v1/test-suites/{suite['id']}")).status_code == 200
    by_rule = (await client.get(f"/api/v1/code-artifacts/by-rule/{governance_rule.id}")).json()
    assert [a["id"] for a in by_rule] == [artifact["id"]]

    lineage = (await client.get(f"/api/v1/audit/lineage/{governance_rule.id}")).json()
    assert lineage["rule"] is None
    assert lineage["entries"][0]["action"] == "rule_deleted"
    assert lineage["entry_count"] == 4

    # A run can still be started for the orphaned artifact and suite
    run = await client.post("/api/v1/pipeline-runs/run", json={
        "code_artifact_id": artifact["id"],
        "test_suite_id": suite["id"],
    })
    assert run.status_code == 201
