"""Tests for the health check endpoint."""

from __future__ import annotations


def test_health_check(client):
    """GET /health returns 200 with status=healthy."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "tempo-payroll-engine"


def test_openapi_lists_payroll_routes(client):
    """The generated schema exposes the payroll, recipient and activity routes."""
    paths = client.get("/openapi.json").json()["paths"]
    assert "/api/v1/payroll/upload" in paths
    assert "/api/v1/payroll/reports/{run_id}/export" in paths
    assert "/api/v1/recipients" in paths
    assert "/api/v1/activity" in paths
