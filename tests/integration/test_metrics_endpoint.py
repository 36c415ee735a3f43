"""Integration tests for metrics endpoint."""

from __future__ import annotations


def test_metrics_endpoint_available(client):
    response = client.get("/metrics")
    assert response.status_code == 200
    body = response.content.decode()
    assert "clairos_http_requests_total" in body


def test_upload_outcomes_are_counted(client):
    response = client.post("/upload")
    assert response.status_code == 401

    body = client.get("/metrics").content.decode()
    assert 'clairos_uploads_total{result="unauthorized"}' in body
