"""Tests for the health check report."""

from app.api.health import HealthResponse, health_report
from app.core.settings import settings


def test_healthy_when_storage_started() -> None:
    report = health_report("memory")

    assert isinstance(report, HealthResponse)
    assert report.status == "healthy"
    assert report.storage == "memory"
    assert report.bucket == settings.BUCKET_NAME
    assert report.service == settings.API_NAME


def test_starting_without_storage() -> None:
    report = health_report(None)
    assert report.status == "starting"
    assert report.storage == "none"
