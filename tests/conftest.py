"""Shared fixtures for VulnSight tests."""

import pytest

from vulnsight.models import AttackPath, ScanResult, ScanStatus, Severity, Vulnerability
from vulnsight.orchestrator import ScanOrchestrator, no_duration


def make_finding(
    id="CVE-2023-0001",
    description="Generic issue",
    severity=Severity.MEDIUM,
    score=5.0,
    produced_by="Nuclei",
):
    return Vulnerability(
        id=id,
        severity_score=score,
        severity=severity,
        description=description,
        affected_components=["Component"],
        produced_by=produced_by,
    )


@pytest.fixture
def finding():
    return make_finding


@pytest.fixture
def make_result():
    """Build a completed ScanResult from findings and attack paths."""

    def _create(findings=(), attack_paths=(), target="https://example.com") -> ScanResult:
        result = ScanResult(target=target, findings=list(findings), attack_paths=list(attack_paths))
        result.seal(ScanStatus.COMPLETED)
        return result

    return _create


@pytest.fixture
def attack_path():
    def _create(description="Chain", steps=("step one",)) -> AttackPath:
        return AttackPath(description=description, steps=steps)

    return _create


@pytest.fixture
def orchestrator():
    return ScanOrchestrator(duration_fn=no_duration)
