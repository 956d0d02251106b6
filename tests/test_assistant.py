"""Tests for the rule-based assistant."""

from unittest.mock import MagicMock

import pytest

from vulnsight.assistant import (
    DEFAULT_RULES,
    MAX_THINKING_DELAY,
    NO_DATA_MESSAGE,
    AssistantEngine,
    IntentRule,
)
from vulnsight.models import Severity
from vulnsight.orchestrator import ScanOrchestrator, no_duration


@pytest.fixture
def engine():
    return AssistantEngine()


@pytest.fixture
def full_result():
    return ScanOrchestrator(duration_fn=no_duration).run("https://shop.example.com").wait()


class TestNoData:
    @pytest.mark.parametrize("query", ["", "sql", "what's critical", "remediation", "hello"])
    def test_no_result_returns_fixed_message(self, engine, query):
        assert engine.ask(query, None) == NO_DATA_MESSAGE


class TestIntents:
    def test_sql_injection_scenario(self, engine, finding, make_result):
        result = make_result([
            finding(
                description="SQL Injection vulnerability in login form",
                severity=Severity.HIGH,
                score=8.5,
                produced_by="Nikto",
            )
        ])
        answer = engine.ask("tell me about sql injection", result)
        assert "1" in answer
        assert "8.5" in answer
        assert "Nikto" in answer
        assert "parameterized queries" in answer

    def test_sql_without_matches_falls_through(self, engine, finding, make_result):
        result = make_result([finding(description="Open port 22")])
        answer = engine.ask("any sql problems?", result)
        assert "SQL injection" not in answer
        assert "Total Vulnerabilities: 1" in answer

    def test_xss(self, engine, full_result):
        answer = engine.ask("Is there XSS?", full_result)
        assert "Cross-Site Scripting" in answer
        assert "6.2" in answer
        assert "Nuclei" in answer

    def test_cross_site_trigger(self, engine, full_result):
        assert engine.ask("cross-site issues", full_result) == engine.ask("xss", full_result)

    def test_critical_lists_critical_findings(self, engine, full_result):
        answer = engine.ask("What's critical?", full_result)
        assert "CRITICAL VULNERABILITIES DETECTED" in answer
        assert "CVE-2023-9999" in answer
        assert "CVE-2023-1234" not in answer
        assert "24-48 hours" in answer

    def test_no_critical_falls_through_to_summary(self, engine, finding, make_result):
        result = make_result([finding(severity=Severity.HIGH, score=7.0)])
        answer = engine.ask("what's critical", result)
        assert "CRITICAL VULNERABILITIES DETECTED" not in answer
        assert "Scan Summary" in answer
        assert "Critical: 0" in answer
        assert "High: 1" in answer

    def test_attack_path_shows_only_first(self, engine, make_result, attack_path):
        result = make_result(attack_paths=[
            attack_path("First chain", ["recon", "exploit login", "dump data"]),
            attack_path("Second chain", ["phish admin"]),
        ])
        answer = engine.ask("show me an attack path", result)
        assert "2 potential attack path" in answer
        assert "First chain" in answer
        assert "1. recon\n2. exploit login\n3. dump data" in answer
        assert "Second chain" not in answer
        assert "phish admin" not in answer

    def test_exploit_without_paths_falls_through(self, engine, finding, make_result):
        result = make_result([finding()])
        answer = engine.ask("how would they exploit this?", result)
        assert "Attack Sequence" not in answer
        assert "Scan Summary" in answer

    def test_remediation_buckets(self, engine, full_result):
        answer = engine.ask("How do I fix these?", full_result)
        assert "Remediation Strategy for 3 vulnerabilities" in answer
        assert "Critical (1 items)" in answer
        assert "High Severity (1 items)" in answer
        assert "Medium/Low (1 items)" in answer
        assert "1 week" in answer
        assert "monthly patch cycle" in answer

    def test_remediation_with_no_findings_falls_through(self, engine, make_result):
        answer = engine.ask("patch plan", make_result())
        assert "Remediation Strategy" not in answer
        assert "Total Vulnerabilities: 0" in answer

    def test_rule_priority(self, engine, full_result):
        # "sql" outranks "critical" and "fix"
        answer = engine.ask("fix the critical sql bug", full_result)
        assert answer.startswith("I found 1 SQL injection")

    def test_case_insensitive(self, engine, full_result):
        assert engine.ask("SQL INJECTION", full_result) == engine.ask("sql injection", full_result)


class TestSummary:
    def test_empty_findings_summary(self, engine, make_result):
        answer = engine.ask("hello", make_result(target="10.0.0.1"))
        assert "10.0.0.1" in answer
        assert "Total Vulnerabilities: 0" in answer
        for label in ("Critical", "High", "Medium", "Low"):
            assert f"{label}: 0" in answer

    def test_empty_query(self, engine, full_result):
        answer = engine.ask("", full_result)
        assert "Total Vulnerabilities: 3" in answer
        assert "Critical: 1" in answer
        assert "Medium: 1" in answer

    def test_deterministic(self, engine, full_result):
        for query in ("sql", "xss", "critical", "attack path", "remediation", "other", ""):
            assert engine.ask(query, full_result) == engine.ask(query, full_result)

    def test_rules_table_order(self):
        assert [r.name for r in DEFAULT_RULES] == [
            "sql-injection", "xss", "critical", "attack-path", "remediation", "summary",
        ]

    def test_custom_rules_without_catch_all(self, make_result):
        engine = AssistantEngine(rules=(IntentRule("never", ("zzz",), lambda r: None),))
        assert "Scan Summary" in engine.ask("zzz", make_result())


class TestRespond:
    def test_respond_sleeps_then_answers(self, full_result):
        sleep = MagicMock()
        engine = AssistantEngine(thinking_delay=1.5, sleep=sleep)
        assert engine.respond("xss", full_result) == engine.ask("xss", full_result)
        sleep.assert_called_once_with(1.5)

    def test_delay_is_bounded(self):
        sleep = MagicMock()
        engine = AssistantEngine(thinking_delay=lambda: 999.0, sleep=sleep)
        assert engine.respond("anything") == NO_DATA_MESSAGE
        sleep.assert_called_once_with(MAX_THINKING_DELAY)

    def test_zero_delay_skips_sleep(self):
        sleep = MagicMock()
        AssistantEngine(sleep=sleep).respond("anything")
        sleep.assert_not_called()
