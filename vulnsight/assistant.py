"""Rule-based assistant answering questions about a scan result.

Answers come from an ordered table of intent rules. A rule fires when one of
its trigger phrases occurs in the lower-cased query and its builder has
something to say; a builder returns None when the result holds nothing
relevant, and evaluation moves on to the next rule. The last rule always
answers with a severity summary.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from vulnsight.models import ScanResult, Severity, Vulnerability

logger = logging.getLogger(__name__)

GREETING = (
    "Hello! I'm your cybersecurity intelligence assistant. I can help you understand "
    "vulnerabilities, suggest remediation strategies, and answer questions about your "
    "scan results. How can I assist you today?"
)

NO_DATA_MESSAGE = (
    "I don't have any scan results to analyze yet. Please run a scan first, and I'll be "
    "able to provide detailed insights about the vulnerabilities found."
)

MAX_THINKING_DELAY = 5.0

Builder = Callable[[ScanResult], str | None]


@dataclass(frozen=True)
class IntentRule:
    name: str
    triggers: tuple[str, ...]
    build: Builder

    def matches(self, query: str) -> bool:
        # An empty trigger list matches everything.
        return not self.triggers or any(t in query for t in self.triggers)


def _mentions(finding: Vulnerability, *needles: str) -> bool:
    text = finding.description.lower()
    return any(n in text for n in needles)


def _sql_injection(result: ScanResult) -> str | None:
    vulns = [f for f in result.findings if _mentions(f, "sql")]
    if not vulns:
        return None
    first = vulns[0]
    return (
        f"I found {len(vulns)} SQL injection vulnerability(ies) in your scan results. "
        f"The first is a {first.severity.value} severity issue with a CVSS score of "
        f"{first.severity_score}. To remediate this:\n\n"
        "1. **Immediate Action**: Implement parameterized queries/prepared statements\n"
        "2. **Input Validation**: Sanitize all user inputs\n"
        "3. **Least Privilege**: Use database accounts with minimal permissions\n"
        "4. **Web Application Firewall**: Deploy WAF rules to filter malicious requests\n\n"
        f"The vulnerability was detected by {first.produced_by} and affects: "
        f"{', '.join(first.affected_components)}"
    )


def _xss(result: ScanResult) -> str | None:
    vulns = [f for f in result.findings if _mentions(f, "xss", "cross-site")]
    if not vulns:
        return None
    first = vulns[0]
    return (
        f"I detected {len(vulns)} Cross-Site Scripting (XSS) vulnerability(ies). This "
        "allows attackers to inject malicious scripts. Here's how to fix it:\n\n"
        "1. **Content Security Policy**: Implement strict CSP headers\n"
        "2. **Output Encoding**: Encode all user-generated content\n"
        "3. **Input Validation**: Validate and sanitize inputs\n"
        "4. **HttpOnly Cookies**: Prevent script access to cookies\n\n"
        f"CVSS Score: {first.severity_score} | Detected by: {first.produced_by}"
    )


def _critical(result: ScanResult) -> str | None:
    vulns = result.by_severity(Severity.CRITICAL)
    if not vulns:
        return None
    lines = "\n".join(
        f"{i}. **{v.id}**: {v.description} (CVSS: {v.severity_score})"
        for i, v in enumerate(vulns, start=1)
    )
    return (
        "**CRITICAL VULNERABILITIES DETECTED**\n\n"
        f"Found {len(vulns)} critical vulnerabilities that require immediate attention:\n\n"
        f"{lines}\n\n"
        "**Immediate Actions Required:**\n"
        "- Patch or mitigate these vulnerabilities within 24-48 hours\n"
        "- Monitor for active exploitation attempts\n"
        "- Consider taking affected systems offline if patches aren't available\n"
        "- Implement compensating controls as temporary measures"
    )


def _attack_path(result: ScanResult) -> str | None:
    if not result.attack_paths:
        return None
    primary = result.attack_paths[0]
    steps = "\n".join(f"{i}. {step}" for i, step in enumerate(primary.steps, start=1))
    return (
        f"I've analyzed {len(result.attack_paths)} potential attack path(s) from your scan results:\n\n"
        f"**Primary Attack Vector:**\n{primary.description}\n\n"
        f"**Attack Sequence:**\n{steps}\n\n"
        "This attack path demonstrates how multiple vulnerabilities can be chained together. "
        "I recommend prioritizing the remediation of vulnerabilities that appear early in "
        "this sequence to break the attack chain."
    )


def _remediation(result: ScanResult) -> str | None:
    if not result.findings:
        return None
    counts = result.severity_counts()
    routine = counts[Severity.MEDIUM] + counts[Severity.LOW]
    return (
        f"**Remediation Strategy for {len(result.findings)} vulnerabilities:**\n\n"
        f"**Priority 1 - Critical ({counts[Severity.CRITICAL]} items):**\n"
        "- Address within 24-48 hours\n"
        "- Consider emergency patching procedures\n\n"
        f"**Priority 2 - High Severity ({counts[Severity.HIGH]} items):**\n"
        "- Remediate within 1 week\n"
        "- Implement monitoring for exploitation attempts\n\n"
        f"**Priority 3 - Medium/Low ({routine} items):**\n"
        "- Address within monthly patch cycle\n"
        "- Bundle with regular maintenance\n\n"
        "**Best Practices:**\n"
        "1. Test patches in staging environment first\n"
        "2. Maintain asset inventory for tracking\n"
        "3. Implement vulnerability scanning automation\n"
        "4. Establish incident response procedures"
    )


def _summary(result: ScanResult) -> str:
    counts = result.severity_counts()
    return (
        f"Based on your scan results for {result.target}, I found:\n\n"
        "**Scan Summary:**\n"
        f"- Total Vulnerabilities: {len(result.findings)}\n"
        f"- Critical: {counts[Severity.CRITICAL]}\n"
        f"- High: {counts[Severity.HIGH]}\n"
        f"- Medium: {counts[Severity.MEDIUM]}\n"
        f"- Low: {counts[Severity.LOW]}\n\n"
        "You can ask me specific questions about:\n"
        '- Individual vulnerabilities (e.g., "Tell me about SQL injection")\n'
        "- Remediation strategies\n"
        "- Attack paths and exploitation scenarios\n"
        "- Risk prioritization\n\n"
        "What would you like to know more about?"
    )


DEFAULT_RULES: tuple[IntentRule, ...] = (
    IntentRule("sql-injection", ("sql injection", "sql"), _sql_injection),
    IntentRule("xss", ("xss", "cross-site"), _xss),
    IntentRule("critical", ("critical", "high priority"), _critical),
    IntentRule("attack-path", ("attack path", "exploit"), _attack_path),
    IntentRule("remediation", ("remediation", "fix", "patch"), _remediation),
    IntentRule("summary", (), _summary),
)


class AssistantEngine:
    def __init__(
        self,
        rules: tuple[IntentRule, ...] = DEFAULT_RULES,
        thinking_delay: float | Callable[[], float] = 0.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.rules = rules
        self.thinking_delay = thinking_delay
        self._sleep = sleep

    def ask(self, query: str, result: ScanResult | None = None) -> str:
        """Answer ``query`` from ``result``. Deterministic and side-effect free."""
        if result is None:
            return NO_DATA_MESSAGE

        lowered = (query or "").lower()
        for rule in self.rules:
            if not rule.matches(lowered):
                continue
            answer = rule.build(result)
            if answer is not None:
                logger.debug("Query %r answered by %s intent", query, rule.name)
                return answer
            logger.debug("Intent %s matched %r but had nothing to report", rule.name, query)
        return _summary(result)

    def respond(self, query: str, result: ScanResult | None = None) -> str:
        """Like ask(), after a bounded thinking pause."""
        delay = self.thinking_delay() if callable(self.thinking_delay) else self.thinking_delay
        delay = min(max(0.0, delay), MAX_THINKING_DELAY)
        if delay:
            self._sleep(delay)
        return self.ask(query, result)
