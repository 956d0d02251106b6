"""Simulated scanners returning canned findings.

No packets leave the machine. Each tool reports the same findings on every
target so runs and assistant answers stay reproducible.
"""

from vulnsight.errors import ToolExecutionError
from vulnsight.models import AttackPath, Severity, Vulnerability
from vulnsight.tools.base import BaseTool, ToolOutput

CANNED_FINDINGS: dict[str, list[dict]] = {
    "nikto": [
        {
            "id": "CVE-2023-1234",
            "severity_score": 8.5,
            "severity": Severity.HIGH,
            "description": "SQL Injection vulnerability in login form",
            "affected_components": ["Login Form", "User Authentication"],
            "exploit_reference": "ExploitDB",
            "remediation": "Implement parameterized queries and input validation",
        },
    ],
    "nuclei": [
        {
            "id": "CVE-2023-5678",
            "severity_score": 6.2,
            "severity": Severity.MEDIUM,
            "description": "Cross-Site Scripting (XSS) in search functionality",
            "affected_components": ["Search Bar", "User Input"],
            "remediation": "Sanitize user input and implement Content Security Policy",
        },
    ],
    "openvas": [
        {
            "id": "CVE-2023-9999",
            "severity_score": 9.1,
            "severity": Severity.CRITICAL,
            "description": "Remote Code Execution via file upload",
            "affected_components": ["File Upload", "Server Processing"],
            "exploit_reference": "Metasploit",
            "remediation": "Restrict file types and implement server-side validation",
        },
    ],
}

CANNED_ATTACK_PATHS: dict[str, list[dict]] = {
    "nikto": [
        {
            "description": "Multi-stage attack exploiting SQL injection and privilege escalation",
            "steps": [
                "Identify SQL injection point in login form",
                "Extract database credentials",
                "Escalate privileges using weak configuration",
                "Access sensitive data and establish persistence",
            ],
        },
    ],
}


class SimulatedTool(BaseTool):
    def __init__(self, fail: bool = False, reason: str = "simulated failure"):
        self.fail = fail
        self.reason = reason

    def execute(self, target: str) -> ToolOutput:
        if self.fail:
            raise ToolExecutionError(self.id, self.reason)

        output = ToolOutput(tool_id=self.id)
        for info in CANNED_FINDINGS.get(self.id, []):
            output.findings.append(Vulnerability(produced_by=self.display_name, **info))
        for info in CANNED_ATTACK_PATHS.get(self.id, []):
            output.attack_paths.append(AttackPath(description=info["description"], steps=info["steps"]))
        return output


class NmapTool(SimulatedTool):
    id = "nmap"
    display_name = "Nmap"
    description = "Network Discovery & Security Auditing"


class NiktoTool(SimulatedTool):
    id = "nikto"
    display_name = "Nikto"
    description = "Web Server Scanner"


class NucleiTool(SimulatedTool):
    id = "nuclei"
    display_name = "Nuclei"
    description = "Vulnerability Scanner"


class OpenVASTool(SimulatedTool):
    id = "openvas"
    display_name = "OpenVAS"
    description = "Vulnerability Assessment"


class NessusTool(SimulatedTool):
    id = "nessus"
    display_name = "Nessus"
    description = "Comprehensive Vulnerability Scanner"
