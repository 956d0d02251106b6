"""Data models for simulated scan runs, findings and results."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class Severity(Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return {
            Severity.CRITICAL: 3,
            Severity.HIGH: 2,
            Severity.MEDIUM: 1,
            Severity.LOW: 0,
        }[self]

    def __ge__(self, other: "Severity") -> bool:
        return self.rank >= other.rank

    def __gt__(self, other: "Severity") -> bool:
        return self.rank > other.rank

    def __le__(self, other: "Severity") -> bool:
        return self.rank <= other.rank

    def __lt__(self, other: "Severity") -> bool:
        return self.rank < other.rank


class ToolStatus(Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETE = "complete"
    ERROR = "error"

    @property
    def finished(self) -> bool:
        return self in (ToolStatus.COMPLETE, ToolStatus.ERROR)


class ScanStatus(Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class Tool:
    id: str
    display_name: str
    description: str = ""
    status: ToolStatus = ToolStatus.IDLE
    error: str | None = None


@dataclass(frozen=True)
class Vulnerability:
    id: str
    severity_score: float
    severity: Severity
    description: str
    affected_components: tuple[str, ...]
    produced_by: str
    exploit_reference: str | None = None
    remediation: str | None = None

    def __post_init__(self):
        if not 0.0 <= self.severity_score <= 10.0:
            raise ValueError(f"severity_score must be within 0.0-10.0, got {self.severity_score}")
        if not self.affected_components:
            raise ValueError(f"{self.id} must list at least one affected component")
        object.__setattr__(self, "affected_components", tuple(self.affected_components))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "severity_score": self.severity_score,
            "severity": self.severity.value,
            "description": self.description,
            "affected_components": list(self.affected_components),
            "produced_by": self.produced_by,
            "exploit_reference": self.exploit_reference,
            "remediation": self.remediation,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Vulnerability":
        return cls(
            id=data["id"],
            severity_score=float(data["severity_score"]),
            severity=Severity(data["severity"]),
            description=data["description"],
            affected_components=tuple(data["affected_components"]),
            produced_by=data["produced_by"],
            exploit_reference=data.get("exploit_reference"),
            remediation=data.get("remediation"),
        )


@dataclass(frozen=True)
class AttackPath:
    description: str
    steps: tuple[str, ...]

    def __post_init__(self):
        if not self.steps:
            raise ValueError("An attack path needs at least one step")
        object.__setattr__(self, "steps", tuple(self.steps))

    def to_dict(self) -> dict:
        return {"description": self.description, "steps": list(self.steps)}

    @classmethod
    def from_dict(cls, data: dict) -> "AttackPath":
        return cls(description=data["description"], steps=tuple(data["steps"]))


def new_scan_id() -> str:
    return f"scan_{uuid.uuid4().hex}"


@dataclass
class ScanResult:
    """Aggregate output of one run.

    Owned by the orchestrator while ``status`` is RUNNING. ``seal()`` moves it
    to its terminal status, after which every assignment raises AttributeError.
    """

    target: str
    id: str = field(default_factory=new_scan_id)
    created_at: datetime = field(default_factory=datetime.now)
    status: ScanStatus = ScanStatus.RUNNING
    findings: list[Vulnerability] = field(default_factory=list)
    attack_paths: list[AttackPath] = field(default_factory=list)
    _sealed: bool = field(default=False, init=False, repr=False, compare=False)

    def __setattr__(self, name, value):
        if getattr(self, "_sealed", False):
            raise AttributeError(f"ScanResult {self.id} is {self.status.value} and can no longer change")
        super().__setattr__(name, value)

    @property
    def sealed(self) -> bool:
        return self._sealed

    def seal(self, status: ScanStatus) -> None:
        if status is ScanStatus.RUNNING:
            raise ValueError("A result can only be sealed as completed or failed")
        self.status = status
        self.findings = tuple(self.findings)
        self.attack_paths = tuple(self.attack_paths)
        self._sealed = True

    def by_severity(self, severity: Severity) -> list[Vulnerability]:
        return [f for f in self.findings if f.severity == severity]

    def severity_counts(self) -> dict[Severity, int]:
        counts = {s: 0 for s in Severity}
        for f in self.findings:
            counts[f.severity] += 1
        return counts

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "target": self.target,
            "created_at": self.created_at.isoformat(),
            "status": self.status.value,
            "findings": [f.to_dict() for f in self.findings],
            "attack_paths": [p.to_dict() for p in self.attack_paths],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ScanResult":
        """Rebuild a finished result from its ``to_dict()`` form."""
        status = ScanStatus(data.get("status", "completed"))
        result = cls(
            target=data["target"],
            id=data["id"],
            created_at=datetime.fromisoformat(data["created_at"]),
            findings=[Vulnerability.from_dict(f) for f in data.get("findings", [])],
            attack_paths=[AttackPath.from_dict(p) for p in data.get("attack_paths", [])],
        )
        result.seal(ScanStatus.COMPLETED if status is ScanStatus.RUNNING else status)
        return result


@dataclass(frozen=True)
class ProgressEvent:
    tool_id: str
    status: ToolStatus
    progress: float
    scan_status: ScanStatus = ScanStatus.RUNNING
    error: str | None = None
