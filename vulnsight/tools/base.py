"""Abstract base tool."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from vulnsight.models import AttackPath, Tool, Vulnerability


@dataclass
class ToolOutput:
    tool_id: str
    findings: list[Vulnerability] = field(default_factory=list)
    attack_paths: list[AttackPath] = field(default_factory=list)


class BaseTool(ABC):
    id: str = "base"
    display_name: str = "Base"
    description: str = ""

    @abstractmethod
    def execute(self, target: str) -> ToolOutput:
        """Run against ``target``; raise ToolExecutionError on failure."""
        ...

    def describe(self) -> Tool:
        return Tool(id=self.id, display_name=self.display_name, description=self.description)
