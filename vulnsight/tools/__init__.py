"""Tool registry for VulnSight."""

from vulnsight.tools.base import BaseTool, ToolOutput
from vulnsight.tools.simulated import (
    NessusTool,
    NiktoTool,
    NmapTool,
    NucleiTool,
    OpenVASTool,
    SimulatedTool,
)

TOOLS: dict[str, type[BaseTool]] = {
    "nmap": NmapTool,
    "nikto": NiktoTool,
    "nuclei": NucleiTool,
    "openvas": OpenVASTool,
    "nessus": NessusTool,
}


def build_registry(fail_tools: list[str] | None = None) -> dict[str, BaseTool]:
    """Instantiate every registered tool, making those in ``fail_tools`` fail."""
    failing = set(fail_tools or [])
    return {tool_id: cls(fail=tool_id in failing) for tool_id, cls in TOOLS.items()}


__all__ = [
    "BaseTool",
    "ToolOutput",
    "SimulatedTool",
    "NmapTool",
    "NiktoTool",
    "NucleiTool",
    "OpenVASTool",
    "NessusTool",
    "TOOLS",
    "build_registry",
]
