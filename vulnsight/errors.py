"""Exception hierarchy for VulnSight."""


class VulnSightError(Exception):
    """Base class for all VulnSight errors."""


class InvalidTarget(VulnSightError, ValueError):
    def __init__(self, target: str | None):
        self.target = target
        super().__init__(f"Invalid scan target: {target!r}")


class UnknownTool(VulnSightError, ValueError):
    def __init__(self, tool_ids: list[str], known: list[str] | None = None):
        self.tool_ids = list(tool_ids)
        msg = f"Unknown tool(s): {', '.join(self.tool_ids)}" if self.tool_ids else "No tools requested"
        if known:
            msg += f" (known: {', '.join(known)})"
        super().__init__(msg)


class ToolExecutionError(VulnSightError):
    """A single tool failed. The run records it and moves on."""

    def __init__(self, tool_id: str, reason: str):
        self.tool_id = tool_id
        self.reason = reason
        super().__init__(f"{tool_id}: {reason}")


class RunCancelled(VulnSightError):
    """Raised inside a run when cancellation interrupts it; never reaches consumers."""

    def __init__(self, tool_id: str | None = None):
        self.tool_id = tool_id
        super().__init__(f"Run cancelled while {tool_id} was running" if tool_id else "Run cancelled")
