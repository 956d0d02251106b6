"""Sequential scan orchestration.

``ScanOrchestrator.run()`` validates its input up front and returns a
``ScanRun``. Nothing executes until the run is iterated: each ``next()``
advances the state machine to the next tool transition and yields a
``ProgressEvent``. Exactly one tool is RUNNING between its start and finish
events, and the run-scoped ``ScanResult`` is sealed when the last tool
finishes or the run is cancelled.
"""

import logging
import random
import threading
from collections.abc import Callable, Iterator

from vulnsight.errors import InvalidTarget, RunCancelled, ToolExecutionError, UnknownTool
from vulnsight.models import ProgressEvent, ScanResult, ScanStatus, Tool, ToolStatus
from vulnsight.tools import BaseTool, ToolOutput, build_registry

logger = logging.getLogger(__name__)

DurationFn = Callable[[str], float]

CANCELLED_REASON = "cancelled"


def random_duration(min_seconds: float = 2.0, max_seconds: float = 4.0) -> DurationFn:
    """Duration strategy drawing uniformly from ``[min_seconds, max_seconds]``."""
    if min_seconds < 0 or max_seconds < min_seconds:
        raise ValueError(f"Invalid duration range: {min_seconds}-{max_seconds}")

    def _duration(tool_id: str) -> float:
        return random.uniform(min_seconds, max_seconds)

    return _duration


def no_duration(tool_id: str) -> float:
    return 0.0


class ScanRun:
    """One end-to-end execution producing exactly one ScanResult.

    ``cancel()`` finishes the run itself when no consumer is inside ``next()``,
    so a caller may cancel and stop iterating without leaving a tool RUNNING.
    """

    def __init__(self, target: str, tools: list[BaseTool], duration_fn: DurationFn):
        self.result = ScanResult(target=target)
        self.tools: dict[str, Tool] = {t.id: t.describe() for t in tools}
        self.last_event: ProgressEvent | None = None
        self._queue = tools
        self._duration_fn = duration_fn
        self._cancelled = threading.Event()
        self._lock = threading.Lock()
        self._finished = 0
        self._outputs: list[ToolOutput] = []
        self._events = self._execute()

    def __iter__(self) -> Iterator[ProgressEvent]:
        return self

    def __next__(self) -> ProgressEvent:
        with self._lock:
            return next(self._events)

    @property
    def progress(self) -> float:
        total = len(self._queue)
        if self._finished >= total:
            return 100.0
        return round(100 * self._finished / total, 2)

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def done(self) -> bool:
        return self.result.sealed

    def running_tools(self) -> list[Tool]:
        return [t for t in self.tools.values() if t.status is ToolStatus.RUNNING]

    def cancel(self) -> None:
        """Stop scheduling tools. Safe to call from any thread, at any time.

        If another thread is currently advancing the run, that thread sees the
        flag and emits the cancellation event. Otherwise the run is wound down
        here and its remaining events are discarded.
        """
        if self.done:
            return
        logger.info("Cancellation requested for %s", self.result.id)
        self._cancelled.set()
        if not self._lock.acquire(blocking=False):
            return
        try:
            for _ in self._events:
                pass
            # The generator may have died from an interrupt without sealing.
            if not self.done:
                self._fail()
        finally:
            self._lock.release()

    def wait(self) -> ScanResult:
        """Drain the remaining events and return the terminal result."""
        for _ in self:
            pass
        return self.result

    def _event(self, record: Tool) -> ProgressEvent:
        self.last_event = ProgressEvent(
            tool_id=record.id,
            status=record.status,
            progress=self.progress,
            scan_status=self.result.status,
            error=record.error,
        )
        return self.last_event

    def _check_cancelled(self, tool_id: str | None = None) -> None:
        if self._cancelled.is_set():
            raise RunCancelled(tool_id)

    def _fail(self) -> Tool | None:
        """Seal the result FAILED and move the running tool, if any, to ERROR."""
        self._merge()
        self.result.seal(ScanStatus.FAILED)
        interrupted = None
        for record in self.running_tools():
            record.status = ToolStatus.ERROR
            record.error = CANCELLED_REASON
            self._finished += 1
            interrupted = record
        logger.warning("%s failed: run cancelled", self.result.id)
        return interrupted

    def _execute(self) -> Iterator[ProgressEvent]:
        logger.info(
            "Starting %s against %s with %s",
            self.result.id, self.result.target, ", ".join(self.tools),
        )
        try:
            for tool in self._queue:
                self._check_cancelled()
                record = self.tools[tool.id]
                record.status = ToolStatus.RUNNING
                logger.debug("%s running", tool.id)
                yield self._event(record)

                self._check_cancelled(tool.id)
                self._cancelled.wait(max(0.0, self._duration_fn(tool.id)))
                self._check_cancelled(tool.id)

                try:
                    self._outputs.append(tool.execute(self.result.target))
                    record.status = ToolStatus.COMPLETE
                    logger.debug("%s complete", tool.id)
                except ToolExecutionError as exc:
                    record.status = ToolStatus.ERROR
                    record.error = exc.reason
                    logger.warning("Tool %s failed: %s", tool.id, exc.reason)

                self._finished += 1
                if self._finished == len(self._queue):
                    self._merge()
                    self.result.seal(ScanStatus.COMPLETED)
                    logger.info(
                        "%s completed with %d finding(s)", self.result.id, len(self.result.findings),
                    )
                yield self._event(record)
        except RunCancelled:
            interrupted = self._fail()
            if interrupted is not None:
                yield self._event(interrupted)

    def _merge(self) -> None:
        seen: set[str] = set()
        for output in self._outputs:
            for finding in output.findings:
                if finding.id in seen:
                    continue
                seen.add(finding.id)
                self.result.findings.append(finding)
            self.result.attack_paths.extend(output.attack_paths)


class ScanOrchestrator:
    """Factory for run-scoped ScanRun objects over a tool registry."""

    def __init__(self, tools: dict[str, BaseTool] | None = None, duration_fn: DurationFn | None = None):
        self.tools = tools if tools is not None else build_registry()
        self.duration_fn = duration_fn or random_duration()

    def run(
        self,
        target: str,
        tool_ids: list[str] | None = None,
        duration_fn: DurationFn | None = None,
    ) -> ScanRun:
        if not isinstance(target, str) or not target.strip():
            raise InvalidTarget(target)

        if tool_ids is None:
            tool_ids = list(self.tools)
        ordered = list(dict.fromkeys(tool_ids))
        unknown = [t for t in ordered if t not in self.tools]
        if not ordered or unknown:
            raise UnknownTool(unknown, known=list(self.tools))

        return ScanRun(
            target=target.strip(),
            tools=[self.tools[t] for t in ordered],
            duration_fn=duration_fn or self.duration_fn,
        )
