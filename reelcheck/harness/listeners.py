"""
Test result listeners.

The pytest plugin turns each test report into a ResultEvent and hands it to
every registered listener, synchronously, before class-level fixtures tear
the browser session down.
"""
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Any, List

from ..browser.screenshots import ReportSink, capture
from ..logging_config import get_logger

logger = get_logger("reelcheck.harness.listeners")


class ResultOutcome(Enum):
    STARTED = "started"
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class ResultEvent:
    """One lifecycle event of a single test."""
    class_name: str
    method_name: str
    nodeid: str
    outcome: ResultOutcome
    instance: Optional[Any] = None
    duration: float = 0.0
    message: str = ""

    @property
    def label(self) -> str:
        return f"{self.class_name}#{self.method_name}"


class ResultListener:
    """Base listener; override the events you care about."""

    def on_test_start(self, event: ResultEvent):
        pass

    def on_test_success(self, event: ResultEvent):
        pass

    def on_test_skipped(self, event: ResultEvent):
        pass

    def on_test_failure(self, event: ResultEvent):
        pass


class LoggingListener(ResultListener):
    """Logs every event so CI logs show the run as it happens."""

    def on_test_start(self, event: ResultEvent):
        logger.info(f"START  : {event.label}")

    def on_test_success(self, event: ResultEvent):
        logger.info(f"PASSED : {event.label} ({event.duration:.2f}s)")

    def on_test_skipped(self, event: ResultEvent):
        logger.warning(f"SKIPPED: {event.label} {event.message}".rstrip())

    def on_test_failure(self, event: ResultEvent):
        logger.error(f"FAILED : {event.label}")


class FailureCaptureListener(ResultListener):
    """
    Attaches a screenshot of the failing test's page to the report sink.

    Only tests whose instance exposes a live ``page`` are captured; API and
    other non-UI tests are skipped without error.
    """

    def __init__(self, sink: Optional[ReportSink] = None):
        self.sink = sink

    def on_test_failure(self, event: ResultEvent):
        page = getattr(event.instance, "page", None) if event.instance is not None else None
        if page is None:
            logger.debug(f"{event.label} exposes no page, skipping screenshot")
            return
        capture(page, event.label, sink=self.sink)


_DISPATCH = {
    ResultOutcome.STARTED: "on_test_start",
    ResultOutcome.PASSED: "on_test_success",
    ResultOutcome.SKIPPED: "on_test_skipped",
    ResultOutcome.FAILED: "on_test_failure",
}


class ListenerRegistry:
    """Ordered set of listeners notified for every ResultEvent."""

    def __init__(self, listeners: Optional[List[ResultListener]] = None):
        self._listeners: List[ResultListener] = list(listeners or [])
        self._lock = threading.Lock()

    def register(self, listener: ResultListener):
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def unregister(self, listener: ResultListener):
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def listeners(self) -> List[ResultListener]:
        with self._lock:
            return list(self._listeners)

    def notify(self, event: ResultEvent):
        method_name = _DISPATCH[event.outcome]
        for listener in self.listeners():
            try:
                getattr(listener, method_name)(event)
            except Exception as e:
                logger.error(f"Result listener {type(listener).__name__} error on {event.label}: {e}")
