"""
Test harness for reelcheck: result listeners and the pytest plugin.
"""
from .listeners import (
    FailureCaptureListener,
    ListenerRegistry,
    LoggingListener,
    ResultEvent,
    ResultListener,
    ResultOutcome,
)
from .plugin import HarnessSettings, UITestBase

__all__ = [
    "FailureCaptureListener",
    "HarnessSettings",
    "ListenerRegistry",
    "LoggingListener",
    "ResultEvent",
    "ResultListener",
    "ResultOutcome",
    "UITestBase",
]
