"""
pytest plugin wiring reelcheck into a test run.

Enable it from a conftest.py with ``pytest_plugins = ["reelcheck.harness.plugin"]``.
"""
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import pytest

from ..browser.factory import browser_factory
from ..browser.screenshots import FileReportSink
from ..browser.waits import wait_for_page_load
from ..config import ConfigReader, config as default_config
from ..logging_config import get_logger
from .listeners import (
    FailureCaptureListener,
    ListenerRegistry,
    LoggingListener,
    ResultEvent,
    ResultOutcome,
)

logger = get_logger("reelcheck.harness.plugin")

registry_key = pytest.StashKey[ListenerRegistry]()


@dataclass
class HarnessSettings:
    """Per-run browser settings resolved from the command line and config."""
    browser: str
    headless: bool
    base_url: str
    save_trace: bool = False
    trace_dir: str = "traces"

    @classmethod
    def resolve(cls, pytest_config: pytest.Config, config: Optional[ConfigReader] = None) -> "HarnessSettings":
        config = config or default_config
        browser = pytest_config.getoption("reelcheck_browser") or config.get("browser")
        if pytest_config.getoption("reelcheck_headed"):
            headless = False
        else:
            headless = config.get_bool("headless")
        save_trace = pytest_config.getoption("reelcheck_save_trace") or config.get_bool("saveTrace", default=False)
        return cls(
            browser=browser,
            headless=headless,
            base_url=config.get("baseUrl"),
            save_trace=save_trace,
            trace_dir=config.get_or_default("traceDir", "traces"),
        )

    def trace_path_for(self, name: str) -> Optional[str]:
        if not self.save_trace:
            return None
        return str(Path(self.trace_dir) / f"{name}-trace.zip")


def pytest_addoption(parser: pytest.Parser):
    group = parser.getgroup("reelcheck", "browser end-to-end tests")
    group.addoption("--engine", action="store", dest="reelcheck_browser", default=None,
                    help="Browser engine: chromium, firefox or webkit (default: 'browser' config key)")
    group.addoption("--headed", action="store_true", dest="reelcheck_headed", default=False,
                    help="Show the browser window (overrides the 'headless' config key)")
    group.addoption("--save-trace", action="store_true", dest="reelcheck_save_trace", default=False,
                    help="Keep the Playwright trace of every UI test class")
    group.addoption("--run-e2e", action="store_true", dest="reelcheck_run_e2e", default=False,
                    help="Run tests marked e2e against the live site")


def pytest_configure(config: pytest.Config):
    config.addinivalue_line("markers", "e2e: drives a real browser against the live site")

    level = os.environ.get("REELCHECK_LOG_LEVEL", "INFO")
    logging.getLogger("reelcheck").setLevel(getattr(logging, level.upper(), logging.INFO))

    sink = FileReportSink(Path(default_config.get_or_default("reportDir", "reports/attachments")))
    config.stash[registry_key] = ListenerRegistry([
        LoggingListener(),
        FailureCaptureListener(sink=sink),
    ])


def pytest_collection_modifyitems(config: pytest.Config, items):
    if config.getoption("reelcheck_run_e2e"):
        return
    skip_e2e = pytest.mark.skip(reason="live browser test, use --run-e2e to run")
    for item in items:
        if "e2e" in item.keywords:
            item.add_marker(skip_e2e)


def get_listener_registry(config: pytest.Config) -> ListenerRegistry:
    return config.stash[registry_key]


def build_event(item: pytest.Item, report: pytest.TestReport, outcome: ResultOutcome) -> ResultEvent:
    cls = getattr(item, "cls", None)
    if cls is not None:
        class_name = cls.__name__
    else:
        class_name = item.path.stem
    method_name = getattr(item, "originalname", None) or item.name

    message = ""
    if report.skipped and isinstance(report.longrepr, tuple):
        message = str(report.longrepr[2])

    return ResultEvent(
        class_name=class_name,
        method_name=method_name,
        nodeid=item.nodeid,
        outcome=outcome,
        instance=getattr(item, "instance", None),
        duration=report.duration,
        message=message,
    )


def _outcome_for(report: pytest.TestReport) -> Optional[ResultOutcome]:
    if report.when == "setup":
        if report.passed:
            return ResultOutcome.STARTED
        return ResultOutcome.SKIPPED if report.skipped else ResultOutcome.FAILED
    if report.when == "call":
        if report.passed:
            return ResultOutcome.PASSED
        return ResultOutcome.SKIPPED if report.skipped else ResultOutcome.FAILED
    return None


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item: pytest.Item, call):
    result = yield
    report = result.get_result()

    registry = item.config.stash.get(registry_key, None)
    outcome = _outcome_for(report)
    if registry is None or outcome is None:
        return

    registry.notify(build_event(item, report, outcome))


@pytest.fixture(scope="session")
def reelcheck_settings(pytestconfig: pytest.Config) -> HarnessSettings:
    return HarnessSettings.resolve(pytestconfig)


class UITestBase:
    """
    Base class for browser test classes.

    Every subclass gets its own browser session for the lifetime of the
    class, opened on ``baseUrl``, reachable as ``self.page``.
    """

    page = None

    @pytest.fixture(scope="class", autouse=True)
    def _browser_session(self, request: pytest.FixtureRequest, reelcheck_settings: HarnessSettings):
        cls = request.cls
        settings = reelcheck_settings
        logger.info(f"Setting up UI test {cls.__name__} - browser={settings.browser}, headless={settings.headless}")

        try:
            page = browser_factory.init_session(settings.browser, settings.headless)
            cls.page = page
            page.goto(settings.base_url)
            wait_for_page_load(page)
            logger.info(f"Navigated to base URL: {settings.base_url}")
            yield page
        finally:
            cls.page = None
            trace_path = settings.trace_path_for(cls.__name__)
            logger.info(f"Tearing down {cls.__name__} - trace output: {trace_path or 'disabled'}")
            browser_factory.tear_down(trace_path=trace_path)
