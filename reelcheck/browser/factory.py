"""
BrowserFactory - Manages one Playwright browser session per test worker.

Each worker (a thread, or a pytest-xdist process) owns a chain of
Playwright -> Browser -> BrowserContext -> Page. Chains are kept in a dict
keyed by worker identity so parallel test classes never see each other's
browser objects.
"""
import os
import threading
from pathlib import Path
from typing import Optional, Dict, Callable, Any, List

from playwright.sync_api import sync_playwright, Page

from ..logging_config import get_logger
from .models import (
    ContextOptions,
    EngineKind,
    LaunchOptions,
    SessionChain,
)

logger = get_logger("reelcheck.browser.factory")


class SessionError(Exception):
    """Base exception for browser session lifecycle errors"""
    pass


class SessionNotInitializedError(SessionError):
    """No live session exists for the calling worker"""
    def __init__(self, worker_id: str):
        self.worker_id = worker_id
        super().__init__(
            f"No browser page for worker {worker_id} - "
            f"did you call init_session() before get_page()?"
        )


class SessionAlreadyInitializedError(SessionError):
    """init_session() called twice without an intervening tear_down()"""
    def __init__(self, worker_id: str):
        self.worker_id = worker_id
        super().__init__(
            f"Worker {worker_id} already has a browser session - call tear_down() first"
        )


def current_worker_id() -> str:
    """Identity of the calling worker: xdist worker name plus thread id."""
    process_worker = os.environ.get("PYTEST_XDIST_WORKER", "main")
    return f"{process_worker}:{threading.get_ident()}"


def _start_playwright() -> Any:
    return sync_playwright().start()


class BrowserFactory:
    """Creates, exposes and tears down per-worker Playwright session chains."""

    def __init__(
        self,
        engine_starter: Optional[Callable[[], Any]] = None,
        context_options: Optional[ContextOptions] = None,
    ):
        self._chains: Dict[str, SessionChain] = {}
        self._lock = threading.Lock()
        self._engine_starter = engine_starter or _start_playwright
        self._context_options = context_options or ContextOptions()

    @staticmethod
    def resolve_engine(browser_name: Optional[str]) -> EngineKind:
        kind = EngineKind.lookup(browser_name)
        if kind is None:
            logger.warning(f"Unknown browser '{browser_name}' - defaulting to chromium")
            return EngineKind.CHROMIUM
        return kind

    # ==================== Session Lifecycle ====================

    def init_session(
        self,
        browser_name: str,
        headless: bool,
        worker_id: Optional[str] = None,
    ) -> Page:
        """
        Build the Playwright -> Browser -> Context -> Page chain for a worker.

        Tracing (screenshots + snapshots) starts on the context;
        tear_down() decides whether the trace is kept.

        Returns the new page.

        Raises:
            SessionAlreadyInitializedError: the worker already has a live chain
        """
        worker_id = worker_id or current_worker_id()
        engine_kind = self.resolve_engine(browser_name)

        chain = SessionChain(
            worker_id=worker_id,
            engine_kind=engine_kind,
            launch_options=LaunchOptions.for_mode(headless),
            context_options=self._context_options,
        )
        with self._lock:
            if worker_id in self._chains:
                raise SessionAlreadyInitializedError(worker_id)
            self._chains[worker_id] = chain

        logger.info(f"Initialising '{engine_kind.value}' browser (headless={headless}, worker={worker_id})")

        try:
            chain.engine = self._engine_starter()
            launcher = {
                EngineKind.CHROMIUM: chain.engine.chromium,
                EngineKind.FIREFOX: chain.engine.firefox,
                EngineKind.WEBKIT: chain.engine.webkit,
            }[engine_kind]

            chain.instance = launcher.launch(**chain.launch_options.to_dict())
            chain.context = chain.instance.new_context(**chain.context_options.to_dict())

            chain.context.tracing.start(screenshots=True, snapshots=True)
            chain.tracing = True

            chain.page = chain.context.new_page()
            chain.page.set_default_timeout(chain.context_options.default_timeout_ms)

        except Exception as e:
            logger.error(f"Failed to initialise browser session for worker {worker_id}: {e}")
            self.tear_down(worker_id=worker_id)
            raise

        logger.info_with("Browser ready - page created", worker_id=worker_id, engine=engine_kind.value)
        return chain.page

    def get_page(self, worker_id: Optional[str] = None) -> Page:
        """
        Return the calling worker's page.

        Raises:
            SessionNotInitializedError: no session exists for the worker
        """
        worker_id = worker_id or current_worker_id()
        with self._lock:
            chain = self._chains.get(worker_id)
        if chain is None or chain.page is None:
            raise SessionNotInitializedError(worker_id)
        return chain.page

    def tear_down(
        self,
        trace_path: Optional[str] = None,
        worker_id: Optional[str] = None,
    ):
        """
        Close the worker's chain in reverse order: Context -> Browser -> Playwright.

        Close errors are logged and never raised, and every slot is cleared
        even when its close call fails.

        Args:
            trace_path: write the trace zip here, or None to discard it
        """
        worker_id = worker_id or current_worker_id()
        with self._lock:
            chain = self._chains.get(worker_id)
        if chain is None:
            logger.debug(f"No browser session to tear down for worker {worker_id}")
            return

        logger.info(f"Tearing down browser session (worker={worker_id}, trace={trace_path})")

        try:
            if chain.context is not None:
                if chain.tracing:
                    self._stop_tracing(chain, trace_path)
                chain.context.close()
        except Exception as e:
            logger.error(f"Error closing BrowserContext for worker {worker_id}: {e}", exc_info=True)
        finally:
            chain.tracing = False
            chain.context = None
            chain.page = None

        try:
            if chain.instance is not None:
                chain.instance.close()
        except Exception as e:
            logger.error(f"Error closing Browser for worker {worker_id}: {e}", exc_info=True)
        finally:
            chain.instance = None

        try:
            if chain.engine is not None:
                chain.engine.stop()
        except Exception as e:
            logger.error(f"Error stopping Playwright for worker {worker_id}: {e}", exc_info=True)
        finally:
            chain.engine = None

        with self._lock:
            if self._chains.get(worker_id) is chain:
                del self._chains[worker_id]

        logger.info(f"Browser teardown complete (worker={worker_id})")

    def _stop_tracing(self, chain: SessionChain, trace_path: Optional[str]):
        # A failed stop must not keep the context open
        try:
            if trace_path:
                Path(trace_path).parent.mkdir(parents=True, exist_ok=True)
                chain.context.tracing.stop(path=str(trace_path))
                logger.info(f"Trace written to {trace_path}")
            else:
                chain.context.tracing.stop()
        except Exception as e:
            logger.error(f"Error stopping trace for worker {chain.worker_id}: {e}", exc_info=True)

    # ==================== Inspection ====================

    def has_session(self, worker_id: Optional[str] = None) -> bool:
        worker_id = worker_id or current_worker_id()
        with self._lock:
            return worker_id in self._chains

    def get_chain(self, worker_id: Optional[str] = None) -> Optional[SessionChain]:
        worker_id = worker_id or current_worker_id()
        with self._lock:
            return self._chains.get(worker_id)

    def active_workers(self) -> List[str]:
        with self._lock:
            return list(self._chains.keys())


# Global singleton instance
browser_factory = BrowserFactory()


def get_page(worker_id: Optional[str] = None) -> Page:
    """Shortcut for browser_factory.get_page()."""
    return browser_factory.get_page(worker_id)
