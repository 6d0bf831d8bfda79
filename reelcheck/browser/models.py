"""
Browser session data models.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Dict, Any


class EngineKind(Enum):
    CHROMIUM = "chromium"
    FIREFOX = "firefox"
    WEBKIT = "webkit"

    @classmethod
    def lookup(cls, name: Optional[str]) -> Optional["EngineKind"]:
        """Case-insensitive match on the engine name; None when unknown."""
        if not name:
            return None
        try:
            return cls(name.strip().lower())
        except ValueError:
            return None


@dataclass
class LaunchOptions:
    """Options for launching a browser instance."""
    headless: bool = True
    slow_mo_ms: int = 0

    @classmethod
    def for_mode(cls, headless: bool) -> "LaunchOptions":
        # slow_mo only applies to headed runs
        return cls(headless=headless, slow_mo_ms=0 if headless else 50)

    def to_dict(self) -> Dict[str, Any]:
        return {"headless": self.headless, "slow_mo": self.slow_mo_ms}


@dataclass
class ContextOptions:
    """Options for a browser context and its first page."""
    viewport_width: int = 1920
    viewport_height: int = 1080
    ignore_https_errors: bool = True
    default_timeout_ms: int = 15000

    def to_dict(self) -> Dict[str, Any]:
        return {
            "viewport": {
                "width": self.viewport_width,
                "height": self.viewport_height,
            },
            "ignore_https_errors": self.ignore_https_errors,
        }


@dataclass
class SessionChain:
    """
    The Playwright -> Browser -> BrowserContext -> Page chain owned by one worker.

    Each slot is None until the tier is built and again after it is closed.
    """
    worker_id: str
    engine_kind: EngineKind = EngineKind.CHROMIUM
    launch_options: LaunchOptions = field(default_factory=LaunchOptions)
    context_options: ContextOptions = field(default_factory=ContextOptions)
    engine: Optional[Any] = field(default=None, repr=False)
    instance: Optional[Any] = field(default=None, repr=False)
    context: Optional[Any] = field(default=None, repr=False)
    page: Optional[Any] = field(default=None, repr=False)
    tracing: bool = False
    created_at: str = field(default_factory=lambda: datetime.now().isoformat())

    def is_empty(self) -> bool:
        return (
            self.engine is None
            and self.instance is None
            and self.context is None
            and self.page is None
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "worker_id": self.worker_id,
            "engine_kind": self.engine_kind.value,
            "launch_options": self.launch_options.to_dict(),
            "context_options": self.context_options.to_dict(),
            "has_engine": self.engine is not None,
            "has_instance": self.instance is not None,
            "has_context": self.context is not None,
            "has_page": self.page is not None,
            "tracing": self.tracing,
            "created_at": self.created_at,
        }
