"""
Failure screenshots and the report sink they are attached to.
"""
import threading
from datetime import datetime
from pathlib import Path
from typing import Optional, List, Protocol, runtime_checkable

from playwright.sync_api import Page

from ..logging_config import get_logger

logger = get_logger("reelcheck.browser.screenshots")

PNG_MIME_TYPE = "image/png"
DEFAULT_LABEL = "Failure Screenshot"

_EXTENSIONS = {
    PNG_MIME_TYPE: ".png",
    "application/zip": ".zip",
    "text/plain": ".txt",
}


@runtime_checkable
class ReportSink(Protocol):
    """Destination for report attachments, shared by all workers."""

    def attach(self, label: str, mime_type: str, payload: bytes) -> None:
        ...


class FileReportSink:
    """Writes each attachment to its own file under ``base_dir``."""

    def __init__(self, base_dir: Optional[Path] = None):
        self._base_dir = Path(base_dir) if base_dir else Path("reports") / "attachments"
        self._lock = threading.Lock()
        self.written: List[Path] = []

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def _get_attachment_path(self, label: str, mime_type: str) -> Path:
        safe_name = "".join(c if c.isalnum() or c in ".-_" else "_" for c in label)
        stamp = datetime.now().strftime("%Y%m%d-%H%M%S-%f")
        extension = _EXTENSIONS.get(mime_type, ".bin")

        path = self._base_dir / f"{safe_name}-{stamp}{extension}"
        counter = 1
        while path.exists():
            path = self._base_dir / f"{safe_name}-{stamp}-{counter}{extension}"
            counter += 1
        return path

    def attach(self, label: str, mime_type: str, payload: bytes) -> None:
        with self._lock:
            self._base_dir.mkdir(parents=True, exist_ok=True)
            path = self._get_attachment_path(label, mime_type)
            path.write_bytes(payload)
            self.written.append(path)
        logger.debug(f"Attachment '{label}' written to {path}")


_default_sink: Optional[ReportSink] = None
_sink_lock = threading.Lock()


def get_report_sink() -> ReportSink:
    global _default_sink
    with _sink_lock:
        if _default_sink is None:
            _default_sink = FileReportSink()
        return _default_sink


def set_report_sink(sink: Optional[ReportSink]):
    global _default_sink
    with _sink_lock:
        _default_sink = sink


def capture(
    page: Optional[Page],
    label: str = DEFAULT_LABEL,
    sink: Optional[ReportSink] = None,
) -> bool:
    """
    Take a full-page screenshot and attach it to the report sink as image/png.

    Capture is best effort: a missing page or a screenshot error is logged
    and reported through the return value, never raised.
    """
    if page is None:
        logger.warning(f"capture() called without a page for '{label}' - skipping")
        return False

    sink = sink or get_report_sink()
    try:
        screenshot = page.screenshot(full_page=True)
        sink.attach(label, PNG_MIME_TYPE, screenshot)
    except Exception as e:
        logger.error(f"Failed to capture screenshot for '{label}': {e}", exc_info=True)
        return False

    logger.info(f"Screenshot attached to report: '{label}'")
    return True
