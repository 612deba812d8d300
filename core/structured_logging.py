"""Scan-aware logging context.

Every record emitted while a scan is running carries the scan id, the
current stage (``scan`` while listing candidates, ``parse`` while a file
is handled) and the candidate file being handled. The fields are held in
context variables and stamped onto records by a handler filter.
"""

from __future__ import annotations

import contextvars
import logging
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

UNSET = "-"

LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | scan=%(scan_id)s | stage=%(phase)s | "
    "file=%(file)s | %(name)s | %(message)s"
)


@dataclass(frozen=True)
class ScanContext:
    """Correlation fields attached to log records."""

    scan_id: str = UNSET
    phase: str = UNSET
    file: str = UNSET


_CONTEXT_VAR: contextvars.ContextVar[ScanContext] = contextvars.ContextVar(
    "rubymap_scan_context", default=ScanContext()
)


def current_context() -> ScanContext:
    return _CONTEXT_VAR.get()


class _ScanContextFilter(logging.Filter):
    """Stamp the current ``ScanContext`` onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        context = _CONTEXT_VAR.get()
        record.scan_id = context.scan_id
        record.phase = context.phase
        record.file = context.file
        return True


def configure_structured_logging(level: int = logging.INFO) -> None:
    """Install ``LOG_FORMAT`` and the context filter on the root handlers."""
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    else:
        root_logger.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT)
    for handler in root_logger.handlers:
        handler.setFormatter(formatter)
        if not any(isinstance(f, _ScanContextFilter) for f in handler.filters):
            handler.addFilter(_ScanContextFilter())


def set_scan_id(scan_id: Optional[str] = None) -> str:
    """Set or generate the scan id for the current context."""
    value = scan_id or uuid.uuid4().hex[:12]
    _CONTEXT_VAR.set(ScanContext(scan_id=value))
    return value


def get_scan_id() -> str:
    return _CONTEXT_VAR.get().scan_id


def get_phase() -> str:
    return _CONTEXT_VAR.get().phase


@contextmanager
def _bound(context: ScanContext) -> Iterator[ScanContext]:
    token = _CONTEXT_VAR.set(context)
    try:
        yield context
    finally:
        _CONTEXT_VAR.reset(token)


@contextmanager
def scan_scope(scan_path: str) -> Iterator[ScanContext]:
    """Enter the ``scan`` stage for ``scan_path``.

    Reuses the scan id already set by the caller, or generates one.
    """
    scan_id = get_scan_id()
    if scan_id == UNSET:
        scan_id = uuid.uuid4().hex[:12]
    with _bound(ScanContext(scan_id=scan_id, phase="scan", file=scan_path)) as context:
        yield context


@contextmanager
def file_scope(file_path: str) -> Iterator[ScanContext]:
    """Enter the ``parse`` stage for one candidate file of the current scan."""
    context = ScanContext(scan_id=get_scan_id(), phase="parse", file=file_path)
    with _bound(context):
        yield context
