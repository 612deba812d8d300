"""Core shared configuration and logging utilities."""

from core.structured_logging import (
    ScanContext,
    configure_structured_logging,
    current_context,
    file_scope,
    get_phase,
    get_scan_id,
    scan_scope,
    set_scan_id,
)
from core.scan_config import (
    ConfigValidationError,
    ScanConfig,
    build_scan_config,
    load_scan_config,
    resolve_strict_config_validation,
)

__all__ = [
    "ScanContext",
    "configure_structured_logging",
    "current_context",
    "file_scope",
    "get_phase",
    "get_scan_id",
    "scan_scope",
    "set_scan_id",
    "ConfigValidationError",
    "ScanConfig",
    "build_scan_config",
    "load_scan_config",
    "resolve_strict_config_validation",
]
