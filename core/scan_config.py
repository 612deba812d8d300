"""Scan configuration loading and validation helpers.

Provides strict/non-strict YAML parsing of scan settings (source file
extensions and the path exclusion pattern) with environment overrides.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)

# Ruby source file extensions
RUBY_EXTENSIONS: frozenset[str] = frozenset({".rb"})

# Full paths matching this pattern are skipped during directory scans
DEFAULT_EXCLUDE_PATTERN: str = r"(^|/)(vendor|node_modules|\.bundle)/"

EXCLUDE_PATTERN_ENV = "RUBYMAP_EXCLUDE_PATTERN"
EXTENSIONS_ENV = "RUBYMAP_EXTENSIONS"


class ConfigValidationError(RuntimeError):
    """Raised when strict configuration validation fails."""


@dataclass
class ScanConfig:
    """Settings controlling which files a directory scan visits."""

    extensions: frozenset[str] = RUBY_EXTENSIONS
    exclude_pattern: Optional[str] = DEFAULT_EXCLUDE_PATTERN

    def exclude_regex(self) -> Optional[re.Pattern[str]]:
        if not self.exclude_pattern:
            return None
        return re.compile(self.exclude_pattern)


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def resolve_strict_config_validation(default: bool = False) -> bool:
    """Resolve strict validation mode from ``STRICT_CONFIG_VALIDATION`` env."""
    return _env_flag("STRICT_CONFIG_VALIDATION", default=default)


def _fail(msg: str, strict: bool) -> None:
    if strict:
        raise ConfigValidationError(msg)
    logger.warning("%s; using defaults", msg)


def _normalize_extensions(raw: Any, strict: bool) -> Optional[frozenset[str]]:
    if isinstance(raw, str):
        raw = raw.split(",")
    if not isinstance(raw, list) or not raw:
        _fail("'extensions' must be a non-empty list of file suffixes", strict)
        return None
    extensions = set()
    for item in raw:
        text = str(item).strip()
        if not text:
            continue
        extensions.add(text if text.startswith(".") else f".{text}")
    if not extensions:
        _fail("'extensions' contains no usable file suffixes", strict)
        return None
    return frozenset(extensions)


def _validate_pattern(raw: Any, strict: bool) -> tuple[bool, Optional[str]]:
    """Return ``(ok, pattern)``; an empty pattern disables exclusion."""
    if raw is None or raw == "":
        return True, None
    if not isinstance(raw, str):
        _fail("'exclude_pattern' must be a string", strict)
        return False, None
    try:
        re.compile(raw)
    except re.error as exc:
        _fail(f"Invalid exclude_pattern {raw!r}: {exc}", strict)
        return False, None
    return True, raw


def build_scan_config(payload: dict[str, Any], strict: bool = False) -> ScanConfig:
    """Build a ``ScanConfig`` from a parsed settings mapping."""
    config = ScanConfig()

    if "extensions" in payload:
        extensions = _normalize_extensions(payload["extensions"], strict)
        if extensions is not None:
            config.extensions = extensions

    if "exclude_pattern" in payload:
        ok, pattern = _validate_pattern(payload["exclude_pattern"], strict)
        if ok:
            config.exclude_pattern = pattern

    unknown = sorted(set(payload) - {"extensions", "exclude_pattern"})
    if unknown:
        _fail("Unknown scan settings: " + ", ".join(unknown), strict)

    return config


def load_scan_config(
    config_path: Optional[str] = None,
    strict: Optional[bool] = None,
) -> ScanConfig:
    """Load scan settings from YAML and apply environment overrides.

    In non-strict mode read/parse failures log a warning and fall back to
    defaults. In strict mode they raise ``ConfigValidationError``.
    """
    if strict is None:
        strict = resolve_strict_config_validation()

    payload: dict[str, Any] = {}
    if config_path is not None:
        payload = _read_yaml(config_path, strict)

    env_pattern = os.getenv(EXCLUDE_PATTERN_ENV)
    if env_pattern is not None:
        payload["exclude_pattern"] = env_pattern
    env_extensions = os.getenv(EXTENSIONS_ENV)
    if env_extensions is not None:
        payload["extensions"] = env_extensions

    config = build_scan_config(payload, strict=strict)
    logger.debug(
        "Scan config: extensions=%s exclude_pattern=%r",
        sorted(config.extensions),
        config.exclude_pattern,
    )
    return config


def _read_yaml(config_path: str, strict: bool) -> dict[str, Any]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            payload = yaml.safe_load(f)
    except FileNotFoundError as exc:
        msg = f"Scan config file not found: {config_path}"
        if strict:
            raise ConfigValidationError(msg) from exc
        logger.warning("%s; continuing with defaults", msg)
        return {}
    except yaml.YAMLError as exc:
        msg = f"Failed to parse scan config YAML at {config_path}: {exc}"
        if strict:
            raise ConfigValidationError(msg) from exc
        logger.warning("%s; continuing with defaults", msg)
        return {}

    if payload is None:
        return {}

    if not isinstance(payload, dict):
        msg = f"Unexpected scan config payload type: {type(payload).__name__}"
        if strict:
            raise ConfigValidationError(msg)
        logger.warning("%s; continuing with defaults", msg)
        return {}

    return payload
