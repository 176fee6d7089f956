#!/usr/bin/env python3
# -*-coding: utf-8-*-
"""
Logging setup for the Settings Panel.

Features:
- Level-specific console formats with optional ANSI colors
- Structured JSON output (SETTINGS_PANEL_LOG_JSON=1)
- Rotating file log next to the panel configuration
- Per-operation timing for rebuild and render passes
"""

import logging
import logging.handlers
import os
import sys
import time
import json
from collections import defaultdict
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

LOGGER_ROOT = "settings_panel"

# Timings above this are reported as slow (a frame budget, not a batch job)
SLOW_OPERATION_SECONDS = 0.05

# =====================================================================================================
# Formatters
# =====================================================================================================

class FastFormatter(logging.Formatter):
    """Formatter with one pre-built format string per level."""

    def __init__(self, enable_colors: bool = False):
        super().__init__()
        self.enable_colors = enable_colors

        self._formatters = {
            logging.ERROR: logging.Formatter("[{asctime}] ERROR   [{name}] {message}", style='{', datefmt='%H:%M:%S'),
            logging.WARNING: logging.Formatter("[{asctime}] WARNING [{name}] {message}", style='{', datefmt='%H:%M:%S'),
            logging.INFO: logging.Formatter("[{asctime}] INFO    {message}", style='{', datefmt='%H:%M:%S'),
            logging.DEBUG: logging.Formatter("[{asctime}] DEBUG   {name}:{lineno} - {message}", style='{', datefmt='%H:%M:%S'),
        }

        self.colors = {
            logging.ERROR: '\033[91m',
            logging.WARNING: '\033[93m',
            logging.INFO: '\033[92m',
            logging.DEBUG: '\033[94m',
        } if enable_colors else {}

    def format(self, record):
        formatter = self._formatters.get(record.levelno, self._formatters[logging.INFO])
        text = formatter.format(record)
        color = self.colors.get(record.levelno)
        if color:
            return f"{color}{text}\033[0m"
        return text


class JsonFormatter(logging.Formatter):
    """Structured JSON formatter (optional)."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "pathname": record.pathname,
            "lineno": record.lineno,
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)

# =====================================================================================================
# Performance Logger
# =====================================================================================================

class SimplePerformanceLogger:
    """Accumulates timings per operation name."""

    def __init__(self, name: str = f"{LOGGER_ROOT}.performance"):
        self.logger = logging.getLogger(name)
        self.metrics: Dict[str, float] = defaultdict(float)
        self.counts: Dict[str, int] = defaultdict(int)

    def log_timing(self, operation: str, duration: float):
        self.metrics[operation] += duration
        self.counts[operation] += 1

        if duration > SLOW_OPERATION_SECONDS:
            self.logger.warning("SLOW: %s took %.3fs", operation, duration)

    def get_stats(self) -> Dict[str, Any]:
        stats = {}
        for operation in self.metrics:
            count = self.counts[operation]
            total = self.metrics[operation]
            stats[operation] = {
                'count': count,
                'total_time': total,
                'avg_time': total / count if count > 0 else 0
            }
        return stats

    def reset(self):
        self.metrics.clear()
        self.counts.clear()


class LoggingTimer:
    """Simple timing context manager."""

    def __init__(self, operation_name: str, perf_logger: Optional[SimplePerformanceLogger] = None):
        self.operation_name = operation_name
        self.perf_logger = perf_logger or _performance_logger
        self.start_time = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.start_time is not None:
            duration = time.perf_counter() - self.start_time
            self.perf_logger.log_timing(self.operation_name, duration)

# =====================================================================================================
# Main Setup Function
# =====================================================================================================

def _env_bool(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def setup_logging(
    log_level: str = "INFO",
    log_dir: Optional[str] = None,
    enable_file_logging: bool = False,
    enable_console_logging: bool = True,
    max_log_size: str = "2MB",
    backup_count: int = 3,
    structured_json: Optional[bool] = None
) -> Dict[str, Any]:
    """
    Configure the ``settings_panel`` logger hierarchy.

    Handlers are attached to the package logger rather than the root logger,
    since the panel normally runs inside a host process that owns the root.
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    panel_logger = logging.getLogger(LOGGER_ROOT)
    panel_logger.setLevel(numeric_level)

    for handler in panel_logger.handlers[:]:
        panel_logger.removeHandler(handler)
        handler.close()

    handlers: Dict[str, logging.Handler] = {}
    use_json = structured_json if structured_json is not None else _env_bool("SETTINGS_PANEL_LOG_JSON")

    if enable_console_logging:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(numeric_level)

        enable_colors = (hasattr(sys.stdout, 'isatty') and
                         sys.stdout.isatty() and
                         os.environ.get('TERM') != 'dumb')

        console_handler.setFormatter(JsonFormatter() if use_json else FastFormatter(enable_colors=enable_colors))
        panel_logger.addHandler(console_handler)
        handlers['console'] = console_handler

    log_dir_path = Path(log_dir) if log_dir else Path("logs")
    if enable_file_logging:
        log_dir_path.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            str(log_dir_path / "settings_panel.log"),
            maxBytes=_parse_size_string(max_log_size),
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(JsonFormatter() if use_json else FastFormatter())
        panel_logger.addHandler(file_handler)
        handlers['file'] = file_handler

    panel_logger.debug("Logging initialized (level=%s, file=%s, json=%s)", log_level, enable_file_logging, use_json)

    return {
        'logger': panel_logger,
        'handlers': handlers,
        'log_dir': log_dir_path
    }

# =====================================================================================================
# Utility functions
# =====================================================================================================

def _parse_size_string(size_str: str) -> int:
    """Parse size string into bytes."""
    size_str = size_str.upper().strip()

    multipliers = {
        'KB': 1024,
        'MB': 1024 ** 2,
        'GB': 1024 ** 3,
        'B': 1,
    }

    for suffix, multiplier in multipliers.items():
        if size_str.endswith(suffix):
            try:
                return int(float(size_str[:-len(suffix)].strip()) * multiplier)
            except ValueError:
                continue

    try:
        return int(float(size_str))
    except ValueError:
        return 2 * 1024 * 1024


@lru_cache(maxsize=32)
def get_logger(name: str) -> logging.Logger:
    """Get cached logger instance."""
    return logging.getLogger(f"{LOGGER_ROOT}.{name}")


def get_performance_stats() -> Dict[str, Any]:
    return _performance_logger.get_stats()


_performance_logger = SimplePerformanceLogger()
