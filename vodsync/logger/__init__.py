"""Logging utilities for the vodsync worker."""

from .logging_decorator import (
    setup_logging,
    enable_console_output,
    log_function,
    log_with_timer,
    log_path_for,
)

__all__ = [
    "setup_logging",
    "enable_console_output",
    "log_function",
    "log_with_timer",
    "log_path_for",
]
