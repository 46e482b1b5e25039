"""
Centralized logging setup and function decorators for the sync worker.

Every pipeline component gets a named logger writing to its own file under
the log directory, with an optional console handler for interactive runs.

Usage:
    from vodsync.logger import setup_logging, log_function

    logger = setup_logging(logger_name="upload", log_file="logs/upload.log")

    @log_function(logger_name="upload", log_execution_time=True)
    def upload_candidates(candidates):
        ...
"""

import functools
import logging
import os
import time
from pathlib import Path
from typing import Optional, Callable, Any


DEFAULT_LOG_DIR = os.getenv("LOG_DIR", "logs")


def log_path_for(logger_name: str, log_dir: Optional[str] = None) -> str:
    """Return the conventional log file path for a logger name."""
    return str(Path(log_dir or DEFAULT_LOG_DIR) / f"{logger_name}.log")


def setup_logging(
    logger_name: str,
    log_file: Optional[str] = None,
    verbose: bool = False,
    level: int = logging.INFO,
) -> logging.Logger:
    """
    Set up a named logger with a file handler and an optional console handler.

    Args:
        logger_name: Name for the logger (e.g., "upload")
        log_file: Path to log file (default: "<LOG_DIR>/<logger_name>.log")
        verbose: If True, also log to the console at DEBUG level
        level: Base logging level (default: logging.INFO)

    Returns:
        Configured logger instance. Calling again with the same name returns
        the already configured logger untouched.
    """
    logger = logging.getLogger(logger_name)

    # Avoid adding multiple handlers if already configured
    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG if verbose else level)

    log_path = Path(log_file or log_path_for(logger_name))
    log_path.parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )
    logger.addHandler(file_handler)

    if verbose:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(
            logging.Formatter("%(asctime)s [%(name)s] %(levelname)s: %(message)s")
        )
        logger.addHandler(console_handler)

    return logger


def enable_console_output(logger_names: list[str]) -> None:
    """Attach a console handler to already configured loggers (for --verbose)."""
    for name in logger_names:
        logger = setup_logging(name)
        if any(type(h) is logging.StreamHandler for h in logger.handlers):
            continue
        handler = logging.StreamHandler()
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(
            logging.Formatter("%(asctime)s [%(name)s] %(levelname)s: %(message)s")
        )
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)


def log_function(
    logger_name: Optional[str] = None,
    level: int = logging.INFO,
    log_args: bool = False,
    log_result: bool = False,
    log_execution_time: bool = True,
) -> Callable:
    """
    Decorator to log function entry, exit, execution time, and exceptions.

    Exceptions are logged with traceback and re-raised unchanged.

    Args:
        logger_name: Logger to use (defaults to the decorated function's module)
        level: Log level for entry/exit messages (default: logging.INFO)
        log_args: If True, log function arguments
        log_result: If True, log return value
        log_execution_time: If True, log execution duration
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            name = logger_name or func.__module__
            logger = logging.getLogger(name)
            if not logger.handlers:
                logger = setup_logging(name, level=level)

            func_name = func.__name__
            log_msg = f"Calling {func_name}"
            if log_args and (args or kwargs):
                args_repr = [repr(a) for a in args]
                kwargs_repr = [f"{k}={v!r}" for k, v in kwargs.items()]
                log_msg += f" with args: {', '.join(args_repr + kwargs_repr)}"
            logger.log(level, log_msg)

            start_time = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                execution_time = time.perf_counter() - start_time
                logger.error(
                    f"Exception in {func_name} after {execution_time:.2f}s: {type(e).__name__}: {e}",
                    exc_info=True,
                )
                raise

            completion_msg = f"Completed {func_name}"
            if log_execution_time:
                completion_msg += f" in {time.perf_counter() - start_time:.2f}s"
            if log_result:
                completion_msg += f" with result: {result!r}"
            logger.log(level, completion_msg)
            return result

        return wrapper

    return decorator


def log_with_timer(logger_name: Optional[str] = None) -> Callable:
    """
    Simple decorator that logs function entry/exit with execution time.

    Example:
        @log_with_timer("quality")
        def reconcile_quality(...):
            ...
    """
    return log_function(
        logger_name=logger_name,
        log_args=False,
        log_result=False,
        log_execution_time=True,
    )
