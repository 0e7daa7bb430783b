"""
Logging configuration for stpapi
"""

import logging
import sys


def setup_logging(level: int = logging.INFO) -> None:
    """
    Configure logging with timestamp, file and line number information

    Args:
        level: Logging level (default: INFO)
    """
    formatter = logging.Formatter(
        fmt="%(asctime)s - %(levelname)-8s %(name)s %(filename)s:%(lineno)d %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # httpx logs every request at INFO; keep it out of the SDK's own output
    if level > logging.DEBUG:
        logging.getLogger("httpx").setLevel(logging.WARNING)


def redact_secret(value: str | None) -> str:
    """Mask all but the prefix and last four characters of a key or client secret"""
    if not value:
        return ""
    if len(value) <= 12:
        return "*" * len(value)
    return f"{value[:7]}...{value[-4:]}"
