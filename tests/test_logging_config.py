"""
Tests for logging configuration
"""

import logging

import pytest

from stpapi.logging_config import redact_secret, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    httpx_level = logging.getLogger("httpx").level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.getLogger("httpx").setLevel(httpx_level)


def test_setup_logging_installs_single_handler(restore_root_logger):
    setup_logging(logging.INFO)
    setup_logging(logging.INFO)

    root = logging.getLogger()
    assert len(root.handlers) == 1
    assert root.level == logging.INFO
    assert logging.getLogger("httpx").level == logging.WARNING


def test_redact_secret():
    assert redact_secret("pk_test_1234567890abcdef") == "pk_test...cdef"
    assert redact_secret("short") == "*****"
    assert redact_secret(None) == ""
