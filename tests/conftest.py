"""
Pytest configuration and shared fixtures for PKSNetwork tests.
"""

import json
import logging
import tempfile
from pathlib import Path
from typing import Any, Callable, Generator, Optional

import pytest

from pksnetwork.core.transport import TransportResponse


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """
    Create a temporary directory for test files.

    Yields:
        Path to temporary directory that is cleaned up after test.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def base_url() -> str:
    return "https://api.example.com"


@pytest.fixture
def json_response() -> Callable[..., TransportResponse]:
    """
    Factory building a TransportResponse with a JSON body.

    Returns:
        Callable taking (body, status_code=200, headers=None)
    """
    def _make(body: Any, status_code: int = 200, headers: Optional[dict] = None) -> TransportResponse:
        return TransportResponse(
            status_code=status_code,
            headers=headers or {"Content-Type": "application/json"},
            body=json.dumps(body).encode("utf-8"),
        )

    return _make


@pytest.fixture(autouse=True)
def reset_logging_handlers() -> Generator[None, None, None]:
    """Close handlers installed by setup_logging so streams do not outlive a test."""
    yield
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        # pytest attaches its own handler subclasses; leave those alone
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            root_logger.removeHandler(handler)
            handler.close()
