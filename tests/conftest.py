"""
Pytest fixtures and configuration for the listen loader tests.
"""

import pytest
from loguru import logger

from tunnel_listen.core.options import OptionList


@pytest.fixture(autouse=True)
def reset_logger():
    """Drop sinks added by a test so they never outlive captured streams."""
    yield
    logger.remove()


@pytest.fixture
def parse():
    """Return a helper turning configuration text into an option list."""
    return OptionList.parse


@pytest.fixture
def config_file(tmp_path):
    """Return a helper writing configuration text to a temporary file."""

    def write(text: str):
        path = tmp_path / "server.conf"
        path.write_text(text)
        return path

    return write
