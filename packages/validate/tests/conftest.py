"""Pytest configuration for dataknobs_validate tests."""

import sys
from pathlib import Path

import pytest

# Add the package source to path for testing
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))


@pytest.fixture(autouse=True)
def reset_message_provider():
    """Restore the English message provider after every test."""
    from dataknobs_validate.messages import set_message_provider

    yield
    set_message_provider(None)
