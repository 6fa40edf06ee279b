from __future__ import annotations

import sys
from pathlib import Path

import pytest
from loguru import logger

_SRC = Path(__file__).resolve().parent.parent / "src"
if _SRC.is_dir():
    sys.path.insert(0, str(_SRC))


@pytest.fixture
def log_messages():
    """Collect loguru messages emitted during a test."""
    messages = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="TRACE")
    yield messages
    logger.remove(handler_id)
