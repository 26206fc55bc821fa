"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest


@pytest.fixture(autouse=True)
def _restore_dsnode_log_level() -> Iterator[None]:
    """CLI runs set the package logger level; undo it after each test."""
    logger = logging.getLogger("dsnode")
    level = logger.level
    yield
    logger.setLevel(level)
