"""Unit tests for logging setup."""

import logging

import pytest

from knnblocks.ops.logging import configure_logging, resolve_level


@pytest.mark.parametrize(
    "name, expected",
    [
        ("debug", logging.DEBUG),
        (" WARNING ", logging.WARNING),
        ("15", 15),
        ("verbose", logging.INFO),
        ("", logging.INFO),
        (None, logging.INFO),
    ],
)
def test_resolve_level(name, expected):
    assert resolve_level(name) == expected


def test_explicit_level_wins_over_env(monkeypatch):
    monkeypatch.setenv("KNNBLOCKS_LOG_LEVEL", "ERROR")

    assert configure_logging(level="debug") == logging.DEBUG
    assert logging.getLogger().level == logging.DEBUG


def test_env_level_and_target_tag(monkeypatch):
    monkeypatch.setenv("KNNBLOCKS_LOG_LEVEL", "warning")

    assert configure_logging(target_id="sprite1") == logging.WARNING
    handler = logging.getLogger().handlers[0]
    assert "[target=sprite1]" in handler.formatter._fmt
