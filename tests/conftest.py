"""Shared fixtures for mentionkit tests."""

import pytest
from loguru import logger

from mentionkit.domain.events import EventBus


@pytest.fixture
def users() -> list[dict[str, str]]:
    return [
        {"id": "u1", "username": "ada", "displayName": "Ada", "href": "/u/ada", "avatarUrl": "/a/ada.png"},
        {"id": "u2", "username": "grace_h", "displayName": "Grace Hopper", "href": "/u/grace", "avatarUrl": "/a/g.png"},
        {"id": "u3", "username": "Adele", "displayName": "Adele", "href": "/u/adele", "avatarUrl": "/a/ad.png"},
    ]


@pytest.fixture
def tags() -> list[dict[str, str]]:
    return [
        {"id": "t1", "tag": "python", "href": "/t/python"},
        {"id": "t2", "tag": "PyCon", "href": "/t/pycon"},
        {"id": "t3", "tag": "rust", "href": "/t/rust"},
    ]


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def log_messages():
    """Collect loguru records emitted during the test as ``(level, message)`` pairs."""
    records: list[tuple[str, str]] = []
    handler_id = logger.add(
        lambda message: records.append((message.record["level"].name, message.record["message"])),
        level="DEBUG",
    )
    yield records
    logger.remove(handler_id)
