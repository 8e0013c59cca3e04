"""Tests for EventBus."""

import pytest

from mentionkit.domain.events import EventBus, MentionChanged, SuggestionCancelled
from mentionkit.domain.types import ActiveQuery, ExitReason, TriggerKind

QUERY = ActiveQuery(TriggerKind.MENTION, "ad", anchor_position=0)


def test_publish_reaches_subscribers_in_order(event_bus):
    calls = []
    event_bus.subscribe(MentionChanged, lambda event: calls.append(("first", event.query)))
    event_bus.subscribe(MentionChanged, lambda event: calls.append(("second", event.query)))

    event_bus.publish(MentionChanged(query=QUERY))

    assert calls == [("first", QUERY), ("second", QUERY)]


def test_publish_only_matching_type(event_bus):
    calls = []
    event_bus.subscribe(SuggestionCancelled, calls.append)

    event_bus.publish(MentionChanged(query=None))

    assert calls == []
    assert event_bus.has_subscribers(SuggestionCancelled)
    assert not event_bus.has_subscribers(MentionChanged)


def test_async_handler_rejected(event_bus):
    """Handlers must be synchronous."""

    async def handler(event):
        pass

    with pytest.raises(TypeError, match="synchronous"):
        event_bus.subscribe(MentionChanged, handler)


def test_duplicate_subscription_ignored(event_bus):
    calls = []
    event_bus.subscribe(MentionChanged, calls.append)
    event_bus.subscribe(MentionChanged, calls.append)

    event_bus.publish(MentionChanged(query=None))

    assert len(calls) == 1


def test_failing_handler_is_isolated(event_bus, log_messages):
    """A raising handler is logged and later handlers still run."""
    calls = []

    def broken(event):
        raise RuntimeError("handler broke")

    event_bus.subscribe(SuggestionCancelled, broken)
    event_bus.subscribe(SuggestionCancelled, calls.append)

    event_bus.publish(SuggestionCancelled(query=QUERY, reason=ExitReason.ESCAPE))

    assert len(calls) == 1
    assert any(level == "ERROR" and "handler broke" in message for level, message in log_messages)


def test_unsubscribe_and_clear():
    bus = EventBus()
    calls = []
    bus.subscribe(MentionChanged, calls.append)
    bus.unsubscribe(MentionChanged, calls.append)
    bus.unsubscribe(MentionChanged, calls.append)

    bus.publish(MentionChanged(query=None))
    assert calls == []

    bus.subscribe(MentionChanged, calls.append)
    bus.clear()
    assert not bus.has_subscribers(MentionChanged)
