"""Unit tests for PatternMatcher."""

import re

from mentionkit.document import TextDocument
from mentionkit.domain.events import ExtensionFailed, PatternApplied
from mentionkit.extensions import Extension, ExtensionRegistry, Pattern, PatternMatcher, emoji_extension


class RecordingHandler:
    def __init__(self, result=None, error: Exception | None = None):
        self.result = result
        self.error = error
        self.calls: list[tuple[str, tuple[str, ...]]] = []

    def __call__(self, full: str, groups: tuple[str, ...]):
        self.calls.append((full, groups))
        if self.error is not None:
            raise self.error
        return self.result


def scan(registry: ExtensionRegistry, text: str, **kwargs):
    document = TextDocument(text)
    matcher = PatternMatcher(registry, **kwargs)
    return document, matcher, matcher.scan(document, len(document))


def test_emoji_shortcode_replaced():
    """Typing :smile: replaces the matched span with the emoji."""
    document, _, result = scan(ExtensionRegistry([emoji_extension()]), "hello :smile:")

    assert document.text == "hello 🙂"
    assert result is not None
    assert result.extension_name == "emoji"
    assert (result.start, result.end) == (6, 13)
    assert result.caret_after == len("hello 🙂")


def test_first_non_null_match_wins():
    """Scanning stops at the first pattern returning a replacement."""
    first = RecordingHandler(result="ONE")
    second = RecordingHandler(result="TWO")
    registry = ExtensionRegistry(
        [
            Extension(name="first", patterns=[Pattern.compile(r"ab$", first)]),
            Extension(name="second", patterns=[Pattern.compile(r"b$", second)]),
        ]
    )

    document, _, result = scan(registry, "xab")

    assert document.text == "xONE"
    assert result.extension_name == "first"
    assert second.calls == []


def test_null_result_falls_through_to_later_patterns():
    """A pattern declining with None leaves the text and lets later patterns run."""
    declining = RecordingHandler(result=None)
    accepting = RecordingHandler(result="!")
    registry = ExtensionRegistry(
        [
            Extension(name="declines", patterns=[Pattern.compile(r"(a)b$", declining)]),
            Extension(name="accepts", patterns=[Pattern.compile(r"b$", accepting)]),
        ]
    )

    document, _, result = scan(registry, "ab")

    assert declining.calls == [("ab", ("a",))]
    assert accepting.calls == [("b", ())]
    assert document.text == "a!"
    assert result.extension_name == "accepts"


def test_no_match_leaves_document_untouched():
    """Without a matching pattern nothing changes."""
    document, _, result = scan(ExtensionRegistry([emoji_extension()]), "plain text")
    assert result is None
    assert document.text == "plain text"


def test_unknown_shortcode_is_left_as_typed():
    """The emoji handler declines unknown shortcodes."""
    document, _, result = scan(ExtensionRegistry([emoji_extension()]), ":nope:")
    assert result is None
    assert document.text == ":nope:"


def test_match_must_end_at_caret():
    """A match earlier in the trailing text does not fire."""
    handler = RecordingHandler(result="X")
    registry = ExtensionRegistry([Extension(name="a", patterns=[Pattern.compile(r"ab", handler)])])

    document, _, result = scan(registry, "abc")

    assert result is None
    assert handler.calls == []
    assert document.text == "abc"


def test_unanchored_pattern_matches_at_caret_after_overlapping_text():
    """A pattern without $ still finds the match ending at the caret when an earlier one shares characters."""
    calls = []

    def smile_only(full, groups):
        calls.append(full)
        return "X" if groups[0] == "smile" else None

    registry = ExtensionRegistry([Extension(name="codes", patterns=[Pattern.compile(r":(\w+):", smile_only)])])

    document, _, result = scan(registry, "x:a:smile:")

    assert calls == [":smile:"]
    assert result is not None
    assert (result.start, result.end) == (3, 10)
    assert document.text == "x:aX"


def test_verbose_pattern_with_trailing_comment():
    """Verbose patterns keep working when they end in a comment."""
    registry = ExtensionRegistry(
        [Extension(name="v", patterns=[Pattern.compile(r"ab  # two letters", RecordingHandler(result="!"), re.VERBOSE)])]
    )

    document, _, result = scan(registry, "xab")

    assert result is not None
    assert document.text == "x!"


def test_faulty_extension_is_isolated(event_bus):
    """A raising handler is reported and later patterns still run on the same keystroke."""
    failures: list[ExtensionFailed] = []
    event_bus.subscribe(ExtensionFailed, failures.append)
    broken = RecordingHandler(error=RuntimeError("boom"))
    registry = ExtensionRegistry(
        [
            Extension(name="broken", patterns=[Pattern.compile(r":(\w+):$", broken)]),
            emoji_extension(),
        ]
    )

    document, matcher, result = scan(registry, ":smile:", event_bus=event_bus)

    assert broken.calls == [(":smile:", ("smile",))]
    assert document.text == "🙂"
    assert result.extension_name == "emoji"
    assert len(failures) == 1
    assert failures[0].error.extension_name == "broken"
    assert isinstance(failures[0].error.cause, RuntimeError)
    assert list(matcher.errors) == [failures[0].error]


def test_faulty_extension_alone_leaves_text(log_messages):
    """When the only matching pattern raises, the text stays as typed and a warning is logged."""
    registry = ExtensionRegistry(
        [Extension(name="broken", patterns=[Pattern.compile(r"x$", RecordingHandler(error=ValueError("bad")))])]
    )

    document, matcher, result = scan(registry, "abx")

    assert result is None
    assert document.text == "abx"
    assert len(matcher.errors) == 1
    assert any(level == "WARNING" and "broken" in message for level, message in log_messages)


def test_non_string_replacement_is_an_extension_error():
    """Returning something other than str or None is treated as a failure."""
    registry = ExtensionRegistry(
        [Extension(name="odd", patterns=[Pattern.compile(r"x$", RecordingHandler(result=42))])]
    )

    document, matcher, result = scan(registry, "x")

    assert result is None
    assert document.text == "x"
    assert isinstance(matcher.errors[0].cause, TypeError)


def test_pattern_applied_event_published(event_bus):
    """Applied replacements are published on the bus."""
    applied: list[PatternApplied] = []
    event_bus.subscribe(PatternApplied, applied.append)

    scan(ExtensionRegistry([emoji_extension()]), "a :fire:", event_bus=event_bus)

    assert len(applied) == 1
    assert applied[0].matched_text == ":fire:"
    assert applied[0].replacement == "🔥"
    assert (applied[0].start, applied[0].end) == (2, 8)


def test_trailing_text_limit_bounds_the_scan():
    """Text further back than the limit is not seen by patterns."""
    handler = RecordingHandler(result="!")
    registry = ExtensionRegistry([Extension(name="a", patterns=[Pattern.compile(r"^abc$", handler)])])

    document, _, result = scan(registry, "zzabc", trailing_text_limit=3)

    assert result is not None
    assert document.text == "zz!"
