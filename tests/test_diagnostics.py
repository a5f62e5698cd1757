import os

import pytest

import callbook.registry as registry_module
from callbook import Call, Occurrence, ordinal
from callbook.diagnostics import format_args, render_call, render_calls
from callbook.registry import capture_context, is_internal_frame


@pytest.mark.parametrize(
    ("cardinal", "expected"),
    [
        (1, "1st"),
        (2, "2nd"),
        (3, "3rd"),
        (4, "4th"),
        (11, "11th"),
        (12, "12th"),
        (13, "13th"),
        (21, "21st"),
        (22, "22nd"),
        (23, "23rd"),
        (101, "101st"),
    ],
)
def test_ordinal(cardinal: int, expected: str) -> None:
    assert ordinal(cardinal) == expected


def test_format_args() -> None:
    assert format_args(()) == ""
    assert format_args(("alice", None, [1, 2])) == "'alice', None, [1, 2]"


def register_here() -> Occurrence:
    return Occurrence(2, capture_context())


def test_render_call_with_context_labels_each_invocation() -> None:
    occurrences = [Occurrence(0, capture_context()), register_here()]
    text = render_call(Call("charge", ("alice", 10)), occurrences)

    lines = text.splitlines()
    assert lines[0] == " * Call: charge, Args: ['alice', 10], Times invoked: 2, Stack traces:"
    assert " |__[ Stack trace for call[0] (1st invocation on this mock): ]" in lines
    assert " |__[ Stack trace for call[1] (3rd invocation on this mock): ]" in lines
    assert "in register_here" in text
    assert "test_render_call_with_context_labels_each_invocation" in text


def test_render_call_without_context() -> None:
    text = render_call(Call("ping", ()), [Occurrence(0)], include_context=False)
    assert text == " * Call: ping, Args: [], Times invoked: 1."


def test_missing_context_is_reported() -> None:
    text = render_call(Call("ping", ()), [Occurrence(0)])
    assert "<no stack trace captured>" in text


def test_render_calls_filters_entries() -> None:
    entries = [
        (Call("charge", ("alice",)), [Occurrence(0)]),
        (Call("refund", ("alice",)), [Occurrence(1)]),
    ]
    text = render_calls(
        entries, include_context=False, predicate=lambda c: c.identifier == "refund"
    )
    assert text == " * Call: refund, Args: ['alice'], Times invoked: 1."
    assert render_calls([], include_context=False) == ""


def test_only_frames_inside_the_engine_package_are_internal() -> None:
    package_dir = os.path.dirname(os.path.abspath(registry_module.__file__))
    sibling = os.path.join(os.path.dirname(package_dir), "callbooktest", "plugin.py")
    prefixed = package_dir + "test" + os.sep + "plugin.py"

    assert is_internal_frame(os.path.join(package_dir, "registry.py"))
    assert not is_internal_frame(sibling)
    assert not is_internal_frame(prefixed)
