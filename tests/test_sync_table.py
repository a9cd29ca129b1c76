"""Tests for the synchronization table."""

from __future__ import annotations

import pytest

from tagscope import (
    SYNCHRONIZATION_TABLE,
    HandlerKind,
    LifecycleCallback,
    VariableScope,
    first_sync_point,
    scopes_to_sync,
    sync_points,
)

NESTED = VariableScope.NESTED
AT_BEGIN = VariableScope.AT_BEGIN
AT_END = VariableScope.AT_END

START = LifecycleCallback.START
INIT = LifecycleCallback.BODY_INIT
AGAIN = LifecycleCallback.BODY_REITERATE
END = LifecycleCallback.END
TAG = LifecycleCallback.TAG

EXPECTED = {
    HandlerKind.SIMPLE: {TAG: {AT_BEGIN, AT_END}},
    HandlerKind.CLASSIC: {START: {AT_BEGIN, NESTED}, END: {AT_BEGIN, AT_END}},
    HandlerKind.ITERATING: {
        START: {AT_BEGIN, NESTED},
        AGAIN: {AT_BEGIN, NESTED},
        END: {AT_BEGIN, AT_END},
    },
    HandlerKind.BODY_BUFFERING: {
        START: {AT_BEGIN, NESTED},
        INIT: {AT_BEGIN, NESTED},
        AGAIN: {AT_BEGIN, NESTED},
        END: {AT_BEGIN, AT_END},
    },
}


class TestTableContents:
    """The table reproduces the synchronization protocol cell by cell."""

    @pytest.mark.parametrize("kind", list(HandlerKind))
    @pytest.mark.parametrize("callback", list(LifecycleCallback))
    def test_cell(self, kind, callback):
        expected = EXPECTED[kind].get(callback, set())
        assert scopes_to_sync(kind, callback) == frozenset(expected)

    def test_total_over_all_pairs(self):
        assert len(SYNCHRONIZATION_TABLE) == len(HandlerKind) * len(LifecycleCallback)

    @pytest.mark.parametrize("kind", list(HandlerKind))
    def test_foreign_callbacks_sync_nothing(self, kind):
        for callback in LifecycleCallback:
            if callback not in kind.callbacks:
                assert scopes_to_sync(kind, callback) == frozenset()

    def test_read_only(self):
        with pytest.raises(TypeError):
            SYNCHRONIZATION_TABLE[(HandlerKind.SIMPLE, START)] = frozenset()  # type: ignore[index]

    def test_cells_are_frozensets(self):
        assert all(isinstance(v, frozenset) for v in SYNCHRONIZATION_TABLE.values())

    @pytest.mark.parametrize("kind", list(HandlerKind))
    def test_nested_only_at_body_adjacent_points(self, kind):
        for callback in kind.callbacks:
            if NESTED in scopes_to_sync(kind, callback):
                assert kind.body_adjacent(callback)

    @pytest.mark.parametrize("kind", list(HandlerKind))
    def test_at_end_only_at_terminal(self, kind):
        assert sync_points(kind, AT_END) == (kind.terminal_callback,)

    @pytest.mark.parametrize("kind", list(HandlerKind))
    def test_at_begin_at_every_checkpoint(self, kind):
        assert sync_points(kind, AT_BEGIN) == kind.callbacks


class TestSyncPoints:
    def test_nested_points_for_body_buffering(self):
        assert sync_points(HandlerKind.BODY_BUFFERING, NESTED) == (START, INIT, AGAIN)

    def test_simple_never_syncs_nested(self):
        assert sync_points(HandlerKind.SIMPLE, NESTED) == ()
        assert first_sync_point(HandlerKind.SIMPLE, NESTED) is None

    @pytest.mark.parametrize(
        ("kind", "scope", "expected"),
        [
            (HandlerKind.SIMPLE, AT_BEGIN, TAG),
            (HandlerKind.CLASSIC, AT_BEGIN, START),
            (HandlerKind.CLASSIC, AT_END, END),
            (HandlerKind.ITERATING, NESTED, START),
        ],
    )
    def test_first_sync_point(self, kind, scope, expected):
        assert first_sync_point(kind, scope) is expected
