"""Variable synchronization points.

After each lifecycle callback returns, generated code must re-read the
current value of some scripting variables. Which ones depends only on the
handler kind, the callback, and the variable's scope window:

=============== ================ ================ ================ ================
Kind            doStartTag       doInitBody       doAfterBody      doEndTag / doTag
=============== ================ ================ ================ ================
SIMPLE          -                -                -                AT_BEGIN, AT_END
CLASSIC         AT_BEGIN, NESTED -                -                AT_BEGIN, AT_END
ITERATING       AT_BEGIN, NESTED -                AT_BEGIN, NESTED AT_BEGIN, AT_END
BODY_BUFFERING  AT_BEGIN, NESTED AT_BEGIN, NESTED AT_BEGIN, NESTED AT_BEGIN, AT_END
=============== ================ ================ ================ ================

- NESTED variables are synchronized at body-adjacent checkpoints only; they
  go out of scope at the terminal callback.
- AT_BEGIN variables are synchronized at every checkpoint.
- AT_END variables are synchronized only at the terminal callback; nothing
  may read them earlier.
- doInitBody runs exactly once, before the first doAfterBody, whenever a
  buffered body is evaluated, which gives BODY_BUFFERING its extra column.

The table is built once at import and is read-only. It is total over every
(kind, callback) pair; pairs outside a kind's sequence map to the empty set.

"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from tagscope.handlers import HandlerKind, LifecycleCallback
from tagscope.variables import VariableScope

_NONE: frozenset[VariableScope] = frozenset()
_BODY = frozenset({VariableScope.AT_BEGIN, VariableScope.NESTED})
_TERMINAL = frozenset({VariableScope.AT_BEGIN, VariableScope.AT_END})

_ROWS: dict[HandlerKind, dict[LifecycleCallback, frozenset[VariableScope]]] = {
    HandlerKind.SIMPLE: {
        LifecycleCallback.TAG: _TERMINAL,
    },
    HandlerKind.CLASSIC: {
        LifecycleCallback.START: _BODY,
        LifecycleCallback.END: _TERMINAL,
    },
    HandlerKind.ITERATING: {
        LifecycleCallback.START: _BODY,
        LifecycleCallback.BODY_REITERATE: _BODY,
        LifecycleCallback.END: _TERMINAL,
    },
    HandlerKind.BODY_BUFFERING: {
        LifecycleCallback.START: _BODY,
        LifecycleCallback.BODY_INIT: _BODY,
        LifecycleCallback.BODY_REITERATE: _BODY,
        LifecycleCallback.END: _TERMINAL,
    },
}


def _build_table() -> Mapping[tuple[HandlerKind, LifecycleCallback], frozenset[VariableScope]]:
    table: dict[tuple[HandlerKind, LifecycleCallback], frozenset[VariableScope]] = {}
    for kind in HandlerKind:
        row = _ROWS[kind]
        for callback in LifecycleCallback:
            table[(kind, callback)] = row.get(callback, _NONE)
    return MappingProxyType(table)


SYNCHRONIZATION_TABLE = _build_table()


def scopes_to_sync(
    kind: HandlerKind, callback: LifecycleCallback
) -> frozenset[VariableScope]:
    """Scopes whose variables are synchronized right after callback returns."""
    return SYNCHRONIZATION_TABLE[(kind, callback)]


def sync_points(
    kind: HandlerKind, scope: VariableScope
) -> tuple[LifecycleCallback, ...]:
    """Callbacks of kind, in lifecycle order, that synchronize scope."""
    return tuple(cb for cb in kind.callbacks if scope in SYNCHRONIZATION_TABLE[(kind, cb)])


def first_sync_point(
    kind: HandlerKind, scope: VariableScope
) -> LifecycleCallback | None:
    """First callback of kind that synchronizes scope, or None."""
    points = sync_points(kind, scope)
    return points[0] if points else None
