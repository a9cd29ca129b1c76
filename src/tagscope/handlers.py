"""Tag handler kinds and their lifecycle callbacks.

A tag's runtime behavior is driven by a fixed sequence of callbacks on its
handler object. The sequence depends only on the handler's kind:

=============== ======================================== ==================
Kind            Callbacks (lifecycle order)              Control flow
=============== ======================================== ==================
SIMPLE          doTag                                    single pass
CLASSIC         doStartTag, doEndTag                     body included or not
ITERATING       doStartTag, doAfterBody, doEndTag        loop until done
BODY_BUFFERING  doStartTag, doInitBody, doAfterBody,     buffered loop
                doEndTag
=============== ======================================== ==================

The set of kinds is closed. A new kind is a protocol change that also needs
a new row in ``tagscope.sync_table``.

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class LifecycleCallback(Enum):
    """A callback site on a tag handler, valued by its handler method name."""

    START = "doStartTag"
    BODY_INIT = "doInitBody"
    BODY_REITERATE = "doAfterBody"
    END = "doEndTag"
    TAG = "doTag"

    @property
    def method_name(self) -> str:
        return self.value


class ControlFlow(Enum):
    """Shape of the control flow a handler kind drives."""

    SINGLE_PASS = "single_pass"
    CONDITIONAL_BODY = "conditional_body"
    LOOP_UNTIL_DONE = "loop_until_done"
    BUFFERED_LOOP = "buffered_loop"


class BodyAction(Enum):
    """Decision returned from doStartTag about the tag body."""

    SKIP_BODY = "skip_body"
    EVAL_BODY_INCLUDE = "eval_body_include"
    EVAL_BODY_BUFFERED = "eval_body_buffered"

    @property
    def evaluates_body(self) -> bool:
        return self is not BodyAction.SKIP_BODY


@dataclass(frozen=True, slots=True)
class LifecycleStep:
    """Static facts about one callback of one handler kind.

    Attributes:
        callback: The callback site.
        body_evaluated: True if reaching this callback implies the body was
            evaluated at least once.
        terminal: True for the last callback of the sequence.
    """

    callback: LifecycleCallback
    body_evaluated: bool
    terminal: bool


_START = LifecycleCallback.START
_INIT = LifecycleCallback.BODY_INIT
_AGAIN = LifecycleCallback.BODY_REITERATE
_END = LifecycleCallback.END
_TAG = LifecycleCallback.TAG


class HandlerKind(Enum):
    """Behavioral kind of a tag handler.

    Each kind carries its ordered callback sequence and control-flow shape
    as static data. Nothing about a kind varies per handler instance.
    """

    SIMPLE = ((_TAG,), ControlFlow.SINGLE_PASS)
    CLASSIC = ((_START, _END), ControlFlow.CONDITIONAL_BODY)
    ITERATING = ((_START, _AGAIN, _END), ControlFlow.LOOP_UNTIL_DONE)
    BODY_BUFFERING = ((_START, _INIT, _AGAIN, _END), ControlFlow.BUFFERED_LOOP)

    def __init__(
        self, callbacks: tuple[LifecycleCallback, ...], control_flow: ControlFlow
    ) -> None:
        self.callbacks = callbacks
        self.control_flow = control_flow
        self.steps = tuple(
            LifecycleStep(
                callback=cb,
                body_evaluated=cb is _AGAIN,
                terminal=i == len(callbacks) - 1,
            )
            for i, cb in enumerate(callbacks)
        )

    @property
    def terminal_callback(self) -> LifecycleCallback:
        """Last callback of the sequence."""
        return self.callbacks[-1]

    @property
    def has_body_callbacks(self) -> bool:
        """False only for SIMPLE, whose body runs inside its single callback."""
        return self is not HandlerKind.SIMPLE

    def step(self, callback: LifecycleCallback) -> LifecycleStep:
        """Return the step for callback.

        Raises:
            ValueError: If callback is not part of this kind's sequence.
        """
        for step in self.steps:
            if step.callback is callback:
                return step
        raise ValueError(f"{self.name} handlers have no {callback.method_name}() callback")

    def body_adjacent(self, callback: LifecycleCallback) -> bool:
        """True if callback opens or follows an evaluation of the body.

        NESTED variables are only meaningful at these checkpoints.
        """
        return (
            self.has_body_callbacks
            and callback in self.callbacks
            and callback is not self.terminal_callback
        )

    @classmethod
    def coerce(cls, value: Any) -> HandlerKind:
        """Convert a kind or its (case-insensitive) name to a HandlerKind."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            member = cls.__members__.get(value.strip().upper())
            if member is not None:
                return member
        raise ValueError(f"Unknown handler kind: {value!r}")


def lifecycle_trace(
    kind: HandlerKind,
    *,
    body_action: BodyAction = BodyAction.EVAL_BODY_INCLUDE,
    iterations: int = 1,
) -> tuple[LifecycleCallback, ...]:
    """Callbacks a handler of ``kind`` reaches at runtime, in order.

    Args:
        kind: Handler kind.
        body_action: What doStartTag decided about the body. Ignored for
            SIMPLE, whose single callback owns its body.
        iterations: Number of body passes when the body is evaluated. Each
            pass of an iterating handler ends in doAfterBody.

    Raises:
        ValueError: On EVAL_BODY_BUFFERED for a kind that cannot buffer, or
            fewer than one pass for an evaluated body.

    Example:
        >>> lifecycle_trace(HandlerKind.ITERATING, iterations=2)
        (<LifecycleCallback.START: 'doStartTag'>, <LifecycleCallback.BODY_REITERATE: 'doAfterBody'>, <LifecycleCallback.BODY_REITERATE: 'doAfterBody'>, <LifecycleCallback.END: 'doEndTag'>)
    """
    if kind is HandlerKind.SIMPLE:
        return (_TAG,)

    if body_action is BodyAction.EVAL_BODY_BUFFERED and kind is not HandlerKind.BODY_BUFFERING:
        raise ValueError(f"{kind.name} handlers cannot buffer their body")
    if body_action.evaluates_body and iterations < 1:
        raise ValueError(f"An evaluated body runs at least once (got {iterations})")

    if kind is HandlerKind.CLASSIC or not body_action.evaluates_body:
        return (_START, _END)

    trace: list[LifecycleCallback] = [_START]
    if body_action is BodyAction.EVAL_BODY_BUFFERED:
        trace.append(_INIT)
    trace.extend([_AGAIN] * iterations)
    trace.append(_END)
    return tuple(trace)
